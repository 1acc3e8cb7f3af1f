"""Centralised construction of problem+json payloads.

Route modules build error bodies through these helpers so codes, titles and
statuses stay in one place (see ``survey_flow.http.error_mapping``).
"""

from __future__ import annotations

from typing import Dict, Optional
import logging

from survey_flow.http.error_mapping import lookup


logger = logging.getLogger(__name__)


def problem(code: str, detail: str, **extra: object) -> Dict[str, object]:
    """Return a problem dict for ``code`` with its mapped title and status."""
    mapped = lookup(code)
    body: Dict[str, object] = {
        "title": mapped["title"],
        "status": mapped["status"],
        "detail": detail,
        "code": code,
    }
    body.update(extra)
    logger.info("error_handler.handle code=%s status=%s", code, mapped["status"])
    return body


def problem_survey_not_found(survey_id: str) -> Dict[str, object]:
    return problem("SURVEY_NOT_FOUND", f"survey {survey_id} not found", survey_id=survey_id)


def problem_survey_id_mismatch(path_id: str, body_id: Optional[str]) -> Dict[str, object]:
    return problem(
        "SURVEY_ID_MISMATCH",
        f"body id {body_id!r} does not match path id {path_id!r}",
    )


def problem_from_definition_error(code: str, message: str) -> Dict[str, object]:
    """Problem for a SurveyDefinitionError raised by the engine."""
    return problem(code or "SURVEY_DEFINITION_INVALID", message)


__all__ = [
    "problem",
    "problem_survey_not_found",
    "problem_survey_id_mismatch",
    "problem_from_definition_error",
]
