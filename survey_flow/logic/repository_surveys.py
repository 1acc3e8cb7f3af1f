"""Repository helpers for survey definitions.

Stores the wire shape exactly as received (after validation) so a
definition reads back unchanged, and rebuilds ``Survey`` models on read.
"""

from __future__ import annotations

from typing import Optional, Tuple
import copy
import logging

from survey_flow.models.survey import Survey
from survey_flow.logic.etag import compute_survey_etag
from survey_flow.logic.inmemory_state import SURVEY_ETAGS, SURVEYS_STORE


logger = logging.getLogger(__name__)


def put_survey(survey: Survey) -> Tuple[dict, str]:
    """Store ``survey``; return its wire dict and new ETag."""
    wire = survey.to_wire()
    etag = compute_survey_etag(wire)
    created = survey.id not in SURVEYS_STORE
    SURVEYS_STORE[survey.id] = copy.deepcopy(wire)
    SURVEY_ETAGS[survey.id] = etag
    logger.info(
        "survey_stored id=%s created=%s questions=%s etag=%s",
        survey.id,
        created,
        len(survey.questions),
        etag,
    )
    return wire, etag


def get_survey_wire(survey_id: str) -> Optional[Tuple[dict, str]]:
    wire = SURVEYS_STORE.get(survey_id)
    if wire is None:
        return None
    return copy.deepcopy(wire), SURVEY_ETAGS[survey_id]


def get_survey(survey_id: str) -> Optional[Survey]:
    """Return a fresh ``Survey`` snapshot, or None when unknown."""
    wire = SURVEYS_STORE.get(survey_id)
    if wire is None:
        return None
    return Survey.model_validate(copy.deepcopy(wire))


__all__ = ["put_survey", "get_survey_wire", "get_survey"]
