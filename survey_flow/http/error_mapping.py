"""Central error mapping for engine and store failures.

Single source of truth mapping error codes to problem titles and HTTP
statuses. Route modules and handlers import from here instead of hardcoding
strings or numbers.
"""

from __future__ import annotations

ERROR_MAP = {
    "SURVEY_NOT_FOUND": {"status": 404, "title": "Survey not found"},
    "SURVEY_DEFINITION_INVALID": {"status": 422, "title": "Invalid survey definition"},
    "SURVEY_QUESTIONS_MISSING": {"status": 422, "title": "Invalid survey definition"},
    "SURVEY_QUESTIONS_NOT_LIST": {"status": 422, "title": "Invalid survey definition"},
    "SURVEY_ID_MISMATCH": {"status": 409, "title": "Conflict"},
}

DEFAULT_ERROR = {"status": 422, "title": "Invalid Request"}


def lookup(code: str) -> dict:
    return ERROR_MAP.get(code, DEFAULT_ERROR)


__all__ = ["ERROR_MAP", "DEFAULT_ERROR", "lookup"]
