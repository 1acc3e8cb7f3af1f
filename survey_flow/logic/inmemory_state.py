"""Central in-memory state holders for the survey store.

Persistence of surveys belongs to the storage layer outside this service;
this process-local dict stands in for it behind ``repository_surveys``.
"""

from __future__ import annotations

from typing import Dict

# Survey definitions as stored JSON (camelCase wire shape): survey_id -> dict
SURVEYS_STORE: Dict[str, dict] = {}

# Current ETag per stored survey: survey_id -> weak ETag
SURVEY_ETAGS: Dict[str, str] = {}


def reset() -> None:
    """Clear all stored state (tests and local development)."""
    SURVEYS_STORE.clear()
    SURVEY_ETAGS.clear()


__all__ = ["SURVEYS_STORE", "SURVEY_ETAGS", "reset"]
