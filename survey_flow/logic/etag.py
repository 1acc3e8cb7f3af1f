"""ETag computation for stored survey definitions."""

from __future__ import annotations

import hashlib
import json


def compute_survey_etag(wire: dict) -> str:
    """Weak ETag over the canonical JSON of a survey definition.

    Token: sorted-key compact JSON -> SHA1 -> W/"…".
    """
    token = json.dumps(wire, sort_keys=True, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    return f'W/"{hashlib.sha1(token).hexdigest()}"'


__all__ = ["compute_survey_etag"]
