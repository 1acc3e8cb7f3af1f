"""Domain event constants and publisher.

Navigation publishes an event when a response reaches an end state so the
completion flow can mark it "completed early" or "completed in full".
"""

from __future__ import annotations

from typing import Any, Dict, List
import logging

from survey_flow.models.navigation import Ended

logger = logging.getLogger(__name__)

RESPONSE_COMPLETED = "response.completed"
RESPONSE_ENDED_EARLY = "response.ended_early"


def publish(event_type: str, payload: Dict[str, Any]) -> None:
    """Publish a domain event.

    Events are logged and buffered in-process for observation.
    """
    logger.info("event_publish type=%s payload=%s", event_type, payload)
    EVENT_BUFFER.append({"type": event_type, "payload": payload})


def publish_end(survey_id: str, question_id: str, state: Ended) -> None:
    event_type = RESPONSE_ENDED_EARLY if state.completed_early else RESPONSE_COMPLETED
    publish(event_type, {"survey_id": survey_id, "question_id": question_id, "reason": state.reason})


EVENT_BUFFER: List[Dict[str, Any]] = []


def get_buffered_events(clear: bool = True) -> List[Dict[str, Any]]:
    """Return buffered domain events; optionally clear the buffer."""
    events = list(EVENT_BUFFER)
    if clear:
        EVENT_BUFFER.clear()
    return events


__all__ = [
    "RESPONSE_COMPLETED",
    "RESPONSE_ENDED_EARLY",
    "publish",
    "publish_end",
    "get_buffered_events",
    "EVENT_BUFFER",
]
