"""Pydantic models for request payloads of the flow routes.

``answers`` is the respondent's AnswerMap exactly as the response layer
stores it; its values are deliberately untyped and are interpreted only by
the answer canonicalisation helpers.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StartRequest(_CamelModel):
    answers: Dict[str, Any] = Field(default_factory=dict)


class NavigationRequest(_CamelModel):
    index: int
    answers: Dict[str, Any] = Field(default_factory=dict)


class VisibilityRequest(_CamelModel):
    answers: Dict[str, Any] = Field(default_factory=dict)
    previous_answers: Optional[Dict[str, Any]] = None


__all__ = ["StartRequest", "NavigationRequest", "VisibilityRequest"]
