"""Pydantic models for flow route response bodies."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from survey_flow.models.navigation import AtQuestion, Ended, NavigationState, Progress


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProgressView(_CamelModel):
    position: int
    total_visible: int


class NavigationView(_CamelModel):
    state: str
    index: Optional[int] = None
    question_id: Optional[str] = None
    progress: Optional[ProgressView] = None
    reason: Optional[str] = None
    completed_early: Optional[bool] = None

    @classmethod
    def from_state(
        cls,
        state: NavigationState,
        question_id: Optional[str] = None,
        progress: Optional[Progress] = None,
    ) -> "NavigationView":
        if isinstance(state, AtQuestion):
            return cls(
                state="at_question",
                index=state.index,
                question_id=question_id,
                progress=ProgressView(position=progress.position, total_visible=progress.total_visible)
                if progress
                else None,
            )
        if not isinstance(state, Ended):
            raise TypeError(f"unknown navigation state {state!r}")
        return cls(state="ended", reason=state.reason, completed_early=state.completed_early)


class VisibilityDelta(_CamelModel):
    now_visible: List[str]
    now_hidden: List[str]
    suppressed_answers: List[str]


class VisibilityView(_CamelModel):
    visibility: Dict[str, bool]
    visible_question_ids: List[str]
    delta: Optional[VisibilityDelta] = None


class AuthoringWarningView(_CamelModel):
    code: str
    owner_id: str
    detail: str


class LintView(_CamelModel):
    survey_id: str
    warnings: List[AuthoringWarningView]


__all__ = [
    "ProgressView",
    "NavigationView",
    "VisibilityDelta",
    "VisibilityView",
    "AuthoringWarningView",
    "LintView",
]
