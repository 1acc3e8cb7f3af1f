"""Navigation endpoints over a stored survey.

Each call is stateless: the client sends the current question index and
its full answer snapshot, and receives the next navigation state. Reaching
an end state publishes a completion event.
"""

from __future__ import annotations

from typing import Callable
import logging

from fastapi import APIRouter

from survey_flow.http.problem import problem_response
from survey_flow.logic import navigation as flow
from survey_flow.logic.events import publish_end
from survey_flow.logic.problem_factory import problem_survey_not_found
from survey_flow.logic.repository_surveys import get_survey
from survey_flow.models.navigation import AtQuestion, NavigationState
from survey_flow.models.requests import NavigationRequest, StartRequest
from survey_flow.models.response_types import NavigationView
from survey_flow.models.survey import Survey


router = APIRouter()
logger = logging.getLogger(__name__)


def _view(survey: Survey, state: NavigationState, answers: dict, from_question_id: str | None) -> NavigationView:
    if isinstance(state, AtQuestion):
        question = survey.questions[state.index]
        progress = flow.progress(survey.questions, state.index, answers, survey.groups)
        return NavigationView.from_state(state, question_id=question.id, progress=progress)
    publish_end(survey.id, from_question_id or "", state)
    return NavigationView.from_state(state)


def _step(survey_id: str, payload: NavigationRequest, move: Callable[..., NavigationState], direction: str):
    survey = get_survey(survey_id)
    if survey is None:
        return problem_response(problem_survey_not_found(survey_id))
    state = move(survey.questions, payload.index, payload.answers, survey.groups)
    from_question_id = None
    if 0 <= payload.index < len(survey.questions):
        from_question_id = survey.questions[payload.index].id
    logger.info(
        "navigation_step survey=%s direction=%s from=%s state=%s",
        survey_id,
        direction,
        payload.index,
        state,
    )
    return _view(survey, state, payload.answers, from_question_id)


@router.post(
    "/surveys/{survey_id}/navigation/start",
    summary="Initial navigation state for a response",
    operation_id="startNavigation",
    tags=["Navigation"],
    response_model=NavigationView,
    response_model_exclude_none=True,
)
def start(survey_id: str, payload: StartRequest):
    survey = get_survey(survey_id)
    if survey is None:
        return problem_response(problem_survey_not_found(survey_id))
    state = flow.initial_state(survey.questions, payload.answers, survey.groups)
    logger.info("navigation_start survey=%s state=%s", survey_id, state)
    return _view(survey, state, payload.answers, None)


@router.post(
    "/surveys/{survey_id}/navigation/next",
    summary="Advance from the current question",
    operation_id="advanceNavigation",
    tags=["Navigation"],
    response_model=NavigationView,
    response_model_exclude_none=True,
)
def next_question(survey_id: str, payload: NavigationRequest):
    return _step(survey_id, payload, flow.advance, "next")


@router.post(
    "/surveys/{survey_id}/navigation/previous",
    summary="Go back to the nearest earlier visible question",
    operation_id="retreatNavigation",
    tags=["Navigation"],
    response_model=NavigationView,
    response_model_exclude_none=True,
)
def previous_question(survey_id: str, payload: NavigationRequest):
    return _step(survey_id, payload, flow.retreat, "previous")


__all__ = ["router"]
