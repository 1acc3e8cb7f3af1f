"""Visibility endpoint: which questions a respondent currently sees."""

from __future__ import annotations

import logging

from fastapi import APIRouter

from survey_flow.http.problem import problem_response
from survey_flow.logic.problem_factory import problem_survey_not_found
from survey_flow.logic.repository_surveys import get_survey
from survey_flow.logic.visibility_delta import delta_between_answers
from survey_flow.logic.visibility_rules import visibility_map
from survey_flow.models.requests import VisibilityRequest
from survey_flow.models.response_types import VisibilityDelta, VisibilityView


router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/surveys/{survey_id}/visibility",
    summary="Evaluate display conditions for an answer snapshot",
    operation_id="evaluateVisibility",
    tags=["Visibility"],
    response_model=VisibilityView,
    response_model_exclude_none=True,
)
def evaluate_visibility(survey_id: str, payload: VisibilityRequest):
    survey = get_survey(survey_id)
    if survey is None:
        return problem_response(problem_survey_not_found(survey_id))
    visibility = visibility_map(survey.questions, payload.answers, survey.groups)
    visible_ids = [qid for qid, shown in visibility.items() if shown]
    delta = None
    if payload.previous_answers is not None:
        now_visible, now_hidden, suppressed = delta_between_answers(
            survey.questions, payload.previous_answers, payload.answers, survey.groups
        )
        delta = VisibilityDelta(now_visible=now_visible, now_hidden=now_hidden, suppressed_answers=suppressed)
        logger.info(
            "visibility_delta survey=%s now_visible=%s now_hidden=%s suppressed=%s",
            survey_id,
            len(now_visible),
            len(now_hidden),
            len(suppressed),
        )
    logger.info("visibility_evaluated survey=%s visible=%s total=%s", survey_id, len(visible_ids), len(visibility))
    return VisibilityView(visibility=visibility, visible_question_ids=visible_ids, delta=delta)


__all__ = ["router"]
