"""Survey definition store endpoints.

PUT stores a definition after Pydantic validation and answers with the
stored shape and a weak ETag; GET returns the stored definition unchanged.
The lint endpoint reports authoring warnings without altering anything.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Body, Request, Response
from pydantic import ValidationError as PydanticValidationError

from survey_flow.http.problem import jsonable_errors, problem_response
from survey_flow.logic.authoring_lint import lint_survey
from survey_flow.logic.problem_factory import (
    problem,
    problem_survey_id_mismatch,
    problem_survey_not_found,
)
from survey_flow.logic.repository_surveys import get_survey, get_survey_wire, put_survey
from survey_flow.models.response_types import AuthoringWarningView, LintView
from survey_flow.models.survey import Survey


router = APIRouter()
logger = logging.getLogger(__name__)


def _if_none_match_hit(request: Request, current: str) -> bool:
    header = request.headers.get("If-None-Match")
    if not header:
        return False
    candidates = [t.strip() for t in header.split(",") if t.strip()]
    return any(c == "*" or c == current for c in candidates)


@router.put(
    "/surveys/{survey_id}",
    summary="Store a survey definition",
    operation_id="putSurvey",
    tags=["Surveys"],
)
def store_survey(survey_id: str, request: Request, response: Response, payload: dict = Body(...)):
    body_id = payload.get("id")
    if body_id is None:
        payload = {**payload, "id": survey_id}
    elif body_id != survey_id:
        return problem_response(problem_survey_id_mismatch(survey_id, body_id))
    try:
        survey = Survey.model_validate(payload)
    except PydanticValidationError as e:
        logger.info("survey_store_rejected id=%s errors_cnt=%s", survey_id, len(e.errors()))
        return problem_response(
            problem("SURVEY_DEFINITION_INVALID", "survey definition failed validation", errors=jsonable_errors(e))
        )
    wire, etag = put_survey(survey)
    if request.app.state.config.engine.lint_on_store:
        for warning in lint_survey(survey):
            logger.warning(
                "authoring_warning survey=%s code=%s owner=%s detail=%s",
                survey_id,
                warning.code,
                warning.owner_id,
                warning.detail,
            )
    response.headers["ETag"] = etag
    return wire


@router.get(
    "/surveys/{survey_id}",
    summary="Get a stored survey definition",
    operation_id="getSurvey",
    tags=["Surveys"],
)
def read_survey(survey_id: str, request: Request, response: Response):
    stored = get_survey_wire(survey_id)
    if stored is None:
        return problem_response(problem_survey_not_found(survey_id))
    wire, etag = stored
    if _if_none_match_hit(request, etag):
        return Response(status_code=304, headers={"ETag": etag})
    response.headers["ETag"] = etag
    return wire


@router.get(
    "/surveys/{survey_id}/lint",
    summary="List authoring warnings for a stored survey",
    operation_id="lintSurvey",
    tags=["Surveys"],
    response_model=LintView,
    response_model_by_alias=True,
)
def lint_stored_survey(survey_id: str):
    survey = get_survey(survey_id)
    if survey is None:
        return problem_response(problem_survey_not_found(survey_id))
    warnings = [AuthoringWarningView(**w.as_dict()) for w in lint_survey(survey)]
    logger.info("survey_lint id=%s warnings=%s", survey_id, len(warnings))
    return LintView(survey_id=survey_id, warnings=warnings)


__all__ = ["router"]
