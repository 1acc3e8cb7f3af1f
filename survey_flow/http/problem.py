"""Problem+JSON utilities and global exception handlers.

Defines the RFC7807 media type and handler callables that produce
application/problem+json responses.
"""

from __future__ import annotations

import logging
from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from survey_flow.logic.problem_factory import problem_from_definition_error
from survey_flow.logic.survey_definition import SurveyDefinitionError

PROBLEM_MEDIA_TYPE = "application/problem+json"

logger = logging.getLogger(__name__)


def problem_response(body: dict, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        body,
        status_code=int(body.get("status", 500) or 500),
        media_type=PROBLEM_MEDIA_TYPE,
        headers=headers,
    )


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:  # noqa: D401
    if isinstance(exc.detail, dict):
        detail = dict(exc.detail)
        detail.setdefault("status", exc.status_code)
    else:
        detail = {"title": "Error", "status": exc.status_code, "detail": str(exc.detail or "")}
    headers = {str(k): str(v) for k, v in (exc.headers or {}).items()}
    return JSONResponse(
        detail,
        status_code=exc.status_code,
        media_type=PROBLEM_MEDIA_TYPE,
        headers=headers or None,
    )


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:  # noqa: D401
    logger.info(
        "validation_422 route=%s method=%s errors_cnt=%s",
        request.url.path,
        request.method,
        len(exc.errors()),
    )
    body = {
        "title": "Invalid Request",
        "status": 422,
        "detail": "Request validation failed",
        "code": "REQUEST_VALIDATION_FAILED",
        "errors": jsonable_errors(exc),
    }
    return JSONResponse(body, status_code=422, media_type=PROBLEM_MEDIA_TYPE)


def jsonable_errors(exc: RequestValidationError | PydanticValidationError) -> list:
    out = []
    for err in exc.errors():
        out.append({"loc": [str(p) for p in err.get("loc", ())], "msg": str(err.get("msg", "")), "type": err.get("type")})
    return out


async def handle_survey_definition_error(request: Request, exc: SurveyDefinitionError) -> JSONResponse:  # noqa: D401
    logger.warning("survey_definition_error route=%s code=%s", request.url.path, exc.code)
    return problem_response(problem_from_definition_error(exc.code, str(exc)))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:  # noqa: D401
    logger.error("unexpected_error route=%s", request.url.path, exc_info=exc)
    return JSONResponse({"title": "Internal Server Error", "status": 500}, status_code=500, media_type=PROBLEM_MEDIA_TYPE)


__all__ = [
    "PROBLEM_MEDIA_TYPE",
    "problem_response",
    "jsonable_errors",
    "handle_http_exception",
    "handle_request_validation_error",
    "handle_survey_definition_error",
    "handle_unexpected_error",
]
