"""APIRouter registration for the survey flow service."""

from __future__ import annotations

from fastapi import APIRouter

from survey_flow.routes.navigation import router as navigation_router
from survey_flow.routes.surveys import router as surveys_router
from survey_flow.routes.visibility import router as visibility_router

api_router = APIRouter()
api_router.include_router(surveys_router, tags=["Surveys"])
api_router.include_router(visibility_router, tags=["Visibility"])
api_router.include_router(navigation_router, tags=["Navigation"])

__all__ = ["api_router"]
