from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError

from survey_flow.config import AppConfig, load_config
from survey_flow.http.cors import apply_cors
from survey_flow.http.problem import (
    handle_http_exception,
    handle_request_validation_error,
    handle_survey_definition_error,
    handle_unexpected_error,
)
from survey_flow.http.request_id import RequestIdMiddleware
from survey_flow.logging_setup import configure_logging
from survey_flow.logic.survey_definition import SurveyDefinitionError
from survey_flow.routes import api_router

logger = logging.getLogger(__name__)


def create_app(config: AppConfig | None = None) -> FastAPI:
    config = config or load_config()
    # Configure global logging before app instantiation so all modules emit
    configure_logging(config.logging.level)
    app = FastAPI(title="Survey Flow Service")
    app.state.config = config

    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(SurveyDefinitionError, handle_survey_definition_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
    app.add_middleware(RequestIdMiddleware)
    apply_cors(app, origins=config.api.cors_origins)

    app.include_router(api_router, prefix=config.api.prefix)

    # Health endpoint (out of prefix for simplicity in local runs)
    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    logger.info(
        "app_created prefix=%s cors_origins=%s lint_on_store=%s",
        config.api.prefix,
        config.api.cors_origins,
        config.engine.lint_on_store,
    )
    return app


# Intentionally do not instantiate the app at import time to prevent side effects.
