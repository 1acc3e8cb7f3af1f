"""FastAPI application package init for the Survey Flow service.

This package exposes a small FastAPI application factory. It wires only
cross-cutting middleware (request-id and CORS) and mounts the API routers.
The flow engine lives in `survey_flow/logic/` and route handlers in
`survey_flow/routes/`.
"""

from __future__ import annotations

from survey_flow.main import create_app

__all__ = ["create_app"]
