"""Main FastAPI application for the fitTrAIner backend."""
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from fittrainer.api.routes.events import router as events_router
from fittrainer.api.routes.plan import router as plan_router
from fittrainer.api.routes.trainer import router as trainer_router
from fittrainer.api.routes.user import router as user_router
from fittrainer.core.config import settings
from fittrainer.core.logging import configure_logging
from fittrainer.core.middleware import RequestIDMiddleware
from fittrainer.db import Base
from fittrainer.db.session import engine
from fittrainer.observability.client import init_opik
from fittrainer.observability.tracing import trace
from fittrainer.services.plan_session import PlanSession

configure_logging(log_level=settings.log_level)

app = FastAPI(title=settings.app_name, version="0.1.0", debug=settings.debug)
app.add_middleware(RequestIDMiddleware)
app.add_middleware(CORSMiddleware, allow_origins=settings.cors_origins, allow_methods=["*"], allow_headers=["*"])
app.include_router(user_router)
app.include_router(plan_router)
app.include_router(trainer_router)
app.include_router(events_router)
app.state.plan_session = PlanSession(wait_seconds=settings.plan_mutation_wait_seconds)


@app.on_event("startup")
async def startup() -> None:
    """Initialize observability and, when asked to, the local database schema."""
    init_opik()
    if settings.create_schema_on_startup:
        Base.metadata.create_all(bind=engine)


@app.get("/health", tags=["health"], summary="Readiness probe")
async def health_check(request: Request) -> dict[str, str]:
    """Return a simple status payload so automation can probe the API."""
    with trace("http.health_check", metadata={"route": "/health"}, request_id=request.state.request_id):
        return {"status": "ok"}


# Mounted last so the API routes above take precedence over the front-end files.
if settings.static_dir and Path(settings.static_dir).is_dir():
    app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
