"""InviteGate API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map InviteGateError → structured JSON responses
    - CORS and session cookie configured from settings (not hardcoded)
    - Service container initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: owns container creation and client cleanup
    - Static files mounted AFTER API routes so /api/* and /login take precedence
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from invitegate.api.error_handlers import register_error_handlers
from invitegate.api.routes import account, auth, health, invites
from invitegate.config import get_settings
from invitegate.infrastructure.observability import setup_logging
from invitegate.services import container as container_module

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    services = container_module.init_container(settings)
    logger.info(f"Server running at {settings.base_url}")
    logger.info(f"Twitter app Redirect URI must be set to: {settings.redirect_uri}")
    yield
    await services.aclose()
    logger.info("InviteGate API shutting down")


app = FastAPI(
    title="InviteGate API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret,
    max_age=settings.session_max_age_seconds,
    same_site="lax",
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info(
        f"{request.method} {request.url.path}",
        extra={"method": request.method, "path": request.url.path},
    )
    return await call_next(request)


app.include_router(health.router)
app.include_router(auth.router)
app.include_router(account.router)
app.include_router(invites.router)

register_error_handlers(app)

# html=True serves index.html at "/" (the OAuth callback redirects there)
if os.path.isdir(settings.static_dir):
    app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("invitegate.main:app", host=settings.host, port=settings.port)
