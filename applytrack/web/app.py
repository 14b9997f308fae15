"""FastAPI application factory."""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from starlette.middleware.sessions import SessionMiddleware

from applytrack.config import AppConfig, load_default_config, validate_config
from applytrack.models import init_db, make_engine, make_session_factory
from applytrack.utils.rate_limit import RateLimiter

from .admin import router as admin_router
from .applications import router as applications_router
from .auth import router as auth_router
from .errors import register_error_handlers
from .jobs import router as jobs_router
from .profile import router as profile_router
from .users import router as users_router

logger = logging.getLogger("applytrack.web")

SLOW_REQUEST_SECONDS = 1.0


@asynccontextmanager
async def lifespan(app: FastAPI):
    for warning in validate_config(app.state.config):
        logger.warning("Config: %s", warning)

    yield

    app.state.engine.dispose()


async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    duration = time.perf_counter() - start

    level = logging.WARNING if response.status_code >= 400 else logging.INFO
    logger.log(
        level, "%s %s %d - %.0fms",
        request.method, request.url.path, response.status_code, duration * 1000,
    )
    if duration > SLOW_REQUEST_SECONDS:
        logger.warning("Slow request: %s %s took %.2fs", request.method, request.url.path, duration)

    return response


def create_app(config: Optional[AppConfig] = None) -> FastAPI:
    config = config or load_default_config()

    app = FastAPI(title="ApplyTrack", lifespan=lifespan)

    engine = make_engine(config.server.database_url)
    init_db(engine)

    app.state.config = config
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)
    app.state.rate_limiter = RateLimiter(
        max_requests=config.rate_limit.max_requests,
        window_seconds=config.rate_limit.window_seconds,
    )

    # Session middleware for cookie-based auth
    app.add_middleware(SessionMiddleware, secret_key=config.server.session_secret)
    app.middleware("http")(log_requests)

    register_error_handlers(app)

    app.include_router(auth_router)
    app.include_router(profile_router)
    app.include_router(jobs_router)
    app.include_router(applications_router)
    app.include_router(users_router)
    app.include_router(admin_router)

    @app.get("/api/health")
    def health():
        return {"success": True, "status": "ok"}

    return app
