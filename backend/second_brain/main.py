from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from contextlib import asynccontextmanager
from typing import Optional
import logging

from second_brain import __version__
from second_brain.core.auth import TokenService
from second_brain.core.config import Settings, get_settings
from second_brain.core.database import Base, build_engine, build_session_factory
from second_brain.core.errors import register_exception_handlers
from second_brain.core.logging_config import (
    setup_security_logging,
    CorrelationIdMiddleware,
    log_security_event,
)
from second_brain.core.security import PasswordHasher
from second_brain.api.endpoints import auth, content, brain
import second_brain.models  # noqa: F401  (registers tables on Base.metadata)

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("Starting Second Brain application...")

    Base.metadata.create_all(bind=app.state.engine)
    logger.info("Database tables created")

    yield

    logger.info("Shutting down Second Brain application...")
    app.state.engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application around one explicit settings object.

    The engine, session factory, token service and password hasher are
    created here and hung on ``app.state``; request handlers reach them only
    through dependencies.
    """
    settings = settings or get_settings()
    setup_security_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="Second Brain",
        description="Save links with tags and share them through a public link",
        version=__version__,
        lifespan=lifespan,
    )

    engine = build_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.token_service = TokenService(
        settings.SECRET_KEY, expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    app.state.password_hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)

    register_exception_handlers(app)

    # Correlation IDs first, so all logs carry them
    app.add_middleware(CorrelationIdMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    prefix = settings.API_PREFIX.rstrip("/")
    app.include_router(auth.router, prefix=prefix, tags=["auth"])
    app.include_router(content.router, prefix=f"{prefix}/content", tags=["content"])
    app.include_router(brain.router, prefix=f"{prefix}/brain", tags=["brain"])

    @app.get("/")
    def root():
        return {
            "name": "Second Brain",
            "version": __version__,
            "description": "Personal bookmarking service",
        }

    @app.get("/health")
    def health_check():
        return {"status": "healthy"}

    log_security_event(
        event_type="app.startup",
        message="Second Brain application configured",
        event_category="system",
        debug=settings.DEBUG,
        token_expiry=settings.ACCESS_TOKEN_EXPIRE_MINUTES is not None,
    )

    return app
