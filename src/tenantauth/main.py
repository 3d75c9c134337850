"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown (Redis, database engine).
Middleware, CORS, exception handlers, and routers all registered here.

The TokenIssuer is built here from settings and stored on app.state,
so token secrets reach the code that signs/verifies tokens as an
explicit TokenConfig rather than through globals.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tenantauth import __version__
from tenantauth.api import api_router
from tenantauth.auth.jwt import TokenConfig, TokenIssuer
from tenantauth.config import settings
from tenantauth.errors import register_exception_handlers

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs at shutdown.
    """
    logger.info(
        "tenantauth.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    from tenantauth.redis import close_redis, init_redis
    try:
        await init_redis()
        logger.info("tenantauth.redis_connected")
    except Exception as e:
        # Redis is optional — only rate limiting is lost
        logger.warning("tenantauth.redis_unavailable", error=str(e))

    yield

    logger.info("tenantauth.shutdown")
    await close_redis()

    from tenantauth.db.engine import engine
    await engine.dispose()


def create_app(token_config: Optional[TokenConfig] = None) -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="tenantauth",
        description="Company registration and JWT credential issuance",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.token_issuer = TokenIssuer(
        token_config or TokenConfig.from_settings(settings)
    )

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → RateLimit → Security → RequestId → handler

    from tenantauth.middleware.rate_limit import RateLimitMiddleware
    from tenantauth.middleware.request_id import RequestIdMiddleware
    from tenantauth.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        default_rpm=settings.rate_limit_rpm,
        auth_rpm=settings.rate_limit_auth_rpm,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: tenantauth.main:app)
app = create_app()
