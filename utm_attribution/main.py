"""
UTM Attribution
Main FastAPI application
"""
from fastapi import FastAPI
from contextlib import asynccontextmanager

from utm_attribution.config import get_settings
from utm_attribution.utils.logger import log
from utm_attribution import __version__

from utm_attribution.api import attribution, health
from utm_attribution.middleware.utm_middleware import UtmMiddleware

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    log.info(f"Starting {settings.app_name} v{__version__}")
    log.info(f"Environment: {settings.environment}")
    log.info(
        f"UTM cookies: ttl={settings.utm_cookie_ttl}s domain={settings.utm_cookie_domain or '<host>'}"
    )

    yield

    log.info("Shutting down application")


app = FastAPI(
    title=settings.app_name,
    version=__version__,
    description="""
    Captures UTM tags, the referring origin and the landing page of incoming
    requests, exposes them to handlers under the `utm.*` request keys and
    persists them in `u_*` cookies.
    """,
    lifespan=lifespan
)

# Attribution capture (ttl/domain/overwrite come from settings)
app.add_middleware(UtmMiddleware)

# Include routers
app.include_router(health.router, tags=["health"])
app.include_router(attribution.router)
