import logging
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from portfolio.config import settings
from portfolio.core.handlers import register_exception_handlers
from portfolio.core.middleware import ErrorEnvelopeMiddleware, PermissiveCORSMiddleware
from portfolio.db import init_db, close_db
from portfolio.routers import router
from portfolio.services.metrics import metrics_endpoint, metrics_middleware
from portfolio.services.observability import init_observability
from portfolio.services.photos import sync_catalog
from portfolio.services.security import TokenIssuer
from portfolio.services.storage import LocalPhotoStorage

# Logging setup
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
log = logging.getLogger("portfolio")


def build_token_issuer() -> TokenIssuer:
    """Fail fast on a missing secret, and on a weak one in production."""
    secret = settings.JWT_SECRET
    if settings.is_production and len(secret.strip()) < 32:
        raise RuntimeError("Insecure JWT_SECRET; set a secret of at least 32 characters in production")
    return TokenIssuer(
        secret,
        algorithm=settings.JWT_ALGORITHM,
        ttl=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRES_MIN),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    log.info("Starting portfolio API...")
    init_observability()
    await init_db()

    added, removed = await sync_catalog(app.state.photo_storage)
    log.info("Photo catalog ready (%d added, %d removed)", added, removed)

    yield

    # Shutdown
    log.info("Shutting down portfolio API...")
    await close_db()
    log.info("Database connections closed")


photo_storage = LocalPhotoStorage(settings.PHOTO_DIR)
photo_storage.ensure_layout()

app = FastAPI(
    title="Portfolio API",
    description="Categorized portfolio images with a single admin account",
    version="1.0.0",
    lifespan=lifespan,
)
app.state.token_issuer = build_token_issuer()
app.state.photo_storage = photo_storage

register_exception_handlers(app)
app.include_router(router)

# Raw image bytes, straight from the category folders
app.mount("/photos", StaticFiles(directory=str(photo_storage.base)), name="photos")

# Middleware setup; the last one added runs first
metrics_middleware(app)
app.add_middleware(ErrorEnvelopeMiddleware)
app.add_middleware(PermissiveCORSMiddleware)


@app.get("/metrics", include_in_schema=False)
async def prometheus_metrics():
    return await metrics_endpoint()
