from fastapi import APIRouter

from .auth import router as auth_router
from .health import router as health_router
from .photos import router as photos_router


def build_router() -> APIRouter:
    router = APIRouter()
    router.include_router(auth_router)
    router.include_router(photos_router)
    router.include_router(health_router)
    return router


# Export module-level router so portfolio.main can import it
router = build_router()
