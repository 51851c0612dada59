"""HTTP layer: controllers, response models and link helpers."""
from fastapi import APIRouter

from .routes import index_router, items_router

router = APIRouter()
router.include_router(index_router)
router.include_router(items_router)

__all__ = ["router", "index_router", "items_router"]
