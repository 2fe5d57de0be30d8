from fastapi import APIRouter
from .system_routes import router as system_router
from .search_routes import router as search_router
from .info_routes import router as info_router
from .download_routes import router as download_router

router = APIRouter()
router.include_router(system_router)
router.include_router(search_router)
router.include_router(info_router)
router.include_router(download_router)
