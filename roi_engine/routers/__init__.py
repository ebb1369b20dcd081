# FastAPI Routers
from roi_engine.routers.health import router as health_router
from roi_engine.routers.roi_calculations import router as roi_calculations_router

__all__ = [
    "health_router",
    "roi_calculations_router",
]
