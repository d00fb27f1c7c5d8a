from moments.web.routers.auth import router as auth_router
from moments.web.routers.health import router as health_router
from moments.web.routers.moments import router as moments_router
from moments.web.routers.upload import router as upload_router

__all__ = [
    "auth_router",
    "health_router",
    "moments_router",
    "upload_router",
]
