from fastapi import APIRouter
from pydantic import BaseModel

from moments.web.deps import AppDep

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str
    store_connected: bool


@router.get("/health", summary="Health check", operation_id="healthCheck")
async def health_check(app: AppDep) -> HealthResponse:
    connected = await app.check_health()
    return HealthResponse(status="healthy" if connected else "unhealthy", store_connected=connected)
