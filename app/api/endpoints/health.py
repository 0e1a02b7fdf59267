# /health endpoint

# backend/app/api/endpoints/health.py

from fastapi import APIRouter, status
from pydantic import BaseModel

router = APIRouter()

class HealthResponse(BaseModel):
    status: str = "ok"

@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Perform a Health Check",
    response_description="Returns the health status of the API.",
)
async def health_check():
    """
    Liveness probe. Does not touch the database so it stays fast.
    """
    return HealthResponse(status="ok")
