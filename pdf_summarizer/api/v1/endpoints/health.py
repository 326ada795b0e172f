"""Health check API endpoints."""

from fastapi import APIRouter
from pydantic import BaseModel, Field

from pdf_summarizer.core.config import settings

router = APIRouter()


class HealthCheckResponse(BaseModel):
    status: str = Field(..., description="Health check status")
    version: str = Field(..., description="Running application version")
    service: str = Field(..., description="Service name")
    llm_configured: bool = Field(..., description="Whether the model API key is set")


@router.get(
    "",
    response_model=HealthCheckResponse,
    tags=["Health"],
    summary="Health check endpoint",
    description="Check if the service is running",
    operation_id="get_service_health_status",
)
async def health_check() -> HealthCheckResponse:
    """Health check endpoint."""
    return HealthCheckResponse(
        status="healthy",
        version=settings.app_version,
        service=settings.app_name,
        llm_configured=settings.llm.is_configured,
    )
