"""
Home/Root API endpoints
Service information endpoints
"""

from fastapi import APIRouter

from storefront.core.config import config

router = APIRouter()


@router.get("/")
async def root():
    """Root endpoint - Service information."""
    return {
        "service": config.service_name,
        "version": config.service_version,
        "environment": config.environment,
        "message": "Storefront Service is running",
        "status": "operational"
    }


@router.get("/version")
def get_version():
    """Service version, used for deployment tracking."""
    return {
        "version": config.service_version,
        "api_version": config.api_version,
    }
