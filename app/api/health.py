from fastapi import APIRouter, Depends

from app.core.config import Settings, get_settings

router = APIRouter()


@router.get("/health", tags=["System"])
def get_system_health(settings: Settings = Depends(get_settings)):
    """
    Returns the system health status including the business timezone
    used for reports and vouchers.
    """
    return {
        "status": "ok",
        "environment": settings.app_env,
        "timezone": settings.business_timezone,
    }
