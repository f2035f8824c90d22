from datetime import UTC, datetime

from fastapi import APIRouter

from visitor_dashboard.core.config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    return {
        "status": "OK",
        "message": f"{settings.PROJECT_NAME} API is running",
        "timestamp": datetime.now(UTC).isoformat(),
    }
