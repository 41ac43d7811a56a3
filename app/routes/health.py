"""Health check endpoints."""
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from app.config import settings

router = APIRouter()


@router.get("/health/live")
async def liveness():
    """Liveness probe - always returns 200 once app is running."""
    return {"status": "ok"}


@router.get("/health/ready")
async def readiness():
    """
    Readiness probe - returns 200 only if OPENAI_API_KEY, DINGTALK_WEBHOOK
    and DINGTALK_SECRET are all set. Only names are reported, never values.
    """
    missing = settings.missing_required()
    if missing:
        return JSONResponse(
            content={"status": "not ready", "missing": missing},
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    return {"status": "ready"}
