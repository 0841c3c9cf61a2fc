from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app import db
from app.services.health import HealthService

router = APIRouter(prefix="/readyz", tags=["health"])


@router.get(
    "",
    summary="Readiness probe",
    description="Runs SELECT 1 and loads the exercise catalog; 503 when either fails.",
)
async def readyz():
    try:
        async with db.SessionLocal() as session:
            return await HealthService(session).ready()
    except (SQLAlchemyError, OSError, ValueError) as exc:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "error": {
                    "code": "not_ready",
                    "message": "Service dependencies are unavailable",
                    "detail": exc.__class__.__name__,
                }
            },
        )
