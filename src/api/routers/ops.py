from fastapi import APIRouter, Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

router = APIRouter()


@router.get("/api/health")
async def health_check() -> dict:
    """Liveness probe used by the frontend and container orchestration."""
    return {"status": "OK", "message": "LexiCal Backend is running"}


@router.get("/metrics")
async def metrics() -> Response:
    """
    Prometheus scrape endpoint.
    """
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)
