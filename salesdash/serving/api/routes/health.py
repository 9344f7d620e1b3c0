"""
Health Check Endpoints

Liveness answers while the process runs; health and readiness also probe
the report store.
"""

from datetime import datetime, timezone
from typing import Dict, Optional

import structlog
from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from salesdash.config import get_settings
from salesdash.serving.api.dependencies import get_store
from salesdash.serving.store import ReportStore

router = APIRouter()
logger = structlog.get_logger(__name__)


class StoreHealth(BaseModel):
    status: str
    backend: str
    error: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    version: str
    environment: str
    timestamp: datetime
    store: StoreHealth


async def _probe_store(store: ReportStore) -> Optional[str]:
    """None when the store answers, otherwise the reason it does not"""
    try:
        if await store.ping():
            return None
        return "store_unavailable"
    except Exception as e:
        logger.warning("Report store probe failed", error=str(e))
        return str(e)


@router.get("/health", response_model=HealthResponse)
async def health_check(store: ReportStore = Depends(get_store)) -> HealthResponse:
    settings = get_settings()
    problem = await _probe_store(store)

    return HealthResponse(
        status="healthy" if problem is None else "degraded",
        version=settings.version,
        environment=settings.app_env,
        timestamp=datetime.now(timezone.utc),
        store=StoreHealth(
            status="healthy" if problem is None else "unhealthy",
            backend=type(store).__name__,
            error=problem,
        ),
    )


@router.get("/health/live")
async def liveness_check() -> Dict[str, str]:
    return {"status": "alive"}


@router.get("/health/ready")
async def readiness_check(response: Response, store: ReportStore = Depends(get_store)) -> Dict[str, str]:
    """503 until the report store answers"""
    problem = await _probe_store(store)
    if problem is not None:
        response.status_code = 503
        return {"status": "not_ready", "reason": problem}
    return {"status": "ready"}
