"""Health check endpoint."""

import time
from fastapi import APIRouter, Request

from arena.models.responses import HealthResponse, HealthDependency
from arena.services.submission_store import InMemorySubmissionStore

router = APIRouter()

_start_time = time.time()


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request):
    """System health check with dependency status."""
    dependencies = {}

    # Check the submission store
    store = getattr(request.app.state, "submission_store", None)
    try:
        start = time.time()
        if store is None or not await store.ping():
            raise ConnectionError("submission store not initialised")
        latency = (time.time() - start) * 1000
        if isinstance(store, InMemorySubmissionStore):
            dependencies["submission_store"] = HealthDependency(
                status="degraded",
                latency_ms=round(latency, 2),
                message="in-memory store; submissions are not durable",
            )
        else:
            dependencies["submission_store"] = HealthDependency(status="healthy", latency_ms=round(latency, 2))
    except Exception as e:
        dependencies["submission_store"] = HealthDependency(status="unhealthy", message=str(e))

    if all(d.status == "healthy" for d in dependencies.values()):
        status = "healthy"
    elif any(d.status == "unhealthy" for d in dependencies.values()):
        status = "unhealthy"
    else:
        status = "degraded"

    return HealthResponse(
        status=status,
        uptime_seconds=round(time.time() - _start_time, 2),
        dependencies=dependencies,
    )
