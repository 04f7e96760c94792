"""Probe endpoints: /health, /ready and /live.

/health and /ready run the checker installed on app.state by the lifespan.
"""

from typing import Any

from fastapi import APIRouter, Request, Response, status

from prompt_forge.core.health import HealthChecker, HealthReport
from prompt_forge.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["health"])


def _status_code(ok: bool) -> int:
    return status.HTTP_200_OK if ok else status.HTTP_503_SERVICE_UNAVAILABLE


async def _run_checks(request: Request) -> HealthReport:
    checker: HealthChecker = request.app.state.health_checker
    return await checker.check_all()


@router.get("/health")
async def health_check(request: Request, response: Response) -> dict[str, Any]:
    """Per-dependency report. 503 unless every dependency is healthy."""
    report = await _run_checks(request)
    response.status_code = _status_code(report.is_healthy)

    logger.info(
        "health_check",
        status=report.status.value,
        checks={c.name: c.status.value for c in report.checks},
    )
    return report.to_dict()


@router.get("/ready")
async def readiness_check(request: Request, response: Response) -> dict[str, Any]:
    """Readiness probe. A degraded service still accepts traffic."""
    report = await _run_checks(request)
    response.status_code = _status_code(report.is_ready)
    return {"ready": report.is_ready, "status": report.status.value}


@router.get("/live")
async def liveness_check() -> dict[str, bool]:
    return {"alive": True}
