"""Dependency health for the /health and /ready endpoints.

A check is an async callable reporting on one dependency: the model provider
or the reCAPTCHA verifier. HealthChecker runs the registered checks
concurrently, bounds each by CHECK_TIMEOUT_SECONDS and folds the results into
one HealthReport.

Overall status, most severe first:
    UNHEALTHY  any check is unhealthy
    DEGRADED   any check is degraded (e.g. reCAPTCHA skipped in development)
    UNKNOWN    some check could not decide
    HEALTHY    every check is healthy, or none are registered

Example:
    checker = HealthChecker(version=settings.app_version)
    checker.add_check("anthropic", check_anthropic)
    report = await checker.check_all()
"""

import asyncio
from collections.abc import Callable, Coroutine, Iterable
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from prompt_forge.core.logging import get_logger

logger = get_logger(__name__)

CHECK_TIMEOUT_SECONDS = 10.0
TIMED_OUT_MESSAGE = "Health check timed out"


class ServiceStatus(Enum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    DEGRADED = "degraded"
    UNKNOWN = "unknown"


@dataclass
class ServiceCheck:
    """Outcome of checking one dependency."""

    name: str
    status: ServiceStatus
    latency_ms: float | None = None
    message: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        return data


@dataclass
class HealthReport:
    status: ServiceStatus
    timestamp: str
    checks: list[ServiceCheck]
    version: str | None = None

    @property
    def is_healthy(self) -> bool:
        return self.status is ServiceStatus.HEALTHY

    @property
    def is_ready(self) -> bool:
        """Degraded services still take traffic."""
        return self.status in (ServiceStatus.HEALTHY, ServiceStatus.DEGRADED)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "timestamp": self.timestamp,
            "version": self.version,
            "checks": [check.to_dict() for check in self.checks],
        }


HealthCheckFunc = Callable[[], Coroutine[Any, Any, ServiceCheck]]


def overall_status(statuses: Iterable[ServiceStatus]) -> ServiceStatus:
    """Fold individual statuses into one, most severe first."""
    seen = set(statuses)
    for status in (ServiceStatus.UNHEALTHY, ServiceStatus.DEGRADED, ServiceStatus.UNKNOWN):
        if status in seen:
            return status
    return ServiceStatus.HEALTHY


class HealthChecker:
    """Registry of named dependency checks."""

    def __init__(self, version: str | None = None) -> None:
        self._checks: dict[str, HealthCheckFunc] = {}
        self._version = version

    def add_check(self, name: str, check_func: HealthCheckFunc) -> None:
        """Register a check, replacing any previous one with the same name."""
        self._checks[name] = check_func

    def remove_check(self, name: str) -> None:
        self._checks.pop(name, None)

    async def check_one(self, name: str) -> ServiceCheck:
        """Run one check. Failures and timeouts become UNHEALTHY results.

        Raises:
            KeyError: If no check is registered with that name.
        """
        if name not in self._checks:
            raise KeyError(f"No health check registered for: {name}")

        loop = asyncio.get_running_loop()
        started = loop.time()

        def elapsed_ms() -> float:
            return round((loop.time() - started) * 1000, 2)

        try:
            result = await asyncio.wait_for(
                self._checks[name](), timeout=CHECK_TIMEOUT_SECONDS
            )
        except TimeoutError:
            logger.warning("health_check_timed_out", service=name)
            return ServiceCheck(
                name=name,
                status=ServiceStatus.UNHEALTHY,
                latency_ms=elapsed_ms(),
                message=TIMED_OUT_MESSAGE,
            )
        except Exception as ex:
            logger.warning("health_check_failed", service=name, error=str(ex))
            return ServiceCheck(
                name=name,
                status=ServiceStatus.UNHEALTHY,
                latency_ms=elapsed_ms(),
                message=str(ex),
            )

        if result.latency_ms is None:
            result.latency_ms = elapsed_ms()
        return result

    async def check_all(self) -> HealthReport:
        """Run every registered check concurrently."""
        checks = list(await asyncio.gather(*map(self.check_one, self._checks)))
        return HealthReport(
            status=overall_status(c.status for c in checks),
            timestamp=datetime.now(UTC).isoformat(),
            checks=checks,
            version=self._version,
        )
