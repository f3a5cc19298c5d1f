"""Component health for the /health and /ready probes.

The store is probed with a single read. Models are never loaded by a probe;
their current loading status is reported instead.
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from ..domain.shop import ModelStatus
from ..domain.storage import KeyValueStorePort
from .logging_config import get_logger

logger = get_logger(__name__)

HEALTH_PROBE_KEY = "health:probe"


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass
class ComponentHealth:
    status: HealthStatus
    message: Optional[str] = None
    latency_ms: Optional[float] = None


def check_store_health(store: KeyValueStorePort) -> ComponentHealth:
    """Read the probe key and time it.

    Any exception marks the store unhealthy; it is logged, not raised.
    """
    started = time.perf_counter()
    try:
        store.get(HEALTH_PROBE_KEY)
    except Exception as exc:
        logger.error(f"Store probe failed: {exc}", exc_info=True)
        return ComponentHealth(HealthStatus.UNHEALTHY, message=f"Store unavailable: {exc}")

    elapsed = round((time.perf_counter() - started) * 1000, 2)
    return ComponentHealth(HealthStatus.HEALTHY, message="Store reachable", latency_ms=elapsed)


def check_model_health(name: str, status: ModelStatus) -> ComponentHealth:
    """A failed model degrades the shop (template names, empty search)."""
    if status == ModelStatus.ERROR:
        return ComponentHealth(HealthStatus.DEGRADED, message=f"{name} model unavailable, fallbacks active")
    return ComponentHealth(HealthStatus.HEALTHY, message=f"{name} model {status.value}")


def get_overall_health(components: Dict[str, ComponentHealth]) -> HealthStatus:
    """Worst component status wins."""
    statuses = {c.status for c in components.values()}
    for candidate in (HealthStatus.UNHEALTHY, HealthStatus.DEGRADED):
        if candidate in statuses:
            return candidate
    return HealthStatus.HEALTHY
