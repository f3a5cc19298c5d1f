"""Observability module for SnackShop.

Provides structured logging, metrics, request correlation and health checks.
"""

from .logging_config import configure_logging, get_logger
from .metrics import (
    cache_lookups_total,
    cache_evictions_total,
    cache_products,
    products_generated_total,
    generation_fallbacks_total,
    model_calls_total,
    model_latency_ms,
    model_loads_total,
)
from .request_id import request_id_var, get_request_id, set_request_id, generate_request_id
from .health import HealthStatus, ComponentHealth
from .middleware import RequestIDMiddleware

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    # Metrics
    "cache_lookups_total",
    "cache_evictions_total",
    "cache_products",
    "products_generated_total",
    "generation_fallbacks_total",
    "model_calls_total",
    "model_latency_ms",
    "model_loads_total",
    # Request ID
    "request_id_var",
    "get_request_id",
    "set_request_id",
    "generate_request_id",
    # Health
    "HealthStatus",
    "ComponentHealth",
    # Middleware
    "RequestIDMiddleware",
]
