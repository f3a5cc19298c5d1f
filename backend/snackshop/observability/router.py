"""Health, readiness and Prometheus endpoints."""

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from ..dependencies import ShopContext, get_context
from .health import (
    ComponentHealth,
    HealthStatus,
    check_model_health,
    check_store_health,
    get_overall_health,
)

router = APIRouter(tags=["Observability"])


def _describe(component: ComponentHealth) -> dict:
    return {
        "status": component.status.value,
        "message": component.message,
        "latency_ms": component.latency_ms,
    }


@router.get("/metrics", include_in_schema=False)
def metrics() -> Response:
    """Prometheus scrape target."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@router.get("/health", summary="Component health")
def health(context: ShopContext = Depends(get_context)) -> JSONResponse:
    """Report the store and both models.

    503 only when a component is unhealthy. A model stuck in ``error`` just
    degrades the shop (templates and empty search results).
    """
    models = context.runtime.loading_state()
    components = {
        "store": check_store_health(context.store),
        "text_model": check_model_health("text-generation", models.text_model),
        "embedding_model": check_model_health("embedding", models.embedding_model),
    }
    overall = get_overall_health(components)

    return JSONResponse(
        status_code=503 if overall == HealthStatus.UNHEALTHY else 200,
        content={
            "status": overall.value,
            "components": {name: _describe(c) for name, c in components.items()},
        },
    )


@router.get("/ready", summary="Readiness probe")
def ready(context: ShopContext = Depends(get_context)):
    """Ready as soon as the store answers; models load lazily."""
    store = check_store_health(context.store)
    if store.status != HealthStatus.HEALTHY:
        return JSONResponse(status_code=503, content={"status": "not_ready", "message": store.message})
    return {"status": "ready", "message": "Accepting traffic"}
