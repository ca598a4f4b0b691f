"""
Health Check Router - Monitoreo del estado del sistema.

Endpoint para verificar que la API está funcionando y que la API de
órdenes de trabajo responde.

Endpoints:
- GET /api/health - Health check con ping al backend
"""

from fastapi import APIRouter, Depends, status
from datetime import datetime, timezone

from farmops.core.dependency import get_work_order_repository
from farmops.repositories.work_order_repository import WorkOrderRepository
from farmops.config import config
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", status_code=status.HTTP_200_OK)
def health_check(
    repo: WorkOrderRepository = Depends(get_work_order_repository)
):
    """
    Health check endpoint para monitoreo del sistema.

    Si la API de órdenes no responde, retorna status "degraded" en lugar de
    error 503: la API sigue viva, con funcionalidad reducida.

    Example response (degraded):
        ```json
        {
            "status": "degraded",
            "timestamp": "2026-01-21T14:30:00Z",
            "environment": "production",
            "backend_connection": "error",
            "version": "1.0.0"
        }
        ```
    """
    logger.info("Health check requested")

    backend_status = "ok" if repo.ping() else "error"
    if backend_status == "error":
        logger.error("Health check failed: farm API did not answer")

    return {
        "status": "healthy" if backend_status == "ok" else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "environment": config.ENVIRONMENT,
        "backend_connection": backend_status,
        "version": "1.0.0"
    }
