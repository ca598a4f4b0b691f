"""
FarmOps API - Entry Point.

Ciclo de vida de órdenes de trabajo agrícolas. API REST con FastAPI que
se ubica entre la interfaz de terreno y la API de datos de la granja:
decide qué transiciones de estado puede pedir cada usuario y las aplica.

Configuración:
- FastAPI app con OpenAPI docs automática
- CORS para frontend
- Exception handlers para errores custom (FarmOpsException)
- Logging comprehensivo

Endpoints:
- GET  /                                   - Root endpoint (info API)
- GET  /api/docs                           - OpenAPI documentation (Swagger UI)
- GET  /api/health                         - Health check
- GET  /api/work-orders                    - Lista de órdenes
- GET  /api/work-orders/{id}               - Detalle con acciones disponibles
- GET  /api/work-orders/{id}/actions       - Acciones disponibles
- POST /api/work-orders/{id}/transition    - Transición de estado
- POST /api/work-orders/{id}/activities    - Registro de actividad
"""

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from farmops.config import config
from farmops.core.dependency import close_singletons
from farmops.exceptions import FarmOpsException, RemoteRejectedError
from farmops.models.error import ErrorResponse
from farmops.utils.logger import get_logger, setup_logger

from farmops.routers import health, work_orders

logger = get_logger(__name__)


# ============================================================================
# INICIALIZACIÓN FASTAPI
# ============================================================================

app = FastAPI(
    title="FarmOps API",
    description="""
    API de ciclo de vida para órdenes de trabajo agrícolas.

    ## Flujo de Estados

    PENDING → IN_PROGRESS → UNDER_REVIEW → COMPLETED, con CANCELLED alcanzable
    desde cualquier estado no terminal y UNDER_REVIEW → IN_PROGRESS (reabrir).

    ## Roles

    - **OPERARIO**: solo sobre órdenes asignadas; puede iniciar y enviar a revisión
    - **CAPATAZ / ADMIN**: todas las transiciones sobre cualquier orden

    COMPLETED y CANCELLED son terminales: nadie puede modificarlas.

    ## Identidad

    El usuario que actúa llega en los headers `X-User-Id` y `X-User-Role`.
    """,
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    license_info={
        "name": "Proprietary"
    }
)


# ============================================================================
# MIDDLEWARE - CORS
# ============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"]
)


# ============================================================================
# EXCEPTION HANDLERS
# ============================================================================

# Mapeo de error_code → HTTP status
STATUS_MAP = {
    # 404 NOT FOUND
    "WORK_ORDER_NOT_FOUND": status.HTTP_404_NOT_FOUND,

    # 403 FORBIDDEN
    "TRANSITION_NOT_PERMITTED": status.HTTP_403_FORBIDDEN,
    "NOT_AUTHORIZED": status.HTTP_403_FORBIDDEN,

    # 409 CONFLICT
    "INVALID_WORK_ORDER_STATE": status.HTTP_409_CONFLICT,

    # 502 BAD GATEWAY (salvo que el backend responda 4xx, ver resolve_http_status)
    "REMOTE_REJECTED": status.HTTP_502_BAD_GATEWAY,

    # 503 / 504
    "BACKEND_UNREACHABLE": status.HTTP_503_SERVICE_UNAVAILABLE,
    "BACKEND_TIMEOUT": status.HTTP_504_GATEWAY_TIMEOUT
}


def resolve_http_status(exc: FarmOpsException) -> int:
    """
    HTTP status para una FarmOpsException.

    Un rechazo del backend con status 4xx se devuelve con ese mismo status
    (409 por estado obsoleto, 422 por validación, etc.); cualquier otro
    rechazo es 502.
    """
    if isinstance(exc, RemoteRejectedError):
        upstream = exc.upstream_status
        if upstream is not None and 400 <= upstream < 500:
            return upstream
    return STATUS_MAP.get(exc.error_code, status.HTTP_500_INTERNAL_SERVER_ERROR)


@app.exception_handler(FarmOpsException)
async def farmops_exception_handler(request: Request, exc: FarmOpsException):
    """
    Handler global para todas las excepciones custom de FarmOps.

    Logging según severidad:
        - 500+: ERROR
        - 403: WARNING (auditoría de intentos no permitidos)
        - resto: INFO (errores cliente esperados)
    """
    http_status = resolve_http_status(exc)

    error_response = ErrorResponse(
        success=False,
        error=exc.error_code,
        kind=exc.kind,
        message=exc.message,
        data=exc.data if exc.data else None
    )

    if http_status >= 500:
        logger.error(f"Server error on {request.method} {request.url.path}: {exc.message}")
    elif http_status == 403:
        logger.warning(f"Forbidden: {exc.message}")
    else:
        logger.info(f"Client error: {exc.message}")

    return JSONResponse(
        status_code=http_status,
        content=error_response.model_dump(mode="json")
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """
    Handler para excepciones no manejadas (fallback).

    En desarrollo (ENVIRONMENT=local): Incluye detalles del error en data
    En producción: Solo mensaje genérico (no exponer detalles internos)
    """
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)

    error_response = ErrorResponse(
        success=False,
        error="INTERNAL_SERVER_ERROR",
        message="Internal server error. Contact the administrator.",
        data={"detail": str(exc)} if config.ENVIRONMENT == "local" else None
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response.model_dump(mode="json")
    )


# ============================================================================
# STARTUP/SHUTDOWN EVENTS
# ============================================================================


@app.on_event("startup")
async def startup_event():
    """
    Configurar sistema al iniciar app.

    Acciones:
    - Configurar logging con setup_logger()
    - Validar variables de entorno
    - Log de información del ambiente
    """
    setup_logger()
    config.validate()
    logger.info("✅ FarmOps API iniciada correctamente")
    logger.info(f"Environment: {config.ENVIRONMENT}")
    logger.info(f"Farm API: {config.FARM_API_URL}")
    logger.info(f"Timezone: {config.TIMEZONE}")
    logger.info(f"CORS Origins: {config.ALLOWED_ORIGINS}")


@app.on_event("shutdown")
async def shutdown_event():
    """Limpieza al apagar app: cierra el cliente HTTP compartido."""
    close_singletons()
    logger.info("🔴 FarmOps API shutting down...")


# ============================================================================
# ROUTERS
# ============================================================================

app.include_router(health.router, prefix="/api", tags=["Health"])
app.include_router(work_orders.router, prefix="/api", tags=["Work Orders"])


# ============================================================================
# ROOT ENDPOINT
# ============================================================================


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint - Información básica de la API."""
    return {
        "message": "FarmOps API - Work Order Lifecycle",
        "version": "1.0.0",
        "docs": "/api/docs",
        "redoc": "/api/redoc",
        "health": "/api/health"
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "farmops.main:app",
        host=config.API_HOST,
        port=config.API_PORT,
        reload=config.ENVIRONMENT == "local"
    )
