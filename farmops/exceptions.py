"""
Jerarquía de excepciones custom para FarmOps.

Todas las excepciones del sistema heredan de FarmOpsException y llevan un
error_code (mapeado a HTTP en main.py) y un ErrorKind (categoría del
ciclo de vida).
"""
from typing import Optional, Any

from farmops.models.enums import ErrorKind


class FarmOpsException(Exception):
    """
    Excepción base para todo el sistema FarmOps.

    Todas las excepciones custom heredan de esta clase.
    """

    def __init__(
        self,
        message: str,
        error_code: str,
        kind: ErrorKind,
        data: Optional[dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.kind = kind
        self.data = data or {}
        super().__init__(self.message)


# ==================== EXCEPCIONES 404 (NOT FOUND) ====================

class WorkOrderNotFoundError(FarmOpsException):
    """Orden de trabajo no existe en el backend."""

    def __init__(self, work_order_id: str):
        super().__init__(
            message=f"Work order '{work_order_id}' not found",
            error_code="WORK_ORDER_NOT_FOUND",
            kind=ErrorKind.NOT_FOUND,
            data={"work_order_id": work_order_id}
        )


# ==================== EXCEPCIONES 403 (FORBIDDEN) - AUTORIZACIÓN ====================

class TransitionNotPermittedError(FarmOpsException):
    """
    Transición de estado no permitida para el rol/estado actual.

    Nunca se envía al backend: se rechaza antes de cualquier llamada.
    """

    def __init__(
        self,
        work_order_id: str,
        current_status: str,
        requested_status: str,
        role: str
    ):
        super().__init__(
            message=(
                f"Transition not permitted for this role/state: "
                f"{current_status} → {requested_status} (role {role})"
            ),
            error_code="TRANSITION_NOT_PERMITTED",
            kind=ErrorKind.FORBIDDEN,
            data={
                "work_order_id": work_order_id,
                "current_status": current_status,
                "requested_status": requested_status,
                "role": role
            }
        )


class NotAuthorizedError(FarmOpsException):
    """
    El usuario no puede modificar la orden.

    Solo ADMIN, CAPATAZ o el OPERARIO asignado pueden actuar sobre una orden.
    """

    def __init__(self, work_order_id: str, user_id: str, role: str, operacion: str):
        super().__init__(
            message=(
                f"User {user_id} ({role}) is not allowed to {operacion} "
                f"on work order '{work_order_id}'"
            ),
            error_code="NOT_AUTHORIZED",
            kind=ErrorKind.FORBIDDEN,
            data={
                "work_order_id": work_order_id,
                "user_id": user_id,
                "role": role,
                "operacion": operacion
            }
        )


# ==================== EXCEPCIONES 409 (CONFLICT) - ESTADO ====================

class InvalidWorkOrderStateError(FarmOpsException):
    """
    Operación no admitida en el estado actual de la orden.

    Ejemplo: agregar una actividad cuando la orden no está IN_PROGRESS.
    """

    def __init__(
        self,
        work_order_id: str,
        current_status: str,
        operacion: str,
        mensaje: Optional[str] = None
    ):
        default_mensaje = (
            f"Cannot {operacion} on work order '{work_order_id}': "
            f"status is {current_status}"
        )
        super().__init__(
            message=mensaje or default_mensaje,
            error_code="INVALID_WORK_ORDER_STATE",
            kind=ErrorKind.INVALID_STATE,
            data={
                "work_order_id": work_order_id,
                "current_status": current_status,
                "operacion": operacion
            }
        )


# ==================== EXCEPCIONES BACKEND (SERVICIO EXTERNO) ====================

class RemoteRejectedError(FarmOpsException):
    """
    El backend rechazó la operación (estado obsoleto, autorización, validación).

    El mensaje del backend se conserva tal cual para mostrarlo al usuario.
    """

    def __init__(self, message: str, upstream_status: Optional[int] = None, details: Any = None):
        data: dict[str, Any] = {"upstream_status": upstream_status}
        if details is not None:
            data["details"] = details

        super().__init__(
            message=message,
            error_code="REMOTE_REJECTED",
            kind=ErrorKind.REMOTE_REJECTED,
            data=data
        )
        self.upstream_status = upstream_status


class BackendUnreachableError(FarmOpsException):
    """Error de transporte al conectar con la API de FarmOps."""

    def __init__(self, message: str, details: Optional[str] = None):
        full_message = f"Farm API unreachable: {message}"
        if details:
            full_message += f" | Details: {details}"

        super().__init__(
            message=full_message,
            error_code="BACKEND_UNREACHABLE",
            kind=ErrorKind.UNREACHABLE,
            data={"details": details} if details else {}
        )


class BackendTimeoutError(FarmOpsException):
    """La API de FarmOps no respondió dentro del timeout configurado."""

    def __init__(self, timeout_seconds: float, operacion: str):
        super().__init__(
            message=(
                f"Farm API did not answer within {timeout_seconds}s while trying to {operacion}. "
                "Please try again."
            ),
            error_code="BACKEND_TIMEOUT",
            kind=ErrorKind.TIMEOUT,
            data={
                "timeout_seconds": timeout_seconds,
                "operacion": operacion
            }
        )
