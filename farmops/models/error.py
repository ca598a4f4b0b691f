"""
Modelo Pydantic para respuestas de error.
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, Any

from farmops.models.enums import ErrorKind


class ErrorResponse(BaseModel):
    """
    Response estándar para errores en la API.

    Utilizado por los exception handlers para retornar errores consistentes.
    """
    success: bool = Field(
        False,
        description="Siempre False para errores"
    )
    error: str = Field(
        ...,
        description="Código de error (ej: TRANSITION_NOT_PERMITTED, REMOTE_REJECTED)",
        examples=["TRANSITION_NOT_PERMITTED", "INVALID_WORK_ORDER_STATE", "REMOTE_REJECTED"]
    )
    kind: Optional[ErrorKind] = Field(
        None,
        description="Categoría del error del ciclo de vida"
    )
    message: str = Field(
        ...,
        description="Mensaje de error legible para el usuario",
        examples=[
            "Transition not permitted for this role/state: PENDING → COMPLETED (role ADMIN)",
            "Cannot add activity on work order 'wo-1': status is UNDER_REVIEW"
        ]
    )
    data: Optional[dict[str, Any]] = Field(
        None,
        description="Contexto adicional sobre el error (opcional)"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "success": False,
                    "error": "TRANSITION_NOT_PERMITTED",
                    "kind": "FORBIDDEN",
                    "message": "Transition not permitted for this role/state: PENDING → COMPLETED (role ADMIN)",
                    "data": {
                        "work_order_id": "wo-1",
                        "current_status": "PENDING",
                        "requested_status": "COMPLETED",
                        "role": "ADMIN"
                    }
                },
                {
                    "success": False,
                    "error": "REMOTE_REJECTED",
                    "kind": "REMOTE_REJECTED",
                    "message": "Work order status changed by another user",
                    "data": {"upstream_status": 409}
                },
                {
                    "success": False,
                    "error": "BACKEND_UNREACHABLE",
                    "kind": "UNREACHABLE",
                    "message": "Farm API unreachable: connection refused",
                    "data": None
                }
            ]
        }
    )
