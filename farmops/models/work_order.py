"""
Modelos Pydantic para Órdenes de Trabajo y Actividades.

Reflejan la representación canónica que devuelve la API REST (camelCase en
el wire, snake_case en Python).
"""
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from farmops.models.enums import (
    ActivityStatus,
    ActivityType,
    DateStatus,
    WorkOrderStatus,
)


class _ApiModel(BaseModel):
    """Base para recursos del backend: alias camelCase, inmutables."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class InputUsage(_ApiModel):
    """Insumo consumido por una actividad."""
    input_id: str = Field(..., description="ID del insumo", min_length=1)
    quantity_used: float = Field(..., description="Cantidad usada", gt=0)


class Activity(_ApiModel):
    """
    Unidad de trabajo registrada bajo una orden.

    Tiene su propio estado de aprobación (PENDING/APPROVED/REJECTED), que el
    ciclo de vida de la orden no evalúa.
    """
    id: str
    work_order_id: str
    type: ActivityType
    status: ActivityStatus = ActivityStatus.PENDING
    execution_date: datetime
    hours_worked: float = Field(..., ge=0)
    details: Optional[Any] = None
    inputs_used: list[InputUsage] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class WorkOrder(_ApiModel):
    """
    Orden de trabajo con su estado de ciclo de vida.

    assigned_to_id identifica al OPERARIO que puede actuar sobre la orden
    mientras está en estados de trabajador.
    """
    id: str
    title: str = ""
    description: str = ""
    scheduled_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    completed_date: Optional[datetime] = None
    status: WorkOrderStatus = WorkOrderStatus.PENDING
    assigned_to_id: Optional[str] = None
    activities: list[Activity] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal


class CreateActivityRequest(_ApiModel):
    """
    Request body para registrar una actividad en una orden.

    Utilizado por POST /api/work-orders/{id}/activities
    """
    type: ActivityType = Field(..., description="Tipo de actividad")
    execution_date: datetime = Field(..., description="Fecha de ejecución")
    hours_worked: float = Field(..., description="Horas trabajadas", gt=0)
    details: Optional[str] = Field(None, description="Observaciones libres")
    inputs_used: list[InputUsage] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "type": "RIEGO",
                    "executionDate": "2026-10-18T08:00:00Z",
                    "hoursWorked": 3.5,
                    "inputsUsed": [{"inputId": "in-12", "quantityUsed": 2}]
                }
            ]
        }
    )


class DateWarning(BaseModel):
    """Advertencia de fecha límite para una orden."""
    status: DateStatus
    message: str
    days_remaining: int

    model_config = ConfigDict(frozen=True)
