"""
Modelos Pydantic para acciones de ciclo de vida (transiciones de estado).
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional

from farmops.models.enums import ActionSeverity, WorkOrderStatus
from farmops.models.work_order import Activity, DateWarning, WorkOrder


class WorkOrderAction(BaseModel):
    """
    Acción disponible sobre una orden de trabajo.

    Lo que el frontend dibuja como botón: etiqueta, estado destino,
    descripción para el diálogo de confirmación y severidad visual.
    """
    label: str = Field(..., description="Texto del botón", examples=["Start Work"])
    next_status: WorkOrderStatus = Field(..., description="Estado destino de la transición")
    description: str = Field(..., description="Descripción para el diálogo de confirmación")
    severity: ActionSeverity = Field(
        ActionSeverity.DEFAULT,
        description="Severidad visual (default, destructive, outline, secondary)"
    )

    model_config = ConfigDict(frozen=True)


class TransitionRequest(BaseModel):
    """
    Request body para cambiar el estado de una orden.

    Utilizado por POST /api/work-orders/{id}/transition
    """
    next_status: WorkOrderStatus = Field(
        ...,
        description="Estado destino solicitado",
        examples=[WorkOrderStatus.IN_PROGRESS]
    )

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"next_status": "IN_PROGRESS"},
                {"next_status": "COMPLETED"}
            ]
        }
    )


class AvailableActionsResponse(BaseModel):
    """Response con las acciones disponibles para el usuario actual."""
    work_order_id: str
    status: WorkOrderStatus
    actions: list[WorkOrderAction] = Field(default_factory=list)
    total: int = Field(..., ge=0)


class TransitionResponse(BaseModel):
    """Response de una transición exitosa (representación del servidor)."""
    success: bool = Field(True)
    work_order: WorkOrder
    previous_status: WorkOrderStatus
    message: str


class ActivityResponse(BaseModel):
    """Response de una actividad creada."""
    success: bool = Field(True)
    activity: Activity
    message: str


class WorkOrderDetailResponse(BaseModel):
    """
    Vista de detalle de una orden: el recurso más todo lo que la pantalla
    necesita para decidir qué mostrar.
    """
    work_order: WorkOrder
    actions: list[WorkOrderAction] = Field(default_factory=list)
    can_mutate: bool
    can_edit: bool
    edit_disabled_reason: Optional[str] = None
    date_warning: Optional[DateWarning] = None
    date_badge_variant: str = Field("default", description="Variante de badge: destructive, warning o default")


class WorkOrderListResponse(BaseModel):
    """Response para lista de órdenes de trabajo."""
    work_orders: list[WorkOrder] = Field(default_factory=list)
    total: int = Field(..., ge=0)
