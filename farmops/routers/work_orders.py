"""
Work Orders Router - Lectura y ciclo de vida de órdenes de trabajo.

Delega toda la lógica de negocio a WorkOrderLifecycleService. Los exception
handlers de main.py mapean las subclases de FarmOpsException al HTTP status
apropiado.

Endpoints:
- GET  /api/work-orders                     - Lista (OPERARIO ve solo las suyas)
- GET  /api/work-orders/{id}                - Detalle con acciones y permisos
- GET  /api/work-orders/{id}/actions        - Acciones disponibles para el usuario
- POST /api/work-orders/{id}/transition     - Cambia el estado (role-gated)
- POST /api/work-orders/{id}/activities     - Registra una actividad (solo IN_PROGRESS)

El usuario que actúa llega en los headers X-User-Id / X-User-Role.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
import logging

from farmops.core.dependency import (
    get_acting_user,
    get_lifecycle_service,
    get_role_service,
    get_work_order_repository
)
from farmops.models.action import (
    ActivityResponse,
    AvailableActionsResponse,
    TransitionRequest,
    TransitionResponse,
    WorkOrderDetailResponse,
    WorkOrderListResponse
)
from farmops.models.enums import UserRole, WorkOrderStatus
from farmops.models.user import ActingUser
from farmops.models.work_order import CreateActivityRequest
from farmops.repositories.work_order_repository import WorkOrderRepository
from farmops.services.lifecycle_service import WorkOrderLifecycleService
from farmops.services.role_service import RoleService
from farmops.utils.date_formatter import get_date_badge_variant, get_date_warning

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/work-orders", response_model=WorkOrderListResponse, status_code=status.HTTP_200_OK)
def list_work_orders(
    status_filter: Optional[list[WorkOrderStatus]] = Query(
        None,
        alias="status",
        description="Estados a incluir (repetible: ?status=PENDING&status=IN_PROGRESS)"
    ),
    acting_user: ActingUser = Depends(get_acting_user),
    repo: WorkOrderRepository = Depends(get_work_order_repository),
    role_service: RoleService = Depends(get_role_service)
):
    """
    Lista órdenes de trabajo visibles para el usuario.

    - ADMIN / CAPATAZ: todas las órdenes
    - OPERARIO: solo las asignadas a él (assignedToId = su id)

    El cliente usa un token de servicio compartido, así que el backend no
    puede acotar por identidad: el filtro assignedToId se envía y además se
    aplica aquí.

    Example request:
        ```bash
        curl -H "X-User-Id: u-7" -H "X-User-Role: OPERARIO" \\
             "http://localhost:8000/api/work-orders?status=PENDING"
        ```
    """
    logger.info(
        f"GET /api/work-orders - user={acting_user.id} ({acting_user.role.value}) "
        f"status={[s.value for s in status_filter or []]}"
    )

    assigned_to_id = acting_user.id if acting_user.role == UserRole.OPERARIO else None
    work_orders = repo.list_work_orders(status=status_filter, assigned_to_id=assigned_to_id)
    if assigned_to_id is not None:
        work_orders = [wo for wo in work_orders if role_service.is_assigned_operator(wo, acting_user)]

    logger.info(f"Found {len(work_orders)} work orders for {acting_user.id}")
    return WorkOrderListResponse(work_orders=work_orders, total=len(work_orders))


@router.get(
    "/work-orders/{work_order_id}",
    response_model=WorkOrderDetailResponse,
    status_code=status.HTTP_200_OK
)
def get_work_order_detail(
    work_order_id: str,
    acting_user: ActingUser = Depends(get_acting_user),
    repo: WorkOrderRepository = Depends(get_work_order_repository),
    lifecycle: WorkOrderLifecycleService = Depends(get_lifecycle_service),
    role_service: RoleService = Depends(get_role_service)
):
    """
    Detalle de una orden con todo lo que la pantalla necesita:

    - actions: transiciones disponibles para el usuario
    - can_mutate: si puede agregar actividades / editar
    - can_edit + edit_disabled_reason: estado del botón de edición
    - date_warning: advertencia de vencimiento (ordenes no terminales)

    Raises:
        HTTPException 404: Si la orden no existe
    """
    logger.info(f"GET /api/work-orders/{work_order_id} - user={acting_user.id}")

    work_order = repo.get_work_order(work_order_id)
    can_edit = role_service.can_edit_work_order(work_order)
    date_warning = None if work_order.is_terminal else get_date_warning(work_order.due_date)

    return WorkOrderDetailResponse(
        work_order=work_order,
        actions=lifecycle.available_actions(work_order, acting_user),
        can_mutate=lifecycle.can_mutate(work_order, acting_user),
        can_edit=can_edit,
        edit_disabled_reason=None if can_edit else role_service.get_edit_disabled_reason(work_order),
        date_warning=date_warning,
        date_badge_variant=get_date_badge_variant(date_warning.status if date_warning else None)
    )


@router.get(
    "/work-orders/{work_order_id}/actions",
    response_model=AvailableActionsResponse,
    status_code=status.HTTP_200_OK
)
def get_available_actions(
    work_order_id: str,
    acting_user: ActingUser = Depends(get_acting_user),
    repo: WorkOrderRepository = Depends(get_work_order_repository),
    lifecycle: WorkOrderLifecycleService = Depends(get_lifecycle_service)
):
    """
    Acciones de estado que el usuario puede solicitar sobre la orden.

    Lista vacía es válida (orden terminal u operario no asignado).
    """
    work_order = repo.get_work_order(work_order_id)
    actions = lifecycle.available_actions(work_order, acting_user)

    logger.info(
        f"{len(actions)} actions available on {work_order_id} "
        f"({work_order.status.value}) for {acting_user.id} ({acting_user.role.value})"
    )
    return AvailableActionsResponse(
        work_order_id=work_order.id,
        status=work_order.status,
        actions=actions,
        total=len(actions)
    )


@router.post(
    "/work-orders/{work_order_id}/transition",
    response_model=TransitionResponse,
    status_code=status.HTTP_200_OK
)
def transition_work_order(
    work_order_id: str,
    request: TransitionRequest,
    acting_user: ActingUser = Depends(get_acting_user),
    repo: WorkOrderRepository = Depends(get_work_order_repository),
    lifecycle: WorkOrderLifecycleService = Depends(get_lifecycle_service)
):
    """
    Cambia el estado de una orden.

    La orden se relee del backend antes de validar, así la decisión se toma
    sobre el estado más reciente conocido. Un solo PUT, sin reintentos.

    Raises:
        HTTPException 403: Transición no permitida para el rol/estado
        HTTPException 404: Orden no encontrada
        HTTPException 4xx/502: Backend rechazó el cambio (mensaje del backend)
        HTTPException 503/504: Backend no disponible; reintentar a mano
    """
    logger.info(
        f"POST /api/work-orders/{work_order_id}/transition - "
        f"next_status={request.next_status.value} user={acting_user.id}"
    )

    work_order = repo.get_work_order(work_order_id)
    updated = lifecycle.request_transition(work_order, request.next_status, acting_user)

    return TransitionResponse(
        success=True,
        work_order=updated,
        previous_status=work_order.status,
        message=f"Work order moved to {updated.status.value}"
    )


@router.post(
    "/work-orders/{work_order_id}/activities",
    response_model=ActivityResponse,
    status_code=status.HTTP_201_CREATED
)
def add_activity(
    work_order_id: str,
    request: CreateActivityRequest,
    acting_user: ActingUser = Depends(get_acting_user),
    repo: WorkOrderRepository = Depends(get_work_order_repository),
    lifecycle: WorkOrderLifecycleService = Depends(get_lifecycle_service)
):
    """
    Registra una actividad en una orden IN_PROGRESS.

    Raises:
        HTTPException 409: La orden no está IN_PROGRESS
        HTTPException 403: El usuario no puede actuar sobre la orden
    """
    logger.info(
        f"POST /api/work-orders/{work_order_id}/activities - "
        f"type={request.type.value} user={acting_user.id}"
    )

    work_order = repo.get_work_order(work_order_id)
    activity = lifecycle.add_activity(work_order, request, acting_user)

    return ActivityResponse(
        success=True,
        activity=activity,
        message=f"Activity {activity.type.value} recorded ({activity.hours_worked}h)"
    )
