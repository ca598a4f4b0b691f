"""
Servicio de permisos por rol sobre órdenes de trabajo.

Responsabilidades:
- Identificar supervisores (ADMIN, CAPATAZ)
- Identificar al OPERARIO asignado a una orden
- Decidir si una orden puede editarse según su estado
- Explicar por qué el botón de edición está deshabilitado
"""
from typing import Optional
import logging

from farmops.models.enums import UserRole, WorkOrderStatus
from farmops.models.user import ActingUser
from farmops.models.work_order import WorkOrder

logger = logging.getLogger(__name__)


SUPERVISOR_ROLES = (UserRole.ADMIN, UserRole.CAPATAZ)

NON_EDITABLE_STATUSES = (WorkOrderStatus.COMPLETED, WorkOrderStatus.CANCELLED)


class RoleService:
    """
    Servicio de permisos por rol.

    Stateless: todas las decisiones dependen solo de la orden y del usuario
    que se pasan como argumento. Usado por WorkOrderLifecycleService y por
    el router de detalle.

    Reglas:
    - ADMIN y CAPATAZ pueden actuar sobre cualquier orden
    - OPERARIO solo sobre órdenes con assigned_to_id == su id
    - COMPLETED y CANCELLED no se editan, sin importar el rol
    """

    def is_supervisor(self, user: ActingUser) -> bool:
        """
        True si el usuario es ADMIN o CAPATAZ.

        Examples:
            >>> RoleService().is_supervisor(ActingUser(id="1", role=UserRole.CAPATAZ))
            True
        """
        return user.tiene_rol(*SUPERVISOR_ROLES)

    def is_assigned_operator(self, work_order: WorkOrder, user: ActingUser) -> bool:
        """
        True si el usuario es el OPERARIO asignado a la orden.

        Una orden sin asignar no tiene operario: retorna False.
        """
        return (
            user.role == UserRole.OPERARIO
            and work_order.assigned_to_id is not None
            and work_order.assigned_to_id == user.id
        )

    def can_modify(self, work_order: WorkOrder, user: ActingUser) -> bool:
        """
        Verifica si el usuario puede actuar sobre la orden (sin mirar el estado).

        Returns:
            bool: True para supervisores y para el operario asignado
        """
        permitido = self.is_supervisor(user) or self.is_assigned_operator(work_order, user)
        if not permitido:
            logger.debug(
                f"User {user.id} ({user.role.value}) cannot act on work order "
                f"{work_order.id} (assigned to {work_order.assigned_to_id})"
            )
        return permitido

    def can_edit_work_order(self, work_order: Optional[WorkOrder]) -> bool:
        """
        Determina si una orden puede editarse según su estado.

        - COMPLETED, CANCELLED: No (estado final)
        - PENDING, IN_PROGRESS, UNDER_REVIEW: Sí (con restricciones de rol)
        """
        if work_order is None:
            return False
        return work_order.status not in NON_EDITABLE_STATUSES

    def get_edit_disabled_reason(self, work_order: Optional[WorkOrder]) -> str:
        """
        Mensaje de tooltip para el botón de edición deshabilitado.

        Examples:
            >>> RoleService().get_edit_disabled_reason(None)
            'Work order not available'
        """
        if work_order is None:
            return "Work order not available"

        if work_order.status == WorkOrderStatus.COMPLETED:
            return "Completed work orders cannot be edited"

        if work_order.status == WorkOrderStatus.CANCELLED:
            return "Cancelled work orders cannot be edited"

        return "This work order cannot be edited"
