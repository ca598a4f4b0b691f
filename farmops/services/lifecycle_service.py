"""
WorkOrderLifecycleService - Role-gated status workflow for work orders.

Combines the structural transitions of WorkOrderStateMachine with the role
rules of RoleService:
- OPERARIO (only when assigned): start_work, submit_for_review
- CAPATAZ / ADMIN: start_work, submit_for_review, reopen, approve, cancel
- COMPLETED / CANCELLED: no actions for anyone, order is read-only

The acting user is always an explicit argument. Work orders are never
mutated locally: a successful transition returns the server's representation,
a failed one leaves the caller's value untouched.
"""

import logging
from typing import NamedTuple, Optional

from statemachine.exceptions import TransitionNotAllowed

from farmops.domain.state_machines.work_order_machine import WorkOrderStateMachine
from farmops.exceptions import (
    InvalidWorkOrderStateError,
    NotAuthorizedError,
    TransitionNotPermittedError
)
from farmops.models.action import WorkOrderAction
from farmops.models.enums import ActionSeverity, WorkOrderStatus
from farmops.models.user import ActingUser
from farmops.models.work_order import Activity, CreateActivityRequest, WorkOrder
from farmops.repositories.work_order_repository import WorkOrderRepository
from farmops.services.role_service import RoleService

logger = logging.getLogger(__name__)


class ActionTemplate(NamedTuple):
    """Presentation of a state machine event as a button."""
    label: str
    description: str
    severity: ActionSeverity


# Order matters: actions are returned in this order.
OPERATOR_ACTIONS: dict[str, ActionTemplate] = {
    "start_work": ActionTemplate(
        "Start Work",
        "Mark this work order as in progress",
        ActionSeverity.DEFAULT
    ),
    "submit_for_review": ActionTemplate(
        "Submit for Review",
        "Mark the work as finished and send it to the foreman for review",
        ActionSeverity.DEFAULT
    ),
}

SUPERVISOR_ACTIONS: dict[str, ActionTemplate] = {
    "start_work": ActionTemplate(
        "Start Work",
        "Mark this work order as in progress",
        ActionSeverity.DEFAULT
    ),
    "submit_for_review": ActionTemplate(
        "Submit for Review",
        "Mark as finished and ready for review",
        ActionSeverity.DEFAULT
    ),
    "reopen": ActionTemplate(
        "Reopen",
        "Send the work order back to in progress so more activities can be added",
        ActionSeverity.OUTLINE
    ),
    "approve": ActionTemplate(
        "Approve & Close",
        "Approve the work and close the work order",
        ActionSeverity.DEFAULT
    ),
    "cancel": ActionTemplate(
        "Cancel Order",
        "Cancel this work order",
        ActionSeverity.DESTRUCTIVE
    ),
}


class WorkOrderLifecycleService:
    """
    Service for the work order status workflow.

    Orchestrates:
    - Available actions per (status, role, assignment)
    - Transition validation before any backend call
    - Single status update per transition (no retries)
    - Activity admission (only while IN_PROGRESS)
    """

    def __init__(
        self,
        work_order_repository: WorkOrderRepository,
        role_service: Optional[RoleService] = None
    ):
        """
        Initialize lifecycle service with injected dependencies.

        Args:
            work_order_repository: Persistence collaborator (REST API client)
            role_service: Role rules (default: new RoleService)
        """
        self.work_order_repo = work_order_repository
        self.role_service = role_service or RoleService()

    def _templates_for(self, work_order: WorkOrder, user: ActingUser) -> dict[str, ActionTemplate]:
        if self.role_service.is_supervisor(user):
            return SUPERVISOR_ACTIONS
        if self.role_service.is_assigned_operator(work_order, user):
            return OPERATOR_ACTIONS
        return {}

    def _resolve(
        self,
        work_order: WorkOrder,
        user: ActingUser
    ) -> list[tuple[str, WorkOrderAction]]:
        """(event, action) pairs the user may fire on the order right now."""
        templates = self._templates_for(work_order, user)
        resolved = []
        for event, template in templates.items():
            try:
                next_status = WorkOrderStateMachine.target_of(work_order.status, event)
            except TransitionNotAllowed:
                continue
            resolved.append((
                event,
                WorkOrderAction(
                    label=template.label,
                    next_status=next_status,
                    description=template.description,
                    severity=template.severity
                )
            ))
        return resolved

    def available_actions(self, work_order: WorkOrder, acting_user: ActingUser) -> list[WorkOrderAction]:
        """
        Compute the transitions the acting user may request on the order.

        Returns:
            Ordered list of WorkOrderAction. Empty when nothing is available
            (terminal order, unassigned operator); that is not an error.

        Examples:
            PENDING + assigned OPERARIO → [Start Work → IN_PROGRESS]
            UNDER_REVIEW + CAPATAZ → [Reopen, Approve & Close, Cancel Order]
        """
        return [action for _, action in self._resolve(work_order, acting_user)]

    def can_mutate(self, work_order: WorkOrder, acting_user: ActingUser) -> bool:
        """
        True if the order is not terminal and the user is ADMIN, CAPATAZ or
        the assigned OPERARIO. Drives editing and activity affordances.
        """
        if work_order.is_terminal:
            return False
        return self.role_service.can_modify(work_order, acting_user)

    def request_transition(
        self,
        work_order: WorkOrder,
        next_status: WorkOrderStatus,
        acting_user: ActingUser
    ) -> WorkOrder:
        """
        Validate and apply a status transition.

        Flow:
        1. Check next_status is among available_actions (no backend call otherwise)
        2. Fire the event on a hydrated state machine
        3. Send exactly one status update to the backend
        4. Return the server's updated work order

        Raises:
            TransitionNotPermittedError: Transition not permitted for this role/state
            RemoteRejectedError: Backend refused the update (message verbatim)
            BackendUnreachableError / BackendTimeoutError: Transport failure, retry manually
            WorkOrderNotFoundError: Order no longer exists
        """
        next_status = WorkOrderStatus(next_status)
        logger.info(
            f"Transition requested on {work_order.id}: {work_order.status.value} → "
            f"{next_status.value} by {acting_user.id} ({acting_user.role.value})"
        )

        event = next(
            (ev for ev, action in self._resolve(work_order, acting_user)
             if action.next_status == next_status),
            None
        )
        if event is None:
            logger.warning(
                f"Transition rejected on {work_order.id}: {work_order.status.value} → "
                f"{next_status.value} not available to {acting_user.id} ({acting_user.role.value})"
            )
            raise TransitionNotPermittedError(
                work_order_id=work_order.id,
                current_status=work_order.status.value,
                requested_status=next_status.value,
                role=acting_user.role.value
            )

        machine = WorkOrderStateMachine(work_order_id=work_order.id, status=work_order.status)
        machine.send(event)

        updated = self.work_order_repo.update_status(work_order.id, machine.status)

        if updated.status != next_status:
            logger.warning(
                f"Backend returned status {updated.status.value} for {work_order.id} "
                f"after requesting {next_status.value}"
            )

        logger.info(f"✅ Work order {work_order.id}: {work_order.status.value} → {updated.status.value}")
        return updated

    def ensure_can_add_activity(self, work_order: WorkOrder) -> None:
        """
        Activity admission rule: activities are appended only while IN_PROGRESS.

        Raises:
            InvalidWorkOrderStateError: Any other status
        """
        if work_order.status != WorkOrderStatus.IN_PROGRESS:
            raise InvalidWorkOrderStateError(
                work_order_id=work_order.id,
                current_status=work_order.status.value,
                operacion="add activity"
            )

    def add_activity(
        self,
        work_order: WorkOrder,
        activity: CreateActivityRequest,
        acting_user: ActingUser
    ) -> Activity:
        """
        Append an activity to the order through the backend.

        Raises:
            InvalidWorkOrderStateError: Order is not IN_PROGRESS
            NotAuthorizedError: User cannot act on this order
            RemoteRejectedError / BackendUnreachableError / BackendTimeoutError
        """
        self.ensure_can_add_activity(work_order)

        if not self.role_service.can_modify(work_order, acting_user):
            raise NotAuthorizedError(
                work_order_id=work_order.id,
                user_id=acting_user.id,
                role=acting_user.role.value,
                operacion="add activity"
            )

        created = self.work_order_repo.create_activity(work_order.id, activity)
        logger.info(
            f"Activity {created.id} ({created.type.value}, {created.hours_worked}h) "
            f"added to {work_order.id} by {acting_user.nombre_completo}"
        )
        return created
