"""
Work order lifecycle state machine.

Manages work order status transitions:
- PENDING → IN_PROGRESS (start_work)
- IN_PROGRESS → UNDER_REVIEW (submit_for_review)
- UNDER_REVIEW → IN_PROGRESS (reopen)
- UNDER_REVIEW → COMPLETED (approve)
- PENDING | IN_PROGRESS | UNDER_REVIEW → CANCELLED (cancel)

COMPLETED and CANCELLED are final. Who may fire each event is decided by
WorkOrderLifecycleService, not here.
"""

import logging
from typing import Union

from statemachine import StateMachine, State
from statemachine.exceptions import TransitionNotAllowed

from farmops.models.enums import WorkOrderStatus

logger = logging.getLogger(__name__)


class WorkOrderStateMachine(StateMachine):
    """
    Work order state machine.

    State values are WorkOrderStatus members, so the machine can be hydrated
    straight from the status the backend returns.

    States:
    - pending (initial)
    - in_progress: only state that admits new activities
    - under_review: waiting for CAPATAZ/ADMIN decision
    - completed (final)
    - cancelled (final)
    """

    pending = State("Pending", value=WorkOrderStatus.PENDING, initial=True)
    in_progress = State("In progress", value=WorkOrderStatus.IN_PROGRESS)
    under_review = State("Under review", value=WorkOrderStatus.UNDER_REVIEW)
    completed = State("Completed", value=WorkOrderStatus.COMPLETED, final=True)
    cancelled = State("Cancelled", value=WorkOrderStatus.CANCELLED, final=True)

    start_work = pending.to(in_progress)
    submit_for_review = in_progress.to(under_review)
    reopen = under_review.to(in_progress)
    approve = under_review.to(completed)
    cancel = (pending.to(cancelled) |
              in_progress.to(cancelled) |
              under_review.to(cancelled))

    EVENTS = ("start_work", "submit_for_review", "reopen", "approve", "cancel")

    def __init__(
        self,
        work_order_id: str,
        status: Union[WorkOrderStatus, str] = WorkOrderStatus.PENDING
    ):
        """
        Initialize the machine hydrated at the work order's current status.

        Args:
            work_order_id: Work order identifier (used for logging)
            status: Current status as returned by the backend

        Raises:
            ValueError: If status is not a known WorkOrderStatus
        """
        self.work_order_id = work_order_id
        super().__init__(start_value=WorkOrderStatus(status))

    @property
    def status(self) -> WorkOrderStatus:
        """Current status as a WorkOrderStatus."""
        return WorkOrderStatus(self.current_state_value)

    def after_transition(self, event: str, source: State, target: State):
        logger.debug(
            f"Work order {self.work_order_id}: {source.value} → {target.value} ({event})"
        )

    @classmethod
    def target_of(
        cls,
        status: Union[WorkOrderStatus, str],
        event: str
    ) -> WorkOrderStatus:
        """
        Status reached by firing `event` from `status`, without touching any work order.

        Raises:
            TransitionNotAllowed: If the event is not allowed from `status`
        """
        machine = cls(work_order_id="preview", status=status)
        machine.send(event)
        return machine.status

    @classmethod
    def allowed_transitions(
        cls,
        status: Union[WorkOrderStatus, str]
    ) -> list[tuple[str, WorkOrderStatus]]:
        """
        (event, target status) pairs allowed from `status`, in declaration order.

        Examples:
            >>> WorkOrderStateMachine.allowed_transitions(WorkOrderStatus.PENDING)
            [('start_work', <WorkOrderStatus.IN_PROGRESS: 'IN_PROGRESS'>), ('cancel', <WorkOrderStatus.CANCELLED: 'CANCELLED'>)]
            >>> WorkOrderStateMachine.allowed_transitions(WorkOrderStatus.COMPLETED)
            []
        """
        allowed = []
        for event in cls.EVENTS:
            try:
                allowed.append((event, cls.target_of(status, event)))
            except TransitionNotAllowed:
                continue
        return allowed
