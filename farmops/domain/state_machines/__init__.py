"""
State machines del dominio.

- WorkOrderStateMachine: PENDING → IN_PROGRESS → UNDER_REVIEW → COMPLETED,
  CANCELLED desde cualquier estado no terminal
"""

from farmops.domain.state_machines.work_order_machine import WorkOrderStateMachine

__all__ = [
    "WorkOrderStateMachine"
]
