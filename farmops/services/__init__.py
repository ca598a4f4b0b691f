"""
Services module - Business logic orchestration layer.

- RoleService: Permisos por rol y asignación
- WorkOrderLifecycleService: Acciones disponibles, transiciones y actividades
"""

from farmops.services.role_service import RoleService
from farmops.services.lifecycle_service import WorkOrderLifecycleService

__all__ = [
    "RoleService",
    "WorkOrderLifecycleService"
]
