"""
Dependency Injection para FastAPI.

Centraliza la creación de dependencias (services, repositories) y la
identidad del usuario que actúa, usando Depends().

Estrategia:
- Singletons: WorkOrderRepository (un httpx.Client con pool de conexiones)
  y RoleService (stateless). Lazy initialization: se crean al primer uso.
- Nuevas instancias: WorkOrderLifecycleService, recibe dependencias inyectadas.
- Usuario actual: headers X-User-Id / X-User-Role que pone el proveedor de
  sesión delante de esta API.

Testability:
- Sobreescribir factory functions con app.dependency_overrides
"""

from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from farmops.models.enums import UserRole
from farmops.models.user import ActingUser
from farmops.repositories.work_order_repository import WorkOrderRepository
from farmops.services.lifecycle_service import WorkOrderLifecycleService
from farmops.services.role_service import RoleService


# ============================================================================
# SINGLETONS - Instancias compartidas por toda la aplicación
# ============================================================================

_work_order_repo_singleton: Optional[WorkOrderRepository] = None
_role_service_singleton: Optional[RoleService] = None


def get_work_order_repository() -> WorkOrderRepository:
    """
    Factory para WorkOrderRepository (singleton).

    Usage:
        repo: WorkOrderRepository = Depends(get_work_order_repository)
    """
    global _work_order_repo_singleton

    if _work_order_repo_singleton is None:
        _work_order_repo_singleton = WorkOrderRepository()

    return _work_order_repo_singleton


def get_role_service() -> RoleService:
    """Factory para RoleService (singleton, stateless)."""
    global _role_service_singleton

    if _role_service_singleton is None:
        _role_service_singleton = RoleService()

    return _role_service_singleton


def close_singletons() -> None:
    """Cierra el cliente HTTP compartido (shutdown de la app)."""
    global _work_order_repo_singleton

    if _work_order_repo_singleton is not None:
        _work_order_repo_singleton.close()
        _work_order_repo_singleton = None


# ============================================================================
# FACTORY FUNCTIONS - Nuevas Instancias con Dependencias Inyectadas
# ============================================================================


def get_lifecycle_service(
    work_order_repo: WorkOrderRepository = Depends(get_work_order_repository),
    role_service: RoleService = Depends(get_role_service)
) -> WorkOrderLifecycleService:
    """
    Factory para WorkOrderLifecycleService (nueva instancia por request).

    Usage:
        lifecycle: WorkOrderLifecycleService = Depends(get_lifecycle_service)
    """
    return WorkOrderLifecycleService(
        work_order_repository=work_order_repo,
        role_service=role_service
    )


# ============================================================================
# USUARIO ACTUAL
# ============================================================================


def get_acting_user(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
    x_user_role: Optional[str] = Header(None, alias="X-User-Role")
) -> ActingUser:
    """
    Construye el ActingUser desde los headers del proveedor de sesión.

    Raises:
        HTTPException 401: Si falta el header X-User-Id o X-User-Role
        HTTPException 422: Si el rol no es ADMIN, CAPATAZ ni OPERARIO
    """
    if not x_user_id or not x_user_role:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-Id or X-User-Role header"
        )

    try:
        role = UserRole(x_user_role.strip().upper())
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown role '{x_user_role}'. Valid roles: {[r.value for r in UserRole]}"
        )

    return ActingUser(id=x_user_id, role=role)
