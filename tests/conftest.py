"""
Fixtures compartidos para los tests de FarmOps.

Provee:
- Variables de entorno de test (antes de importar farmops.config)
- Usuarios por rol (ADMIN, CAPATAZ, OPERARIO asignado / no asignado)
- Factory de WorkOrder
"""
import os
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("FARM_API_URL", "http://farm.test/api")
os.environ.setdefault("FARM_API_TOKEN", "test-token")
os.environ.setdefault("TIMEZONE", "America/Santiago")

import pytest

from farmops.models.enums import UserRole, WorkOrderStatus
from farmops.models.user import ActingUser
from farmops.models.work_order import WorkOrder


OPERARIO_ID = "u-operario-7"
OTRO_OPERARIO_ID = "u-operario-9"


@pytest.fixture
def admin():
    return ActingUser(id="u-admin-1", role=UserRole.ADMIN)


@pytest.fixture
def capataz():
    return ActingUser(id="u-capataz-2", role=UserRole.CAPATAZ, name="Rosa", last_name="Quispe")


@pytest.fixture
def operario():
    """OPERARIO asignado a las órdenes creadas con make_work_order()."""
    return ActingUser(id=OPERARIO_ID, role=UserRole.OPERARIO)


@pytest.fixture
def otro_operario():
    """OPERARIO que no está asignado a ninguna orden."""
    return ActingUser(id=OTRO_OPERARIO_ID, role=UserRole.OPERARIO)


@pytest.fixture
def make_work_order():
    """Factory: make_work_order(status, assigned_to_id=OPERARIO_ID, **extra)."""
    def _make(status=WorkOrderStatus.PENDING, assigned_to_id=OPERARIO_ID, **extra):
        return WorkOrder(
            id=extra.pop("id", "wo-1"),
            title=extra.pop("title", "Poda cuartel 4"),
            status=status,
            assigned_to_id=assigned_to_id,
            **extra
        )
    return _make
