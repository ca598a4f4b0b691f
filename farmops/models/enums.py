"""
Enumeraciones para el sistema FarmOps.

Define los estados de órdenes de trabajo y actividades, los roles de usuario
y las categorías de error que expone el ciclo de vida.
"""
from enum import Enum


class WorkOrderStatus(str, Enum):
    """
    Estados posibles de una orden de trabajo.

    PENDING: Creada, trabajo no iniciado
    IN_PROGRESS: Trabajo en curso (admite nuevas actividades)
    UNDER_REVIEW: Enviada a revisión del capataz
    COMPLETED: Aprobada y cerrada (terminal)
    CANCELLED: Cancelada (terminal)
    """
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    UNDER_REVIEW = "UNDER_REVIEW"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({WorkOrderStatus.COMPLETED, WorkOrderStatus.CANCELLED})


class UserRole(str, Enum):
    """
    Roles de usuario del sistema.

    ADMIN: Administrador, autoridad total
    CAPATAZ: Supervisor de los campos que gestiona
    OPERARIO: Trabajador de campo, restringido a sus órdenes asignadas
    """
    ADMIN = "ADMIN"
    CAPATAZ = "CAPATAZ"
    OPERARIO = "OPERARIO"


class ActivityStatus(str, Enum):
    """Estado de aprobación de una actividad registrada."""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ActivityType(str, Enum):
    """Tipos de actividad de campo."""
    PODA = "PODA"
    RIEGO = "RIEGO"
    APLICACION = "APLICACION"
    COSECHA = "COSECHA"
    MANTENIMIENTO = "MANTENIMIENTO"
    MONITOREO = "MONITOREO"
    OTRO = "OTRO"


class ActionSeverity(str, Enum):
    """Severidad visual con la que el frontend dibuja una acción."""
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"
    OUTLINE = "outline"
    SECONDARY = "secondary"


class ErrorKind(str, Enum):
    """
    Categorías de error del ciclo de vida.

    FORBIDDEN: Transición o acción no permitida para el rol/estado
    INVALID_STATE: Operación no admitida en el estado actual (ej: actividad fuera de IN_PROGRESS)
    REMOTE_REJECTED: El backend rechazó la operación (mensaje se reenvía tal cual)
    UNREACHABLE: Fallo de transporte, el usuario puede reintentar
    TIMEOUT: El backend no respondió a tiempo, el usuario puede reintentar
    NOT_FOUND: Recurso inexistente
    """
    FORBIDDEN = "FORBIDDEN"
    INVALID_STATE = "INVALID_STATE"
    REMOTE_REJECTED = "REMOTE_REJECTED"
    UNREACHABLE = "UNREACHABLE"
    TIMEOUT = "TIMEOUT"
    NOT_FOUND = "NOT_FOUND"


class DateStatus(str, Enum):
    """Estado de la fecha límite de una orden."""
    OVERDUE = "overdue"
    DUE_SOON = "due-soon"
    UPCOMING = "upcoming"
