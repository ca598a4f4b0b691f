"""
Utilidades de fechas para órdenes de trabajo.

"Hoy" se calcula en el timezone configurado (default America/Santiago),
no en UTC, para que una orden no aparezca vencida antes de medianoche local.
"""

from datetime import date, datetime
from typing import Optional, Union

import pytz

from farmops.config import config
from farmops.models.enums import DateStatus
from farmops.models.work_order import DateWarning


def get_timezone() -> pytz.BaseTzInfo:
    """
    Obtiene el timezone configurado del sistema.

    Examples:
        >>> get_timezone().zone
        'America/Santiago'
    """
    return pytz.timezone(config.TIMEZONE)


def now_local() -> datetime:
    """Fecha y hora actual en el timezone configurado."""
    return datetime.now(get_timezone())


def today_local() -> date:
    """Fecha actual en el timezone configurado."""
    return now_local().date()


def to_local_date(value: Union[date, datetime]) -> date:
    """
    Normaliza una fecha límite a fecha local.

    - datetime con tz: se convierte al timezone configurado
    - datetime naive: se toma como local
    - date: sin cambios
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(get_timezone()).date()
        return value.date()
    return value


def get_date_warning(
    due_date: Optional[Union[date, datetime]],
    threshold: Optional[int] = None,
    today: Optional[date] = None
) -> Optional[DateWarning]:
    """
    Calcula el estado de una fecha límite.

    Args:
        due_date: Fecha límite de la orden (None → sin advertencia)
        threshold: Días antes del vencimiento para considerarla "próxima a vencer"
                   (default: config.DUE_SOON_THRESHOLD_DAYS)
        today: Fecha de referencia (default: hoy en timezone local)

    Returns:
        DateWarning o None si no hace falta advertencia

    Examples:
        >>> get_date_warning(date(2026, 1, 20), today=date(2026, 1, 21)).message
        'Overdue since yesterday'
        >>> get_date_warning(date(2026, 1, 21), today=date(2026, 1, 21)).message
        'Due today'
        >>> get_date_warning(date(2026, 1, 30), today=date(2026, 1, 21)) is None
        True
    """
    if due_date is None:
        return None

    threshold = config.DUE_SOON_THRESHOLD_DAYS if threshold is None else threshold
    today = today or today_local()
    days_remaining = (to_local_date(due_date) - today).days

    if days_remaining < 0:
        message = (
            "Overdue since yesterday" if days_remaining == -1
            else f"Overdue by {abs(days_remaining)} days"
        )
        return DateWarning(status=DateStatus.OVERDUE, message=message, days_remaining=days_remaining)

    if days_remaining == 0:
        return DateWarning(status=DateStatus.DUE_SOON, message="Due today", days_remaining=0)

    if days_remaining <= threshold:
        message = "Due tomorrow" if days_remaining == 1 else f"Due in {days_remaining} days"
        return DateWarning(status=DateStatus.DUE_SOON, message=message, days_remaining=days_remaining)

    return None


def get_date_badge_variant(status: Optional[DateStatus]) -> str:
    """
    Variante de badge para el estado de fecha.

    Examples:
        >>> get_date_badge_variant(DateStatus.OVERDUE)
        'destructive'
        >>> get_date_badge_variant(None)
        'default'
    """
    if status == DateStatus.OVERDUE:
        return "destructive"
    if status == DateStatus.DUE_SOON:
        return "warning"
    return "default"
