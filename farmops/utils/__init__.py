"""Utilidades del backend FarmOps."""

from .date_formatter import (
    get_date_badge_variant,
    get_date_warning,
    get_timezone,
    now_local,
    today_local
)

__all__ = [
    "get_date_badge_variant",
    "get_date_warning",
    "get_timezone",
    "now_local",
    "today_local"
]
