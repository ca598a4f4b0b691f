"""
Unit tests for due-date helpers.

Tests the overdue / due-soon messages and local-timezone normalization.
"""
from datetime import date, datetime

import pytest
import pytz

from farmops.models.enums import DateStatus
from farmops.utils.date_formatter import (
    get_date_badge_variant,
    get_date_warning,
    get_timezone,
    to_local_date
)

TODAY = date(2026, 1, 21)


def test_timezone_from_config():
    assert get_timezone().zone == "America/Santiago"


def test_no_due_date_means_no_warning():
    assert get_date_warning(None, today=TODAY) is None


@pytest.mark.parametrize("due,status,message,days", [
    (date(2026, 1, 20), DateStatus.OVERDUE, "Overdue since yesterday", -1),
    (date(2026, 1, 16), DateStatus.OVERDUE, "Overdue by 5 days", -5),
    (date(2026, 1, 21), DateStatus.DUE_SOON, "Due today", 0),
    (date(2026, 1, 22), DateStatus.DUE_SOON, "Due tomorrow", 1),
    (date(2026, 1, 24), DateStatus.DUE_SOON, "Due in 3 days", 3),
])
def test_date_warning_messages(due, status, message, days):
    warning = get_date_warning(due, threshold=3, today=TODAY)

    assert warning.status == status
    assert warning.message == message
    assert warning.days_remaining == days


def test_beyond_threshold_has_no_warning():
    assert get_date_warning(date(2026, 1, 25), threshold=3, today=TODAY) is None
    assert get_date_warning(date(2026, 1, 25), threshold=4, today=TODAY).message == "Due in 4 days"


def test_aware_datetime_is_converted_to_local_date():
    # 02:00 UTC del 22 es todavía el 21 en Santiago (UTC-3 en verano)
    due = datetime(2026, 1, 22, 2, 0, tzinfo=pytz.utc)

    assert to_local_date(due) == date(2026, 1, 21)
    assert get_date_warning(due, today=TODAY).message == "Due today"


def test_naive_datetime_is_taken_as_local():
    assert to_local_date(datetime(2026, 1, 22, 2, 0)) == date(2026, 1, 22)


def test_badge_variant():
    assert get_date_badge_variant(DateStatus.OVERDUE) == "destructive"
    assert get_date_badge_variant(DateStatus.DUE_SOON) == "warning"
    assert get_date_badge_variant(None) == "default"
