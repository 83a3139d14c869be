"""Date manipulation utilities"""

from datetime import date, datetime

from dateutil.relativedelta import relativedelta


def months_before(d: date, months: int) -> date:
    """Same calendar day N months earlier (clamped to month end)."""
    return d - relativedelta(months=months)


def utc_today() -> date:
    return datetime.utcnow().date()
