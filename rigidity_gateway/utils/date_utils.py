"""Date manipulation utilities"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Timezone-aware current time, the default clock for classification"""
    return datetime.now(timezone.utc)


def format_duration_months(months: int) -> str:
    """Render a month count as years and months, e.g. "26 years and 1 month" """
    years, remaining = divmod(months, 12)
    year_part = f"{years} year" if years == 1 else f"{years} years"
    month_part = f"{remaining} month" if remaining == 1 else f"{remaining} months"
    if years == 0:
        return month_part
    if remaining == 0:
        return year_part
    return f"{year_part} and {month_part}"
