"""Helpers compartidos por todos los renderers."""

from __future__ import annotations

from datetime import datetime, timezone

DATE_FORMAT = "%Y-%m-%d %H:%M:%S UTC"


def format_date(value: datetime | None) -> str:
    """Fecha en UTC con formato fijo (los datetimes naive se asumen UTC)."""
    if value is None:
        return ""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime(DATE_FORMAT)
