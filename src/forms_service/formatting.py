from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from zoneinfo import ZoneInfo


SIZE_UNITS = ["Bytes", "KB", "MB", "GB"]


def format_file_size(size: int) -> str:
    """Render a byte count with 1024-based units and at most two decimals.

    The unit is ``floor(log_1024(size))``, clamped to the largest unit, so
    anything from 1024 GB upwards is still shown in GB.
    """
    if size == 0:
        return "0 Bytes"

    k = 1024
    i = 0
    while i < len(SIZE_UNITS) - 1 and size >= k ** (i + 1):
        i += 1

    value = (Decimal(size) / k ** i).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    value = f"{value}".rstrip("0").rstrip(".")
    return f"{value} {SIZE_UNITS[i]}"


def format_date(value: datetime | str, tz_name: str = "UTC") -> str:
    """Render a timestamp as ``Jan 1, 2025, 09:05 AM`` in ``tz_name``.

    Naive datetimes are taken as UTC.
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)

    local = value.astimezone(ZoneInfo(tz_name))
    return f"{local:%b} {local.day}, {local.year}, {local:%I:%M %p}"
