from datetime import datetime, timezone

import pytest

from src.forms_service.formatting import format_date, format_file_size


@pytest.mark.unit
@pytest.mark.parametrize("size,expected", [
    (0, "0 Bytes"),
    (1, "1 Bytes"),
    (1023, "1023 Bytes"),
    (1024, "1 KB"),
    (1536, "1.5 KB"),
    (1100, "1.07 KB"),
    (1152, "1.13 KB"),
    (1664, "1.63 KB"),
    (2 * 1024 * 1024, "2 MB"),
    (52428800, "50 MB"),
    (3 * 1024 ** 3, "3 GB"),
    (2048 * 1024 ** 3, "2048 GB"),
])
def test_should_format_file_size_with_binary_units(size: int, expected: str) -> None:
    assert format_file_size(size) == expected


@pytest.mark.unit
@pytest.mark.parametrize("value,expected", [
    (datetime(2025, 1, 1, 0, 0, tzinfo=timezone.utc), "Jan 1, 2025, 12:00 AM"),
    (datetime(2024, 11, 23, 15, 7, tzinfo=timezone.utc), "Nov 23, 2024, 03:07 PM"),
    ("2025-03-09T09:30:00.000Z", "Mar 9, 2025, 09:30 AM"),
    (datetime(2025, 1, 1, 0, 0), "Jan 1, 2025, 12:00 AM"),
])
def test_should_format_date_as_month_day_year_and_time(value, expected: str) -> None:
    assert format_date(value) == expected


@pytest.mark.unit
def test_should_format_date_in_display_timezone() -> None:
    value = datetime(2025, 1, 1, 0, 0, tzinfo=timezone.utc)

    assert format_date(value, "America/New_York") == "Dec 31, 2024, 07:00 PM"
