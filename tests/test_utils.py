from datetime import date, datetime

import pytest
from utils import parse_date, parse_int


@pytest.mark.parametrize("raw,expected", [
    ("12", 12),
    ("  7", 7),
    ("-3", -3),
    ("+4", 4),
    ("12kg", 12),
    ("3.9", 3),
    (15, 15),
    ("abc", None),
    ("", None),
    (None, None),
    ("kg 12", None),
    ("١٢", None),
    ("12٣", 12),
    ("1" * 5000, None),
])
def test_parse_int(raw, expected):
    assert parse_int(raw) == expected


@pytest.mark.parametrize("raw,expected", [
    ("2023-12-31", date(2023, 12, 31)),
    ("2023-12-31T23:59:59", date(2023, 12, 31)),
    ("2023-12-31T00:00:00.000Z", date(2023, 12, 31)),
    (date(2024, 2, 29), date(2024, 2, 29)),
    (datetime(2024, 3, 1, 12, 0), date(2024, 3, 1)),
    ("31/12/2023", None),
    ("", None),
    (None, None),
])
def test_parse_date(raw, expected):
    assert parse_date(raw) == expected
