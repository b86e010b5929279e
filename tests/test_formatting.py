import sys
from decimal import Decimal
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from salarymm.core.formatting import format_compact_currency, format_currency, parse_currency


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (20_160_000, "20.160.000 ₫"),
        (Decimal("1600000"), "1.600.000 ₫"),
        ("750000", "750.000 ₫"),
        (0, "0 ₫"),
        (Decimal("999.5"), "1.000 ₫"),
        (-1_000, "-1.000 ₫"),
        ("abc", "0 ₫"),
        (float("nan"), "0 ₫"),
    ],
)
def test_format_currency(value, expected):
    assert format_currency(value) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (1_500_000_000, "1.5B"),
        (2_000_000_000, "2.0B"),
        (20_160_000, "20M"),
        (1_000_000, "1M"),
        (750_000, "750.000"),
        (Decimal("1234.5"), "1.234,5"),
    ],
)
def test_format_compact_currency(value, expected):
    assert format_compact_currency(value) == expected


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("20.160.000 ₫", Decimal("20160000")),
        ("1.234,5", Decimal("1234.5")),
        ("-500.000", Decimal("-500000")),
        ("", Decimal("0")),
        ("VND", Decimal("0")),
    ],
)
def test_parse_currency(text, expected):
    assert parse_currency(text) == expected


def test_format_then_parse_keeps_whole_amounts():
    assert parse_currency(format_currency(25_150_000)) == 25_150_000
