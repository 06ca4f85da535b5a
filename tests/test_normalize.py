"""Tests for raw row normalization."""

import pytest

from kline_core.data.feed import Bar
from kline_core.data.normalize import normalize_page, normalize_row
from kline_core.errors import MalformedRecord


def test_row_parsed_into_bar():
    row = ["1704067200000", "42000.5", "42100", "41950.25", "42050", "123.4", "5190000.1"]

    bar = normalize_row(row)

    assert bar == Bar(1704067200000, 42000.5, 42100.0, 41950.25, 42050.0, 123.4, 5190000.1)
    assert bar.opened_at.isoformat() == "2024-01-01T00:00:00+00:00"


def test_extra_fields_ignored():
    row = ["0", "1", "2", "0.5", "1.5", "10", "15", "unused"]
    assert normalize_row(row).turnover == 15.0


def test_short_row_names_first_missing_field():
    with pytest.raises(MalformedRecord) as excinfo:
        normalize_row(["100"])
    assert excinfo.value.field == "open"

    with pytest.raises(MalformedRecord) as excinfo:
        normalize_row(["100", "1", "2", "0.5", "1.5", "10"])
    assert excinfo.value.field == "turnover"


@pytest.mark.parametrize(
    "row, field",
    [
        (["abc", "1", "2", "0.5", "1.5", "10", "15"], "start_time"),
        (["1.5", "1", "2", "0.5", "1.5", "10", "15"], "start_time"),
        (["-1", "1", "2", "0.5", "1.5", "10", "15"], "start_time"),
        (["1_000", "1", "2", "0.5", "1.5", "10", "15"], "start_time"),
        ([" 100 ", "1", "2", "0.5", "1.5", "10", "15"], "start_time"),
        (["+100", "1", "2", "0.5", "1.5", "10", "15"], "start_time"),
        ([1.5, "1", "2", "0.5", "1.5", "10", "15"], "start_time"),
        (["0", "1", "x", "0.5", "y", "10", "15"], "high"),
        (["0", "1", "2", "0.5", "1.5", "", "15"], "volume"),
    ],
)
def test_unparseable_field_reported(row, field):
    with pytest.raises(MalformedRecord) as excinfo:
        normalize_row(row)
    assert excinfo.value.field == field


def test_non_sequence_row_rejected():
    with pytest.raises(MalformedRecord) as excinfo:
        normalize_row("0,1,2,3,4,5,6")
    assert excinfo.value.field == "row"


def test_page_aborts_on_first_bad_row():
    rows = [["0", "1", "2", "0.5", "1.5", "10", "15"], ["100"], ["oops"]]
    with pytest.raises(MalformedRecord) as excinfo:
        normalize_page(rows)
    assert excinfo.value.field == "open"
