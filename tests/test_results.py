"""Tests for result rows and counters."""

import pytest

from neogm.results import (
    Absent,
    Bag,
    ReportedCount,
    ResultRow,
    ResultSet,
    Scalar,
    read_count,
)


@pytest.mark.unit
class TestResultRow:
    def test_tagged_values(self):
        row = ResultRow({"n_value": {"name": "Alice"}, "n_id": 4})

        assert row.value("n_value") == Bag({"name": "Alice"})
        assert row.value("n_id") == Scalar(4)
        assert row.value("missing") == Absent("missing")

    def test_none_is_scalar(self):
        assert ResultRow({"n_id": None}).value("n_id") == Scalar(None)

    def test_mapping_interface(self):
        row = ResultRow([("a", 1), ("b", 2)])

        assert dict(row) == {"a": 1, "b": 2}
        assert len(row) == 2
        assert row.get("c") is None


@pytest.mark.unit
class TestResultSet:
    def test_rows_are_wrapped(self):
        result = ResultSet([{"a": 1}, ResultRow({"a": 2})])

        assert len(result) == 2
        assert all(isinstance(r, ResultRow) for r in result)
        assert result.first()["a"] == 1

    def test_empty(self):
        result = ResultSet()

        assert len(result) == 0
        assert result.first() is None


@pytest.mark.unit
class TestReadCount:
    def test_known(self):
        outcome = read_count(ResultSet([{"ctr": 2}]), "ctr")

        assert outcome == ReportedCount.known(2)
        assert outcome.is_known
        assert int(outcome) == 2

    @pytest.mark.parametrize(
        ("rows", "reason"),
        [
            ([], "no rows"),
            ([{"other": 1}], "ctr is missing"),
            ([{"ctr": "1"}], "ctr is not an integer: '1'"),
            ([{"ctr": True}], "ctr is not an integer: True"),
            ([{"ctr": -1}], "ctr is negative: -1"),
            ([{"ctr": {"n": 1}}], "ctr is a value bag"),
        ],
    )
    def test_unknown(self, rows, reason):
        outcome = read_count(ResultSet(rows), "ctr")

        assert not outcome.is_known
        assert outcome.reason == reason
        assert int(outcome) == 0

    def test_exactly_one(self):
        result = ResultSet([{"ctr": 1}, {"ctr": 2}])

        assert read_count(result, "ctr").value == 1
        assert read_count(result, "ctr", exactly_one=True).reason == "expected 1 row, got 2"

    def test_zero_differs_from_unknown(self):
        assert ReportedCount.known(0) != ReportedCount.unknown("no rows")
