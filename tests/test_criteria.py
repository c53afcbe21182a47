"""Tests for search criteria."""

import pytest

from neogm.criteria import Comparison, Criteria, SortDirection


@pytest.mark.unit
class TestSortDirection:
    def test_coerce_strings(self):
        assert SortDirection.coerce("asc") is SortDirection.ASC
        assert SortDirection.coerce("DESC") is SortDirection.DESC
        assert SortDirection.coerce(SortDirection.ASC) is SortDirection.ASC

    def test_coerce_invalid(self):
        with pytest.raises(ValueError, match="Invalid sort direction"):
            SortDirection.coerce("sideways")


@pytest.mark.unit
class TestCriteria:
    """Test criteria construction."""

    def test_from_filters_keeps_order(self):
        criteria = Criteria.from_filters({"b": 2, "a": 1, "id()": 9})

        assert [c.field for c in criteria] == ["b", "a", "id()"]
        assert criteria.filters() == {"b": 2, "a": 1, "id()": 9}

    def test_every_clause_is_equality(self):
        criteria = Criteria.from_filters({"name": "Alice", "age": 30})

        assert all(isinstance(c, Comparison) for c in criteria)
        assert {c.operator for c in criteria} == {"="}

    def test_orderings_are_coerced(self):
        criteria = Criteria.from_filters({}, {"name": "asc", "age": SortDirection.DESC})

        assert criteria.orderings == {"name": SortDirection.ASC, "age": SortDirection.DESC}

    def test_pagination(self):
        criteria = Criteria.from_filters({}, None, 5, 10)

        assert criteria.first_result == 5
        assert criteria.max_results == 10

    def test_negative_pagination_rejected(self):
        with pytest.raises(ValueError):
            Criteria(first_result=-1)
        with pytest.raises(ValueError):
            Criteria(max_results=-1)

    def test_negative_pagination_rejected_by_setters(self):
        criteria = Criteria()

        with pytest.raises(ValueError, match="first_result cannot be negative"):
            criteria.set_first_result(-1)
        with pytest.raises(ValueError, match="max_results cannot be negative"):
            criteria.set_max_results(-5)
        assert criteria.first_result is None
        assert criteria.max_results is None

    def test_fluent_building(self):
        expr = Criteria.expr()
        criteria = (
            Criteria()
            .and_where(expr.eq("name", "Alice"))
            .order_by("age", "desc")
            .set_first_result(0)
            .set_max_results(1)
        )

        assert criteria == Criteria.from_filters({"name": "Alice"}, {"age": "DESC"}, 0, 1)

    def test_to_dict(self):
        criteria = Criteria.from_filters({"name": "Alice"}, {"age": "asc"}, None, 1)

        assert criteria.to_dict() == {
            "where": [{"field": "name", "operator": "=", "value": "Alice"}],
            "orderings": {"age": "ASC"},
            "first_result": None,
            "max_results": 1,
        }
