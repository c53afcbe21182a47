"""Store-independent search criteria.

A :class:`Criteria` is a conjunction of equality clauses plus optional
ordering and pagination. Statement builders translate it into the store's
query language.
"""

from enum import Enum

import typing as t
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field


class SortDirection(Enum):
    """Sort direction enumeration."""

    ASC = "ASC"
    DESC = "DESC"

    @classmethod
    def coerce(cls, value: "SortDirection | str") -> "SortDirection":
        if isinstance(value, SortDirection):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            msg = f"Invalid sort direction: {value!r}"
            raise ValueError(msg) from None


@dataclass(frozen=True)
class Comparison:
    """Equality clause ``field = value``."""

    field: str
    value: t.Any

    operator: t.ClassVar[str] = "="

    def to_dict(self) -> dict[str, t.Any]:
        return {"field": self.field, "operator": self.operator, "value": self.value}


class ExpressionBuilder:
    """Factory for criteria clauses."""

    def eq(self, field: str, value: t.Any) -> Comparison:
        return Comparison(field, value)


_EXPRESSION_BUILDER = ExpressionBuilder()


def _check_not_negative(name: str, value: int | None) -> None:
    if value is not None and value < 0:
        msg = f"{name} cannot be negative"
        raise ValueError(msg)


@dataclass
class Criteria:
    """Ordered equality clauses with ordering, offset and limit."""

    where: list[Comparison] = field(default_factory=list)
    orderings: dict[str, SortDirection] = field(default_factory=dict)
    first_result: int | None = None
    max_results: int | None = None

    def __post_init__(self) -> None:
        self.orderings = {
            name: SortDirection.coerce(direction)
            for name, direction in self.orderings.items()
        }
        _check_not_negative("first_result", self.first_result)
        _check_not_negative("max_results", self.max_results)

    @staticmethod
    def expr() -> ExpressionBuilder:
        return _EXPRESSION_BUILDER

    @classmethod
    def from_filters(
        cls,
        filters: Mapping[str, t.Any],
        orderings: Mapping[str, SortDirection | str] | None = None,
        first_result: int | None = None,
        max_results: int | None = None,
    ) -> "Criteria":
        """Build criteria with one equality clause per filter entry."""
        criteria = cls(
            orderings=dict(orderings or {}),
            first_result=first_result,
            max_results=max_results,
        )
        expr = cls.expr()
        for name, value in filters.items():
            criteria.and_where(expr.eq(name, value))
        return criteria

    def and_where(self, comparison: Comparison) -> "Criteria":
        self.where.append(comparison)
        return self

    def order_by(self, field: str, direction: SortDirection | str = SortDirection.ASC) -> "Criteria":
        self.orderings[field] = SortDirection.coerce(direction)
        return self

    def set_first_result(self, first_result: int | None) -> "Criteria":
        _check_not_negative("first_result", first_result)
        self.first_result = first_result
        return self

    def set_max_results(self, max_results: int | None) -> "Criteria":
        _check_not_negative("max_results", max_results)
        self.max_results = max_results
        return self

    def filters(self) -> dict[str, t.Any]:
        """Return the clauses as a ``field -> value`` mapping."""
        return {c.field: c.value for c in self.where}

    def __iter__(self) -> Iterator[Comparison]:
        return iter(self.where)

    def __len__(self) -> int:
        return len(self.where)

    def to_dict(self) -> dict[str, t.Any]:
        return {
            "where": [c.to_dict() for c in self.where],
            "orderings": {k: v.value for k, v in self.orderings.items()},
            "first_result": self.first_result,
            "max_results": self.max_results,
        }
