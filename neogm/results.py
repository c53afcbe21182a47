"""Tabular results returned by a graph client.

Rows are read through :meth:`ResultRow.value`, which returns a tagged
variant (:class:`Scalar`, :class:`Bag` or :class:`Absent`) instead of a raw
dynamic value. Reporting paths that tolerate malformed rows use
:class:`ReportedCount`, which keeps "zero" and "unknown" apart.
"""

import typing as t
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Scalar:
    value: t.Any


@dataclass(frozen=True)
class Bag:
    values: Mapping[str, t.Any]


@dataclass(frozen=True)
class Absent:
    key: str


RowValue = Scalar | Bag | Absent


class ResultRow(Mapping[str, t.Any]):
    """Read-only mapping from column key to value."""

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, t.Any] | Iterable[tuple[str, t.Any]] = ()) -> None:
        self._data: dict[str, t.Any] = dict(data)

    def __getitem__(self, key: str) -> t.Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"ResultRow({self._data!r})"

    def value(self, key: str) -> RowValue:
        if key not in self._data:
            return Absent(key)
        raw = self._data[key]
        if isinstance(raw, Mapping):
            return Bag(raw)
        return Scalar(raw)


class ResultSet(Sequence[ResultRow]):
    """Ordered rows of one executed statement."""

    __slots__ = ("_rows",)

    def __init__(self, rows: Iterable[ResultRow | Mapping[str, t.Any]] = ()) -> None:
        self._rows = [r if isinstance(r, ResultRow) else ResultRow(r) for r in rows]

    @t.overload
    def __getitem__(self, index: int) -> ResultRow: ...

    @t.overload
    def __getitem__(self, index: slice) -> list[ResultRow]: ...

    def __getitem__(self, index: int | slice) -> ResultRow | list[ResultRow]:
        return self._rows[index]

    def __len__(self) -> int:
        return len(self._rows)

    def __repr__(self) -> str:
        return f"ResultSet({self._rows!r})"

    def first(self) -> ResultRow | None:
        return self._rows[0] if self._rows else None


@dataclass(frozen=True)
class ReportedCount:
    """A count read from a result, or the reason it could not be read."""

    value: int | None
    reason: str | None = field(default=None, compare=False)

    @classmethod
    def known(cls, value: int) -> "ReportedCount":
        return cls(value)

    @classmethod
    def unknown(cls, reason: str) -> "ReportedCount":
        return cls(None, reason)

    @property
    def is_known(self) -> bool:
        return self.value is not None

    def __int__(self) -> int:
        return self.value or 0


def read_count(result: ResultSet, key: str, *, exactly_one: bool = False) -> ReportedCount:
    """Read an integer counter from the first row of ``result``."""
    if exactly_one and len(result) != 1:
        return ReportedCount.unknown(f"expected 1 row, got {len(result)}")
    row = result.first()
    if row is None:
        return ReportedCount.unknown("no rows")
    match row.value(key):
        case Scalar(value=int() as value) if not isinstance(value, bool):
            if value < 0:
                return ReportedCount.unknown(f"{key} is negative: {value}")
            return ReportedCount.known(value)
        case Scalar(value=value):
            return ReportedCount.unknown(f"{key} is not an integer: {value!r}")
        case Bag():
            return ReportedCount.unknown(f"{key} is a value bag")
        case Absent():
            return ReportedCount.unknown(f"{key} is missing")
    return ReportedCount.unknown(f"{key} is unreadable")
