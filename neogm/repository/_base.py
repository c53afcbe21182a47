"""Repository errors and interface."""

import typing as t
from collections.abc import Mapping

if t.TYPE_CHECKING:
    from neogm.criteria import Criteria, SortDirection
    from neogm.results import ReportedCount

EntityType = t.TypeVar("EntityType")

OrderBy = Mapping[str, "SortDirection | str"]


class RepositoryError(Exception):
    """Base exception for repository operations."""

    def __init__(
        self,
        message: str,
        entity_type: str | None = None,
        operation: str | None = None,
    ) -> None:
        self.entity_type = entity_type
        self.operation = operation
        super().__init__(message)


class CardinalityError(RepositoryError):
    """An exactly-one lookup matched a different number of records."""

    def __init__(
        self,
        actual: int,
        entity_type: str | None = None,
        operation: str | None = None,
    ) -> None:
        super().__init__(
            f"Expected only 1 record, got {actual}",
            entity_type=entity_type,
            operation=operation,
        )
        self.expected = 1
        self.actual = actual


class DataShapeError(RepositoryError):
    """The store answered in a shape the repository cannot use."""

    def __init__(
        self,
        message: str,
        entity_type: str | None = None,
        operation: str | None = None,
        key: str | None = None,
    ) -> None:
        super().__init__(message, entity_type=entity_type, operation=operation)
        self.key = key


class HydrationError(RepositoryError):
    """A value bag could not be applied to a node."""


@t.runtime_checkable
class RepositoryProtocol(t.Protocol[EntityType]):  # type: ignore[misc]
    """Protocol defining repository interface."""

    async def find(self, node_id: t.Any) -> EntityType | None: ...

    async def find_all(self) -> list[EntityType]: ...

    async def find_by(
        self,
        filters: Mapping[str, t.Any],
        order_by: OrderBy | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[EntityType]: ...

    async def find_one_by(
        self,
        filters: Mapping[str, t.Any],
        order_by: OrderBy | None = None,
    ) -> EntityType | None: ...

    async def find_by_query(
        self,
        identifier: str,
        query: str,
        params: Mapping[str, t.Any],
        order_by: OrderBy | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[EntityType]: ...

    async def find_one_by_query(
        self,
        identifier: str,
        query: str,
        params: Mapping[str, t.Any],
        order_by: OrderBy | None = None,
    ) -> EntityType | None: ...

    async def matching(self, criteria: "Criteria") -> list[EntityType]: ...

    async def save(self, node: EntityType) -> int: ...

    async def delete(self, node: EntityType) -> int: ...

    async def delete_outcome(self, node: EntityType) -> "ReportedCount": ...

    async def refresh(self, node: EntityType) -> None: ...

    async def reload(self, node: EntityType) -> None: ...

    async def count(self, filters: Mapping[str, t.Any] | None = None) -> int: ...

    async def count_outcome(
        self, filters: Mapping[str, t.Any] | None = None
    ) -> "ReportedCount": ...
