"""Executable statements and the builder protocol that produces them."""

import typing as t
from collections.abc import Mapping
from dataclasses import dataclass, field

from .criteria import Criteria, SortDirection


@dataclass(frozen=True)
class Statement:
    """Query text with its bound parameters."""

    text: str
    parameters: Mapping[str, t.Any] = field(default_factory=dict)

    def __add__(self, fragment: str) -> "Statement":
        return Statement(self.text + fragment, self.parameters)

    def __str__(self) -> str:
        return self.text


@t.runtime_checkable
class QueryBuilder(t.Protocol):
    """Turns criteria or nodes into statements for the store.

    ``identifier`` is the variable the statement binds the node to; result
    rows are keyed from it (``<identifier>_value``, ``<identifier>_id``).
    """

    def get_search_query(
        self,
        node_class: type[t.Any],
        identifier: str,
        criteria: Criteria,
    ) -> Statement: ...

    def get_custom_search_query(
        self,
        node_class: type[t.Any],
        identifier: str,
        params: Mapping[str, t.Any],
        order_by: Mapping[str, SortDirection | str] | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> str: ...

    def get_create_query(self, node: t.Any, identifier: str) -> Statement | None: ...

    def get_update_query(self, node: t.Any, identifier: str) -> Statement | None: ...

    def get_detach_delete_query(self, node: t.Any, identifier: str) -> Statement: ...

    def get_count_query(
        self,
        node_class: type[t.Any],
        identifier: str,
        criteria: Criteria,
    ) -> Statement: ...
