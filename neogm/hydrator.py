"""Populate node instances from raw value bags."""

import typing as t
from collections.abc import Mapping

from .repository._base import HydrationError

if t.TYPE_CHECKING:
    from .manager import NodeManager


class Hydrator(t.Protocol):
    async def populate(
        self,
        manager: "NodeManager",
        node: t.Any,
        values: t.Any,
    ) -> None: ...


class AttributeHydrator:
    """Copy every entry of the value bag onto the node as an attribute."""

    async def populate(
        self,
        manager: "NodeManager",
        node: t.Any,
        values: t.Any,
    ) -> None:
        if not isinstance(values, Mapping):
            msg = f"Cannot hydrate {type(node).__name__} from {type(values).__name__}"
            raise HydrationError(
                msg,
                entity_type=type(node).__name__,
                operation="hydrate",
            )
        for name, value in values.items():
            setattr(node, name, value)
