"""Per-class identity metadata."""

import typing as t
from dataclasses import dataclass


@dataclass(frozen=True)
class ClassMetadata:
    """Identity access for one node class.

    The identifier defaults to the lower-cased class name and the identity
    attribute to ``id``. A class overrides them with ``__node_identifier__``
    and ``__node_id_field__``.
    """

    node_class: type[t.Any]
    node_identifier: str
    id_field: str = "id"

    @classmethod
    def for_class(cls, node_class: type[t.Any]) -> "ClassMetadata":
        return cls(
            node_class=node_class,
            node_identifier=getattr(
                node_class, "__node_identifier__", node_class.__name__.lower()
            ),
            id_field=getattr(node_class, "__node_id_field__", "id"),
        )

    @property
    def class_name(self) -> str:
        return f"{self.node_class.__module__}.{self.node_class.__qualname__}"

    def get_node_identifier(self) -> str:
        return self.node_identifier

    def get_id_value(self, node: t.Any) -> t.Any:
        # Uninitialised instances have no identity attribute yet.
        return getattr(node, self.id_field, None)

    def set_id_value(self, node: t.Any, value: t.Any) -> None:
        setattr(node, self.id_field, value)


class MetadataProvider(t.Protocol):
    def get_class_metadata(self, node_class: type[t.Any]) -> ClassMetadata: ...


class MetadataCache:
    """Builds :class:`ClassMetadata` once per class and keeps it."""

    def __init__(self) -> None:
        self._metadata: dict[type[t.Any], ClassMetadata] = {}

    def get_class_metadata(self, node_class: type[t.Any]) -> ClassMetadata:
        metadata = self._metadata.get(node_class)
        if metadata is None:
            metadata = ClassMetadata.for_class(node_class)
            self._metadata[node_class] = metadata
        return metadata

    def __contains__(self, node_class: object) -> bool:
        return node_class in self._metadata

    def __len__(self) -> int:
        return len(self._metadata)
