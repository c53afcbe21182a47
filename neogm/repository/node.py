"""Repository mapping one node class onto graph store records.

Every operation follows the same pipeline: build criteria, ask the
statement builder for a statement, run it through the client, then hydrate
rows or read counters, and finally update the identity cache and dispatch
lifecycle events.
"""

import logging

import typing as t
from collections.abc import Mapping

from neogm.criteria import Criteria, SortDirection
from neogm.events import NodeCreatedEvent, NodeDeletedEvent, NodeUpdatedEvent
from neogm.metadata import ClassMetadata
from neogm.results import Absent, Bag, ReportedCount, ResultSet, Scalar, read_count
from neogm.statements import Statement

from ._base import CardinalityError, DataShapeError, EntityType, OrderBy

if t.TYPE_CHECKING:
    from neogm.manager import NodeManager

logger = logging.getLogger(__name__)


class BaseRepository(t.Generic[EntityType]):
    """Repository for one node class, bound to one :class:`NodeManager`.

    The manager supplies the statement builder, client, hydrator, identity
    cache and event dispatcher. The repository keeps no state of its own
    between calls.
    """

    def __init__(self, manager: "NodeManager", node_class: type[EntityType]) -> None:
        self._nm = manager
        self.node_class = node_class
        self.class_metadata: ClassMetadata = manager.metadata_cache.get_class_metadata(
            node_class
        )
        self.settings = manager.settings

        manager.set_repository(node_class, self)

    @property
    def class_name(self) -> str:
        return self.class_metadata.class_name

    @property
    def node_manager(self) -> "NodeManager":
        return self._nm

    def get_identifier(self) -> str:
        return self.class_metadata.get_node_identifier()

    async def find(self, node_id: t.Any) -> EntityType | None:
        """Return the node with ``node_id``, preferring the identity cache.

        A cached instance is returned as is, even if the stored record has
        changed since it was cached.
        """
        cached = self._nm.nodes_cache.get(self.node_class, node_id)
        if cached is not None:
            return t.cast("EntityType", cached)

        node = await self.find_one_by({self.settings.id_pseudo_field: node_id})
        if node is not None:
            self._nm.nodes_cache.put(self.node_class, node_id, node)
        return node

    async def find_all(self) -> list[EntityType]:
        return await self.find_by({})

    async def find_by(
        self,
        filters: Mapping[str, t.Any],
        order_by: OrderBy | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[EntityType]:
        criteria = self._build_criteria(filters, order_by, offset, limit)
        return await self.matching(criteria)

    async def find_by_query(
        self,
        identifier: str,
        query: str,
        params: Mapping[str, t.Any],
        order_by: OrderBy | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[EntityType]:
        """Run caller-written query text completed by the statement builder.

        ``identifier`` is the variable ``query`` binds the node to.
        """
        fragment = self._nm.query_builder.get_custom_search_query(
            self.node_class, identifier, params, order_by, limit, offset
        )
        result = await self._run(Statement(query, dict(params)) + fragment)
        return await self._hydrate_nodes(identifier, result)

    async def find_one_by(
        self,
        filters: Mapping[str, t.Any],
        order_by: OrderBy | None = None,
    ) -> EntityType | None:
        """Return the single matching node, ``None`` when nothing matches.

        Raises:
            CardinalityError: If more than one record matches.
        """
        criteria = self._build_criteria(filters, order_by, None, 1)
        identifier = self.get_identifier()
        statement = self._nm.query_builder.get_search_query(
            self.node_class, identifier, criteria
        )
        result = await self._run(statement)
        return await self._hydrate_one(identifier, result, "find_one_by")

    async def find_one_by_query(
        self,
        identifier: str,
        query: str,
        params: Mapping[str, t.Any],
        order_by: OrderBy | None = None,
    ) -> EntityType | None:
        fragment = self._nm.query_builder.get_custom_search_query(
            self.node_class, identifier, params, order_by, 1, None
        )
        result = await self._run(Statement(query, dict(params)) + fragment)
        return await self._hydrate_one(identifier, result, "find_one_by_query")

    async def matching(self, criteria: Criteria) -> list[EntityType]:
        identifier = self.get_identifier()
        statement = self._nm.query_builder.get_search_query(
            self.node_class, identifier, criteria
        )
        result = await self._run(statement)
        return await self._hydrate_nodes(identifier, result)

    async def save(self, node: EntityType) -> int:
        """Insert ``node`` if it has no identity yet, update it otherwise.

        Returns the number of rows the store reported; 0 means nothing was
        persisted.

        Raises:
            DataShapeError: If an insert does not answer with the new identity.
        """
        identifier = self.get_identifier()
        node_id = self.class_metadata.get_id_value(node)
        insert = node_id is None

        builder = self._nm.query_builder
        statement = (
            builder.get_create_query(node, identifier)
            if insert
            else builder.get_update_query(node, identifier)
        )
        if statement is None:
            logger.debug("Nothing to persist for %s", self.class_name)
            return 0

        result = await self._run(statement)
        if not len(result):
            return 0

        if insert:
            node_id = self._inserted_id(identifier, result)
            self.class_metadata.set_id_value(node, node_id)
            await self._nm.event_dispatcher.dispatch(NodeCreatedEvent(node=node))
        else:
            await self._nm.event_dispatcher.dispatch(NodeUpdatedEvent(node=node))

        self._nm.nodes_cache.put(self.node_class, node_id, node)
        return len(result)

    async def delete(self, node: EntityType) -> int:
        """Detach-delete ``node`` and return how many records were removed.

        An unreadable counter in the response is reported as 0.
        """
        return int(await self.delete_outcome(node))

    async def delete_outcome(self, node: EntityType) -> ReportedCount:
        node_id = self.class_metadata.get_id_value(node)
        if node_id is None:
            return ReportedCount.known(0)

        # Evict first so nothing reads the cached node while it is being deleted.
        self._nm.nodes_cache.remove(self.node_class, node_id)

        statement = self._nm.query_builder.get_detach_delete_query(
            node, self.get_identifier()
        )
        result = await self._run(statement)

        outcome = read_count(result, self.settings.delete_counter_key)
        if not outcome.is_known:
            logger.warning(
                "Could not read delete counter for %s %s: %s",
                self.class_name,
                node_id,
                outcome.reason,
            )
        elif outcome.value:
            await self._nm.event_dispatcher.dispatch(NodeDeletedEvent(node=node))
        return outcome

    async def refresh(self, node: EntityType) -> None:
        await self.reload(node)
        await self._nm.event_dispatcher.dispatch(NodeUpdatedEvent(node=node))

    async def reload(self, node: EntityType) -> None:
        """Re-read ``node`` from the store and hydrate it in place.

        The identity cache is bypassed.

        Raises:
            CardinalityError: If the identity no longer resolves to exactly
                one record.
        """
        node_id = self.class_metadata.get_id_value(node)
        if node_id is None:
            return

        identifier = self.get_identifier()
        criteria = self._build_criteria(
            {self.settings.id_pseudo_field: node_id}, None, None, 1
        )
        statement = self._nm.query_builder.get_search_query(
            self.node_class, identifier, criteria
        )
        result = await self._run(statement)
        if len(result) != 1:
            raise CardinalityError(len(result), self.class_name, "reload")

        await self._hydrate(identifier, result[0], node)

    async def count(self, filters: Mapping[str, t.Any] | None = None) -> int:
        """Count matching records; an unreadable answer counts as 0."""
        return int(await self.count_outcome(filters))

    async def count_outcome(self, filters: Mapping[str, t.Any] | None = None) -> ReportedCount:
        identifier = self.get_identifier()
        criteria = self._build_criteria(filters or {})
        statement = self._nm.query_builder.get_count_query(
            self.node_class, identifier, criteria
        )
        result = await self._run(statement)

        outcome = read_count(
            result, self.settings.value_key(identifier), exactly_one=True
        )
        if not outcome.is_known:
            logger.warning("Could not read count for %s: %s", self.class_name, outcome.reason)
        return outcome

    def _build_criteria(
        self,
        filters: Mapping[str, t.Any],
        order_by: Mapping[str, SortDirection | str] | None = None,
        first_result: int | None = None,
        max_results: int | None = None,
    ) -> Criteria:
        return Criteria.from_filters(filters, order_by, first_result, max_results)

    async def _run(self, statement: Statement) -> ResultSet:
        if self.settings.log_statements:
            logger.debug("Running %s with %s", statement.text, dict(statement.parameters))
        return await self._nm.client.run(statement)

    def _inserted_id(self, identifier: str, result: ResultSet) -> t.Any:
        key = self.settings.id_key(identifier)
        if len(result) != 1:
            raise DataShapeError(
                f"Failed to handle inserted node: expected 1 row, got {len(result)}",
                self.class_name,
                "save",
                key,
            )
        match result[0].value(key):
            case Scalar(value=node_id) if node_id is not None:
                return node_id
            case Scalar() | Bag() | Absent():
                raise DataShapeError(
                    "Failed to handle inserted node: unexpected value",
                    self.class_name,
                    "save",
                    key,
                )

    async def _hydrate_one(
        self,
        identifier: str,
        result: ResultSet,
        operation: str,
    ) -> EntityType | None:
        if len(result) > 1:
            raise CardinalityError(len(result), self.class_name, operation)
        if not len(result):
            return None
        nodes = await self._hydrate_nodes(identifier, result)
        return nodes[0] if nodes else None

    async def _hydrate_nodes(self, identifier: str, result: ResultSet) -> list[EntityType]:
        nodes: list[EntityType] = []
        for row in result:
            node = self.node_class.__new__(self.node_class)
            await self._hydrate(identifier, row, node)
            nodes.append(node)
        return nodes

    async def _hydrate(self, identifier: str, row: Mapping[str, t.Any], node: EntityType) -> None:
        values = row.get(self.settings.value_key(identifier))
        await self._nm.hydrator.populate(self._nm, node, values)
