"""Graph client backed by the official ``neo4j`` async driver."""

import logging

import typing as t
from collections.abc import Mapping
from datetime import datetime

from neogm.config import Neo4jSettings
from neogm.results import ResultRow, ResultSet

from ._base import ClientError, GraphClientBase

if t.TYPE_CHECKING:
    from neo4j import AsyncDriver, AsyncSession, AsyncTransaction

logger = logging.getLogger(__name__)


def to_plain(value: t.Any) -> t.Any:
    """Convert driver graph types to plain Python values.

    Nodes and relationships become their property mappings, so a value bag
    returned as ``RETURN n AS person_value`` hydrates like a map projection.
    """
    if hasattr(value, "labels") and hasattr(value, "items"):  # Node
        return dict(value.items())
    if hasattr(value, "start_node") and hasattr(value, "items"):  # Relationship
        return dict(value.items())
    if isinstance(value, Mapping):
        return {k: to_plain(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [to_plain(v) for v in value]
    return value


class Neo4jClient(GraphClientBase):
    """Runs statements against Neo4j and returns :class:`ResultSet` rows."""

    def __init__(self, settings: Neo4jSettings | None = None, **kwargs: t.Any) -> None:
        super().__init__()
        self.settings = settings or Neo4jSettings(**kwargs)
        self._session: AsyncSession | None = None

    async def _create_client(self) -> "AsyncDriver":
        try:
            from neo4j import AsyncGraphDatabase
        except ImportError as e:
            msg = "neo4j package is required for Neo4jClient"
            raise ClientError(msg) from e

        settings = self.settings
        driver = AsyncGraphDatabase.driver(
            settings.uri,
            auth=settings.auth,
            max_connection_lifetime=settings.max_connection_lifetime,
            connection_acquisition_timeout=settings.connection_acquisition_timeout,
            max_connection_pool_size=settings.max_connections,
            max_transaction_retry_time=settings.max_transaction_retry_time,
            initial_retry_delay=settings.initial_retry_delay,
            retry_delay_multiplier=settings.retry_delay_multiplier,
            retry_delay_jitter_factor=settings.retry_delay_jitter_factor,
            encrypted=settings.encrypted,
        )
        await driver.verify_connectivity()
        logger.info("Connected to Neo4j at %s", settings.uri)
        return driver

    async def _execute(
        self,
        client: "AsyncDriver",
        query: str,
        parameters: dict[str, t.Any],
    ) -> ResultSet:
        start_time = datetime.now()
        if self._transaction is not None:
            result = await self._transaction.run(query, parameters)
            rows = await self._collect(result)
        else:
            async with client.session(database=self.settings.database) as session:
                result = await session.run(query, parameters)
                rows = await self._collect(result)

        logger.debug(
            "Query returned %d rows in %.3fs",
            len(rows),
            (datetime.now() - start_time).total_seconds(),
        )
        return ResultSet(rows)

    @staticmethod
    async def _collect(result: t.Any) -> list[ResultRow]:
        return [
            ResultRow((key, to_plain(value)) for key, value in record.items())
            async for record in result
        ]

    async def _begin_transaction(self, client: "AsyncDriver") -> "AsyncTransaction":
        self._session = client.session(database=self.settings.database)
        return await self._session.begin_transaction()

    async def _commit_transaction(self, transaction: "AsyncTransaction") -> None:
        try:
            await transaction.commit()
        finally:
            await self._close_session()

    async def _rollback_transaction(self, transaction: "AsyncTransaction") -> None:
        try:
            await transaction.rollback()
        finally:
            await self._close_session()

    async def _close_session(self) -> None:
        if self._session is not None:
            session, self._session = self._session, None
            await session.close()
