"""Graph client interface and shared connection handling."""

from abc import ABC, abstractmethod

import asyncio
import typing as t

from neogm.cleanup import CleanupMixin
from neogm.results import ResultSet
from neogm.statements import Statement


class ClientError(Exception):
    """Raised when a graph client is misused or cannot be created."""


@t.runtime_checkable
class GraphClient(t.Protocol):
    async def run(self, statement: Statement) -> ResultSet: ...


class GraphClientBase(CleanupMixin, ABC):
    """Lazily connected client with an optional explicit transaction."""

    def __init__(self) -> None:
        super().__init__()
        self._client: t.Any = None
        self._client_lock: asyncio.Lock | None = None
        self._transaction: t.Any = None

    @property
    def in_transaction(self) -> bool:
        return self._transaction is not None

    async def _ensure_client(self) -> t.Any:
        """Ensure client connection with lazy initialization."""
        if self.cleaned_up:
            msg = "Client has been cleaned up"
            raise ClientError(msg)
        if self._client is None:
            if self._client_lock is None:
                self._client_lock = asyncio.Lock()
            async with self._client_lock:
                if self._client is None:
                    self._client = await self._create_client()
                    self.register_resource(self._client)
        return self._client

    @abstractmethod
    async def _create_client(self) -> t.Any:
        """Create the database client connection."""

    async def run(self, statement: Statement) -> ResultSet:
        return await self.run_query(statement.text, statement.parameters)

    async def run_query(
        self,
        query: str,
        parameters: t.Mapping[str, t.Any] | None = None,
    ) -> ResultSet:
        client = await self._ensure_client()
        return await self._execute(client, query, dict(parameters or {}))

    @abstractmethod
    async def _execute(
        self,
        client: t.Any,
        query: str,
        parameters: dict[str, t.Any],
    ) -> ResultSet:
        """Implementation-specific query execution."""

    async def begin_transaction(self) -> None:
        if self._transaction is not None:
            msg = "A transaction is already active"
            raise ClientError(msg)
        client = await self._ensure_client()
        self._transaction = await self._begin_transaction(client)

    async def commit_transaction(self) -> None:
        if self._transaction is None:
            msg = "No active transaction to commit"
            raise ClientError(msg)
        transaction, self._transaction = self._transaction, None
        await self._commit_transaction(transaction)

    async def rollback_transaction(self) -> None:
        if self._transaction is None:
            msg = "No active transaction to rollback"
            raise ClientError(msg)
        transaction, self._transaction = self._transaction, None
        await self._rollback_transaction(transaction)

    @abstractmethod
    async def _begin_transaction(self, client: t.Any) -> t.Any: ...

    @abstractmethod
    async def _commit_transaction(self, transaction: t.Any) -> None: ...

    @abstractmethod
    async def _rollback_transaction(self, transaction: t.Any) -> None: ...

    async def _cleanup_resources(self) -> None:
        if self._transaction is not None:
            transaction, self._transaction = self._transaction, None
            await self._rollback_transaction(transaction)
        self._client = None
