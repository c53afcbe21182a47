"""Shared fixtures for neogm tests."""

import pytest

from neogm.cache import NodesCache
from neogm.events import LocalEventDispatcher, NodeEvent
from neogm.hydrator import AttributeHydrator
from neogm.manager import NodeManager
from neogm.metadata import MetadataCache
from neogm.repository import BaseRepository
from tests.fakes import Person, RecordingQueryBuilder, ScriptedClient


@pytest.fixture
def query_builder() -> RecordingQueryBuilder:
    return RecordingQueryBuilder()


@pytest.fixture
def client() -> ScriptedClient:
    return ScriptedClient()


@pytest.fixture
def nodes_cache() -> NodesCache:
    return NodesCache()


@pytest.fixture
def events() -> list[NodeEvent]:
    return []


@pytest.fixture
def dispatcher(events: list[NodeEvent]) -> LocalEventDispatcher:
    dispatcher = LocalEventDispatcher()
    dispatcher.subscribe(events.append)
    return dispatcher


@pytest.fixture
def manager(
    query_builder: RecordingQueryBuilder,
    client: ScriptedClient,
    nodes_cache: NodesCache,
    dispatcher: LocalEventDispatcher,
) -> NodeManager:
    return NodeManager(
        query_builder=query_builder,
        client=client,
        hydrator=AttributeHydrator(),
        metadata_cache=MetadataCache(),
        nodes_cache=nodes_cache,
        event_dispatcher=dispatcher,
    )


@pytest.fixture
def repository(manager: NodeManager) -> BaseRepository[Person]:
    return BaseRepository(manager, Person)
