"""Session object wiring the repository collaborators together."""

import logging

import typing as t

from .cache import IdentityCache, NodesCache
from .cleanup import CleanupMixin
from .client import GraphClient, Neo4jClient
from .config import Neo4jSettings, RepositorySettings, settings_summary
from .events import EventDispatcher, LocalEventDispatcher
from .hydrator import AttributeHydrator, Hydrator
from .metadata import MetadataCache, MetadataProvider
from .repository import BaseRepository, RepositoryError
from .statements import QueryBuilder

logger = logging.getLogger(__name__)

T = t.TypeVar("T")


class NodeManager(CleanupMixin):
    """One unit of work: collaborators, identity cache and repositories.

    Every collaborator is passed in explicitly. Use :meth:`create` to get
    the default implementations for the ones you do not supply.
    """

    def __init__(
        self,
        query_builder: QueryBuilder,
        client: GraphClient,
        hydrator: Hydrator,
        metadata_cache: MetadataProvider,
        nodes_cache: IdentityCache,
        event_dispatcher: EventDispatcher,
        settings: RepositorySettings | None = None,
    ) -> None:
        super().__init__()
        self.query_builder = query_builder
        self.client = client
        self.hydrator = hydrator
        self.metadata_cache = metadata_cache
        self.nodes_cache = nodes_cache
        self.event_dispatcher = event_dispatcher
        self.settings = settings or RepositorySettings()
        self._repositories: dict[type[t.Any], BaseRepository[t.Any]] = {}

        self.register_resource(client)

    @classmethod
    def create(
        cls,
        query_builder: QueryBuilder,
        *,
        client: GraphClient | None = None,
        neo4j_settings: Neo4jSettings | None = None,
        hydrator: Hydrator | None = None,
        metadata_cache: MetadataProvider | None = None,
        nodes_cache: IdentityCache | None = None,
        event_dispatcher: EventDispatcher | None = None,
        settings: RepositorySettings | None = None,
    ) -> "NodeManager":
        """Build a manager, filling in default collaborators."""
        if client is None:
            neo4j_settings = neo4j_settings or Neo4jSettings()
            logger.debug("Using Neo4j client: %s", settings_summary(neo4j_settings))
            client = Neo4jClient(neo4j_settings)
        return cls(
            query_builder=query_builder,
            client=client,
            hydrator=hydrator or AttributeHydrator(),
            metadata_cache=metadata_cache or MetadataCache(),
            nodes_cache=nodes_cache or NodesCache(),
            event_dispatcher=event_dispatcher or LocalEventDispatcher(),
            settings=settings,
        )

    def set_repository(self, node_class: type[t.Any], repository: BaseRepository[t.Any]) -> None:
        existing = self._repositories.get(node_class)
        if existing is not None and existing is not repository:
            logger.debug(
                "Replacing %s repository for %s",
                type(existing).__name__,
                node_class.__name__,
            )
        self._repositories[node_class] = repository

    def get_repository(self, node_class: type[T]) -> BaseRepository[T]:
        """Return the repository for ``node_class``, creating it on first use.

        A node class picks its repository type with ``__repository_class__``.
        """
        repository = self._repositories.get(node_class)
        if repository is not None:
            return repository

        repository_class = getattr(node_class, "__repository_class__", BaseRepository)
        if not (isinstance(repository_class, type) and issubclass(repository_class, BaseRepository)):
            msg = f"{node_class.__name__}.__repository_class__ must subclass BaseRepository"
            raise RepositoryError(msg, entity_type=node_class.__name__, operation="registry")

        # The repository registers itself through set_repository.
        return repository_class(self, node_class)

    def has_repository(self, node_class: type[t.Any]) -> bool:
        return node_class in self._repositories

    @property
    def repositories(self) -> dict[type[t.Any], BaseRepository[t.Any]]:
        return self._repositories.copy()

    async def _cleanup_resources(self) -> None:
        self._repositories.clear()
        clear = getattr(self.nodes_cache, "clear", None)
        if clear is not None:
            clear()
