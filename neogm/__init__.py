"""neogm: repositories mapping Python objects onto graph store nodes."""

from .cache import NodesCache
from .client import ClientError, GraphClient, Neo4jClient
from .config import LoggerSettings, Neo4jSettings, RepositorySettings
from .criteria import Comparison, Criteria, SortDirection
from .events import (
    LocalEventDispatcher,
    NodeCreatedEvent,
    NodeDeletedEvent,
    NodeEvent,
    NodeUpdatedEvent,
)
from .hydrator import AttributeHydrator
from .manager import NodeManager
from .metadata import ClassMetadata, MetadataCache
from .repository import (
    BaseRepository,
    CardinalityError,
    DataShapeError,
    HydrationError,
    RepositoryError,
)
from .results import ReportedCount, ResultRow, ResultSet
from .statements import QueryBuilder, Statement

__version__ = "0.1.0"

__all__ = [
    "AttributeHydrator",
    "BaseRepository",
    "CardinalityError",
    "ClassMetadata",
    "ClientError",
    "Comparison",
    "Criteria",
    "DataShapeError",
    "GraphClient",
    "HydrationError",
    "LocalEventDispatcher",
    "LoggerSettings",
    "MetadataCache",
    "Neo4jClient",
    "Neo4jSettings",
    "NodeCreatedEvent",
    "NodeDeletedEvent",
    "NodeEvent",
    "NodeManager",
    "NodeUpdatedEvent",
    "NodesCache",
    "QueryBuilder",
    "ReportedCount",
    "RepositoryError",
    "RepositorySettings",
    "ResultRow",
    "ResultSet",
    "SortDirection",
    "Statement",
]
