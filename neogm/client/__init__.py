"""Graph store clients."""

from ._base import ClientError, GraphClient, GraphClientBase
from .neo4j import Neo4jClient

__all__ = ["ClientError", "GraphClient", "GraphClientBase", "Neo4jClient"]
