"""Node repositories."""

from ._base import (
    CardinalityError,
    DataShapeError,
    HydrationError,
    RepositoryError,
    RepositoryProtocol,
)
from .node import BaseRepository

__all__ = [
    "BaseRepository",
    "CardinalityError",
    "DataShapeError",
    "HydrationError",
    "RepositoryError",
    "RepositoryProtocol",
]
