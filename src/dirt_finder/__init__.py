"""Exhaustive block-rotation search over a voxel world lattice."""

from .engine import SearchEngine, SearchError
from .generator import DeterministicGenerator
from .models import Constraint, Coordinate, Direction, Facing, Partition, SearchVolume
from .partition import SearchPartitioner
from .position import position_hash
from .predicate import Predicate, matches
from .request import RequestError, SearchRequest, build_search_request

__all__ = [
    "Constraint",
    "Coordinate",
    "DeterministicGenerator",
    "Direction",
    "Facing",
    "Partition",
    "Predicate",
    "RequestError",
    "SearchEngine",
    "SearchError",
    "SearchPartitioner",
    "SearchRequest",
    "SearchVolume",
    "build_search_request",
    "matches",
    "position_hash",
]
