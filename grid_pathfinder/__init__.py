from .exceptions import OutOfBounds, PathfinderError
from .grid import Grid, TileType, Visitor
from .search import (
    ALGORITHMS,
    Direction,
    SearchResult,
    SearchStatus,
    a_star,
    bfs,
    dfs,
    dijkstra,
    euclidean,
)

__all__ = [
    "ALGORITHMS",
    "Direction",
    "Grid",
    "OutOfBounds",
    "PathfinderError",
    "SearchResult",
    "SearchStatus",
    "TileType",
    "Visitor",
    "a_star",
    "bfs",
    "dfs",
    "dijkstra",
    "euclidean",
]
