"""Grid search algorithms that find and mark a path from source to destination.

Provided algorithms
- dfs: randomized Depth-First Search (finds a path, not necessarily the shortest)
- bfs: Breadth-First Search (shortest path, every move costs 1)
- dijkstra: Dijkstra's algorithm over a tentative-distance table
- a_star: A* with a straight-line (Euclidean) heuristic

Every algorithm works in place: explored EMPTY tiles become VISITED, tiles on
the found path become PATH, and each of those writes lands in the grid's
visitor log in the order it happened. SOURCE and DESTINATION keep their types.
Markings left by an earlier search are wiped before a new one starts.

All entry points take (grid, rng=None) so callers can treat them alike; only
dfs draws from rng.
"""

import collections
import enum
import heapq
import logging
import math
import random

from .grid import TileType

logger = logging.getLogger(__name__)


class Direction(enum.Enum):
    UP = (0, 1)
    DOWN = (0, -1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    def step(self, point):
        dx, dy = self.value
        return point[0] + dx, point[1] + dy


class SearchStatus(enum.Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"


class SearchResult:
    """Outcome of one search call.

    path is the list of points from source to destination (both included),
    empty when nothing was found. came_from maps every discovered point to
    its predecessor (the source maps to None).
    """
    def __init__(self, status, path=None, came_from=None, visited_count=0):
        self.status = status
        self.path = path or []
        self.came_from = came_from or {}
        self.visited_count = visited_count

    @property
    def found(self):
        return self.status is SearchStatus.FOUND

    def __bool__(self):
        return self.found

    def __repr__(self):
        return (f"SearchResult(status={self.status.name}, path_length={len(self.path)}, "
                f"visited_count={self.visited_count})")


def euclidean(a, b):
    """Straight-line distance; admissible and consistent on a 4-connected unit-cost grid."""
    return math.hypot(a[0] - b[0], a[1] - b[1])


def _start(grid, name):
    """Checks that both endpoints are set, then wipes earlier markings and the visitor log.

    Returns (source, destination), or None when the search cannot run.
    """
    source, destination = grid.get_source(), grid.get_destination()
    if source is None or destination is None:
        logger.debug("%s: source=%s destination=%s, not searching", name, source, destination)
        return None
    grid.clear_markings()
    grid.clear_visitor_log()
    return source, destination


def _open_neighbors(grid, point):
    """Yield in-bounds, non-wall neighbors in UP, DOWN, LEFT, RIGHT order."""
    for direction in Direction:
        nxt = direction.step(point)
        if grid.in_bounds(*nxt) and grid.get_tile(*nxt) is not TileType.WALL:
            yield nxt


def _mark_visited(grid, point):
    if grid.get_tile(*point) is TileType.EMPTY:
        grid.set_tile(*point, TileType.VISITED)
        return True
    return False


def _mark_path(grid, point):
    if grid.get_tile(*point) is TileType.VISITED:
        grid.set_tile(*point, TileType.PATH)


def _reconstruct_path(grid, came_from, source, destination):
    """Walks the parent pointers back from destination, marking each step PATH.

    Returns the path in source -> destination order.
    """
    path = [destination]
    node = came_from[destination]
    while node is not None and node != source:
        _mark_path(grid, node)
        path.append(node)
        node = came_from[node]
    path.append(source)
    path.reverse()
    return path


def _finish(name, result):
    logger.debug("%s: %s after visiting %d tiles (path length %d)",
                 name, result.status.name, result.visited_count, len(result.path))
    return result


def dfs(grid, rng=None):
    """Randomized Depth-First Search from the source.

    DFS Semantics:
      - Dives as deep as possible before backtracking. At each tile the four
        directions are shuffled (Fisher-Yates, via rng.shuffle) so repeated
        runs on the same maze take different routes.
      - The recursion is kept as an explicit stack of frames
        (point, remaining directions) so large grids don't hit the recursion limit.
      - Dead ends are popped without un-marking their VISITED tiles.
      - When the destination is reached, every tile still on the stack is on
        the path; they are promoted to PATH deepest first, the order a
        recursive search would unwind in.

    Not guaranteed to find the shortest path.
    """
    endpoints = _start(grid, "DFS")
    if endpoints is None:
        return SearchResult(SearchStatus.NOT_FOUND)
    source, destination = endpoints
    rng = rng or random

    def shuffled_directions():
        directions = list(Direction)
        rng.shuffle(directions)
        return iter(directions)

    came_from = {source: None}
    stack = [(source, shuffled_directions())]
    visited_count = 0

    while stack:
        current, directions = stack[-1]
        for direction in directions:
            nxt = direction.step(current)
            if (grid.in_bounds(*nxt) and grid.get_tile(*nxt) is not TileType.WALL
                    and nxt not in came_from):
                break
        else:
            stack.pop()  # Backtrack
            continue

        came_from[nxt] = current
        if nxt == destination:
            path = [point for point, _ in stack] + [destination]
            for point, _ in reversed(stack):
                _mark_path(grid, point)
            return _finish("DFS", SearchResult(SearchStatus.FOUND, path, came_from, visited_count))

        if _mark_visited(grid, nxt):
            visited_count += 1
        stack.append((nxt, shuffled_directions()))

    return _finish("DFS", SearchResult(SearchStatus.NOT_FOUND, came_from=came_from, visited_count=visited_count))


def bfs(grid, rng=None):
    """Breadth-first search; the first time a tile is reached is the shortest way there."""
    endpoints = _start(grid, "BFS")
    if endpoints is None:
        return SearchResult(SearchStatus.NOT_FOUND)
    source, destination = endpoints

    queue = collections.deque([source])
    came_from = {source: None}
    visited_count = 0

    while queue:
        current = queue.popleft()
        if current == destination:
            path = _reconstruct_path(grid, came_from, source, destination)
            return _finish("BFS", SearchResult(SearchStatus.FOUND, path, came_from, visited_count))
        for nxt in _open_neighbors(grid, current):
            if nxt not in came_from:
                came_from[nxt] = current
                if _mark_visited(grid, nxt):
                    visited_count += 1
                queue.append(nxt)

    return _finish("BFS", SearchResult(SearchStatus.NOT_FOUND, came_from=came_from, visited_count=visited_count))


def dijkstra(grid, rng=None):
    """Dijkstra's algorithm with a tentative-distance table.

    With every move costing 1 this finds paths as short as BFS does; the
    distance table and strict relaxation are what weighted moves would need.
    The unsettled set is a heap with lazy deletion: entries for tiles that
    were settled already are skipped when popped.
    """
    endpoints = _start(grid, "Dijkstra")
    if endpoints is None:
        return SearchResult(SearchStatus.NOT_FOUND)
    source, destination = endpoints

    dist = collections.defaultdict(lambda: math.inf)
    dist[source] = 0
    came_from = {source: None}
    settled = set()
    unsettled = [(0, source)]
    visited_count = 0

    while unsettled:
        d, current = heapq.heappop(unsettled)
        if current in settled:
            continue
        settled.add(current)

        if current == destination:
            path = _reconstruct_path(grid, came_from, source, destination)
            return _finish("Dijkstra", SearchResult(SearchStatus.FOUND, path, came_from, visited_count))

        for nxt in _open_neighbors(grid, current):
            candidate = d + 1
            if candidate < dist[nxt]:
                if dist[nxt] == math.inf and _mark_visited(grid, nxt):
                    visited_count += 1
                dist[nxt] = candidate
                came_from[nxt] = current
                heapq.heappush(unsettled, (candidate, nxt))

    return _finish("Dijkstra", SearchResult(SearchStatus.NOT_FOUND, came_from=came_from, visited_count=visited_count))


def a_star(grid, rng=None, heuristic=euclidean):
    """A* search: Dijkstra ordered by f = g + h instead of g alone.

    g_score is the cost from the source, f_score adds the heuristic estimate
    to the destination. Tiles are marked VISITED when they are expanded, not
    when they are first discovered. A consistent heuristic never finds a
    cheaper way into an expanded tile, so closed tiles are skipped when popped.
    """
    endpoints = _start(grid, "A*")
    if endpoints is None:
        return SearchResult(SearchStatus.NOT_FOUND)
    source, destination = endpoints

    g_score = collections.defaultdict(lambda: math.inf)
    f_score = collections.defaultdict(lambda: math.inf)
    g_score[source] = 0
    f_score[source] = heuristic(source, destination)
    came_from = {source: None}
    closed = set()
    open_heap = [(f_score[source], 0, source)]  # (f, g, point)
    visited_count = 0

    while open_heap:
        _, g, current = heapq.heappop(open_heap)
        if current in closed or g > g_score[current]:
            continue  # Stale entry

        if current == destination:
            path = _reconstruct_path(grid, came_from, source, destination)
            return _finish("A*", SearchResult(SearchStatus.FOUND, path, came_from, visited_count))

        closed.add(current)
        if _mark_visited(grid, current):
            visited_count += 1

        for nxt in _open_neighbors(grid, current):
            tentative_g = g_score[current] + 1
            if tentative_g < g_score[nxt]:
                came_from[nxt] = current
                g_score[nxt] = tentative_g
                f_score[nxt] = tentative_g + heuristic(nxt, destination)
                heapq.heappush(open_heap, (f_score[nxt], tentative_g, nxt))

    return _finish("A*", SearchResult(SearchStatus.NOT_FOUND, came_from=came_from, visited_count=visited_count))


ALGORITHMS = {
    "DFS": dfs,
    "BFS": bfs,
    "Dijkstra": dijkstra,
    "A*": a_star,
}
