import enum
import logging
import random
from collections import namedtuple

from .exceptions import OutOfBounds

logger = logging.getLogger(__name__)


class TileType(enum.Enum):
    WALL = "wall"
    EMPTY = "empty"
    SOURCE = "source"
    DESTINATION = "destination"
    VISITED = "visited"
    PATH = "path"


# A point and the type it was marked with, replayed by the animation shell.
Visitor = namedtuple("Visitor", ["point", "type"])

# Tile types recorded in the visitor log
LOGGED_TYPES = (TileType.VISITED, TileType.PATH)

TILE_GLYPHS = {
    TileType.WALL: "#",
    TileType.EMPTY: ".",
    TileType.SOURCE: "S",
    TileType.DESTINATION: "D",
    TileType.VISITED: "o",
    TileType.PATH: "*",
}

# (dx, dy) offsets of the 4-connected neighborhood
NEIGHBOR_OFFSETS = [(0, 1), (0, -1), (-1, 0), (1, 0)]


class Grid:
    """
    Stores a rectangular board of typed tiles for pathfinding.

    Grid Representation:
      - Tiles live in a flat list indexed by y * width + x.
      - Coordinates are (x, y) with x the column (0 to width-1) and y the row
        (0 to height-1). y grows upward, so str(grid) prints the top row
        (y = height-1) first.
      - A new grid is all EMPTY with no source and no destination.

    Source/Destination:
      - At most one SOURCE and one DESTINATION tile exist at any time. Moving
        a marker resets its previous cell to EMPTY.

    Visitor Log:
      - Every write of a VISITED or PATH tile appends a Visitor(point, type)
        entry. The log is what the shell replays to animate a search; the
        tiles themselves already hold the final result.
    """
    def __init__(self, width, height):
        if width < 1 or height < 1:
            raise ValueError(f"grid dimensions must be positive, got {width}x{height}")
        self._width = width
        self._height = height
        self._tiles = [TileType.EMPTY] * (width * height)
        self._source = None
        self._destination = None
        self._visitor_log = []

    @property
    def width(self):
        return self._width

    @property
    def height(self):
        return self._height

    def in_bounds(self, x, y):
        return 0 <= x < self._width and 0 <= y < self._height

    # name used by the GUI shell
    is_in_grid = in_bounds

    def _index(self, x, y):
        if not self.in_bounds(x, y):
            raise OutOfBounds(x, y, self._width, self._height)
        return y * self._width + x

    def get_tile(self, x, y):
        return self._tiles[self._index(x, y)]

    def set_tile(self, x, y, tile_type):
        """Sets the tile at (x, y), keeping the source/destination bookkeeping in sync.

        SOURCE and DESTINATION writes are forwarded to set_source/set_destination.
        Overwriting the current source or destination cell with anything else
        forgets that marker. VISITED and PATH writes are appended to the visitor log.
        """
        if not isinstance(tile_type, TileType):
            raise TypeError(f"expected a TileType, got {tile_type!r}")
        if tile_type is TileType.SOURCE:
            self.set_source(x, y)
            return
        if tile_type is TileType.DESTINATION:
            self.set_destination(x, y)
            return
        self._write(x, y, tile_type)

    def _write(self, x, y, tile_type):
        index = self._index(x, y)
        point = (x, y)
        if point == self._source and tile_type is not TileType.SOURCE:
            self._source = None
        if point == self._destination and tile_type is not TileType.DESTINATION:
            self._destination = None
        self._tiles[index] = tile_type
        if tile_type in LOGGED_TYPES:
            self._visitor_log.append(Visitor(point, tile_type))

    def get_source(self):
        return self._source

    def set_source(self, x, y):
        self._index(x, y)
        if self._source is not None and self._source != (x, y):
            self._write(*self._source, TileType.EMPTY)
        self._write(x, y, TileType.SOURCE)
        self._source = (x, y)

    def get_destination(self):
        return self._destination

    def set_destination(self, x, y):
        self._index(x, y)
        if self._destination is not None and self._destination != (x, y):
            self._write(*self._destination, TileType.EMPTY)
        self._write(x, y, TileType.DESTINATION)
        self._destination = (x, y)

    def neighbors(self, x, y):
        """Yields the in-bounds 4-neighbors of (x, y), whatever their type."""
        for dx, dy in NEIGHBOR_OFFSETS:
            nx, ny = x + dx, y + dy
            if self.in_bounds(nx, ny):
                yield nx, ny

    def tiles_of(self, tile_type):
        """Returns the coordinates holding tile_type in row-major order."""
        return [(i % self._width, i // self._width)
                for i, tile in enumerate(self._tiles) if tile is tile_type]

    def clear_markings(self):
        for i, tile in enumerate(self._tiles):
            if tile in LOGGED_TYPES:
                self._tiles[i] = TileType.EMPTY

    def clear_grid(self):
        self._tiles = [TileType.EMPTY] * (self._width * self._height)
        self._source = None
        self._destination = None
        self._visitor_log = []

    def visitor_log(self):
        return list(self._visitor_log)

    def clear_visitor_log(self):
        self._visitor_log = []

    def generate_maze(self, rng=None):
        """Carves a "perfect" maze using a randomized Prim's algorithm on the tiles.

        High-level overview:
          - Every tile starts as a WALL. A random start tile is carved and its
            wall neighbors seed the frontier.
          - A random wall w is taken off the frontier. If, across w, one side
            is already carved and the opposite side is still a WALL, both w
            and that opposite tile are carved, and the opposite tile's wall
            neighbors join the frontier.
          - Pairs that are both carved would close a loop and pairs that are
            both walls are not connected to the maze yet, so both are skipped.
          - Carved tiles sit on the start tile's parity lattice with single
            connector tiles between them, which makes the carved region a
            spanning tree: exactly one path between any two carved tiles.

        The start tile becomes the SOURCE and the last lattice tile carved
        becomes the DESTINATION. Grids too small to carve anything past the
        start tile get no destination.

        Parameters:
          rng: source of randomness with randrange(); defaults to the random module.
        """
        rng = rng or random
        self.clear_grid()
        self._tiles = [TileType.WALL] * (self._width * self._height)

        # Step 1: carve a random start tile
        start = (rng.randrange(self._width), rng.randrange(self._height))
        self._write(*start, TileType.EMPTY)

        frontier = []
        in_frontier = set()

        def add_frontier_walls(cx, cy):
            for nx, ny in self.neighbors(cx, cy):
                if self.get_tile(nx, ny) is TileType.WALL and (nx, ny) not in in_frontier:
                    in_frontier.add((nx, ny))
                    frontier.append((nx, ny))

        add_frontier_walls(*start)
        last_carved = None

        # Step 2: grow the tree until every reachable wall has been considered
        while frontier:
            # Pop a uniformly random wall (swap with the tail to keep removal O(1))
            i = rng.randrange(len(frontier))
            frontier[i], frontier[-1] = frontier[-1], frontier[i]
            wx, wy = frontier.pop()
            in_frontier.discard((wx, wy))

            for (ax, ay), (bx, by) in (((wx - 1, wy), (wx + 1, wy)), ((wx, wy - 1), (wx, wy + 1))):
                if not (self.in_bounds(ax, ay) and self.in_bounds(bx, by)):
                    continue
                a_wall = self.get_tile(ax, ay) is TileType.WALL
                b_wall = self.get_tile(bx, by) is TileType.WALL
                if a_wall == b_wall:
                    continue
                target = (ax, ay) if a_wall else (bx, by)
                self._write(wx, wy, TileType.EMPTY)
                self._write(*target, TileType.EMPTY)
                add_frontier_walls(*target)
                last_carved = target
                break

        self.set_source(*start)
        if last_carved is not None:
            self.set_destination(*last_carved)
        logger.debug("Generated %dx%d maze: source=%s destination=%s carved=%d",
                     self._width, self._height, self._source, self._destination,
                     self._width * self._height - len(self.tiles_of(TileType.WALL)))

    def __str__(self):
        rows = []
        for y in range(self._height - 1, -1, -1):
            row = self._tiles[y * self._width:(y + 1) * self._width]
            rows.append("".join(TILE_GLYPHS[tile] for tile in row))
        return "\n".join(rows)

    def __repr__(self):
        return f"Grid(width={self._width}, height={self._height})"
