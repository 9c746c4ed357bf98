class PathfinderError(Exception):
    """Base exception for the grid pathfinder package."""


class OutOfBounds(PathfinderError, IndexError):
    """Raised when a tile outside the grid is read or written."""

    def __init__(self, x, y, width, height):
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        super().__init__(f"({x}, {y}) is not in the grid!")
