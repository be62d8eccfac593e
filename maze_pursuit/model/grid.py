"""Maze grid management for the pursuit simulation."""

from enum import Enum
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np


class Position(NamedTuple):
    """Integer tile coordinate."""
    x: int
    y: int


class Direction(Enum):
    """Facing / movement direction. UP decreases y."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    NONE = "none"

    @property
    def vector(self) -> Tuple[int, int]:
        return _DIRECTION_VECTORS[self]


_DIRECTION_VECTORS: Dict[Direction, Tuple[int, int]] = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
    Direction.NONE: (0, 0),
}


class CellType(Enum):
    """Tile classification. Values are stored in the numpy type layer."""
    WALL = 0
    PATH = 1
    GHOST_HOUSE = 2


class Consumable(Enum):
    """What `GridMap.consume_at` removed from a tile."""
    NONE = "none"
    PELLET = "pellet"
    POWER_PELLET = "power_pellet"


# Layout characters understood by GridMap.from_layout
LAYOUT_WALL = '#'
LAYOUT_PELLET = '.'
LAYOUT_POWER_PELLET = 'o'
LAYOUT_PATH = ' '
LAYOUT_GHOST_HOUSE = '-'
LAYOUT_PLAYER_START = 'S'
LAYOUT_PURSUER_HOME = 'H'


class GridMap:
    """
    Maze layout with tile classification and consumable layers.

    Coordinate convention: (x, y) for API, [y, x] for array indexing.
    Horizontal movement wraps around the left/right edge (tunnels);
    vertical movement does not.
    """

    def __init__(self, width: int, height: int,
                 player_start: Position, pursuer_home: Position):
        self.width = width
        self.height = height
        self.player_start = Position(*player_start)
        self.pursuer_home = Position(*pursuer_home)

        self.cell_types = np.full((height, width), CellType.PATH.value, dtype=np.int8)
        self.pellets = np.zeros((height, width), dtype=bool)
        self.power_pellets = np.zeros((height, width), dtype=bool)

        # Fixed by seal(); never changes afterwards
        self.total_pellets = 0

    @classmethod
    def from_layout(cls, lines: Sequence[str]) -> "GridMap":
        """
        Build a grid from ASCII rows.

        '#' wall, '.' pellet, 'o' power pellet, ' ' open path,
        '-' ghost house, 'S' player start, 'H' pursuer home (ghost house).
        """
        if not lines:
            raise ValueError("Layout has no rows")
        width = len(lines[0])
        if any(len(line) != width for line in lines):
            raise ValueError("Layout rows must all have the same length")

        player_start: Optional[Position] = None
        pursuer_home: Optional[Position] = None
        for y, line in enumerate(lines):
            for x, ch in enumerate(line):
                if ch == LAYOUT_PLAYER_START:
                    player_start = Position(x, y)
                elif ch == LAYOUT_PURSUER_HOME:
                    pursuer_home = Position(x, y)
        if player_start is None or pursuer_home is None:
            raise ValueError("Layout needs one 'S' (player start) and one 'H' (pursuer home)")

        grid = cls(width, len(lines), player_start, pursuer_home)
        for y, line in enumerate(lines):
            for x, ch in enumerate(line):
                if ch == LAYOUT_WALL:
                    grid.cell_types[y, x] = CellType.WALL.value
                elif ch in (LAYOUT_GHOST_HOUSE, LAYOUT_PURSUER_HOME):
                    grid.cell_types[y, x] = CellType.GHOST_HOUSE.value
                elif ch == LAYOUT_PELLET:
                    grid.pellets[y, x] = True
                elif ch == LAYOUT_POWER_PELLET:
                    grid.power_pellets[y, x] = True
                elif ch not in (LAYOUT_PATH, LAYOUT_PLAYER_START):
                    raise ValueError(f"Unknown layout character {ch!r} at ({x}, {y})")
        grid.seal()
        return grid

    @classmethod
    def open(cls, width: int, height: int,
             player_start: Tuple[int, int] = (0, 0),
             pursuer_home: Optional[Tuple[int, int]] = None,
             pellets: Sequence[Tuple[int, int]] = (),
             power_pellets: Sequence[Tuple[int, int]] = ()) -> "GridMap":
        """Wall-less grid with explicitly placed consumables, at most one per tile."""
        overlap = {tuple(p) for p in pellets} & {tuple(p) for p in power_pellets}
        if overlap:
            raise ValueError(f"Tiles hold both a pellet and a power pellet: {sorted(overlap)}")
        if pursuer_home is None:
            pursuer_home = (width // 2, height // 2)
        grid = cls(width, height, Position(*player_start), Position(*pursuer_home))
        for x, y in pellets:
            grid.pellets[y, x] = True
        for x, y in power_pellets:
            grid.power_pellets[y, x] = True
        grid.seal()
        return grid

    def add_walls(self, coords: Sequence[Tuple[int, int]]) -> None:
        """Mark cells as walls, removing any consumable. Call before seal()."""
        for x, y in coords:
            if self.in_bounds(Position(x, y)):
                self.cell_types[y, x] = CellType.WALL.value
                self.pellets[y, x] = False
                self.power_pellets[y, x] = False

    def seal(self) -> None:
        """Fix the pellet total from the consumables currently placed."""
        # Every consumable counts once, matching one pellets_eaten increment per pickup
        self.total_pellets = int(np.count_nonzero(self.pellets) + np.count_nonzero(self.power_pellets))

    def in_bounds(self, pos: Position) -> bool:
        return 0 <= pos.x < self.width and 0 <= pos.y < self.height

    def wrap(self, pos: Tuple[int, int]) -> Position:
        """Resolve horizontal tunnel wrap; y is left untouched."""
        return Position(pos[0] % self.width, pos[1])

    def cell_type(self, pos: Tuple[int, int]) -> CellType:
        x, y = self.wrap(pos)
        if not 0 <= y < self.height:
            return CellType.WALL
        return CellType(int(self.cell_types[y, x]))

    def is_walkable(self, pos: Tuple[int, int]) -> bool:
        """Check the (wrapped) cell is inside the grid and not a wall."""
        x, y = self.wrap(pos)
        if not 0 <= y < self.height:
            return False
        return self.cell_types[y, x] != CellType.WALL.value

    def neighbors(self, pos: Tuple[int, int]) -> List[Position]:
        """Walkable 4-neighbours in up, down, left, right order."""
        x, y = pos
        result = []
        for dx, dy in ((0, -1), (0, 1), (-1, 0), (1, 0)):
            nxt = self.wrap((x + dx, y + dy))
            if self.is_walkable(nxt):
                result.append(nxt)
        return result

    def step(self, pos: Tuple[int, int], direction: Direction) -> Position:
        """Position one tile away in `direction`, wrapped horizontally."""
        dx, dy = direction.vector
        return self.wrap((pos[0] + dx, pos[1] + dy))

    def has_pellet(self, pos: Tuple[int, int]) -> bool:
        return bool(self.in_bounds(Position(*pos)) and self.pellets[pos[1], pos[0]])

    def has_power_pellet(self, pos: Tuple[int, int]) -> bool:
        return bool(self.in_bounds(Position(*pos)) and self.power_pellets[pos[1], pos[0]])

    def consume_at(self, pos: Tuple[int, int]) -> Consumable:
        """Clear the consumable at `pos` and report what was there."""
        x, y = pos
        if not self.in_bounds(Position(x, y)):
            return Consumable.NONE
        if self.pellets[y, x]:
            self.pellets[y, x] = False
            return Consumable.PELLET
        if self.power_pellets[y, x]:
            self.power_pellets[y, x] = False
            return Consumable.POWER_PELLET
        return Consumable.NONE

    def remaining_consumables(self) -> List[Position]:
        """Positions still carrying a pellet or power pellet, row-major."""
        ys, xs = np.nonzero(self.pellets | self.power_pellets)
        return [Position(int(x), int(y)) for x, y in zip(xs, ys)]

    def walkable_positions(self) -> List[Position]:
        ys, xs = np.nonzero(self.cell_types != CellType.WALL.value)
        return [Position(int(x), int(y)) for x, y in zip(xs, ys)]

    def nearest_walkable(self, pos: Tuple[int, int]) -> Position:
        """Walkable tile closest to `pos` (Manhattan); ties go to the first row-major."""
        ys, xs = np.nonzero(self.cell_types != CellType.WALL.value)
        if len(xs) == 0:
            return Position(*pos)
        dist = np.abs(xs - pos[0]) + np.abs(ys - pos[1])
        idx = int(np.argmin(dist))
        return Position(int(xs[idx]), int(ys[idx]))

    def scatter_corners(self) -> List[Position]:
        """Walkable tiles nearest to the top-right, top-left, bottom-right and bottom-left corners."""
        w, h = self.width - 1, self.height - 1
        return [self.nearest_walkable(corner)
                for corner in ((w, 0), (0, 0), (w, h), (0, h))]

    def clamp(self, pos: Tuple[int, int]) -> Position:
        """Clamp a coordinate to grid bounds."""
        return Position(min(max(pos[0], 0), self.width - 1),
                        min(max(pos[1], 0), self.height - 1))

    def copy(self) -> "GridMap":
        """Independent copy; consumable layers are not shared."""
        grid = GridMap(self.width, self.height, self.player_start, self.pursuer_home)
        grid.cell_types = self.cell_types.copy()
        grid.pellets = self.pellets.copy()
        grid.power_pellets = self.power_pellets.copy()
        grid.total_pellets = self.total_pellets
        return grid
