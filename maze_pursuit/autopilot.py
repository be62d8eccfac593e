"""Headless player policy used by the CLI in place of keyboard input."""

from collections import deque
from typing import Dict, Optional, Set

from .model.agent import PursuerState
from .model.engine import World
from .model.grid import Direction, GridMap, Position


def _direction_between(grid: GridMap, a: Position, b: Position) -> Direction:
    for direction in (Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT):
        if grid.step(a, direction) == b:
            return direction
    return Direction.NONE


def autopilot_direction(world: World) -> Direction:
    """
    First step of a breadth-first route to the nearest remaining pellet.

    Tiles held by dangerous pursuers (CHASE or SCATTER) are avoided.
    Returns Direction.NONE when no pellet is reachable.
    """
    grid = world.grid
    start = world.player.position
    blocked: Set[Position] = {
        p.position for p in world.pursuers
        if p.state in (PursuerState.CHASE, PursuerState.SCATTER)
    }

    parents: Dict[Position, Optional[Position]] = {start: None}
    queue = deque([start])
    while queue:
        current = queue.popleft()
        if current != start and (grid.has_pellet(current) or grid.has_power_pellet(current)):
            # Walk back to the tile right after the start
            while parents[current] != start:
                current = parents[current]
            return _direction_between(grid, start, current)
        for neighbor in grid.neighbors(current):
            if neighbor in parents or neighbor in blocked:
                continue
            parents[neighbor] = current
            queue.append(neighbor)
    return Direction.NONE
