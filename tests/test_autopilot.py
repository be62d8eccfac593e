"""Tests for maze_pursuit.autopilot."""

from __future__ import annotations

from maze_pursuit.autopilot import autopilot_direction
from maze_pursuit.config import PursuerConfig, default_config
from maze_pursuit.model.agent import PursuerState, TargetingStrategy, create_pursuer
from maze_pursuit.model.engine import create_world
from maze_pursuit.model.grid import Direction, GridMap, Position
from maze_pursuit.model.pathfinding import Algorithm

LAYOUT = [
    "#######",
    "#S...o#",
    "#.###.#",
    "#..H..#",
    "#######",
]


def _world(grid: GridMap, pursuer_at=None, state: PursuerState = PursuerState.SCATTER):
    pursuers = []
    if pursuer_at is not None:
        config = PursuerConfig(TargetingStrategy.DIRECT, 8, 1.0, Algorithm.ASTAR)
        pursuer = create_pursuer("blinky", Position(*pursuer_at), Position(*pursuer_at), config)
        pursuer.state = state
        pursuers.append(pursuer)
    return create_world(default_config(), grid, pursuers=pursuers)


class TestAutopilot:
    def test_heads_for_nearest_pellet(self) -> None:
        # Down and right are both one step away; breadth-first order tries down first
        assert autopilot_direction(_world(GridMap.from_layout(LAYOUT))) == Direction.DOWN

    def test_avoids_dangerous_pursuer(self) -> None:
        world = _world(GridMap.from_layout(LAYOUT), pursuer_at=(1, 2))
        assert autopilot_direction(world) == Direction.RIGHT

    def test_ignores_frightened_pursuer(self) -> None:
        world = _world(GridMap.from_layout(LAYOUT), pursuer_at=(1, 2),
                       state=PursuerState.FRIGHTENED)
        assert autopilot_direction(world) == Direction.DOWN

    def test_no_pellets_left(self) -> None:
        assert autopilot_direction(_world(GridMap.open(5, 5))) == Direction.NONE

    def test_follows_tunnel(self) -> None:
        grid = GridMap.open(7, 1, player_start=(0, 0), pellets=[(5, 0)])
        assert autopilot_direction(_world(grid)) == Direction.LEFT
