"""Player and pursuer agents."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple, TYPE_CHECKING

from .grid import Direction, Position
from .pathfinding import AlgorithmMetrics

if TYPE_CHECKING:
    from ..config import PursuerConfig


class PursuerState(Enum):
    """FSM states of a pursuer."""
    CHASE = "CHASE"
    SCATTER = "SCATTER"
    FRIGHTENED = "FRIGHTENED"
    DEAD = "DEAD"


class TargetingStrategy(Enum):
    """How a pursuer picks its target while in CHASE."""
    DIRECT = "direct"
    AMBUSH = "ambush"
    PROXIMITY = "proximity"
    RANDOM = "random"


# Start offsets from the pursuer home tile, per reference pursuer
START_OFFSETS: Dict[str, Tuple[int, int]] = {
    'blinky': (0, -2),
    'pinky': (-1, 0),
    'inky': (1, 0),
    'clyde': (0, 0),
}

# Index into GridMap.scatter_corners(): top-right, top-left, bottom-right, bottom-left
CORNER_INDEX: Dict[str, int] = {
    'blinky': 0,
    'pinky': 1,
    'inky': 2,
    'clyde': 3,
}


@dataclass
class PlayerAgent:
    """The player-controlled agent."""
    position: Position
    lives: int
    direction: Direction = Direction.NONE
    queued_direction: Direction = Direction.NONE
    score: int = 0
    pellets_eaten: int = 0
    empowered: bool = False
    empowered_ticks: int = 0  # tick clock
    combo: int = 0  # pursuers eaten during the current empowerment

    def copy(self) -> "PlayerAgent":
        return PlayerAgent(**self.__dict__)


@dataclass
class PursuerAgent:
    """
    An FSM-controlled pursuer.

    `state_started_at` is read from the simulation clock (elapsed seconds
    since the player first moved, pauses excluded), not from the tick
    counter.
    """
    name: str
    position: Position
    home: Position
    scatter_corner: Position
    config: "PursuerConfig"
    direction: Direction = Direction.UP
    state: PursuerState = PursuerState.SCATTER
    target: Optional[Position] = None
    path: Tuple[Position, ...] = ()
    state_started_at: float = 0.0
    last_metrics: Optional[AlgorithmMetrics] = None
    transition_counts: Dict[PursuerState, int] = field(
        default_factory=lambda: {s: 0 for s in PursuerState})

    def __post_init__(self):
        if self.target is None:
            self.target = self.scatter_corner

    def enter(self, state: PursuerState, now: float) -> None:
        """Switch state and restart the time-in-state reference."""
        self.state = state
        self.state_started_at = now
        self.transition_counts[state] += 1

    def time_in_state(self, now: float) -> float:
        return now - self.state_started_at

    def copy(self) -> "PursuerAgent":
        clone = PursuerAgent(**self.__dict__)
        clone.transition_counts = dict(self.transition_counts)
        return clone

    def __repr__(self) -> str:
        return (f"PursuerAgent(name={self.name}, pos={tuple(self.position)}, "
                f"state={self.state.value})")


def create_pursuer(name: str, home: Position, scatter_corner: Position,
                   config: "PursuerConfig",
                   start: Optional[Position] = None) -> PursuerAgent:
    """New pursuer in SCATTER at `start`, or at its home tile when omitted."""
    return PursuerAgent(
        name=name,
        position=Position(*(start if start is not None else home)),
        home=Position(*home),
        scatter_corner=Position(*scatter_corner),
        config=config,
    )
