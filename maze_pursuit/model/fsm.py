"""Per-pursuer finite-state-machine controller.

Transitions:

    SCATTER    -> CHASE       time in state >= scatter_time
    CHASE      -> FRIGHTENED  power pellet eaten
    SCATTER    -> FRIGHTENED  power pellet eaten
    FRIGHTENED -> CHASE       time in state >= frightened_duration
    FRIGHTENED -> DEAD        devoured by the empowered player
    DEAD       -> CHASE       position equals home tile

A power pellet wins over a timeout in the same tick. Time in state is
measured on the simulation clock.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence, TYPE_CHECKING

import numpy as np

from .agent import PlayerAgent, PursuerAgent, PursuerState, TargetingStrategy
from .grid import Direction, GridMap, Position
from .pathfinding import find_path

if TYPE_CHECKING:
    from ..config import GameConfig

logger = logging.getLogger(__name__)


PINCER_LOOKAHEAD = 2
FLEE_THRESHOLD_BASE = 8.0


@dataclass(frozen=True)
class Transition:
    source: PursuerState
    target: PursuerState
    condition: str
    event: str


FSM_TRANSITIONS = (
    Transition(PursuerState.SCATTER, PursuerState.CHASE, "Scatter time elapsed", "TIMEOUT"),
    Transition(PursuerState.CHASE, PursuerState.FRIGHTENED, "Player ate a power pellet", "POWER_PELLET"),
    Transition(PursuerState.SCATTER, PursuerState.FRIGHTENED, "Player ate a power pellet", "POWER_PELLET"),
    Transition(PursuerState.FRIGHTENED, PursuerState.CHASE, "Frightened time elapsed", "TIMEOUT"),
    Transition(PursuerState.FRIGHTENED, PursuerState.DEAD, "Player ate the pursuer", "EATEN"),
    Transition(PursuerState.DEAD, PursuerState.CHASE, "Reached home tile", "REVIVE"),
)

_TRANSITIONS_BY_EDGE = {(t.source, t.target): t for t in FSM_TRANSITIONS}


def find_transition(source: PursuerState, target: PursuerState) -> Optional[Transition]:
    return _TRANSITIONS_BY_EDGE.get((source, target))


def _transition(pursuer: PursuerAgent, target: PursuerState, now: float) -> Transition:
    transition = _TRANSITIONS_BY_EDGE[(pursuer.state, target)]
    pursuer.enter(target, now)
    logger.debug("%s: %s -> %s (%s)", pursuer.name, transition.source.value,
                 transition.target.value, transition.event)
    return transition


def _next_state(pursuer: PursuerAgent, config: "GameConfig",
                power_pellet_eaten: bool, now: float) -> Optional[Transition]:
    state = pursuer.state

    if power_pellet_eaten and state != PursuerState.DEAD:
        if state == PursuerState.FRIGHTENED:
            # Already frightened: restart the timer without a transition
            pursuer.state_started_at = now
            return None
        return _transition(pursuer, PursuerState.FRIGHTENED, now)

    elapsed = pursuer.time_in_state(now)
    if state == PursuerState.SCATTER and elapsed >= config.ai.scatter_time:
        return _transition(pursuer, PursuerState.CHASE, now)
    if state == PursuerState.FRIGHTENED and elapsed >= config.ai.frightened_duration:
        return _transition(pursuer, PursuerState.CHASE, now)
    if state == PursuerState.DEAD and pursuer.position == pursuer.home:
        return _transition(pursuer, PursuerState.CHASE, now)
    return None


# ----- CHASE targeting strategies -----

def _direct_target(pursuer: PursuerAgent, player: PlayerAgent,
                   pursuers: Sequence[PursuerAgent]) -> Position:
    return player.position


def _ambush_target(pursuer: PursuerAgent, player: PlayerAgent,
                   pursuers: Sequence[PursuerAgent]) -> Position:
    dx, dy = player.direction.vector
    lookahead = pursuer.config.lookahead
    return Position(player.position.x + dx * lookahead, player.position.y + dy * lookahead)


def _proximity_target(pursuer: PursuerAgent, player: PlayerAgent,
                      pursuers: Sequence[PursuerAgent]) -> Position:
    lead = next((p for p in pursuers if p.name == pursuer.config.lead), None)
    if lead is None:
        return player.position
    dx, dy = player.direction.vector
    pivot_x = player.position.x + dx * PINCER_LOOKAHEAD
    pivot_y = player.position.y + dy * PINCER_LOOKAHEAD
    return Position(2 * pivot_x - lead.position.x, 2 * pivot_y - lead.position.y)


def _random_target(pursuer: PursuerAgent, player: PlayerAgent,
                   pursuers: Sequence[PursuerAgent]) -> Position:
    distance = math.hypot(pursuer.position.x - player.position.x,
                          pursuer.position.y - player.position.y)
    # More aggressive -> smaller threshold -> chases from closer in
    threshold = FLEE_THRESHOLD_BASE - pursuer.config.aggressiveness / 2
    return player.position if distance > threshold else pursuer.scatter_corner


CHASE_TARGETS: Dict[TargetingStrategy,
                    Callable[[PursuerAgent, PlayerAgent, Sequence[PursuerAgent]], Position]] = {
    TargetingStrategy.DIRECT: _direct_target,
    TargetingStrategy.AMBUSH: _ambush_target,
    TargetingStrategy.PROXIMITY: _proximity_target,
    TargetingStrategy.RANDOM: _random_target,
}


def _scatter_target(pursuer: PursuerAgent, grid: GridMap, config: "GameConfig",
                    rng: Optional[np.random.Generator], entered: bool) -> Position:
    if config.scatter_targeting != 'random' or rng is None:
        return pursuer.scatter_corner
    # Seeded random tile, kept until reached or unreachable
    stale = (entered or pursuer.target is None or pursuer.position == pursuer.target
             or len(pursuer.path) <= 1)
    if not stale:
        return pursuer.target
    candidates = grid.walkable_positions()
    return candidates[int(rng.integers(len(candidates)))]


def compute_target(pursuer: PursuerAgent, grid: GridMap, player: PlayerAgent,
                   pursuers: Sequence[PursuerAgent], config: "GameConfig",
                   rng: Optional[np.random.Generator] = None,
                   entered: bool = False) -> Position:
    """Target tile for the pursuer's current state."""
    state = pursuer.state
    if state == PursuerState.CHASE:
        return CHASE_TARGETS[pursuer.config.targeting_strategy](pursuer, player, pursuers)
    if state == PursuerState.SCATTER:
        return _scatter_target(pursuer, grid, config, rng, entered)
    if state == PursuerState.FRIGHTENED:
        # Flee along the player -> pursuer vector
        away_x = pursuer.position.x + 2 * (pursuer.position.x - player.position.x)
        away_y = pursuer.position.y + 2 * (pursuer.position.y - player.position.y)
        return grid.clamp((away_x, away_y))
    return pursuer.home


def update_pursuer(pursuer: PursuerAgent, grid: GridMap, player: PlayerAgent,
                   pursuers: Sequence[PursuerAgent], config: "GameConfig",
                   power_pellet_eaten: bool, now: float,
                   rng: Optional[np.random.Generator] = None) -> Optional[Transition]:
    """
    Run one FSM tick for `pursuer`: apply at most one transition, recompute
    the target and replace the stored path. `now` is the simulation clock.

    An unreachable target leaves an empty path, so the pursuer holds its
    position.
    """
    transition = _next_state(pursuer, config, power_pellet_eaten, now)

    pursuer.target = compute_target(pursuer, grid, player, pursuers, config, rng,
                                    entered=transition is not None)

    algorithm = pursuer.config.algorithm or config.default_algorithm
    result = find_path(algorithm, grid, pursuer.position, pursuer.target)
    pursuer.path = result.path
    pursuer.last_metrics = result.metrics
    return transition


def move_along_path(pursuer: PursuerAgent) -> bool:
    """Step one tile along the stored path. Returns False when stationary."""
    if len(pursuer.path) <= 1:
        return False
    nxt = pursuer.path[1]
    dx = nxt.x - pursuer.position.x
    dy = nxt.y - pursuer.position.y
    # A jump across the grid is a tunnel wrap in the opposite direction
    if abs(dx) > 1:
        dx = -1 if dx > 0 else 1

    if dx > 0:
        pursuer.direction = Direction.RIGHT
    elif dx < 0:
        pursuer.direction = Direction.LEFT
    elif dy > 0:
        pursuer.direction = Direction.DOWN
    elif dy < 0:
        pursuer.direction = Direction.UP

    pursuer.position = nxt
    pursuer.path = pursuer.path[1:]
    return True


def kill(pursuer: PursuerAgent, now: float) -> Transition:
    """FRIGHTENED -> DEAD when the empowered player devours the pursuer."""
    return _transition(pursuer, PursuerState.DEAD, now)
