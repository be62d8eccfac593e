"""Simulation engine for the pursuit game."""

import copy
import logging
import math
import time
from collections import deque
from dataclasses import dataclass, field, replace
from typing import Callable, Deque, Dict, List, Optional, Sequence, Tuple, TYPE_CHECKING, Any

import numpy as np

from .agent import (CORNER_INDEX, START_OFFSETS, PlayerAgent, PursuerAgent,
                    PursuerState, create_pursuer)
from .fsm import Transition, kill, move_along_path, update_pursuer
from .grid import Consumable, Direction, GridMap, Position
from .levels import load_level
from .pathfinding import AlgorithmMetrics
from .replay import ReplayCursor
from .state import (EventType, Frame, FrameHistory, GameEvent, GameStatus,
                    PursuerSnapshot, SimulationClock)

if TYPE_CHECKING:
    from ..config import GameConfig

logger = logging.getLogger(__name__)


BASE_TICK_RATE = 10.0  # ticks per second at game_speed = agent_speed = 1


@dataclass
class Session:
    """Aggregate counters recomputed at the end of every tick."""
    score: int
    lives: int
    level: int
    pellets_remaining: int
    total_pellets: int
    start_time: Optional[float] = None  # host wall clock
    elapsed_time: float = 0.0


@dataclass
class World:
    """Complete simulation state. `advance` never mutates its input world."""
    status: GameStatus
    grid: GridMap
    player: PlayerAgent
    pursuers: List[PursuerAgent]
    session: Session
    history: FrameHistory
    rng: np.random.Generator
    clock: SimulationClock = field(default_factory=SimulationClock)
    tick: int = 0
    last_transitions: List[Tuple[str, Transition]] = field(default_factory=list)
    path_visualization: Tuple[Position, ...] = ()
    metrics_log: Deque[AlgorithmMetrics] = field(default_factory=lambda: deque(maxlen=1000))

    def copy(self) -> "World":
        return World(
            status=self.status,
            grid=self.grid.copy(),
            player=self.player.copy(),
            pursuers=[p.copy() for p in self.pursuers],
            session=replace(self.session),
            history=self.history.copy(),
            rng=copy.deepcopy(self.rng),
            clock=self.clock.copy(),
            tick=self.tick,
            last_transitions=list(self.last_transitions),
            path_visualization=self.path_visualization,
            metrics_log=deque(self.metrics_log, maxlen=self.metrics_log.maxlen),
        )

    def pursuer(self, name: str) -> Optional[PursuerAgent]:
        return next((p for p in self.pursuers if p.name == name), None)


def tick_interval(config: "GameConfig") -> float:
    """Seconds between host ticks for the configured game and agent speed."""
    return 1.0 / (BASE_TICK_RATE * config.game_speed * config.ai.agent_speed)


def _build_grid(config: "GameConfig") -> GridMap:
    if config.layout:
        return GridMap.from_layout(config.layout)
    return load_level(config.level)


def create_pursuers(grid: GridMap, config: "GameConfig") -> List[PursuerAgent]:
    """One pursuer per configured name, placed around the grid's home tile."""
    corners = grid.scatter_corners()
    home = grid.pursuer_home
    pursuers = []
    for i, (name, pursuer_config) in enumerate(config.pursuers.items()):
        dx, dy = START_OFFSETS.get(name, (0, 0))
        start = Position(home.x + dx, home.y + dy)
        if not grid.in_bounds(start) or not grid.is_walkable(start):
            start = home
        corner = corners[CORNER_INDEX.get(name, i % len(corners))]
        pursuers.append(create_pursuer(name, home, corner, pursuer_config, start))
    return pursuers


def create_world(config: "GameConfig", grid: Optional[GridMap] = None,
                 pursuers: Optional[Sequence[PursuerAgent]] = None) -> World:
    """
    Build a READY world. `grid` defaults to the configured layout or level;
    `pursuers` defaults to one pursuer per configured pursuer entry.
    """
    grid = grid if grid is not None else _build_grid(config)
    if pursuers is None:
        pursuers = create_pursuers(grid, config)

    player = PlayerAgent(position=grid.player_start, lives=config.lives)
    session = Session(
        score=0,
        lives=config.lives,
        level=config.level,
        pellets_remaining=grid.total_pellets,
        total_pellets=grid.total_pellets,
    )
    return World(
        status=GameStatus.READY,
        grid=grid,
        player=player,
        pursuers=list(pursuers),
        session=session,
        history=FrameHistory(config.frame_capacity),
        rng=np.random.default_rng(config.seed),
        metrics_log=deque(maxlen=config.metrics_capacity),
    )


def start_game(world: World, now: float) -> World:
    """READY -> PLAYING. The simulation clock still waits for the first move."""
    if world.status != GameStatus.READY:
        return world
    world = world.copy()
    world.status = GameStatus.PLAYING
    world.session.start_time = now
    world.clock = SimulationClock()
    return world


def toggle_pause(world: World, now: float) -> World:
    """PLAYING <-> PAUSED; paused time is excluded from the simulation clock."""
    if world.status not in (GameStatus.PLAYING, GameStatus.PAUSED):
        return world
    world = world.copy()
    if world.status == GameStatus.PLAYING:
        world.status = GameStatus.PAUSED
        world.clock.pause(now)
    else:
        world.status = GameStatus.PLAYING
        world.clock.resume(now)
    return world


def set_direction(world: World, direction: Direction) -> World:
    """Queue the player's next movement direction."""
    player = world.player.copy()
    player.queued_direction = direction
    return replace(world, player=player)


def reset_game(config: "GameConfig") -> World:
    return create_world(config)


def _move_player(player: PlayerAgent, grid: GridMap) -> bool:
    """Try the queued direction, then the current one. Returns True if moved."""
    for direction in (player.queued_direction, player.direction):
        if direction == Direction.NONE:
            continue
        target = grid.step(player.position, direction)
        if grid.is_walkable(target):
            player.position = target
            player.direction = direction
            return True
    return False


def _respawn(player: PlayerAgent, grid: GridMap) -> None:
    player.position = grid.player_start
    player.direction = Direction.NONE
    player.queued_direction = Direction.NONE
    player.combo = 0


def _fsm_event(tick: int, name: str, transition: Transition) -> GameEvent:
    return GameEvent(
        tick=tick,
        event_type=EventType.FSM_CHANGE,
        description=f"{name} changed state",
        pursuer=name,
        details=f"{transition.source.value} -> {transition.target.value}",
    )


def advance(world: World, config: "GameConfig", now: float) -> World:
    """
    Advance the world by one tick and return the new world.

    `now` is the host's wall-clock reading in seconds. Worlds that are not
    PLAYING are returned unchanged.

    1. Move the player (queued direction, else current direction)
    2. Latch the simulation clock on the first successful move
    3. Resolve pellet / power pellet pickup
    4. Count down empowerment (tick clock)
    5. FSM update and one-tile move for each pursuer, in order
    6. Resolve player/pursuer collisions by Euclidean distance
    7. Recompute session counters and the path overlay
    8. Append the frame snapshot
    9. Evaluate win / loss
    """
    if world.status != GameStatus.PLAYING:
        return world

    world = world.copy()
    tick = world.tick + 1
    grid = world.grid
    player = world.player
    scoring = config.scoring
    events: List[GameEvent] = []
    transitions: List[Tuple[str, Transition]] = []

    # Phase 1 & 2: Player movement and clock latch
    moved = _move_player(player, grid)
    if moved and not world.clock.latched:
        world.clock.latch(now)
        logger.debug("Simulation clock latched at tick %d", tick)
    sim_now = world.clock.elapsed(now)

    # Phase 3: Consumables
    power_pellet_eaten = False
    consumed = grid.consume_at(player.position)
    if consumed == Consumable.PELLET:
        player.score += scoring.pellet
        player.pellets_eaten += 1
        events.append(GameEvent(tick, EventType.PELLET_EATEN, "Pellet eaten"))
    elif consumed == Consumable.POWER_PELLET:
        player.score += scoring.power_pellet
        player.pellets_eaten += 1
        player.empowered = True
        player.empowered_ticks = config.empowerment_ticks
        player.combo = 0
        power_pellet_eaten = True
        events.append(GameEvent(tick, EventType.POWER_PELLET, "Power pellet eaten"))
    if consumed != Consumable.NONE and player.pellets_eaten == grid.total_pellets:
        events.append(GameEvent(tick, EventType.LEVEL_COMPLETE, "All pellets eaten"))

    # Phase 4: Empowerment countdown
    if player.empowered:
        player.empowered_ticks -= 1
        if player.empowered_ticks <= 0:
            player.empowered = False
            player.empowered_ticks = 0
            player.combo = 0

    # Phase 5: Pursuer FSM and movement
    for pursuer in world.pursuers:
        transition = update_pursuer(pursuer, grid, player, world.pursuers, config,
                                    power_pellet_eaten, sim_now, world.rng)
        move_along_path(pursuer)
        if pursuer.last_metrics is not None:
            world.metrics_log.append(pursuer.last_metrics)
        if transition is not None:
            transitions.append((pursuer.name, transition))
            events.append(_fsm_event(tick, pursuer.name, transition))

    # Phase 6: Collisions
    for pursuer in world.pursuers:
        distance = math.hypot(player.position.x - pursuer.position.x,
                              player.position.y - pursuer.position.y)
        if distance >= config.collision_radius:
            continue
        if pursuer.state == PursuerState.FRIGHTENED:
            transition = kill(pursuer, sim_now)
            points = scoring.pursuer_base * 2 ** player.combo
            player.score += points
            player.combo += 1
            transitions.append((pursuer.name, transition))
            events.append(_fsm_event(tick, pursuer.name, transition))
            events.append(GameEvent(tick, EventType.PURSUER_EATEN,
                                    f"{pursuer.name} eaten for {points} points",
                                    pursuer=pursuer.name))
            logger.debug("%s eaten for %d points (combo %d)", pursuer.name, points, player.combo)
        elif pursuer.state != PursuerState.DEAD:
            player.lives -= 1
            _respawn(player, grid)
            events.append(GameEvent(tick, EventType.PLAYER_DEATH,
                                    f"Caught by {pursuer.name}", pursuer=pursuer.name))
            logger.debug("Player caught by %s, %d lives left", pursuer.name, player.lives)

    # Phase 7: Session counters
    session = world.session
    session.score = player.score
    session.lives = player.lives
    session.pellets_remaining = grid.total_pellets - player.pellets_eaten
    if session.start_time is not None:
        session.elapsed_time = now - session.start_time
    world.path_visualization = world.pursuers[0].path if world.pursuers else ()
    world.last_transitions = transitions

    # Phase 8: Frame snapshot
    world.history.append(Frame(
        tick=tick,
        timestamp=sim_now,
        player_position=player.position,
        player_direction=player.direction,
        pursuers=tuple(
            PursuerSnapshot(p.name, p.position, p.state, p.target, p.path)
            for p in world.pursuers
        ),
        score=player.score,
        lives=player.lives,
        pellets_remaining=session.pellets_remaining,
        events=tuple(events),
    ))
    world.tick = tick

    # Phase 9: Termination
    if player.lives <= 0:
        world.status = GameStatus.GAME_OVER
    elif grid.total_pellets > 0 and player.pellets_eaten >= grid.total_pellets:
        world.status = GameStatus.VICTORY
    if world.status != GameStatus.PLAYING:
        logger.info("Episode ended at tick %d: %s (score %d)",
                    tick, world.status.value, player.score)

    return world


class SimulationEngine:
    """
    Stateful wrapper that owns a world, a config and a clock function.

    Callers must serialize calls; the engine has no internal concurrency.
    """

    def __init__(self, config: "GameConfig",
                 clock: Callable[[], float] = time.monotonic,
                 grid: Optional[GridMap] = None):
        self.config = config
        self.clock = clock
        self.world = create_world(config, grid)

    def start(self) -> None:
        self.world = start_game(self.world, self.clock())

    def toggle_pause(self) -> None:
        self.world = toggle_pause(self.world, self.clock())

    def set_direction(self, direction: Direction) -> None:
        self.world = set_direction(self.world, direction)

    def reset(self) -> None:
        self.world = reset_game(self.config)

    def step(self) -> Optional[Frame]:
        """Execute one tick. Returns the new frame, or None if nothing ran."""
        previous_tick = self.world.tick
        self.world = advance(self.world, self.config, self.clock())
        if self.world.tick == previous_tick:
            return None
        return self.world.history.last

    def is_finished(self) -> bool:
        """Check if the episode has ended or hit the tick limit."""
        return (self.world.status in (GameStatus.GAME_OVER, GameStatus.VICTORY) or
                self.world.tick >= self.config.max_ticks)

    def replay(self, playback_speed: float = 1.0) -> ReplayCursor:
        return ReplayCursor(self.world.history.frames(), playback_speed)

    def get_summary(self) -> Dict[str, Any]:
        """Get summary statistics for the episode."""
        world = self.world
        return {
            'status': world.status.value,
            'ticks': world.tick,
            'score': world.session.score,
            'lives': world.session.lives,
            'level': world.session.level,
            'pellets_eaten': world.player.pellets_eaten,
            'pellets_total': world.session.total_pellets,
            'simulation_seconds': world.clock.elapsed(self.clock()),
            'transitions': {
                p.name: {s.value: n for s, n in p.transition_counts.items()}
                for p in world.pursuers
            },
        }
