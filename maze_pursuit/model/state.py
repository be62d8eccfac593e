"""Snapshot dataclasses, frame history and clocks for the pursuit simulation."""

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Dict, Iterator, List, Optional, Tuple

from .grid import Direction, Position
from .agent import PursuerState


DEFAULT_FRAME_CAPACITY = 1000


class GameStatus(Enum):
    READY = "ready"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "game_over"
    VICTORY = "victory"


class EventType(Enum):
    FSM_CHANGE = "fsm_change"
    PELLET_EATEN = "pellet_eaten"
    POWER_PELLET = "power_pellet"
    PURSUER_EATEN = "pursuer_eaten"
    PLAYER_DEATH = "player_death"
    LEVEL_COMPLETE = "level_complete"


@dataclass(frozen=True)
class GameEvent:
    """Something notable that happened during a tick."""
    tick: int
    event_type: EventType
    description: str
    pursuer: Optional[str] = None
    details: Optional[str] = None


@dataclass(frozen=True)
class PursuerSnapshot:
    """Immutable snapshot of a pursuer at the end of a tick."""
    name: str
    position: Position
    state: PursuerState
    target: Position
    path: Tuple[Position, ...]


@dataclass(frozen=True)
class Frame:
    """Post-tick world snapshot used for step-by-step replay."""
    tick: int
    timestamp: float  # simulation clock, seconds
    player_position: Position
    player_direction: Direction
    pursuers: Tuple[PursuerSnapshot, ...]
    score: int
    lives: int
    pellets_remaining: int
    events: Tuple[GameEvent, ...]

    def to_csv_rows(self) -> List[Dict]:
        """One row per pursuer, in CSV-compatible format."""
        events = ";".join(e.event_type.value for e in self.events)
        return [
            {
                "tick": self.tick,
                "time": round(self.timestamp, 3),
                "player_x": self.player_position.x,
                "player_y": self.player_position.y,
                "player_direction": self.player_direction.value,
                "score": self.score,
                "lives": self.lives,
                "pellets_remaining": self.pellets_remaining,
                "pursuer": p.name,
                "pursuer_x": p.position.x,
                "pursuer_y": p.position.y,
                "pursuer_state": p.state.value,
                "target_x": p.target.x,
                "target_y": p.target.y,
                "path_length": len(p.path),
                "events": events,
            }
            for p in self.pursuers
        ]


class FrameHistory:
    """Ordered, capped frame log; the oldest frame is evicted past capacity."""

    def __init__(self, capacity: int = DEFAULT_FRAME_CAPACITY,
                 frames: Tuple[Frame, ...] = ()):
        if capacity < 1:
            raise ValueError("Frame capacity must be at least 1")
        self.capacity = capacity
        self._frames: Deque[Frame] = deque(frames, maxlen=capacity)

    def append(self, frame: Frame) -> None:
        self._frames.append(frame)

    def frames(self) -> Tuple[Frame, ...]:
        return tuple(self._frames)

    @property
    def last(self) -> Optional[Frame]:
        return self._frames[-1] if self._frames else None

    def copy(self) -> "FrameHistory":
        # Frames are immutable, so sharing them between copies is safe
        return FrameHistory(self.capacity, tuple(self._frames))

    def __len__(self) -> int:
        return len(self._frames)

    def __getitem__(self, index: int) -> Frame:
        return self._frames[index]

    def __iter__(self) -> Iterator[Frame]:
        return iter(self._frames)


@dataclass
class SimulationClock:
    """
    Elapsed seconds since the player's first move, pauses excluded.

    Reads 0 until latched. FSM timeouts use this clock; the empowerment
    countdown uses the tick counter instead.
    """
    origin: Optional[float] = None
    paused_total: float = 0.0
    paused_at: Optional[float] = None

    @property
    def latched(self) -> bool:
        return self.origin is not None

    def latch(self, now: float) -> None:
        if self.origin is None:
            self.origin = now

    def pause(self, now: float) -> None:
        if self.paused_at is None:
            self.paused_at = now

    def resume(self, now: float) -> None:
        if self.paused_at is not None:
            # Pauses before the first move never count against the clock
            if self.origin is not None:
                self.paused_total += now - max(self.paused_at, self.origin)
            self.paused_at = None

    def elapsed(self, now: float) -> float:
        if self.origin is None:
            return 0.0
        reference = self.paused_at if self.paused_at is not None else now
        return max(0.0, reference - self.origin - self.paused_total)

    def copy(self) -> "SimulationClock":
        return SimulationClock(self.origin, self.paused_total, self.paused_at)
