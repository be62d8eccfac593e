"""Model package for the pursuit simulation."""

from .grid import CellType, Consumable, Direction, GridMap, Position
from .levels import LEVELS, load_level
from .pathfinding import (Algorithm, AlgorithmMetrics, ComparisonResult, PathResult,
                          astar, bfs, compare_algorithms, dijkstra, find_path,
                          summarize_metrics)
from .agent import PlayerAgent, PursuerAgent, PursuerState, TargetingStrategy, create_pursuer
from .state import (EventType, Frame, FrameHistory, GameEvent, GameStatus,
                    PursuerSnapshot, SimulationClock)
from .fsm import FSM_TRANSITIONS, Transition, kill, move_along_path, update_pursuer
from .replay import ReplayCursor
from .engine import (SimulationEngine, World, advance, create_world, reset_game,
                     set_direction, start_game, tick_interval, toggle_pause)

__all__ = [
    'CellType',
    'Consumable',
    'Direction',
    'GridMap',
    'Position',
    'LEVELS',
    'load_level',
    'Algorithm',
    'AlgorithmMetrics',
    'ComparisonResult',
    'PathResult',
    'astar',
    'bfs',
    'compare_algorithms',
    'dijkstra',
    'find_path',
    'summarize_metrics',
    'PlayerAgent',
    'PursuerAgent',
    'PursuerState',
    'TargetingStrategy',
    'create_pursuer',
    'EventType',
    'Frame',
    'FrameHistory',
    'GameEvent',
    'GameStatus',
    'PursuerSnapshot',
    'SimulationClock',
    'FSM_TRANSITIONS',
    'Transition',
    'kill',
    'move_along_path',
    'update_pursuer',
    'ReplayCursor',
    'SimulationEngine',
    'World',
    'advance',
    'create_world',
    'reset_game',
    'set_direction',
    'start_game',
    'tick_interval',
    'toggle_pause',
]
