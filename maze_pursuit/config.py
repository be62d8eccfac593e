"""Configuration dataclasses and YAML loader for the pursuit simulation."""

from dataclasses import dataclass, field, fields, replace
from typing import List, Dict, Any, Optional
from pathlib import Path
import yaml

from .model.agent import TargetingStrategy
from .model.pathfinding import Algorithm


PURSUER_NAMES = ('blinky', 'pinky', 'inky', 'clyde')
DIFFICULTY_PRESETS = ('easy', 'medium', 'hard', 'custom')
SCATTER_TARGETING = ('corner', 'random')


@dataclass
class PursuerConfig:
    targeting_strategy: TargetingStrategy
    aggressiveness: int          # 1-10
    relative_speed: float        # 0.5-1.5, carried for reporting
    algorithm: Optional[Algorithm] = None  # None -> GameConfig.default_algorithm
    personality: List[str] = field(default_factory=list)
    lead: str = 'blinky'         # proximity strategy pivots on this pursuer
    lookahead: int = 4           # ambush strategy offset in tiles


@dataclass
class AITimingConfig:
    agent_speed: float = 1.0         # 0.5-2.0, scales the host tick rate
    scatter_time: float = 5.0        # seconds in SCATTER before CHASE
    chase_time: float = 20.0         # seconds; CHASE has no timeout, carried for reporting
    frightened_duration: float = 6.0  # seconds in FRIGHTENED before CHASE


@dataclass
class ScoringConfig:
    pellet: int = 10
    power_pellet: int = 50
    pursuer_base: int = 200  # doubles per pursuer eaten in one empowerment


@dataclass
class GameConfig:
    ai: AITimingConfig
    pursuers: Dict[str, PursuerConfig]
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    difficulty_preset: str = 'medium'
    default_algorithm: Algorithm = Algorithm.ASTAR
    game_speed: float = 1.0
    lives: int = 3
    empowerment_ticks: int = 360     # tick clock
    collision_radius: float = 0.6    # tiles, Euclidean
    frame_capacity: int = 1000
    metrics_capacity: int = 1000
    scatter_targeting: str = 'corner'
    level: int = 1
    layout: Optional[List[str]] = None  # overrides `level` when set

    # Run/export flags (can be overridden by CLI)
    max_ticks: int = 2000
    csv_enabled: bool = True
    quiet: bool = False
    seed: Optional[int] = None
    out_dir: Path = field(default_factory=lambda: Path("./output"))


def default_pursuer_configs() -> Dict[str, PursuerConfig]:
    """Fresh reference pursuer configs; callers may mutate the result."""
    return {
        'blinky': PursuerConfig(TargetingStrategy.DIRECT, 8, 1.0, Algorithm.ASTAR, ['brave']),
        'pinky': PursuerConfig(TargetingStrategy.AMBUSH, 6, 0.95, Algorithm.ASTAR, ['cautious']),
        'inky': PursuerConfig(TargetingStrategy.PROXIMITY, 5, 0.9, Algorithm.BFS, ['unpredictable']),
        'clyde': PursuerConfig(TargetingStrategy.RANDOM, 4, 0.85, Algorithm.DIJKSTRA, ['evasive']),
    }


def default_config() -> GameConfig:
    """Complete configuration with reference defaults."""
    return GameConfig(ai=AITimingConfig(), pursuers=default_pursuer_configs())


_PRESET_TIMINGS: Dict[str, AITimingConfig] = {
    'easy': AITimingConfig(agent_speed=0.7, scatter_time=10.0, chase_time=15.0,
                           frightened_duration=8.0),
    'medium': AITimingConfig(),
    'hard': AITimingConfig(agent_speed=1.3, scatter_time=5.0, chase_time=25.0,
                           frightened_duration=4.0),
}


def apply_difficulty_preset(config: GameConfig, preset: str) -> GameConfig:
    """Return a copy of `config` with the preset's AI timing; 'custom' keeps it."""
    if preset not in DIFFICULTY_PRESETS:
        raise ValueError(f"Unknown difficulty preset: {preset}")
    if preset == 'custom':
        return replace(config, difficulty_preset=preset)
    return replace(config, difficulty_preset=preset, ai=replace(_PRESET_TIMINGS[preset]))


def _parse_algorithm(value: Any) -> Optional[Algorithm]:
    if value is None or isinstance(value, Algorithm):
        return value
    try:
        return Algorithm(value)
    except ValueError:
        raise ValueError(f"Unknown algorithm: {value}") from None


def _parse_strategy(value: Any) -> TargetingStrategy:
    if isinstance(value, TargetingStrategy):
        return value
    try:
        return TargetingStrategy(value)
    except ValueError:
        raise ValueError(f"Unknown targeting strategy: {value}") from None


def _merge_pursuer(base: PursuerConfig, raw: Dict[str, Any]) -> PursuerConfig:
    """Overlay raw YAML keys on a complete pursuer config."""
    merged = replace(base, personality=list(base.personality))
    if 'targeting_strategy' in raw:
        merged.targeting_strategy = _parse_strategy(raw['targeting_strategy'])
    if 'aggressiveness' in raw:
        merged.aggressiveness = int(raw['aggressiveness'])
    if 'relative_speed' in raw:
        merged.relative_speed = float(raw['relative_speed'])
    if 'algorithm' in raw:
        merged.algorithm = _parse_algorithm(raw['algorithm'])
    if 'personality' in raw:
        merged.personality = list(raw['personality'] or [])
    if 'lead' in raw:
        merged.lead = str(raw['lead'])
    if 'lookahead' in raw:
        merged.lookahead = int(raw['lookahead'])
    return merged


def _merge_dataclass(base, raw: Dict[str, Any]):
    """Overlay plain scalar keys on a dataclass, ignoring unknown keys."""
    known = {f.name for f in fields(base)}
    return replace(base, **{k: v for k, v in raw.items() if k in known})


def merge_config(raw: Optional[Dict[str, Any]]) -> GameConfig:
    """
    Repair a partial configuration dictionary by merging it against the
    complete defaults. Missing pursuer entries are filled in; pursuers
    not among the reference four are built from the first reference
    config and their own keys.
    """
    raw = raw or {}
    config = default_config()

    preset = raw.get('difficulty_preset')
    if preset is not None:
        config = apply_difficulty_preset(config, preset)

    config.ai = _merge_dataclass(config.ai, raw.get('ai', {}) or {})
    config.scoring = _merge_dataclass(config.scoring, raw.get('scoring', {}) or {})

    pursuers_raw = raw.get('pursuers')
    if pursuers_raw is not None:
        defaults = default_pursuer_configs()
        config.pursuers = {
            name: _merge_pursuer(defaults.get(name, defaults['blinky']), entry or {})
            for name, entry in pursuers_raw.items()
        }

    if 'default_algorithm' in raw:
        config.default_algorithm = _parse_algorithm(raw['default_algorithm']) or Algorithm.ASTAR

    scatter = raw.get('scatter_targeting', config.scatter_targeting)
    if scatter not in SCATTER_TARGETING:
        raise ValueError(f"Unknown scatter targeting: {scatter}")
    config.scatter_targeting = scatter

    for key in ('game_speed', 'collision_radius'):
        if key in raw:
            setattr(config, key, float(raw[key]))
    for key in ('lives', 'empowerment_ticks', 'frame_capacity', 'metrics_capacity',
                'level', 'max_ticks'):
        if key in raw:
            setattr(config, key, int(raw[key]))
    if raw.get('layout'):
        config.layout = [str(row) for row in raw['layout']]
    if raw.get('seed') is not None:
        config.seed = int(raw['seed'])

    # Parse export config (optional)
    export_raw = raw.get('export', {}) or {}
    config.csv_enabled = export_raw.get('csv', True)
    if export_raw.get('out_dir'):
        config.out_dir = Path(export_raw['out_dir'])

    return config


def load_config(config_path: Path) -> GameConfig:
    """Load a YAML configuration file and merge it against the defaults."""
    with open(config_path) as f:
        raw = yaml.safe_load(f)
    if raw is not None and not isinstance(raw, dict):
        raise ValueError(f"Configuration root must be a mapping: {config_path}")
    return merge_config(raw)
