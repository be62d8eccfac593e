"""Tests for maze_pursuit.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from maze_pursuit.config import (
    PURSUER_NAMES,
    apply_difficulty_preset,
    default_config,
    load_config,
    merge_config,
)
from maze_pursuit.model.agent import TargetingStrategy
from maze_pursuit.model.pathfinding import Algorithm

REPO_CONFIG = Path(__file__).resolve().parents[1] / "configs" / "default.yaml"


class TestDefaults:
    def test_reference_values(self) -> None:
        config = default_config()
        assert tuple(config.pursuers) == PURSUER_NAMES
        assert config.ai.scatter_time == 5.0
        assert config.ai.frightened_duration == 6.0
        assert config.lives == 3
        assert config.empowerment_ticks == 360
        assert config.collision_radius == pytest.approx(0.6)
        assert config.scoring.pursuer_base == 200

    def test_reference_pursuers(self) -> None:
        pursuers = default_config().pursuers
        assert pursuers["blinky"].targeting_strategy == TargetingStrategy.DIRECT
        assert pursuers["inky"].algorithm == Algorithm.BFS
        assert pursuers["clyde"].algorithm == Algorithm.DIJKSTRA
        assert pursuers["pinky"].personality == ["cautious"]

    def test_defaults_are_fresh(self) -> None:
        first = default_config()
        first.pursuers["blinky"].personality.append("sleepy")
        assert default_config().pursuers["blinky"].personality == ["brave"]


class TestPresets:
    def test_easy_preset(self) -> None:
        base = default_config()
        easy = apply_difficulty_preset(base, "easy")
        assert easy.ai.agent_speed == pytest.approx(0.7)
        assert easy.ai.scatter_time == 10.0
        assert easy.ai.frightened_duration == 8.0
        assert easy.difficulty_preset == "easy"
        assert base.ai.scatter_time == 5.0

    def test_hard_preset(self) -> None:
        hard = apply_difficulty_preset(default_config(), "hard")
        assert hard.ai.agent_speed == pytest.approx(1.3)
        assert hard.ai.frightened_duration == 4.0

    def test_custom_keeps_timing(self) -> None:
        base = default_config()
        base.ai.scatter_time = 2.5
        assert apply_difficulty_preset(base, "custom").ai.scatter_time == 2.5

    def test_unknown_preset(self) -> None:
        with pytest.raises(ValueError, match="preset"):
            apply_difficulty_preset(default_config(), "nightmare")


class TestMergeConfig:
    def test_empty_is_default(self) -> None:
        config = merge_config(None)
        assert config.level == 1
        assert config.csv_enabled

    def test_partial_pursuers_are_repaired(self) -> None:
        config = merge_config({
            "pursuers": {
                "blinky": {"aggressiveness": 3},
                "sue": {"targeting_strategy": "ambush"},
            },
        })
        assert list(config.pursuers) == ["blinky", "sue"]
        assert config.pursuers["blinky"].aggressiveness == 3
        assert config.pursuers["blinky"].targeting_strategy == TargetingStrategy.DIRECT
        assert config.pursuers["sue"].targeting_strategy == TargetingStrategy.AMBUSH
        assert config.pursuers["sue"].aggressiveness == 8

    def test_preset_then_overrides(self) -> None:
        config = merge_config({"difficulty_preset": "easy", "ai": {"scatter_time": 3}})
        assert config.ai.agent_speed == pytest.approx(0.7)
        assert config.ai.scatter_time == 3

    def test_unknown_algorithm(self) -> None:
        with pytest.raises(ValueError, match="algorithm"):
            merge_config({"pursuers": {"blinky": {"algorithm": "greedy"}}})

    def test_unknown_strategy(self) -> None:
        with pytest.raises(ValueError, match="strategy"):
            merge_config({"pursuers": {"blinky": {"targeting_strategy": "teleport"}}})

    def test_unknown_scatter_targeting(self) -> None:
        with pytest.raises(ValueError, match="scatter"):
            merge_config({"scatter_targeting": "sideways"})

    def test_export_block(self) -> None:
        config = merge_config({"export": {"csv": False, "out_dir": "results"}})
        assert not config.csv_enabled
        assert config.out_dir == Path("results")

    def test_layout_and_numbers(self) -> None:
        config = merge_config({"layout": ["#S#", "#H#"], "lives": "5", "game_speed": 2})
        assert config.layout == ["#S#", "#H#"]
        assert config.lives == 5
        assert config.game_speed == 2.0


class TestLoadConfig:
    def test_repository_config_loads(self) -> None:
        config = load_config(REPO_CONFIG)
        assert config.seed == 42
        assert config.pursuers["inky"].lead == "blinky"

    def test_yaml_file(self, tmp_path: Path) -> None:
        path = tmp_path / "game.yaml"
        path.write_text("level: 2\ndefault_algorithm: bfs\nseed: 7\n")
        config = load_config(path)
        assert config.level == 2
        assert config.default_algorithm == Algorithm.BFS
        assert config.seed == 7

    def test_non_mapping_root(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError, match="mapping"):
            load_config(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.yaml")
