"""Tests for the maze_pursuit.main command line runner."""

from __future__ import annotations

import csv
from pathlib import Path

import pytest

from maze_pursuit.export.reporter import Reporter
from maze_pursuit.main import SteppedClock, main


class TestEpisodeRun:
    def test_writes_csv_exports(self, tmp_path: Path) -> None:
        code = main(["--level", "2", "--ticks", "30", "--seed", "1",
                     "--out-dir", str(tmp_path), "--quiet"])
        assert code == 0
        frames = tmp_path / "frames.csv"
        metrics = tmp_path / "pathfinding_metrics.csv"
        assert frames.exists()
        assert metrics.exists()
        with open(frames, newline="") as f:
            rows = list(csv.DictReader(f))
        assert rows
        assert max(int(r["tick"]) for r in rows) <= 30

    def test_no_csv(self, tmp_path: Path) -> None:
        code = main(["--ticks", "5", "--no-csv", "--out-dir", str(tmp_path), "--quiet"])
        assert code == 0
        assert not (tmp_path / "frames.csv").exists()

    def test_report_printed(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["--ticks", "10", "--no-csv", "--preset", "hard",
                     "--out-dir", str(tmp_path)]) == 0
        out = capsys.readouterr().out
        assert "Initializing simulation..." in out
        assert "MAZE PURSUIT SIMULATION REPORT" in out

    def test_config_file(self, tmp_path: Path) -> None:
        config = tmp_path / "run.yaml"
        config.write_text(f"level: 3\nmax_ticks: 8\nexport:\n  out_dir: {tmp_path / 'out'}\n")
        assert main(["--config", str(config), "--quiet"]) == 0
        assert (tmp_path / "out" / "frames.csv").exists()

    def test_report_uses_capped_metrics_log(self, tmp_path: Path,
                                            monkeypatch: pytest.MonkeyPatch) -> None:
        captured = []

        def _summary(self, world, metrics, output_dir, csv_enabled) -> str:
            captured.append(list(metrics))
            return ""

        monkeypatch.setattr(Reporter, "generate_summary", _summary)
        config = tmp_path / "capped.yaml"
        config.write_text("max_ticks: 10\nmetrics_capacity: 4\n")
        assert main(["--config", str(config), "--no-csv", "--out-dir", str(tmp_path)]) == 0
        assert len(captured) == 1
        assert len(captured[0]) == 4


class TestCompare:
    def test_compare_prints_table(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["--level", "1", "--compare", "9", "11", "1", "1"]) == 0
        out = capsys.readouterr().out
        assert "Path (9, 11) -> (1, 1)" in out
        assert "dijkstra" in out


class TestErrors:
    def test_missing_config(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["--config", str(tmp_path / "nope.yaml")]) == 1
        assert "Error" in capsys.readouterr().err

    def test_bad_config_value(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        config = tmp_path / "bad.yaml"
        config.write_text("default_algorithm: greedy\n")
        assert main(["--config", str(config)]) == 1
        assert "greedy" in capsys.readouterr().err

    def test_unknown_level(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["--level", "9", "--quiet"]) == 1
        assert "Unknown level" in capsys.readouterr().err


class TestSteppedClock:
    def test_advances_explicitly(self) -> None:
        clock = SteppedClock()
        assert clock() == 0.0
        clock.advance(0.25)
        assert clock() == pytest.approx(0.25)
