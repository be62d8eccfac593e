"""Tests for maze_pursuit.model.replay and the frame history it reads."""

from __future__ import annotations

import pytest

from maze_pursuit.model.agent import PursuerState
from maze_pursuit.model.grid import Direction, Position
from maze_pursuit.model.replay import ReplayCursor
from maze_pursuit.model.state import (
    EventType,
    Frame,
    FrameHistory,
    GameEvent,
    PursuerSnapshot,
    SimulationClock,
)


def _frame(tick: int, events=()) -> Frame:
    snapshot = PursuerSnapshot("blinky", Position(1, 1), PursuerState.CHASE,
                               Position(0, 0), (Position(1, 1), Position(0, 1)))
    return Frame(
        tick=tick,
        timestamp=tick * 0.1,
        player_position=Position(0, 0),
        player_direction=Direction.LEFT,
        pursuers=(snapshot,),
        score=10 * tick,
        lives=3,
        pellets_remaining=100 - tick,
        events=tuple(events),
    )


class TestReplayCursor:
    def test_starts_paused_at_first_frame(self) -> None:
        cursor = ReplayCursor([_frame(1), _frame(2)])
        assert cursor.paused
        assert cursor.current.tick == 1

    def test_navigation_is_clamped(self) -> None:
        cursor = ReplayCursor([_frame(t) for t in range(1, 4)])
        assert cursor.previous().tick == 1
        assert cursor.next().tick == 2
        assert cursor.to_end().tick == 3
        assert cursor.next().tick == 3
        assert cursor.seek(-10).tick == 1
        assert cursor.seek(99).tick == 3
        assert cursor.to_start().tick == 1

    def test_playback_pauses_at_end(self) -> None:
        cursor = ReplayCursor([_frame(1), _frame(2)])
        assert cursor.advance_playback().tick == 1  # paused: no movement
        cursor.play()
        assert cursor.advance_playback().tick == 2
        assert not cursor.paused
        assert cursor.advance_playback().tick == 2
        assert cursor.paused

    def test_speed_sets_interval(self) -> None:
        cursor = ReplayCursor([_frame(1)], playback_speed=4.0)
        assert cursor.interval == pytest.approx(0.025)
        cursor.set_speed(0.5)
        assert cursor.interval == pytest.approx(0.2)

    @pytest.mark.parametrize("speed", [0.0, -1.0])
    def test_non_positive_speed_rejected(self, speed: float) -> None:
        with pytest.raises(ValueError):
            ReplayCursor([_frame(1)], playback_speed=speed)

    def test_empty_replay(self) -> None:
        cursor = ReplayCursor([])
        assert cursor.current is None
        assert cursor.next() is None
        assert cursor.at_end

    def test_frames_are_not_modified(self) -> None:
        frames = [_frame(1), _frame(2)]
        cursor = ReplayCursor(frames)
        cursor.to_end()
        assert cursor.frames == tuple(frames)


class TestFrameHistory:
    def test_capacity_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            FrameHistory(0)

    def test_oldest_frame_evicted(self) -> None:
        history = FrameHistory(2)
        for tick in (1, 2, 3):
            history.append(_frame(tick))
        assert [f.tick for f in history] == [2, 3]
        assert history.last.tick == 3

    def test_copy_is_independent(self) -> None:
        history = FrameHistory(5)
        history.append(_frame(1))
        clone = history.copy()
        clone.append(_frame(2))
        assert len(history) == 1
        assert len(clone) == 2


class TestFrameRows:
    def test_one_row_per_pursuer(self) -> None:
        event = GameEvent(3, EventType.PELLET_EATEN, "Pellet eaten")
        rows = _frame(3, [event]).to_csv_rows()
        assert len(rows) == 1
        row = rows[0]
        assert row["pursuer"] == "blinky"
        assert row["pursuer_state"] == "CHASE"
        assert row["player_direction"] == "left"
        assert row["path_length"] == 2
        assert row["events"] == "pellet_eaten"


class TestSimulationClock:
    def test_zero_until_latched(self) -> None:
        clock = SimulationClock()
        assert clock.elapsed(10.0) == 0.0
        clock.latch(10.0)
        clock.latch(12.0)
        assert clock.elapsed(13.0) == pytest.approx(3.0)

    def test_frozen_while_paused(self) -> None:
        clock = SimulationClock()
        clock.latch(0.0)
        clock.pause(2.0)
        assert clock.elapsed(9.0) == pytest.approx(2.0)
        clock.resume(9.0)
        assert clock.elapsed(10.0) == pytest.approx(3.0)

    def test_pause_before_latch_does_not_count(self) -> None:
        clock = SimulationClock()
        clock.pause(0.0)
        clock.latch(1.0)
        clock.resume(3.0)
        assert clock.elapsed(4.0) == pytest.approx(1.0)
