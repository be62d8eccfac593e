"""Read-only step-by-step playback over recorded frames."""

from typing import Optional, Sequence, Tuple

from .state import Frame


BASE_PLAYBACK_INTERVAL = 0.1  # seconds between frames at speed 1.0


class ReplayCursor:
    """
    Cursor over an immutable frame sequence.

    The cursor only moves an index; frames are never modified. The host
    drives playback by calling `advance_playback` every `interval` seconds.
    """

    def __init__(self, frames: Sequence[Frame], playback_speed: float = 1.0):
        self.frames: Tuple[Frame, ...] = tuple(frames)
        self.index = 0
        self.paused = True
        self.playback_speed = 1.0
        self.set_speed(playback_speed)

    def __len__(self) -> int:
        return len(self.frames)

    @property
    def current(self) -> Optional[Frame]:
        if not self.frames:
            return None
        return self.frames[self.index]

    @property
    def at_end(self) -> bool:
        return self.index >= len(self.frames) - 1

    @property
    def interval(self) -> float:
        return BASE_PLAYBACK_INTERVAL / self.playback_speed

    def set_speed(self, playback_speed: float) -> None:
        if playback_speed <= 0:
            raise ValueError("Playback speed must be positive")
        self.playback_speed = playback_speed

    def seek(self, index: int) -> Optional[Frame]:
        """Jump to `index`, clamped to the available frames."""
        if self.frames:
            self.index = min(max(index, 0), len(self.frames) - 1)
        return self.current

    def next(self) -> Optional[Frame]:
        return self.seek(self.index + 1)

    def previous(self) -> Optional[Frame]:
        return self.seek(self.index - 1)

    def to_start(self) -> Optional[Frame]:
        return self.seek(0)

    def to_end(self) -> Optional[Frame]:
        return self.seek(len(self.frames) - 1)

    def play(self) -> None:
        self.paused = False

    def pause(self) -> None:
        self.paused = True

    def advance_playback(self) -> Optional[Frame]:
        """One playback step; pauses when the last frame is reached."""
        if self.paused:
            return self.current
        if self.at_end:
            self.paused = True
            return self.current
        return self.next()
