"""CSV export for frames and pathfinding metrics."""

import csv
from pathlib import Path
from typing import Iterable, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..model.pathfinding import AlgorithmMetrics
    from ..model.state import Frame


FRAME_FIELDS = [
    'tick', 'time', 'player_x', 'player_y', 'player_direction', 'score', 'lives',
    'pellets_remaining', 'pursuer', 'pursuer_x', 'pursuer_y', 'pursuer_state',
    'target_x', 'target_y', 'path_length', 'events',
]

METRICS_FIELDS = [
    'algorithm', 'nodes_expanded', 'execution_time_ms', 'path_length', 'timestamp',
]


class _CSVWriter:
    """Incremental CSV file with a fixed header."""

    fieldnames: List[str] = []

    def __init__(self, output_path: Path):
        self.output_path = Path(output_path)
        self.file: Optional[object] = None
        self.writer: Optional[csv.DictWriter] = None
        self._is_open = False

    def open(self) -> None:
        """Initialize file and write header."""
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self.file = open(self.output_path, 'w', newline='')
        self.writer = csv.DictWriter(self.file, fieldnames=self.fieldnames)
        self.writer.writeheader()
        self._is_open = True

    def _write_rows(self, rows: Iterable[dict]) -> None:
        if not self._is_open:
            self.open()
        for row in rows:
            self.writer.writerow(row)
        self.file.flush()

    def close(self) -> None:
        """Close file handle."""
        if self.file:
            self.file.close()
            self.file = None
            self.writer = None
            self._is_open = False

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class FrameCSVWriter(_CSVWriter):
    """
    Exports frames, one row per pursuer per tick.

    Output format:
        tick,time,player_x,player_y,...,pursuer,pursuer_x,pursuer_y,pursuer_state,...
        1,0.0,10,11,...,blinky,9,6,SCATTER,...
    """

    fieldnames = FRAME_FIELDS

    def append(self, frame: "Frame") -> None:
        self._write_rows(frame.to_csv_rows())


class MetricsCSVWriter(_CSVWriter):
    """Exports one row per pathfinding invocation."""

    fieldnames = METRICS_FIELDS

    def append(self, metrics: "AlgorithmMetrics") -> None:
        self._write_rows([{
            'algorithm': metrics.algorithm.value,
            'nodes_expanded': metrics.nodes_expanded,
            'execution_time_ms': round(metrics.execution_time_ms, 4),
            'path_length': metrics.path_length,
            'timestamp': metrics.timestamp,
        }])

    def extend(self, metrics: Iterable["AlgorithmMetrics"]) -> None:
        for m in metrics:
            self.append(m)
