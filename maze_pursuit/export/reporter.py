"""Summary report generation for the pursuit simulation."""

from collections import Counter
from typing import Dict, Iterable, Optional, TYPE_CHECKING
from pathlib import Path

from ..model.pathfinding import summarize_metrics

if TYPE_CHECKING:
    from ..model.engine import World
    from ..model.pathfinding import AlgorithmMetrics, ComparisonResult
    from ..model.state import Frame


class Reporter:
    """Accumulates per-frame events and renders a formatted text report."""

    def __init__(self, config_path: Optional[str], seed: Optional[int]):
        self.config_path = config_path
        self.seed = seed
        self.event_counts: Counter = Counter()
        self.frames_seen = 0

    def update(self, frame: "Frame") -> None:
        """Accumulate event counts per frame."""
        self.frames_seen += 1
        for event in frame.events:
            self.event_counts[event.event_type.value] += 1

    def generate_summary(self, world: "World",
                         metrics: Iterable["AlgorithmMetrics"],
                         output_dir: Path,
                         csv_enabled: bool) -> str:
        """Returns formatted text report."""
        session = world.session
        eaten = world.player.pellets_eaten
        total = session.total_pellets
        completion_pct = (eaten / total * 100) if total > 0 else 0

        lines = [
            "",
            "=" * 80,
            "                       MAZE PURSUIT SIMULATION REPORT",
            "=" * 80,
            f"Configuration: {self.config_path or '(defaults)'}",
            f"Random Seed: {self.seed if self.seed is not None else 'None (random)'}",
            "",
            "EPISODE",
            "-" * 40,
            f"Outcome:               {world.status.value}",
            f"Ticks:                 {world.tick}",
            f"Score:                 {session.score}",
            f"Lives Remaining:       {session.lives}",
            f"Pellets Eaten:         {eaten} / {total} ({completion_pct:.1f}%)",
            f"Pursuers Eaten:        {self.event_counts.get('pursuer_eaten', 0)}",
            f"Player Deaths:         {self.event_counts.get('player_death', 0)}",
            "",
            "FSM TRANSITIONS (entries per state)",
            "-" * 40,
        ]
        for pursuer in world.pursuers:
            counts = "  ".join(f"{state.value}={n}"
                               for state, n in pursuer.transition_counts.items())
            lines.append(f"{pursuer.name:<10} [{pursuer.state.value:<10}] {counts}")

        lines += ["", "PATHFINDING METRICS (averages)", "-" * 40]
        lines += self._metrics_lines(summarize_metrics(metrics))

        lines += ["", "OUTPUT FILES", "-" * 40]
        if csv_enabled:
            lines.append(f"Frame Log:   {output_dir / 'frames.csv'}")
            lines.append(f"Metrics Log: {output_dir / 'pathfinding_metrics.csv'}")
        else:
            lines.append("CSV Logs:    (disabled)")

        lines.append("=" * 80)
        return "\n".join(lines)

    @staticmethod
    def _metrics_lines(summary: Dict) -> list:
        if not summary:
            return ["(no pathfinding runs)"]
        lines = [f"{'Algorithm':<10} {'Runs':>6} {'Nodes':>10} {'Time (ms)':>10} {'Length':>8}"]
        for algorithm, stats in summary.items():
            lines.append(
                f"{algorithm.value:<10} {stats['runs']:>6} "
                f"{stats['avg_nodes_expanded']:>10.1f} "
                f"{stats['avg_execution_time_ms']:>10.3f} "
                f"{stats['avg_path_length']:>8.1f}")
        return lines


def format_comparison(result: "ComparisonResult") -> str:
    """Side-by-side table for one compare_algorithms run."""
    lines = [
        f"Path {tuple(result.origin)} -> {tuple(result.destination)}",
        f"{'Algorithm':<10} {'Nodes':>8} {'Time (ms)':>10} {'Length':>8}",
        "-" * 40,
    ]
    for r in result.results:
        m = r.metrics
        length = str(m.path_length) if r.found else "none"
        lines.append(f"{m.algorithm.value:<10} {m.nodes_expanded:>8} "
                     f"{m.execution_time_ms:>10.3f} {length:>8}")
    return "\n".join(lines)
