"""Grid pathfinding: A*, Dijkstra and breadth-first search with metrics.

Every search returns a `PathResult` whose path runs from start to goal
inclusive (empty when the goal is unreachable) together with the
`AlgorithmMetrics` of that single invocation.

Tie-breaking: nodes with equal priority leave the open set in insertion
order. This keeps runs reproducible but is not part of the contract.
"""

import heapq
import itertools
import logging
import time
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from .grid import GridMap, Position

logger = logging.getLogger(__name__)


class Algorithm(Enum):
    ASTAR = "astar"
    DIJKSTRA = "dijkstra"
    BFS = "bfs"


ALL_ALGORITHMS: Tuple[Algorithm, ...] = (Algorithm.ASTAR, Algorithm.DIJKSTRA, Algorithm.BFS)


@dataclass(frozen=True)
class AlgorithmMetrics:
    """Cost of one pathfinding invocation."""
    algorithm: Algorithm
    nodes_expanded: int
    execution_time_ms: float
    path_length: int
    timestamp: float  # wall-clock epoch seconds


@dataclass(frozen=True)
class PathResult:
    path: Tuple[Position, ...]
    metrics: AlgorithmMetrics

    @property
    def found(self) -> bool:
        return len(self.path) > 0


@dataclass(frozen=True)
class ComparisonResult:
    """Side-by-side results of several algorithms on one start/goal pair."""
    origin: Position
    destination: Position
    results: Tuple[PathResult, ...]

    @property
    def algorithms(self) -> List[Algorithm]:
        return [r.metrics.algorithm for r in self.results]

    @property
    def metrics(self) -> List[AlgorithmMetrics]:
        return [r.metrics for r in self.results]


@dataclass
class _Node:
    position: Position
    g: int
    h: int
    parent: Optional["_Node"] = None

    @property
    def f(self) -> int:
        return self.g + self.h


@dataclass
class _OpenSet:
    """
    Priority queue keyed on f with in-place decrease-key.

    Each tile has at most one live heap entry. Re-keying marks the old
    entry as stale and pushes a replacement, so the heap never yields the
    same tile twice.
    """
    _heap: List[list] = field(default_factory=list)
    _entries: Dict[Position, list] = field(default_factory=dict)
    _counter: Iterator[int] = field(default_factory=itertools.count)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, pos: Position) -> bool:
        return pos in self._entries

    def get(self, pos: Position) -> _Node:
        return self._entries[pos][2]

    def push(self, node: _Node) -> None:
        entry = [node.f, next(self._counter), node]
        self._entries[node.position] = entry
        heapq.heappush(self._heap, entry)

    def decrease(self, node: _Node, g: int, parent: _Node) -> None:
        """Lower g in place and re-key the tile's entry."""
        old = self._entries.pop(node.position)
        old[2] = None  # stale
        node.g = g
        node.parent = parent
        self.push(node)

    def pop(self) -> _Node:
        while self._heap:
            _, _, node = heapq.heappop(self._heap)
            if node is not None:
                del self._entries[node.position]
                return node
        raise KeyError("pop from an empty open set")


def manhattan(a: Tuple[int, int], b: Tuple[int, int], wrap_width: Optional[int] = None) -> int:
    """
    Manhattan distance. With `wrap_width`, the horizontal component is
    measured the short way around the tunnel so the heuristic stays
    admissible on wrapping grids.
    """
    dx = abs(a[0] - b[0])
    if wrap_width is not None:
        dx %= wrap_width
        dx = min(dx, wrap_width - dx)
    return dx + abs(a[1] - b[1])


def _reconstruct(node: _Node) -> Tuple[Position, ...]:
    path: List[Position] = []
    current: Optional[_Node] = node
    while current is not None:
        path.append(current.position)
        current = current.parent
    path.reverse()
    return tuple(path)


def _result(algorithm: Algorithm, path: Tuple[Position, ...],
            nodes_expanded: int, started: float) -> PathResult:
    metrics = AlgorithmMetrics(
        algorithm=algorithm,
        nodes_expanded=nodes_expanded,
        execution_time_ms=(time.perf_counter() - started) * 1000.0,
        path_length=len(path),
        timestamp=time.time(),
    )
    return PathResult(path=path, metrics=metrics)


def _best_first(grid: GridMap, start: Position, goal: Position,
                algorithm: Algorithm,
                heuristic: Callable[[Position], int]) -> PathResult:
    """Shared A*/Dijkstra loop; Dijkstra passes a zero heuristic."""
    started = time.perf_counter()
    nodes_expanded = 0

    open_set = _OpenSet()
    closed = set()
    open_set.push(_Node(start, 0, heuristic(start)))

    while open_set:
        current = open_set.pop()
        nodes_expanded += 1

        if current.position == goal:
            return _result(algorithm, _reconstruct(current), nodes_expanded, started)

        closed.add(current.position)

        for neighbor in grid.neighbors(current.position):
            if neighbor in closed:
                continue
            g = current.g + 1  # uniform step cost
            if neighbor not in open_set:
                open_set.push(_Node(neighbor, g, heuristic(neighbor), current))
            else:
                existing = open_set.get(neighbor)
                if g < existing.g:
                    open_set.decrease(existing, g, current)

    return _result(algorithm, (), nodes_expanded, started)


def astar(grid: GridMap, start: Tuple[int, int], goal: Tuple[int, int]) -> PathResult:
    """A* with f = g + Manhattan distance."""
    start, goal = Position(*start), Position(*goal)
    wrap_width = grid.width if _wraps(grid) else None
    return _best_first(grid, start, goal, Algorithm.ASTAR,
                       lambda pos: manhattan(pos, goal, wrap_width))


def dijkstra(grid: GridMap, start: Tuple[int, int], goal: Tuple[int, int]) -> PathResult:
    """Dijkstra: A* with a zero heuristic."""
    return _best_first(grid, Position(*start), Position(*goal), Algorithm.DIJKSTRA,
                       lambda pos: 0)


def bfs(grid: GridMap, start: Tuple[int, int], goal: Tuple[int, int]) -> PathResult:
    """Breadth-first search; the first visit to a tile is a shortest path to it."""
    started = time.perf_counter()
    start, goal = Position(*start), Position(*goal)
    nodes_expanded = 0

    queue = deque([_Node(start, 0, 0)])
    visited = {start}

    while queue:
        current = queue.popleft()  # FIFO
        nodes_expanded += 1

        if current.position == goal:
            return _result(Algorithm.BFS, _reconstruct(current), nodes_expanded, started)

        for neighbor in grid.neighbors(current.position):
            if neighbor in visited:
                continue
            visited.add(neighbor)
            queue.append(_Node(neighbor, current.g + 1, 0, current))

    return _result(Algorithm.BFS, (), nodes_expanded, started)


def _wraps(grid: GridMap) -> bool:
    """True when at least one row has walkable tiles on both edges."""
    return any(grid.is_walkable((0, y)) and grid.is_walkable((grid.width - 1, y))
               for y in range(grid.height))


ALGORITHMS: Dict[Algorithm, Callable[[GridMap, Tuple[int, int], Tuple[int, int]], PathResult]] = {
    Algorithm.ASTAR: astar,
    Algorithm.DIJKSTRA: dijkstra,
    Algorithm.BFS: bfs,
}


def find_path(algorithm: Union[Algorithm, str], grid: GridMap,
              start: Tuple[int, int], goal: Tuple[int, int]) -> PathResult:
    """Dispatch to the search named by `algorithm`."""
    result = ALGORITHMS[Algorithm(algorithm)](grid, start, goal)
    logger.debug("%s %s -> %s: length=%d expanded=%d",
                 result.metrics.algorithm.value, tuple(start), tuple(goal),
                 result.metrics.path_length, result.metrics.nodes_expanded)
    return result


def compare_algorithms(grid: GridMap, start: Tuple[int, int], goal: Tuple[int, int],
                       algorithms: Sequence[Union[Algorithm, str]] = ALL_ALGORITHMS
                       ) -> ComparisonResult:
    """Run each algorithm independently on the same start/goal pair."""
    results = tuple(find_path(algo, grid, start, goal) for algo in algorithms)
    return ComparisonResult(origin=Position(*start), destination=Position(*goal),
                            results=results)


def summarize_metrics(metrics: Iterable[AlgorithmMetrics]) -> Dict[Algorithm, Dict[str, float]]:
    """Per-algorithm run counts and mean nodes, time and path length."""
    grouped: Dict[Algorithm, List[AlgorithmMetrics]] = {}
    for m in metrics:
        grouped.setdefault(m.algorithm, []).append(m)

    summary = {}
    for algorithm in ALL_ALGORITHMS:
        runs = grouped.get(algorithm)
        if not runs:
            continue
        summary[algorithm] = {
            'runs': len(runs),
            'avg_nodes_expanded': float(np.mean([m.nodes_expanded for m in runs])),
            'avg_execution_time_ms': float(np.mean([m.execution_time_ms for m in runs])),
            'avg_path_length': float(np.mean([m.path_length for m in runs])),
        }
    return summary
