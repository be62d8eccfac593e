"""Grid pursuit simulation: pathfinding and FSM pursuer AI."""

__version__ = "0.1.0"
