"""Built-in maze layouts selectable by level number."""

from typing import Dict, List

from .grid import GridMap


LEVELS: Dict[int, List[str]] = {
    # Classic: two tunnels joined through row 9, house in the middle
    1: [
        "###################",
        "#........#........#",
        "#o##.###.#.###.##o#",
        "#.................#",
        "#.##.#.#####.#.##.#",
        "#....#...#...#....#",
        "####.###.#.###.####",
        "####.#.......#.####",
        "####.#.##-##.#.####",
        ".......#-H-#.......",
        "####.#.#####.#.####",
        "####.#...S...#.####",
        "####.#.#####.#.####",
        "#........#........#",
        "#.##.###.#.###.##.#",
        "#o.#...........#.o#",
        "##.#.#.#####.#.#.##",
        "#....#...#...#....#",
        "#.######.#.######.#",
        "#.................#",
        "###################",
    ],
    # Compact: pillars and an empty tunnel row
    2: [
        "###############",
        "#o...........o#",
        "#.##.##.##.##.#",
        "#.............#",
        "#.##.#####.##.#",
        "#....#---#....#",
        "####.#-H-#.####",
        "    .#---#.    ",
        "####.##-##.####",
        "#.............#",
        "#.##.#####.##.#",
        "#......S......#",
        "#.##.##.##.##.#",
        "#o...........o#",
        "###############",
    ],
    # Arena: no internal walls apart from the house
    3: [
        "###############",
        "#o...........o#",
        "#.............#",
        "#....#---#....#",
        "#....#-H-#....#",
        "#....##-##....#",
        "#.............#",
        "#......S......#",
        "#.............#",
        "#o...........o#",
        "###############",
    ],
}


def load_level(level: int) -> GridMap:
    """Create a fresh grid for a built-in level."""
    try:
        layout = LEVELS[level]
    except KeyError:
        raise ValueError(
            f"Unknown level {level}; available: {sorted(LEVELS)}") from None
    return GridMap.from_layout(layout)
