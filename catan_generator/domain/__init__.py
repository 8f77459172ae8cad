"""Board topology, board catalogue and the random queue."""

from .board import (
    NO_NUMBER_RESOURCES,
    RED_NUMBERS,
    ROLL_NUMBERS,
    Beach,
    Board,
    BoardLayout,
    BoardSpecError,
    Corner,
    Dimensions,
    Hex,
    Port,
    ResourceType,
)
from .random_queue import RandomQueue
from .specs import (
    BOARD_SPECS,
    SHAPE_URL_KEYS,
    BeachConnection,
    BoardShape,
    BoardSpec,
    ScoreRange,
    get_spec,
)

__all__ = [
    "BOARD_SPECS",
    "NO_NUMBER_RESOURCES",
    "RED_NUMBERS",
    "ROLL_NUMBERS",
    "SHAPE_URL_KEYS",
    "Beach",
    "BeachConnection",
    "Board",
    "BoardLayout",
    "BoardShape",
    "BoardSpec",
    "BoardSpecError",
    "Corner",
    "Dimensions",
    "Hex",
    "Port",
    "RandomQueue",
    "ResourceType",
    "ScoreRange",
    "get_spec",
]
