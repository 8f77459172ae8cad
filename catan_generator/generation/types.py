from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from catan_generator.domain.board import Board


class DesertPlacement(str, Enum):
    RANDOM = "random"
    CENTER = "center"
    OFF_CENTER = "off_center"
    INLAND = "inland"
    COAST = "coast"


class ResourcePlacement(str, Enum):
    EVEN = "even"
    CLUMPED = "clumped"


class NumberPlacement(str, Enum):
    FAIR = "fair"
    GREEDY = "greedy"


class GeneratorStrategy(str, Enum):
    BALANCED = "balanced"
    RANDOM = "random"


class NoFeasibleBoardError(RuntimeError):
    """Raised when no candidate board could be built within the attempt ceiling."""


@dataclass(frozen=True)
class GenerationOptions:
    desert_placement: DesertPlacement = DesertPlacement.RANDOM
    # 1.0 spreads equal resources apart, 0.0 groups them together.
    resource_distribution: float = 1.0
    # 1.0 equalizes corner scores, 0.0 stacks good numbers on good spots.
    number_distribution: float = 0.85
    shuffle_ports: bool = False
    allow_resource_on_port: bool = True
    separate_red_numbers: bool = True
    min_attempts: int = 15
    min_time_ms: float = 200.0
    cold_start_min_time_ms: float = 500.0
    max_attempts: int = 10_000


@dataclass(frozen=True)
class PlacementFailure:
    stage: str
    detail: str

    def __str__(self) -> str:
        return f"{self.stage}: {self.detail}"


@dataclass
class GenerationResult:
    board: Board
    score: float
    target: float
    candidates: int
    failures: int
    elapsed_ms: float
    # Why the most recent discarded attempt was thrown away.
    last_failure: Optional[PlacementFailure] = None

