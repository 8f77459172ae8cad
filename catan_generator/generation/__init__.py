"""Balanced and random board generation."""

from .calibration import calibrate_score_range
from .construction import construct_candidate
from .generators import BalancedGenerator, Generator, RandomGenerator, create_generator
from .scoring import evaluate_board, score_board, score_target
from .types import (
    DesertPlacement,
    GenerationOptions,
    GenerationResult,
    GeneratorStrategy,
    NoFeasibleBoardError,
    NumberPlacement,
    PlacementFailure,
    ResourcePlacement,
)
from .validation import adjacent_same_resource_pairs, validate_counts, validate_red_number_spacing

__all__ = [
    "BalancedGenerator",
    "DesertPlacement",
    "GenerationOptions",
    "GenerationResult",
    "Generator",
    "GeneratorStrategy",
    "NoFeasibleBoardError",
    "NumberPlacement",
    "PlacementFailure",
    "RandomGenerator",
    "ResourcePlacement",
    "adjacent_same_resource_pairs",
    "calibrate_score_range",
    "construct_candidate",
    "create_generator",
    "evaluate_board",
    "score_board",
    "score_target",
    "validate_counts",
    "validate_red_number_spacing",
]
