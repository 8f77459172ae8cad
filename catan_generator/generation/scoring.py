from __future__ import annotations

import math
from statistics import fmean, pvariance
from typing import Dict, List, Optional, Sequence, Tuple

from catan_generator.domain.board import (
    NO_NUMBER_RESOURCES,
    ROLL_NUMBERS,
    Board,
    Corner,
    Hex,
    ResourceType,
)
from catan_generator.domain.specs import BoardSpec

PIP_WEIGHTS: Dict[int, int] = {number: (number - 1 if number < 7 else 13 - number) for number in ROLL_NUMBERS}

ROLL_VALUE_EXPONENT = 1.2
UNNUMBERED_ROLL_VALUE = 0.5
PORT_BONUS = 2.0
PORT_MATCH_MULTIPLIER = 0.3
COMBO_SCALE = 0.1
HEX_SCORE_EXPONENT = 1.5
BEST_CORNER_WEIGHT = 0.5

COMBOS: Tuple[Tuple[str, float, Tuple[ResourceType, ...]], ...] = (
    ("City", 3.0, (ResourceType.WHEAT, ResourceType.ORE)),
    ("Road", 2.5, (ResourceType.BRICK, ResourceType.WOOD)),
    ("Development card", 1.0, (ResourceType.SHEEP, ResourceType.ORE, ResourceType.WHEAT)),
)


def pip_weight(roll_number: Optional[int]) -> int:
    """Number of two-dice combinations that roll `roll_number` (out of 36)."""
    if roll_number is None:
        return 0
    try:
        return PIP_WEIGHTS[roll_number]
    except KeyError:
        raise ValueError(f"{roll_number} is not a roll number.") from None


def resource_value(resource: Optional[ResourceType]) -> float:
    if resource is None or resource in NO_NUMBER_RESOURCES or resource is ResourceType.ANY:
        return 0.0
    if resource is ResourceType.GOLD:
        return 1.2
    if resource is ResourceType.ORE:
        return 1.1
    return 1.0


def roll_value(hex_: Hex, missing_value: float = 0.0) -> float:
    if hex_.roll_number is None:
        return missing_value
    return pip_weight(hex_.roll_number) ** ROLL_VALUE_EXPONENT


def score_board(
    board: Board,
    *,
    next_number: Optional[int] = None,
    allow_resource_on_port: bool = True,
    balanced: bool = False,
) -> None:
    """Scores every corner, then every hex from its corners.

    `next_number` is the roll number about to be placed; unnumbered hexes count
    as if they might receive it when looking for resource combinations.
    The balanced pass pads corners with fewer than three productive hexes as
    if the missing hexes were average ones, so the coast is not undervalued.
    """
    next_value = float(pip_weight(next_number)) ** ROLL_VALUE_EXPONENT
    average_hex = _average_hex_value(board) if balanced else 0.0

    for corner in board.corners:
        corner.score, corner.notes = _score_corner(
            corner,
            next_value=next_value,
            allow_resource_on_port=allow_resource_on_port,
            average_hex=average_hex,
        )

    for hex_ in board.hexes:
        hex_.score = sum((corner.score or 0.0) ** HEX_SCORE_EXPONENT for corner in hex_.corners)


def evaluate_board(board: Board, *, allow_resource_on_port: bool = True) -> float:
    """Quality of a finished board. Lower is fairer.

    Variance of the balanced corner scores, plus a share of the single best
    unpadded corner so one runaway spot is penalized.
    """
    score_board(board, allow_resource_on_port=allow_resource_on_port)
    land = land_corners(board)
    if not land:
        return 0.0
    best_corner = max(corner.score or 0.0 for corner in land)

    score_board(board, allow_resource_on_port=allow_resource_on_port, balanced=True)
    return pvariance([corner.score or 0.0 for corner in land]) + BEST_CORNER_WEIGHT * best_corner


def land_corners(board: Board) -> List[Corner]:
    return [corner for corner in board.corners if any(hex_.is_productive for hex_ in corner.hexes)]


def score_target(spec: BoardSpec, number_distribution: float) -> float:
    """The candidate quality a generation run aims for.

    Fully fair aims at 0 and fully greedy at infinity; in between, the target
    moves linearly between the shape's calibrated greedy and fair means.
    """
    if number_distribution >= 1.0:
        return 0.0
    if number_distribution <= 0.0:
        return math.inf
    if spec.score_range is None:
        return 0.0 if number_distribution >= 0.5 else math.inf
    greedy, fair = spec.score_range.greedy, spec.score_range.fair
    return greedy + (fair - greedy) * number_distribution


def distance_to_target(quality: float, target: float) -> float:
    if math.isinf(target):
        return -quality
    return abs(quality - target)


def _score_corner(
    corner: Corner,
    *,
    next_value: float,
    allow_resource_on_port: bool,
    average_hex: float,
) -> Tuple[float, str]:
    hexes = corner.hexes
    score = sum(resource_value(hex_.resource) * roll_value(hex_, UNNUMBERED_ROLL_VALUE) for hex_ in hexes)
    notes: List[str] = []

    odds = _roll_odds_per_resource(hexes, next_value)
    if corner.port is not None:
        notes.append("Has port")
        score += PORT_BONUS
        if allow_resource_on_port and corner.port.resource in odds:
            addition = odds[corner.port.resource] * PORT_MATCH_MULTIPLIER
            notes.append(f"Matching port: {round(addition, 2)}")
            score += addition

    for name, multiplier, resources in COMBOS:
        if all(resource in odds for resource in resources):
            addition = sum(odds[resource] for resource in resources) * COMBO_SCALE * multiplier
            notes.append(f"{name} corner: {round(addition, 2)}")
            score += addition

    if average_hex:
        productive = sum(1 for hex_ in hexes if hex_.is_productive)
        if 0 < productive < 3:
            padding = (3 - productive) * average_hex
            notes.append(f"Coast padding: {round(padding, 2)}")
            score += padding

    return score, "\n".join(notes)


def _roll_odds_per_resource(hexes: Sequence[Hex], default_roll_value: float) -> Dict[ResourceType, float]:
    odds: Dict[ResourceType, float] = {}
    for hex_ in hexes:
        if not hex_.is_productive:
            continue
        assert hex_.resource is not None
        odds[hex_.resource] = odds.get(hex_.resource, 0.0) + roll_value(hex_, default_roll_value)
    return odds


def _average_hex_value(board: Board) -> float:
    values = [
        resource_value(hex_.resource) * roll_value(hex_)
        for hex_ in board.hexes
        if hex_.is_productive and hex_.roll_number is not None
    ]
    return fmean(values) if values else 0.0
