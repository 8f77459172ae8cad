from __future__ import annotations

from collections import Counter
from typing import List, Tuple

from catan_generator.domain.board import NO_NUMBER_RESOURCES, RED_NUMBERS, Board, Hex


def validate_counts(board: Board) -> bool:
    """True when the mutable hexes hold exactly the shape's resources and roll numbers."""
    spec = board.spec
    resources: Counter = Counter()
    numbers = []
    for hex_ in board.mutable_hexes:
        if hex_.resource is None:
            return False
        resources[hex_.resource] += 1
        if hex_.resource in NO_NUMBER_RESOURCES:
            if hex_.roll_number is not None:
                return False
        elif hex_.roll_number is None:
            return False
        else:
            numbers.append(hex_.roll_number)

    if resources != Counter(spec.resources()):
        return False

    return sorted(numbers) == sorted(spec.roll_numbers())


def validate_red_number_spacing(board: Board) -> bool:
    for first, second in _adjacent_pairs(board):
        if first.roll_number in RED_NUMBERS and second.roll_number in RED_NUMBERS:
            return False
    return True


def adjacent_same_resource_pairs(board: Board, *, mutable_only: bool = True) -> List[Tuple[Hex, Hex]]:
    pairs = []
    for first, second in _adjacent_pairs(board):
        if mutable_only and (first.immutable or second.immutable):
            continue
        if first.resource is not None and first.resource is second.resource:
            pairs.append((first, second))
    return pairs


def _adjacent_pairs(board: Board) -> List[Tuple[Hex, Hex]]:
    pairs = []
    for hex_ in board.hexes:
        for neighbor in hex_.neighbors:
            if (neighbor.y, neighbor.x) > (hex_.y, hex_.x):
                pairs.append((hex_, neighbor))
    return pairs
