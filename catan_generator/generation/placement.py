from __future__ import annotations

from typing import Collection, Optional, Sequence

from catan_generator.domain.board import Hex, ResourceType
from catan_generator.domain.random_queue import IndexSource, RandomQueue

from .types import NumberPlacement, ResourcePlacement


def resource_strategy_queue(
    count: int, resource_distribution: float, rng: IndexSource
) -> RandomQueue[ResourcePlacement]:
    even = int(round(count * resource_distribution))
    return RandomQueue(
        [ResourcePlacement.EVEN] * even + [ResourcePlacement.CLUMPED] * (count - even),
        rng=rng,
    )


def number_strategy_queue(
    count: int, number_distribution: float, rng: IndexSource
) -> RandomQueue[NumberPlacement]:
    fair = int(round(count * number_distribution))
    return RandomQueue(
        [NumberPlacement.FAIR] * fair + [NumberPlacement.GREEDY] * (count - fair),
        rng=rng,
    )


def place_resource(
    hex_: Hex,
    pool: RandomQueue[ResourceType],
    placement: ResourcePlacement,
    excluded: Collection[ResourceType] = (),
) -> Optional[ResourceType]:
    """Pops a resource for `hex_` from `pool`, or returns None if nothing is legal.

    EVEN never repeats a neighbouring resource. CLUMPED repeats one when the
    pool still has it and otherwise behaves like EVEN.
    """
    neighbor_resources = set(hex_.neighbor_resources())
    if placement is ResourcePlacement.CLUMPED:
        resource = pool.filter(
            lambda value: value not in excluded and value in neighbor_resources
        ).pop()
        if resource is not None:
            pool.remove(resource)
            return resource
    return pool.pop_excluding(*excluded, *neighbor_resources)


def choose_number_hex(
    candidates: Sequence[Hex], placement: NumberPlacement, rng: IndexSource
) -> Optional[Hex]:
    """Picks the lowest (FAIR) or highest (GREEDY) scoring hex, at random among ties."""
    if not candidates:
        return None
    scores = [hex_.score or 0.0 for hex_ in candidates]
    wanted = min(scores) if placement is NumberPlacement.FAIR else max(scores)
    ties = [hex_ for hex_, score in zip(candidates, scores) if score == wanted]
    return RandomQueue(ties, rng=rng).pop()
