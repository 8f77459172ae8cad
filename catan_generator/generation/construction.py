from __future__ import annotations

import logging
from typing import List, Optional, Set

from catan_generator.domain.board import RED_NUMBERS, Board, Hex, ResourceType
from catan_generator.domain.random_queue import IndexSource, RandomQueue
from catan_generator.domain.specs import BoardSpec

from .placement import (
    choose_number_hex,
    number_strategy_queue,
    place_resource,
    resource_strategy_queue,
)
from .scoring import pip_weight, score_board
from .types import (
    DesertPlacement,
    GenerationOptions,
    NumberPlacement,
    PlacementFailure,
    ResourcePlacement,
)

logger = logging.getLogger(__name__)


def construct_candidate(
    board: Board,
    spec: BoardSpec,
    options: GenerationOptions,
    rng: IndexSource,
) -> Optional[PlacementFailure]:
    """Fills `board` with one candidate layout.

    Returns None on success, or the first dead end hit. The board is reset
    first, so it can be reused across attempts.
    """
    board.reset()
    _assign_ports(board, spec, options, rng)

    pool: RandomQueue[ResourceType] = RandomQueue(spec.resources(), rng=rng)
    _place_deserts(board, spec, pool, effective_desert_placement(spec, options.desert_placement), rng)

    strategies = resource_strategy_queue(
        sum(1 for hex_ in board.mutable_hexes if hex_.resource is None),
        options.resource_distribution,
        rng,
    )
    failure = _place_port_resources(board, spec, pool, strategies, options)
    if failure is not None:
        return failure
    failure = _place_remaining_resources(board, spec, pool, strategies)
    if failure is not None:
        return failure
    return _place_numbers(board, spec, options, rng)


def effective_desert_placement(spec: BoardSpec, placement: DesertPlacement) -> DesertPlacement:
    if spec.all_coastal_hexes:
        return DesertPlacement.RANDOM
    if not spec.center_coords and placement in (DesertPlacement.CENTER, DesertPlacement.OFF_CENTER):
        return DesertPlacement.INLAND
    return placement


def desert_candidates(board: Board, spec: BoardSpec, placement: DesertPlacement) -> List[Hex]:
    open_hexes = [
        hex_
        for hex_ in board.mutable_hexes
        if hex_.resource is None and spec.is_resource_allowed(hex_, ResourceType.DESERT)
    ]
    if placement is DesertPlacement.CENTER:
        return [hex_ for hex_ in open_hexes if hex_.coordinate in spec.center_coords]
    if placement is DesertPlacement.COAST:
        return [hex_ for hex_ in open_hexes if hex_.is_coastal and len(hex_.typed_port_resources()) < 2]
    if placement in (DesertPlacement.OFF_CENTER, DesertPlacement.INLAND):
        return [
            hex_
            for hex_ in open_hexes
            if not hex_.is_coastal and hex_.coordinate not in spec.center_coords
        ]
    return []


def _assign_ports(board: Board, spec: BoardSpec, options: GenerationOptions, rng: IndexSource) -> None:
    if not options.shuffle_ports and spec.has_default_port_resources:
        return
    queue = RandomQueue(board.default_port_resources, rng=rng)
    shuffled = [queue.pop() for _ in board.ports]
    board.set_port_resources([resource for resource in shuffled if resource is not None])


def _place_deserts(
    board: Board,
    spec: BoardSpec,
    pool: RandomQueue[ResourceType],
    placement: DesertPlacement,
    rng: IndexSource,
) -> None:
    if placement is DesertPlacement.RANDOM:
        return
    candidates = RandomQueue(desert_candidates(board, spec, placement), rng=rng)
    while ResourceType.DESERT in pool:
        hex_ = candidates.pop()
        if hex_ is None:
            # Whatever is left goes through normal resource placement.
            logger.debug(
                "%s: no %s hex left for %d desert(s)",
                spec.label,
                placement.value,
                pool.count(ResourceType.DESERT),
            )
            return
        hex_.resource = ResourceType.DESERT
        pool.remove(ResourceType.DESERT)
        if placement is not DesertPlacement.CENTER:
            for neighbor in hex_.neighbors:
                candidates.remove(neighbor)


def _disallowed(spec: BoardSpec, hex_: Hex, pool: RandomQueue[ResourceType]) -> Set[ResourceType]:
    return {resource for resource in pool if not spec.is_resource_allowed(hex_, resource)}


def _place_port_resources(
    board: Board,
    spec: BoardSpec,
    pool: RandomQueue[ResourceType],
    strategies: RandomQueue[ResourcePlacement],
    options: GenerationOptions,
) -> Optional[PlacementFailure]:
    for hex_ in board.mutable_hexes:
        if hex_.resource is not None:
            continue
        port_resources = hex_.typed_port_resources()
        if not port_resources:
            continue

        excluded = _disallowed(spec, hex_, pool)
        excluded.add(ResourceType.DESERT)
        if not options.allow_resource_on_port:
            excluded |= port_resources
        resource = place_resource(hex_, pool, strategies.pop() or ResourcePlacement.EVEN, excluded)
        if resource is None:
            return PlacementFailure("port resources", f"no resource fits the port hex at {hex_.coordinate}")
        hex_.resource = resource
    return None


def _place_remaining_resources(
    board: Board,
    spec: BoardSpec,
    pool: RandomQueue[ResourceType],
    strategies: RandomQueue[ResourcePlacement],
) -> Optional[PlacementFailure]:
    for hex_ in board.mutable_hexes:
        if hex_.resource is not None:
            continue
        excluded = _disallowed(spec, hex_, pool)
        resource = place_resource(hex_, pool, strategies.pop() or ResourcePlacement.EVEN, excluded)
        if resource is None:
            return PlacementFailure("resources", f"no resource fits the hex at {hex_.coordinate}")
        hex_.resource = resource
    return None


def _place_numbers(
    board: Board,
    spec: BoardSpec,
    options: GenerationOptions,
    rng: IndexSource,
) -> Optional[PlacementFailure]:
    # Best numbers at the end, so the next one to place is always numbers[-1].
    numbers = sorted(spec.roll_numbers(), key=pip_weight)
    unnumbered = [hex_ for hex_ in board.mutable_hexes if hex_.is_productive]
    if len(unnumbered) != len(numbers):
        return PlacementFailure(
            "numbers", f"{len(unnumbered)} productive hexes for {len(numbers)} roll numbers"
        )

    def may_take(hex_: Hex, number: int) -> bool:
        if options.separate_red_numbers and number in RED_NUMBERS:
            return not any(neighbor.roll_number in RED_NUMBERS for neighbor in hex_.neighbors)
        return True

    def assign(hex_: Hex) -> None:
        hex_.roll_number = numbers.pop()
        unnumbered.remove(hex_)

    inland = [hex_ for hex_ in unnumbered if not hex_.is_coastal]
    if inland and numbers:
        hex_ = RandomQueue([h for h in inland if may_take(h, numbers[-1])], rng=rng).pop()
        if hex_ is None:
            return PlacementFailure("numbers", "no inland hex can take the best roll number")
        assign(hex_)

    productive_types = sorted(
        {hex_.resource for hex_ in board.mutable_hexes if hex_.is_productive and hex_.resource is not None},
        key=lambda resource: resource.value,
    )
    if len(productive_types) > 1:
        for resource in productive_types:
            if not numbers:
                break
            if any(hex_.roll_number is not None and hex_.resource is resource for hex_ in board.mutable_hexes):
                continue
            candidates = [
                hex_
                for hex_ in unnumbered
                if hex_.resource is resource
                and may_take(hex_, numbers[-1])
                and not any(
                    neighbor.roll_number is not None and neighbor.resource is resource
                    for neighbor in hex_.neighbors
                )
            ]
            hex_ = RandomQueue(candidates, rng=rng).pop()
            if hex_ is None:
                return PlacementFailure("numbers", f"no {resource.value} hex can take a good roll number")
            assign(hex_)

    strategies = number_strategy_queue(len(unnumbered), options.number_distribution, rng)
    while unnumbered:
        number = numbers[-1]
        score_board(board, next_number=number, allow_resource_on_port=options.allow_resource_on_port)
        eligible = [hex_ for hex_ in unnumbered if may_take(hex_, number)]
        hex_ = choose_number_hex(eligible, strategies.pop() or NumberPlacement.FAIR, rng)
        if hex_ is None:
            return PlacementFailure("numbers", f"no hex can take a {number}")
        assign(hex_)
    return None
