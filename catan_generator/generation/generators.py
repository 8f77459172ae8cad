from __future__ import annotations

import logging
import random
import time
from abc import ABC, abstractmethod
from typing import Optional

from catan_generator.domain.board import Board, BoardLayout, ResourceType
from catan_generator.domain.random_queue import RandomQueue
from catan_generator.domain.specs import BoardSpec

from .construction import construct_candidate
from .scoring import distance_to_target, evaluate_board, score_target
from .types import (
    DesertPlacement,
    GenerationOptions,
    GenerationResult,
    GeneratorStrategy,
    NoFeasibleBoardError,
    PlacementFailure,
)

logger = logging.getLogger(__name__)


class Generator(ABC):
    def __init__(
        self,
        options: GenerationOptions | None = None,
        *,
        seed: Optional[int] = None,
        rng: random.Random | None = None,
    ) -> None:
        self.options = options or GenerationOptions()
        _validate_options(self.options)
        self._rng = rng if rng is not None else random.Random(seed)

    @abstractmethod
    def generate(self, spec: BoardSpec) -> GenerationResult:
        raise NotImplementedError


class BalancedGenerator(Generator):
    """Best-of-N generator.

    Builds candidates until both `min_attempts` candidates exist and the time
    floor has passed, then keeps the one whose quality is closest to the
    target for `number_distribution`. The first run of an instance uses the
    longer cold-start floor.
    """

    def __init__(
        self,
        options: GenerationOptions | None = None,
        *,
        seed: Optional[int] = None,
        rng: random.Random | None = None,
    ) -> None:
        super().__init__(options, seed=seed, rng=rng)
        self._warmed_up = False

    @property
    def is_warm(self) -> bool:
        return self._warmed_up

    def generate(self, spec: BoardSpec, *, warm_start: Optional[bool] = None) -> GenerationResult:
        options = self.options
        warm = self._warmed_up if warm_start is None else warm_start
        min_time_ms = options.min_time_ms if warm else options.cold_start_min_time_ms
        target = score_target(spec, options.number_distribution)

        board = Board(spec)
        started = time.perf_counter()
        best_layout: BoardLayout | None = None
        best_distance = 0.0
        candidates = 0
        failures = 0
        last_failure: PlacementFailure | None = None

        while True:
            elapsed_ms = (time.perf_counter() - started) * 1000.0
            if candidates >= options.min_attempts and elapsed_ms >= min_time_ms:
                break
            if candidates + failures >= options.max_attempts:
                if best_layout is None:
                    raise NoFeasibleBoardError(
                        f"Unable to build a {spec.label} board after {options.max_attempts} attempts"
                        + (f" (last failure: {last_failure})." if last_failure else ".")
                    )
                logger.warning(
                    "%s: attempt ceiling reached with %d candidate(s)", spec.label, candidates
                )
                break

            failure = construct_candidate(board, spec, options, self._rng)
            if failure is not None:
                failures += 1
                last_failure = failure
                logger.debug("%s: discarded attempt, %s", spec.label, failure)
                continue

            candidates += 1
            quality = evaluate_board(board, allow_resource_on_port=options.allow_resource_on_port)
            distance = distance_to_target(quality, target)
            if best_layout is None or distance < best_distance:
                best_layout = board.snapshot()
                best_distance = distance

        assert best_layout is not None
        board.apply_layout(best_layout)
        score = evaluate_board(board, allow_resource_on_port=options.allow_resource_on_port)
        elapsed_ms = (time.perf_counter() - started) * 1000.0
        self._warmed_up = True
        logger.info(
            "%s: picked score %.2f (target %.2f) from %d candidate(s), %d discarded, %.0f ms",
            spec.label,
            score,
            target,
            candidates,
            failures,
            elapsed_ms,
        )
        return GenerationResult(
            board=board,
            score=score,
            target=target,
            candidates=candidates,
            failures=failures,
            elapsed_ms=elapsed_ms,
            last_failure=last_failure,
        )


class RandomGenerator(Generator):
    """Uniform shuffle with no balancing beyond the shape's placement rules."""

    def generate(self, spec: BoardSpec) -> GenerationResult:
        options = self.options
        board = Board(spec)
        started = time.perf_counter()
        last_failure: PlacementFailure | None = None

        for attempt in range(options.max_attempts):
            failure = self._shuffle(board, spec)
            if failure is not None:
                last_failure = failure
                logger.debug("%s: discarded attempt, %s", spec.label, failure)
                continue

            score = evaluate_board(board, allow_resource_on_port=options.allow_resource_on_port)
            return GenerationResult(
                board=board,
                score=score,
                target=score_target(spec, options.number_distribution),
                candidates=1,
                failures=attempt,
                elapsed_ms=(time.perf_counter() - started) * 1000.0,
                last_failure=last_failure,
            )

        raise NoFeasibleBoardError(
            f"Unable to shuffle a {spec.label} board after {options.max_attempts} attempts."
        )

    def _shuffle(self, board: Board, spec: BoardSpec) -> PlacementFailure | None:
        board.reset()
        if self.options.shuffle_ports or not spec.has_default_port_resources:
            ports = RandomQueue(board.default_port_resources, rng=self._rng)
            board.set_port_resources([ports.pop() for _ in board.ports])

        pool: RandomQueue[ResourceType] = RandomQueue(spec.resources(), rng=self._rng)
        for hex_ in board.mutable_hexes:
            resource = pool.pop_one_of(*(r for r in pool if spec.is_resource_allowed(hex_, r)))
            if resource is None:
                return PlacementFailure("resources", f"no resource fits the hex at {hex_.coordinate}")
            hex_.resource = resource

        numbers = RandomQueue(spec.roll_numbers(), rng=self._rng)
        for hex_ in board.mutable_hexes:
            if hex_.is_productive:
                hex_.roll_number = numbers.pop()
        return None


def create_generator(
    strategy: GeneratorStrategy | str = GeneratorStrategy.BALANCED,
    options: GenerationOptions | None = None,
    *,
    seed: Optional[int] = None,
) -> Generator:
    normalized = GeneratorStrategy(strategy)
    if normalized is GeneratorStrategy.RANDOM:
        return RandomGenerator(options, seed=seed)
    return BalancedGenerator(options, seed=seed)


def _validate_options(options: GenerationOptions) -> None:
    if not (0.0 <= options.resource_distribution <= 1.0):
        raise ValueError("resource_distribution must be between 0.0 and 1.0.")
    if not (0.0 <= options.number_distribution <= 1.0):
        raise ValueError("number_distribution must be between 0.0 and 1.0.")
    if options.min_attempts < 1:
        raise ValueError("min_attempts must be >= 1.")
    if options.min_time_ms < 0.0 or options.cold_start_min_time_ms < 0.0:
        raise ValueError("Minimum generation times must be >= 0.")
    if options.max_attempts < options.min_attempts:
        raise ValueError("max_attempts must be >= min_attempts.")
    DesertPlacement(options.desert_placement)
