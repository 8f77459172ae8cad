from __future__ import annotations

import dataclasses
import logging
from statistics import fmean
from typing import Optional

from catan_generator.domain.specs import BoardSpec, ScoreRange

from .generators import BalancedGenerator
from .types import GenerationOptions

logger = logging.getLogger(__name__)


def calibrate_score_range(
    spec: BoardSpec,
    samples: int = 20,
    options: GenerationOptions | None = None,
    *,
    seed: Optional[int] = None,
) -> ScoreRange:
    """Measures the mean quality of fully greedy and fully fair boards for `spec`.

    The result is what `BoardSpec.score_range` holds, and is what intermediate
    `number_distribution` values interpolate between.
    """
    if samples < 1:
        raise ValueError("samples must be >= 1.")
    base = options or GenerationOptions()

    means = []
    for number_distribution in (0.0, 1.0):
        generator = BalancedGenerator(
            dataclasses.replace(base, number_distribution=number_distribution),
            seed=seed,
        )
        scores = [generator.generate(spec).score for _ in range(samples)]
        means.append(fmean(scores))
        logger.info(
            "%s: number_distribution=%.1f mean %.2f over %d board(s)",
            spec.label,
            number_distribution,
            means[-1],
            samples,
        )

    greedy, fair = means
    return ScoreRange(greedy=round(greedy, 1), fair=round(fair, 1))
