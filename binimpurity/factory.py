"""Builders for calculators and aggregators keyed by impurity name."""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from .aggregators import EntropyAggregator, GiniAggregator, ImpurityAggregator, VarianceAggregator
from .calculators import EntropyCalculator, GiniCalculator, ImpurityCalculator, VarianceCalculator
from .errors import UnrecognizedImpurityError

__all__ = ["IMPURITY_NAMES", "get_aggregator", "get_calculator"]

logger = logging.getLogger(__name__)

_CALCULATORS: dict[str, type[ImpurityCalculator]] = {
    "gini": GiniCalculator,
    "entropy": EntropyCalculator,
    "variance": VarianceCalculator,
}

_AGGREGATORS: dict[str, type[ImpurityAggregator]] = {
    "gini": GiniAggregator,
    "entropy": EntropyAggregator,
    "variance": VarianceAggregator,
}

IMPURITY_NAMES = frozenset(_CALCULATORS)


def get_calculator(impurity: str, stats: Sequence[float] | np.ndarray) -> ImpurityCalculator:
    """Create a calculator of the given impurity type over ``stats``.

    ``stats`` is copied; the calculator treats it as a standalone slice with
    ``offset = 0`` and ``stats_size = len(stats)``.
    """
    cls = _CALCULATORS.get(impurity)
    if cls is None:
        raise UnrecognizedImpurityError(
            f"ImpurityCalculator builder did not recognize impurity type: {impurity}"
        )
    vector = np.array(stats, dtype=np.float64)
    logger.debug("Building %s over %d stats", cls.__name__, vector.shape[0])
    return cls(vector, vector.copy(), 0, int(vector.shape[0]))


def get_aggregator(impurity: str, num_classes: int = 2) -> ImpurityAggregator:
    """Create the aggregator for ``impurity``; ``num_classes`` is ignored for variance."""
    cls = _AGGREGATORS.get(impurity)
    if cls is None:
        raise UnrecognizedImpurityError(
            f"ImpurityAggregator builder did not recognize impurity type: {impurity}"
        )
    if cls is VarianceAggregator:
        aggregator = cls()
    else:
        aggregator = cls(num_classes)
    logger.debug("Building %r", aggregator)
    return aggregator
