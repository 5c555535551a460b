"""Aggregators: in-place updates of per-bin slices of a flat stats buffer.

Aggregator instances hold only ``stats_size``; the buffer itself belongs to
the caller and is passed to every call together with an offset.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

from .calculators import (
    EntropyCalculator,
    GiniCalculator,
    ImpurityCalculator,
    VarianceCalculator,
    check_stats_buffer,
)
from .errors import InvalidLabelError
from .metrics import Entropy, Gini, Impurity, Variance

__all__ = [
    "EntropyAggregator",
    "GiniAggregator",
    "ImpurityAggregator",
    "VarianceAggregator",
]


class ImpurityAggregator(ABC):
    """Updates views of a vector of sufficient statistics.

    Parameters
    ----------
    stats_size:
        Length of the statistics slice for one (node, feature, bin).
    """

    calculator_cls: type[ImpurityCalculator]

    def __init__(self, stats_size: int) -> None:
        if stats_size <= 0:
            raise ValueError("stats_size must be positive")
        self.stats_size = int(stats_size)

    @property
    @abstractmethod
    def impurity(self) -> Impurity:
        """Metric matching this aggregator's statistics."""

    def merge(self, all_stats: np.ndarray, offset: int, other_offset: int) -> None:
        """Add the slice at ``other_offset`` into the slice at ``offset``.

        The slice at ``other_offset`` is left unmodified.
        """
        check_stats_buffer(all_stats)
        size = self.stats_size
        target = all_stats[offset : offset + size]
        np.add(target, all_stats[other_offset : other_offset + size], out=target)

    @abstractmethod
    def update(
        self,
        all_stats: np.ndarray,
        offset: int,
        label: float,
        instance_weight: float = 1.0,
    ) -> None:
        """Account for one observation in the slice starting at ``offset``."""

    def get_calculator(self, all_stats: np.ndarray, offset: int) -> ImpurityCalculator:
        """Calculator viewing the slice starting at ``offset``."""
        return self.calculator_cls.from_slice(all_stats, offset, self.stats_size)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(stats_size={self.stats_size})"


class _ClassificationAggregator(ImpurityAggregator):
    """One weight counter per class label."""

    def update(
        self,
        all_stats: np.ndarray,
        offset: int,
        label: float,
        instance_weight: float = 1.0,
    ) -> None:
        check_stats_buffer(all_stats)
        if label >= self.stats_size:
            raise InvalidLabelError(
                f"{type(self).__name__} given label {label} but requires "
                f"label < numClasses (= {self.stats_size})."
            )
        if label < 0:
            raise InvalidLabelError(
                f"{type(self).__name__} given label {label} but requires "
                f"label is non-negative."
            )
        all_stats[offset + int(label)] += instance_weight


class EntropyAggregator(_ClassificationAggregator):
    calculator_cls = EntropyCalculator

    @property
    def impurity(self) -> Impurity:
        return Entropy()


class GiniAggregator(_ClassificationAggregator):
    calculator_cls = GiniCalculator

    @property
    def impurity(self) -> Impurity:
        return Gini()


class VarianceAggregator(ImpurityAggregator):
    """Slices hold ``(count, sum, sum_squares)``; ``label`` is the target value."""

    calculator_cls = VarianceCalculator

    @property
    def impurity(self) -> Impurity:
        return Variance()

    def __init__(self, stats_size: int = 3) -> None:
        if stats_size != 3:
            raise ValueError("VarianceAggregator requires stats_size == 3")
        super().__init__(stats_size)

    def update(
        self,
        all_stats: np.ndarray,
        offset: int,
        label: float,
        instance_weight: float = 1.0,
    ) -> None:
        check_stats_buffer(all_stats)
        all_stats[offset] += instance_weight
        all_stats[offset + 1] += instance_weight * label
        all_stats[offset + 2] += instance_weight * label * label
