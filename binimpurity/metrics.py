"""Impurity metrics computed from sufficient statistics.

Each metric exposes three equivalent entry points:

``calculate(counts, total_count)``
    Classification form over a label-count vector.
``calculate_moments(count, sum_, sum_squares)``
    Regression form over the first three moments of the label.
``calculate_slice(all_stats, offset, stats_size)``
    Either form, read in place from one slice of a flat stats buffer.

Metrics hold no state, so instances are cheap and interchangeable.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

import numpy as np

from .errors import UnrecognizedImpurityError, UnsupportedOperationError

__all__ = [
    "Entropy",
    "Gini",
    "Impurity",
    "Variance",
    "impurity_from_string",
    "log2",
]

_LN2 = np.log(2.0)


def log2(x: np.ndarray | float) -> np.ndarray | float:
    """Base-2 logarithm as the ratio of natural logarithms."""
    return np.log(x) / _LN2


class Impurity(ABC):
    """Common interface of the impurity families."""

    name: str = ""
    is_classification: bool = False

    def calculate(self, counts: Sequence[float] | np.ndarray, total_count: float) -> float:
        """Impurity of a label-count vector, or 0 if ``total_count == 0``."""
        raise UnsupportedOperationError(f"{type(self).__name__}.calculate")

    def calculate_moments(self, count: float, sum_: float, sum_squares: float) -> float:
        """Impurity from ``(count, sum, sum of squares)``, or 0 if ``count == 0``."""
        raise UnsupportedOperationError(f"{type(self).__name__}.calculate_moments")

    @abstractmethod
    def calculate_slice(self, all_stats: np.ndarray, offset: int, stats_size: int) -> float:
        """Impurity of ``all_stats[offset:offset + stats_size]`` without copying it."""

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(type(self))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class Entropy(Impurity):
    """Information entropy (in bits) for multiclass classification."""

    name = "entropy"
    is_classification = True

    def calculate(self, counts: Sequence[float] | np.ndarray, total_count: float) -> float:
        if total_count == 0:
            return 0.0
        arr = np.asarray(counts, dtype=np.float64)
        # 0 * log2(0) contributes nothing; rounding residue below zero is dropped too
        freq = arr[arr > 0] / total_count
        return float(-np.sum(freq * log2(freq)))

    def calculate_slice(self, all_stats: np.ndarray, offset: int, stats_size: int) -> float:
        view = all_stats[offset : offset + stats_size]
        return self.calculate(view, float(np.sum(view)))


class Gini(Impurity):
    """Gini impurity ``1 - sum(p_i ** 2)`` for multiclass classification."""

    name = "gini"
    is_classification = True

    def calculate(self, counts: Sequence[float] | np.ndarray, total_count: float) -> float:
        if total_count == 0:
            return 0.0
        arr = np.asarray(counts, dtype=np.float64)
        freq = arr[arr > 0] / total_count
        return float(1.0 - np.sum(freq * freq))

    def calculate_slice(self, all_stats: np.ndarray, offset: int, stats_size: int) -> float:
        view = all_stats[offset : offset + stats_size]
        return self.calculate(view, float(np.sum(view)))


class Variance(Impurity):
    """Weighted variance of the label for regression.

    Slices hold ``(count, sum, sum_squares)`` in that order.
    """

    name = "variance"
    is_classification = False

    def calculate_moments(self, count: float, sum_: float, sum_squares: float) -> float:
        if count == 0:
            return 0.0
        return float((sum_squares - (sum_ * sum_) / count) / count)

    def calculate_slice(self, all_stats: np.ndarray, offset: int, stats_size: int) -> float:
        return self.calculate_moments(
            float(all_stats[offset]),
            float(all_stats[offset + 1]),
            float(all_stats[offset + 2]),
        )


_IMPURITIES: dict[str, type[Impurity]] = {
    Entropy.name: Entropy,
    Gini.name: Gini,
    Variance.name: Variance,
}


def impurity_from_string(name: str) -> Impurity:
    """Return a metric instance for ``name`` (case-insensitive)."""
    cls = _IMPURITIES.get(str(name).lower())
    if cls is None:
        raise UnrecognizedImpurityError(
            f"Did not recognize impurity type: {name!r} "
            f"(expected one of {sorted(_IMPURITIES)})"
        )
    return cls()
