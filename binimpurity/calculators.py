"""Calculators: per-bin views over a flat stats buffer.

A calculator is bound to one ``(offset, stats_size)`` slice of a buffer owned
by the caller. It keeps

* ``stats``: a private copy of the slice taken at construction time, and
* ``all_stats``: a reference to the full buffer, so :meth:`calculate` reads
  the slice exactly the way an aggregator would.

``add`` and ``subtract`` mutate the receiver and return it. They never write
into the caller's buffer; instead ``all_stats`` is replaced by a private copy
carrying the same update. Call :meth:`copy` first when the original value is
still needed, e.g. ``right = parent.copy().subtract(left)``.

Calculators carry no locking and must not be shared between mutating threads.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

import numpy as np

from .errors import InvalidLabelError, SizeMismatchError
from .metrics import Entropy, Gini, Impurity, Variance

__all__ = [
    "EntropyCalculator",
    "GiniCalculator",
    "ImpurityCalculator",
    "VarianceCalculator",
]


def check_stats_buffer(all_stats: object) -> np.ndarray:
    """Return ``all_stats`` unchanged if it is a 1D ``float64`` ndarray."""
    if not isinstance(all_stats, np.ndarray) or all_stats.dtype != np.float64 or all_stats.ndim != 1:
        kind = getattr(all_stats, "dtype", type(all_stats).__name__)
        raise TypeError(f"stats buffer must be a 1D float64 numpy array, got {kind}")
    return all_stats


class ImpurityCalculator(ABC):
    """Sufficient statistics for one (node, feature, bin)."""

    def __init__(
        self,
        stats: Sequence[float] | np.ndarray,
        all_stats: np.ndarray | None = None,
        offset: int = 0,
        stats_size: int | None = None,
    ) -> None:
        self.stats = np.array(stats, dtype=np.float64)
        if self.stats.ndim != 1:
            raise ValueError("stats must be a 1D vector")
        if stats_size is None:
            stats_size = int(self.stats.shape[0])
        if self.stats.shape[0] != stats_size:
            raise SizeMismatchError(
                f"{type(self).__name__} given {self.stats.shape[0]} stats "
                f"but stats_size is {stats_size}."
            )
        if all_stats is None:
            all_stats = self.stats.copy()
            offset = 0
        self.all_stats = check_stats_buffer(all_stats)
        self.offset = int(offset)
        self.stats_size = int(stats_size)

    @classmethod
    def from_slice(cls, all_stats: np.ndarray, offset: int, stats_size: int) -> "ImpurityCalculator":
        """Bind a calculator to ``all_stats[offset:offset + stats_size]``."""
        check_stats_buffer(all_stats)
        if offset < 0 or offset + stats_size > all_stats.shape[0]:
            raise IndexError(
                f"slice [{offset}, {offset + stats_size}) is outside a buffer "
                f"of length {all_stats.shape[0]}"
            )
        view = all_stats[offset : offset + stats_size]
        return cls(view.copy(), all_stats, offset, stats_size)

    @property
    @abstractmethod
    def impurity(self) -> Impurity:
        """Metric this calculator delegates to."""

    def copy(self) -> "ImpurityCalculator":
        """Deep copy; the clone shares no arrays with ``self``."""
        return type(self)(self.stats.copy(), self.all_stats.copy(), self.offset, self.stats_size)

    def calculate(self) -> float:
        """Impurity of the slice this calculator is bound to."""
        return self.impurity.calculate_slice(self.all_stats, self.offset, self.stats_size)

    def _check_operand(self, other: "ImpurityCalculator", verb: str) -> None:
        if self.stats_size != other.stats_size:
            raise SizeMismatchError(
                f"Two ImpurityCalculator instances cannot be {verb} with different "
                f"counts sizes.  Sizes are {self.stats_size} and {other.stats_size}."
            )

    def add(self, other: "ImpurityCalculator") -> "ImpurityCalculator":
        """Add ``other`` into this calculator, modifying and returning ``self``."""
        self._check_operand(other, "added")
        delta = other.stats.copy()
        end = self.offset + self.stats_size
        new_all_stats = self.all_stats.copy()
        self.stats += delta
        new_all_stats[self.offset : end] += delta
        self.all_stats = new_all_stats
        return self

    def subtract(self, other: "ImpurityCalculator") -> "ImpurityCalculator":
        """Subtract ``other`` from this calculator, modifying and returning ``self``."""
        self._check_operand(other, "subtracted")
        delta = other.stats.copy()
        end = self.offset + self.stats_size
        new_all_stats = self.all_stats.copy()
        self.stats -= delta
        new_all_stats[self.offset : end] -= delta
        self.all_stats = new_all_stats
        return self

    @property
    @abstractmethod
    def weighted_count(self) -> float:
        """Untruncated total weight of the slice."""

    @property
    def count(self) -> int:
        """Number of data points accounted for, truncated to an integer."""
        return int(self.weighted_count)

    @property
    @abstractmethod
    def predict(self) -> float:
        """Prediction made from the sufficient statistics."""

    def prob(self, label: float) -> float:
        """Probability of ``label``, or -1 if the family has no probabilities."""
        return -1.0

    def __repr__(self) -> str:
        values = ", ".join(str(float(v)) for v in self.stats)
        return f"{type(self).__name__}(stats = [{values}])"


class _ClassificationCalculator(ImpurityCalculator):
    """Label-weight vector; element ``i`` is the total weight of label ``i``."""

    @property
    def weighted_count(self) -> float:
        return float(np.sum(self.stats))

    @property
    def predict(self) -> float:
        if self.count == 0:
            return 0.0
        # argmax keeps the first maximum, so ties go to the lowest label
        return float(np.argmax(self.stats))

    def prob(self, label: float) -> float:
        lbl = int(label)
        if lbl >= self.stats_size:
            raise InvalidLabelError(
                f"{type(self).__name__}.prob given invalid label: {lbl} "
                f"(should be < {self.stats_size})"
            )
        if lbl < 0:
            raise InvalidLabelError(
                f"{type(self).__name__}.prob does not support negative labels (got {lbl})"
            )
        if self.count == 0:
            return 0.0
        return float(self.stats[lbl] / self.weighted_count)


class EntropyCalculator(_ClassificationCalculator):
    @property
    def impurity(self) -> Impurity:
        return Entropy()


class GiniCalculator(_ClassificationCalculator):
    @property
    def impurity(self) -> Impurity:
        return Gini()


class VarianceCalculator(ImpurityCalculator):
    """``(count, sum, sum_squares)`` of the label."""

    def __init__(
        self,
        stats: Sequence[float] | np.ndarray,
        all_stats: np.ndarray | None = None,
        offset: int = 0,
        stats_size: int | None = None,
    ) -> None:
        super().__init__(stats, all_stats, offset, stats_size)
        if self.stats_size != 3:
            raise SizeMismatchError(
                f"VarianceCalculator requires 3 stats (count, sum, sum_squares), "
                f"got {self.stats_size}."
            )

    @property
    def impurity(self) -> Impurity:
        return Variance()

    @property
    def weighted_count(self) -> float:
        return float(self.stats[0])

    @property
    def predict(self) -> float:
        if self.count == 0:
            return 0.0
        return float(self.stats[1] / self.stats[0])
