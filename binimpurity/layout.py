"""Flat stats buffer layout for (node, feature, bin) triples."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .aggregators import ImpurityAggregator
from .calculators import ImpurityCalculator
from .errors import SizeMismatchError

__all__ = ["StatsLayout"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StatsLayout:
    """Offsets of every (node, feature, bin) slice inside one flat buffer.

    Slices are laid out node-major, then feature, then bin, each
    ``stats_size`` wide. Features may have different bin counts.

    Parameters
    ----------
    stats_size:
        Width of one bin's statistics (``num_classes`` or 3).
    num_bins:
        Number of bins for each feature.
    num_nodes:
        Number of tree nodes sharing the buffer.
    """

    stats_size: int
    num_bins: tuple[int, ...]
    num_nodes: int = 1

    def __post_init__(self) -> None:
        object.__setattr__(self, "num_bins", tuple(int(b) for b in self.num_bins))
        if self.stats_size <= 0:
            raise ValueError("stats_size must be positive")
        if self.num_nodes <= 0:
            raise ValueError("num_nodes must be positive")
        if any(b <= 0 for b in self.num_bins):
            raise ValueError("every feature needs at least one bin")

    @property
    def num_features(self) -> int:
        return len(self.num_bins)

    @property
    def feature_offsets(self) -> np.ndarray:
        """Start of each feature within a node, plus the node width at the end."""
        offsets = np.zeros(self.num_features + 1, dtype=np.int64)
        np.cumsum(np.asarray(self.num_bins, dtype=np.int64) * self.stats_size, out=offsets[1:])
        return offsets

    @property
    def node_stride(self) -> int:
        return int(sum(self.num_bins)) * self.stats_size

    @property
    def size(self) -> int:
        return self.num_nodes * self.node_stride

    def offset(self, node: int, feature: int, bin_: int) -> int:
        if not 0 <= node < self.num_nodes:
            raise IndexError(f"node {node} out of range [0, {self.num_nodes})")
        if not 0 <= feature < self.num_features:
            raise IndexError(f"feature {feature} out of range [0, {self.num_features})")
        if not 0 <= bin_ < self.num_bins[feature]:
            raise IndexError(
                f"bin {bin_} out of range [0, {self.num_bins[feature]}) for feature {feature}"
            )
        return (
            node * self.node_stride
            + int(self.feature_offsets[feature])
            + bin_ * self.stats_size
        )

    def allocate(self) -> np.ndarray:
        logger.debug(
            "Allocating stats buffer: %d nodes x %d bins x %d stats",
            self.num_nodes,
            sum(self.num_bins),
            self.stats_size,
        )
        return np.zeros(self.size, dtype=np.float64)

    def _check_aggregator(self, aggregator: ImpurityAggregator) -> None:
        if aggregator.stats_size != self.stats_size:
            raise SizeMismatchError(
                f"aggregator stats_size {aggregator.stats_size} does not match "
                f"layout stats_size {self.stats_size}"
            )

    def merge_for_feature(
        self,
        all_stats: np.ndarray,
        aggregator: ImpurityAggregator,
        node: int,
        feature: int,
    ) -> None:
        """Turn one feature's bins into cumulative sums, in place.

        Afterwards bin ``b`` holds the statistics of bins ``0..b``, i.e. the
        left child of the split ``bin <= b``.
        """
        self._check_aggregator(aggregator)
        for bin_ in range(1, self.num_bins[feature]):
            aggregator.merge(
                all_stats,
                self.offset(node, feature, bin_),
                self.offset(node, feature, bin_ - 1),
            )

    def merge_buffers(self, all_stats: np.ndarray, other: Sequence[float] | np.ndarray) -> np.ndarray:
        """Add a partial buffer with the same layout into ``all_stats`` in place."""
        other_arr = np.asarray(other, dtype=np.float64)
        if all_stats.shape != (self.size,) or other_arr.shape != (self.size,):
            raise SizeMismatchError(
                f"buffers of shape {all_stats.shape} and {other_arr.shape} do not "
                f"match layout size {self.size}"
            )
        all_stats += other_arr
        return all_stats

    def get_calculator(
        self,
        all_stats: np.ndarray,
        aggregator: ImpurityAggregator,
        node: int,
        feature: int,
        bin_: int,
    ) -> ImpurityCalculator:
        self._check_aggregator(aggregator)
        return aggregator.get_calculator(all_stats, self.offset(node, feature, bin_))
