"""Configuration objects for binimpurity."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Literal, Sequence

from .aggregators import ImpurityAggregator
from .errors import UnrecognizedImpurityError
from .factory import IMPURITY_NAMES, get_aggregator
from .layout import StatsLayout
from .metrics import Impurity, impurity_from_string

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ImpurityConfig:
    """Choice of impurity family and label arity.

    Parameters
    ----------
    impurity:
        Impurity family:
        - ``"entropy"``: information entropy over class weights,
        - ``"gini"``: Gini impurity over class weights,
        - ``"variance"``: label variance for regression.
    num_classes:
        Number of class labels for the classification families. Ignored for
        ``"variance"``, whose statistics are always ``(count, sum, sum_squares)``.
    """

    impurity: Literal["entropy", "gini", "variance"] = "gini"
    num_classes: int = 2

    def __post_init__(self) -> None:
        if self.impurity not in IMPURITY_NAMES:
            raise UnrecognizedImpurityError(f"Unsupported impurity: {self.impurity}")
        if self.is_classification and self.num_classes < 2:
            raise ValueError("num_classes must be at least 2 for classification impurities")

    @classmethod
    def from_env(cls, **overrides: object) -> "ImpurityConfig":
        """Build a config, letting ``BINIMPURITY_IMPURITY`` override the family."""
        env_impurity = os.getenv("BINIMPURITY_IMPURITY")
        if env_impurity:
            logger.debug("Impurity overridden from environment: %s", env_impurity)
            overrides["impurity"] = env_impurity.lower()
        return cls(**overrides)  # type: ignore[arg-type]

    @property
    def is_classification(self) -> bool:
        return self.impurity != "variance"

    @property
    def stats_size(self) -> int:
        return self.num_classes if self.is_classification else 3

    def make_impurity(self) -> Impurity:
        return impurity_from_string(self.impurity)

    def make_aggregator(self) -> ImpurityAggregator:
        return get_aggregator(self.impurity, self.num_classes)

    def make_layout(self, num_bins: Sequence[int], num_nodes: int = 1) -> StatsLayout:
        return StatsLayout(stats_size=self.stats_size, num_bins=tuple(num_bins), num_nodes=num_nodes)
