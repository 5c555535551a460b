"""binimpurity: sufficient-statistics impurity for histogram tree training."""

from .aggregators import EntropyAggregator, GiniAggregator, ImpurityAggregator, VarianceAggregator
from .calculators import EntropyCalculator, GiniCalculator, ImpurityCalculator, VarianceCalculator
from .config import ImpurityConfig
from .errors import (
    ImpurityError,
    InvalidLabelError,
    SizeMismatchError,
    UnrecognizedImpurityError,
    UnsupportedOperationError,
)
from .factory import get_aggregator, get_calculator
from .layout import StatsLayout
from .metrics import Entropy, Gini, Impurity, Variance, impurity_from_string

__version__ = "0.1.0"

__all__ = [
    "Entropy",
    "EntropyAggregator",
    "EntropyCalculator",
    "Gini",
    "GiniAggregator",
    "GiniCalculator",
    "Impurity",
    "ImpurityAggregator",
    "ImpurityCalculator",
    "ImpurityConfig",
    "ImpurityError",
    "InvalidLabelError",
    "SizeMismatchError",
    "StatsLayout",
    "UnrecognizedImpurityError",
    "UnsupportedOperationError",
    "Variance",
    "VarianceAggregator",
    "VarianceCalculator",
    "get_aggregator",
    "get_calculator",
    "impurity_from_string",
]
