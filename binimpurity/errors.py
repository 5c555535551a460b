"""Exception types raised by the impurity core."""

from __future__ import annotations


class ImpurityError(Exception):
    """Base class for all impurity contract violations."""


class InvalidLabelError(ImpurityError, ValueError):
    """A classification label fell outside ``[0, stats_size)``."""


class SizeMismatchError(ImpurityError, ValueError):
    """Two statistics vectors of different length were combined."""


class UnsupportedOperationError(ImpurityError, NotImplementedError):
    """The metric family does not provide the requested form of ``calculate``."""


class UnrecognizedImpurityError(ImpurityError, ValueError):
    """An impurity family name outside the supported set was given."""
