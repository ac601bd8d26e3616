"""
exceptions.py
=============
Error taxonomy for predeval.

Every error is a programming or input error the caller has to fix: they
are raised where the problem is detected and are never caught inside the
library. Each class also derives from the closest builtin exception so
code written against ValueError / TypeError keeps working.
"""

from __future__ import annotations


class PredevalError(Exception):
    """Base class for all predeval errors."""


class InvalidMetricError(PredevalError, TypeError):
    """A metric is not callable, not a Metric, unnamed, duplicated or unknown."""


class InvalidDirectionError(PredevalError, ValueError):
    """Direction is not one of maximize / minimize / zero."""


class IncompatibleMetricKindsError(PredevalError, ValueError):
    """Numeric metrics were combined with class or class-probability metrics."""

    def __init__(self, numeric: list[str], other: list[str]) -> None:
        self.numeric = list(numeric)
        self.other   = list(other)
        super().__init__(
            "Numeric metrics cannot be combined with class or class-probability "
            f"metrics. Numeric: {self.numeric}. Class/probability: {self.other}."
        )


class EmptySetError(PredevalError, ValueError):
    """A metric set was requested with no members."""


class MissingValueError(PredevalError, ValueError):
    """Missing truth/estimate values were found while na_rm=False."""


class NoPositiveEventsError(PredevalError, ValueError):
    """A curve was requested for data that contains no events."""


class MalformedInputError(PredevalError, ValueError):
    """Columns, types, levels or lengths of the input do not fit the call."""
