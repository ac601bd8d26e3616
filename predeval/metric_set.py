"""
metric_set.py
=============
Combine several metrics into a single evaluator.

    from predeval import metric_set
    from predeval.metrics import accuracy, kap, gain_capture

    class_metrics = metric_set(accuracy, kap, gain_capture)
    class_metrics(df.groupby("fold"), "obs", "prob_yes", estimate="pred")

The evaluator's argument shape follows from the kinds it contains:

    numeric          evaluate(data, truth, estimate, na_rm=True, **extra_columns)
    class / prob     evaluate(data, truth, *score_columns, estimate=None,
                              estimator=None, na_rm=True, event_level=None)

Numeric metrics can never be combined with class or probability metrics:
their inputs are different columns with different meanings. Class and
probability metrics mix freely; the hard labels then have to be passed by
name (estimate=...) so they cannot be confused with the score columns.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterator

import pandas as pd

from predeval.config import DIRECTION_COL, KIND_COL, METRIC_COL
from predeval.exceptions import (
    EmptySetError,
    IncompatibleMetricKindsError,
    InvalidMetricError,
    MalformedInputError,
)
from predeval.metric import Metric, MetricArgs, MetricKind, evaluate_metrics
from predeval.validation import resolve_event_level


class CombinedKind(str, Enum):
    NUMERIC       = "numeric"
    CLASS_OR_PROB = "class_or_prob"


# ---------------------------------------------------------------------------
# Metric set
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MetricSet:
    """
    An ordered, immutable collection of compatible metrics.

    Calling the set (or its `evaluate` attribute) runs every metric on every
    partition of the data and returns one row per partition per metric.
    """
    metrics:       tuple[Metric, ...]
    combined_kind: CombinedKind
    evaluate:      Callable[..., pd.DataFrame] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "evaluate", _DISPATCHERS[self.combined_kind](self.metrics)
        )

    def __call__(self, *args, **kwargs) -> pd.DataFrame:
        return self.evaluate(*args, **kwargs)

    def __len__(self) -> int:
        return len(self.metrics)

    def __iter__(self) -> Iterator[Metric]:
        return iter(self.metrics)

    @property
    def names(self) -> list[str]:
        return [m.name for m in self.metrics]

    @property
    def signature(self) -> inspect.Signature:
        """Argument shape of the synthesized evaluator."""
        return inspect.signature(self.evaluate)

    def to_frame(self) -> pd.DataFrame:
        """One row per member: name, kind and direction."""
        return pd.DataFrame({
            METRIC_COL:    self.names,
            KIND_COL:      [m.kind.value for m in self.metrics],
            DIRECTION_COL: [m.direction.value for m in self.metrics],
        })


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------

def metric_set(*metrics: Metric) -> MetricSet:
    """
    Validate metrics and build a MetricSet.

    Raises
    ------
    EmptySetError                : no metrics given.
    InvalidMetricError           : a member is not a Metric, or two members
                                   share a name.
    IncompatibleMetricKindsError : numeric metrics mixed with class or
                                   probability metrics.
    """
    if not metrics:
        raise EmptySetError("metric_set() needs at least one metric.")

    not_metrics = [repr(m) for m in metrics if not isinstance(m, Metric)]
    if not_metrics:
        raise InvalidMetricError(
            f"All members of a metric set must be metrics created with "
            f"new_numeric_metric / new_class_metric / new_prob_metric. "
            f"Got: {not_metrics}"
        )

    seen: set[str] = set()
    duplicates = []
    for m in metrics:
        if m.name in seen:
            duplicates.append(m.name)
        seen.add(m.name)
    if duplicates:
        raise InvalidMetricError(
            f"Metric names must be unique within a set. Duplicated: {duplicates}"
        )

    numeric = [m.name for m in metrics if m.kind is MetricKind.NUMERIC]
    other   = [m.name for m in metrics if m.kind is not MetricKind.NUMERIC]
    if numeric and other:
        raise IncompatibleMetricKindsError(numeric, other)

    combined = CombinedKind.NUMERIC if numeric else CombinedKind.CLASS_OR_PROB
    return MetricSet(metrics=tuple(metrics), combined_kind=combined)


# ---------------------------------------------------------------------------
# Dispatchers
# ---------------------------------------------------------------------------

def _numeric_dispatcher(metrics: tuple[Metric, ...]) -> Callable[..., pd.DataFrame]:

    def evaluate(
        data,
        truth: str,
        estimate: str,
        na_rm: bool = True,
        progress: bool | None = None,
        **extra: str,
    ) -> pd.DataFrame:
        """
        Evaluate numeric metrics.

        Extra keyword arguments name additional numeric columns; each metric
        receives that partition's values under the same keyword
        (e.g. sample_weight="w").
        """
        not_columns = sorted(k for k, v in extra.items() if not isinstance(v, str))
        if not_columns:
            raise MalformedInputError(
                f"Extra numeric arguments must be column names, got values for: "
                f"{not_columns}"
            )
        args = MetricArgs(truth=truth, estimate=estimate, na_rm=na_rm, extra=dict(extra))
        return evaluate_metrics(data, metrics, args, progress=progress)

    return evaluate


def _class_prob_dispatcher(metrics: tuple[Metric, ...]) -> Callable[..., pd.DataFrame]:
    class_names = [m.name for m in metrics if m.kind is MetricKind.CLASS]
    prob_names  = [m.name for m in metrics if m.kind is MetricKind.CLASS_PROB]

    def evaluate(
        data,
        truth: str,
        *scores: str,
        estimate: str | None = None,
        estimator: str | None = None,
        na_rm: bool = True,
        event_level: str | None = None,
        progress: bool | None = None,
    ) -> pd.DataFrame:
        """
        Evaluate class and class-probability metrics.

        Positional columns after truth are probability scores (one for a
        binary outcome, one per truth level otherwise). Hard predicted
        labels go in estimate=, by name.
        """
        if class_names and estimate is None:
            raise MalformedInputError(
                f"Class metrics {class_names} need the predicted labels: "
                f"pass estimate=<column> by name."
            )
        if prob_names and not scores:
            raise MalformedInputError(
                f"Probability metrics {prob_names} need score column(s) "
                f"after truth."
            )
        args = MetricArgs(
            truth=truth,
            estimate=estimate,
            scores=tuple(scores),
            estimator=estimator,
            na_rm=na_rm,
            event_level=resolve_event_level(event_level),
        )
        return evaluate_metrics(data, metrics, args, progress=progress)

    return evaluate


_DISPATCHERS: dict[CombinedKind, Callable] = {
    CombinedKind.NUMERIC:       _numeric_dispatcher,
    CombinedKind.CLASS_OR_PROB: _class_prob_dispatcher,
}
