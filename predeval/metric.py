"""
metric.py
=========
Metric descriptors.

A Metric pairs a plain vector function with the metadata that the metric
set builder and tuning tools consult: its kind (numeric, class or
class-probability) and its direction of optimality (maximize, minimize or
zero). The function itself never sees that metadata.

    def my_mae(truth, estimate, sample_weight=None):
        return float(np.average(np.abs(truth - estimate), weights=sample_weight))

    my_mae = new_numeric_metric(my_mae, "minimize")
    my_mae(df, "y", "pred")            # one row per group

What each kind's function receives
----------------------------------
    numeric    fn(truth, estimate, **extra)
               float ndarrays; extra holds the partition's values of any
               additional numeric columns passed by keyword.
    class      fn(truth, estimate, *, estimator, event_level)
               categorical Series sharing the truth levels.
    class_prob fn(truth, estimate, *, estimator, event_level)
               truth is categorical; estimate is a Series of event
               probabilities (binary) or a DataFrame with one column per
               truth level (multiclass). Hard labels passed to a metric
               set with estimate= are not forwarded to probability
               metrics; the argument only exists so class and
               probability metrics share one call shape.

Truth levels are those of the whole table, not of one group: a group that
never sees a level still gets it as a category, so the event level and the
estimator are the same for every group.

All functions return a single float.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable

import pandas as pd

from predeval.config import (
    DIRECTION_COL,
    ESTIMATE_COL,
    ESTIMATOR_COL,
    KIND_COL,
    METRIC_COL,
    NUMERIC_ESTIMATOR,
    RESULT_COLUMNS,
    VALID_DIRECTIONS,
)
from predeval.exceptions import (
    InvalidDirectionError,
    InvalidMetricError,
    MalformedInputError,
)
from predeval.partition import apply_partitions, partition_frame
from predeval.validation import (
    as_factor,
    factor_pair,
    handle_missing,
    require_columns,
    require_numeric,
    truth_levels,
    resolve_estimator,
    resolve_event_level,
)


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class MetricKind(str, Enum):
    NUMERIC    = "numeric"
    CLASS      = "class"
    CLASS_PROB = "class_prob"


class Direction(str, Enum):
    MAXIMIZE = "maximize"
    MINIMIZE = "minimize"
    ZERO     = "zero"


# ---------------------------------------------------------------------------
# Call arguments
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MetricArgs:
    """Column references and options of one evaluation call."""
    truth:       str
    estimate:    str | None = None
    scores:      tuple[str, ...] = ()
    estimator:   str | None = None
    na_rm:       bool = True
    event_level: str = "first"
    extra:       dict[str, str] = field(default_factory=dict)
    levels:      tuple | None = None

    def columns(self) -> list[str]:
        """Every column this call reads, in a stable order."""
        cols = [self.truth]
        if self.estimate is not None:
            cols.append(self.estimate)
        cols.extend(self.scores)
        cols.extend(self.extra.values())
        return cols


# ---------------------------------------------------------------------------
# Descriptor
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Metric:
    """An immutable metric function with its kind and direction."""
    name:      str
    fn:        Callable[..., float] = field(repr=False)
    kind:      MetricKind
    direction: Direction

    def compute(self, frame: pd.DataFrame, args: MetricArgs) -> dict[str, Any]:
        """Evaluate on one partition and return a single result row."""
        estimator, value = _ADAPTERS[self.kind](self, frame, args)
        return {
            METRIC_COL:    self.name,
            ESTIMATOR_COL: estimator,
            ESTIMATE_COL:  float(value),
            DIRECTION_COL: self.direction.value,
            KIND_COL:      self.kind.value,
        }

    def __call__(
        self,
        data,
        truth: str,
        *columns: str,
        estimator: str | None = None,
        na_rm: bool = True,
        event_level: str | None = None,
        progress: bool | None = None,
        **extra: str,
    ) -> pd.DataFrame:
        """
        Evaluate this metric alone on a (possibly grouped) table.

        Numeric and class metrics take exactly one estimate column after
        truth; probability metrics take one score column (binary) or one
        per truth level (multiclass). Extra keyword columns are only
        accepted by numeric metrics.
        """
        if self.kind is MetricKind.CLASS_PROB:
            estimate, scores = None, tuple(columns)
        elif len(columns) == 1:
            estimate, scores = columns[0], ()
        else:
            raise MalformedInputError(
                f"{self.kind.value} metric '{self.name}' takes exactly one "
                f"estimate column, got {list(columns)}."
            )

        if extra and self.kind is not MetricKind.NUMERIC:
            raise MalformedInputError(
                f"Extra columns {sorted(extra)} are only accepted by numeric metrics."
            )

        args = MetricArgs(
            truth=truth,
            estimate=estimate,
            scores=scores,
            estimator=estimator,
            na_rm=na_rm,
            event_level=resolve_event_level(event_level),
            extra=dict(extra),
        )
        return evaluate_metrics(data, (self,), args, progress=progress)


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

def new_numeric_metric(fn: Callable, direction: str, name: str | None = None) -> Metric:
    """Wrap fn as a numeric metric (continuous truth and estimate)."""
    return _new_metric(fn, direction, MetricKind.NUMERIC, name)


def new_class_metric(fn: Callable, direction: str, name: str | None = None) -> Metric:
    """Wrap fn as a class metric (hard predicted labels)."""
    return _new_metric(fn, direction, MetricKind.CLASS, name)


def new_prob_metric(fn: Callable, direction: str, name: str | None = None) -> Metric:
    """Wrap fn as a class-probability metric (predicted probabilities)."""
    return _new_metric(fn, direction, MetricKind.CLASS_PROB, name)


def _new_metric(fn, direction, kind: MetricKind, name: str | None) -> Metric:
    if not callable(fn):
        raise InvalidMetricError(
            f"`fn` must be callable, got {type(fn).__name__}."
        )

    if isinstance(direction, Direction):
        resolved = direction
    elif isinstance(direction, str) and direction in VALID_DIRECTIONS:
        resolved = Direction(direction)
    else:
        raise InvalidDirectionError(
            f"Unknown direction {direction!r}. Valid options: {list(VALID_DIRECTIONS)}"
        )

    if name is None:
        name = getattr(fn, "__name__", None)
    if not isinstance(name, str) or not name or name == "<lambda>":
        raise InvalidMetricError(
            "Metric needs a name: pass name=... for lambdas and callable objects."
        )

    return Metric(name=name, fn=fn, kind=kind, direction=resolved)


# ---------------------------------------------------------------------------
# Evaluation over partitions
# ---------------------------------------------------------------------------

def evaluate_metrics(
    data,
    metrics: tuple[Metric, ...],
    args: MetricArgs,
    progress: bool | None = None,
) -> pd.DataFrame:
    """
    Evaluate metrics on every partition of data.

    Columns are checked and truth levels resolved once against the whole
    table; every partition then yields one row per metric, in metric order.
    """
    parted = partition_frame(data)
    require_columns(parted.source, args.columns())

    kinds = {m.kind for m in metrics}
    if kinds - {MetricKind.NUMERIC} and args.levels is None:
        labels = None
        if MetricKind.CLASS in kinds and args.estimate is not None:
            labels = parted.source[args.estimate]
        levels = truth_levels(parted.source[args.truth], labels)
        args = replace(args, levels=tuple(levels))

    def _one(frame: pd.DataFrame) -> pd.DataFrame:
        rows = [metric.compute(frame, args) for metric in metrics]
        return pd.DataFrame(rows, columns=RESULT_COLUMNS)

    return apply_partitions(parted, _one, progress=progress, desc="Evaluating")


# ---------------------------------------------------------------------------
# Kind adapters: compute(metric, partition, args) -> (estimator, value)
# ---------------------------------------------------------------------------

def _compute_numeric(metric: Metric, frame: pd.DataFrame, args: MetricArgs):
    if args.estimate is None:
        raise MalformedInputError(
            f"Numeric metric '{metric.name}' needs an estimate column."
        )
    cols  = [args.truth, args.estimate, *args.extra.values()]
    frame = handle_missing(frame, cols, args.na_rm, metric.name)
    for col in cols:
        require_numeric(frame[col], col)

    extra = {key: frame[col].to_numpy(dtype=float) for key, col in args.extra.items()}
    value = metric.fn(
        frame[args.truth].to_numpy(dtype=float),
        frame[args.estimate].to_numpy(dtype=float),
        **extra,
    )
    return NUMERIC_ESTIMATOR, value


def _compute_class(metric: Metric, frame: pd.DataFrame, args: MetricArgs):
    if args.estimate is None:
        raise MalformedInputError(
            f"Class metric '{metric.name}' needs the predicted labels: "
            f"pass estimate=<column> by name."
        )
    frame = handle_missing(frame, [args.truth, args.estimate], args.na_rm, metric.name)
    truth, estimate = factor_pair(
        frame[args.truth], frame[args.estimate], levels=args.levels,
    )

    estimator = resolve_estimator(args.estimator, len(truth.cat.categories) > 2)
    value = metric.fn(
        truth, estimate, estimator=estimator, event_level=args.event_level,
    )
    return estimator, value


def _compute_prob(metric: Metric, frame: pd.DataFrame, args: MetricArgs):
    if not args.scores:
        raise MalformedInputError(
            f"Probability metric '{metric.name}' needs at least one score column."
        )
    cols  = [args.truth, *args.scores]
    frame = handle_missing(frame, cols, args.na_rm, metric.name)
    for col in args.scores:
        require_numeric(frame[col], col)

    truth  = as_factor(frame[args.truth], levels=args.levels)
    levels = list(truth.cat.categories)

    if len(args.scores) == 1:
        if len(levels) != 2:
            raise MalformedInputError(
                f"'{metric.name}': one score column needs exactly 2 truth levels, "
                f"got {len(levels)}: {levels}."
            )
        estimate = frame[args.scores[0]].reset_index(drop=True)
    else:
        if len(args.scores) != len(levels):
            raise MalformedInputError(
                f"'{metric.name}': got {len(args.scores)} score column(s) for "
                f"{len(levels)} truth level(s) {levels}."
            )
        estimate = frame[list(args.scores)].reset_index(drop=True)

    estimator = resolve_estimator(args.estimator, len(args.scores) > 1)
    value = metric.fn(
        truth, estimate, estimator=estimator, event_level=args.event_level,
    )
    return estimator, value


_ADAPTERS: dict[MetricKind, Callable] = {
    MetricKind.NUMERIC:    _compute_numeric,
    MetricKind.CLASS:      _compute_class,
    MetricKind.CLASS_PROB: _compute_prob,
}
