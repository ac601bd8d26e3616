"""
predeval
========
Performance metrics for predictive models over tabular prediction results.

The library has two engines:

    - metric composition : metrics tagged with a kind (numeric, class,
                           class-probability) and a direction, combined
                           into one group-aware evaluator by metric_set()
    - rank-based curves  : gain and lift curves from probability scores,
                           with tie handling, multiclass one-vs-all and
                           one curve per group

Quickstart
----------
    import pandas as pd
    from predeval import metric_set, gain_curve, lift_curve
    from predeval.metrics import accuracy, kap, gain_capture, rmse, mae

    # --- Class + probability metrics, one row per fold per metric ---
    evaluate = metric_set(accuracy, kap, gain_capture)
    results = evaluate(
        df.groupby("fold"),
        "obs",               # truth column
        "prob_yes",          # probability of the event level
        estimate="pred",     # hard predicted labels, always by name
    )

    # --- Numeric metrics ---
    numeric = metric_set(rmse, mae)
    numeric(df, "y", "y_hat")

    # --- Curves ---
    gain_curve(df, "obs", "prob_yes")
    lift_curve(df.groupby("fold"), "obs", "prob_yes", event_level="second")

    # --- Custom metric ---
    from predeval import new_numeric_metric
    def max_error(truth, estimate):
        return float(abs(truth - estimate).max())
    max_error = new_numeric_metric(max_error, "minimize")
"""

from predeval.curves import gain_curve, gain_curve_vec, lift_curve, lift_curve_vec
from predeval.exceptions import (
    EmptySetError,
    IncompatibleMetricKindsError,
    InvalidDirectionError,
    InvalidMetricError,
    MalformedInputError,
    MissingValueError,
    NoPositiveEventsError,
    PredevalError,
)
from predeval.metric import (
    Direction,
    Metric,
    MetricKind,
    new_class_metric,
    new_numeric_metric,
    new_prob_metric,
)
from predeval.metric_set import CombinedKind, MetricSet, metric_set
from predeval.partition import is_grouped, partition_frame
from predeval.registry import get_metric, list_metrics, load_metric_set

__all__ = [
    "metric_set",
    "MetricSet",
    "CombinedKind",
    "Metric",
    "MetricKind",
    "Direction",
    "new_numeric_metric",
    "new_class_metric",
    "new_prob_metric",
    "gain_curve",
    "lift_curve",
    "gain_curve_vec",
    "lift_curve_vec",
    "partition_frame",
    "is_grouped",
    "get_metric",
    "list_metrics",
    "load_metric_set",
    "PredevalError",
    "InvalidMetricError",
    "InvalidDirectionError",
    "IncompatibleMetricKindsError",
    "EmptySetError",
    "MissingValueError",
    "NoPositiveEventsError",
    "MalformedInputError",
]
