"""
registry.py
===========
Look up built-in metrics by name and build metric sets from YAML files.

A metric set file lists metric names in the order their rows should
appear in the results:

    # experiments/churn/metrics.yaml
    metrics:
      - accuracy
      - kap
      - gain_capture

    evaluate = load_metric_set("experiments/churn/metrics.yaml")
    results  = evaluate(df, "churned", "prob_yes", estimate="pred")

The usual metric_set() checks apply, so a file mixing numeric and class
metrics fails with IncompatibleMetricKindsError.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from predeval.exceptions import InvalidMetricError, MalformedInputError
from predeval.metric import Metric
from predeval.metric_set import MetricSet, metric_set
from predeval.metrics import (
    accuracy,
    f_meas,
    gain_capture,
    kap,
    mae,
    mn_log_loss,
    msd,
    precision,
    recall,
    rmse,
    rsq,
)

BUILTIN_METRICS: dict[str, Metric] = {
    m.name: m
    for m in (
        rmse, mae, rsq, msd,
        accuracy, kap, precision, recall, f_meas,
        gain_capture, mn_log_loss,
    )
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def list_metrics() -> list[str]:
    """Names of all built-in metrics, sorted."""
    return sorted(BUILTIN_METRICS)


def get_metric(name: str) -> Metric:
    """Return the built-in metric called name."""
    try:
        return BUILTIN_METRICS[name]
    except KeyError:
        raise InvalidMetricError(
            f"Unknown metric '{name}'. Valid options: {list_metrics()}"
        ) from None


def load_metric_set(path: str | Path) -> MetricSet:
    """
    Build a MetricSet from a YAML file with a top-level `metrics` list.

    Raises
    ------
    FileNotFoundError   : path does not exist.
    MalformedInputError : the file has no `metrics` list of names.
    InvalidMetricError  : a name is not a built-in metric.
    EmptySetError       : the list is empty.
    """
    config = _load_yaml(path)

    names = config.get("metrics") if isinstance(config, dict) else None
    if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
        raise MalformedInputError(
            f"{path}: expected a top-level 'metrics' list of metric names, "
            f"e.g.\nmetrics:\n  - accuracy\n  - kap"
        )

    return metric_set(*(get_metric(n) for n in names))


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _load_yaml(path: str | Path) -> Any:
    resolved = Path(path)
    if not resolved.exists():
        raise FileNotFoundError(
            f"Metric set file not found: {resolved}\n"
            f"Make sure you pass the path to a YAML file, e.g.:\n"
            f"  experiments/churn/metrics.yaml"
        )
    with resolved.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)
