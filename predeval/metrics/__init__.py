"""
metrics/
========
Built-in metrics, one module per metric kind.

Every metric here is created with the public factories in
predeval.metric, exactly like a user-defined metric, so any of them can be
combined with custom metrics in a metric_set().

    numeric.py        → rmse, mae, rsq, msd
    classification.py → accuracy, kap, precision, recall, f_meas
    probability.py    → gain_capture, mn_log_loss
"""

from predeval.metrics.numeric import mae, msd, rmse, rsq
from predeval.metrics.classification import (
    accuracy,
    f_meas,
    kap,
    precision,
    recall,
)
from predeval.metrics.probability import gain_capture, mn_log_loss

__all__ = [
    "rmse",
    "mae",
    "rsq",
    "msd",
    "accuracy",
    "kap",
    "precision",
    "recall",
    "f_meas",
    "gain_capture",
    "mn_log_loss",
]
