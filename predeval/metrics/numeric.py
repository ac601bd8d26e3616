"""
metrics/numeric.py
==================
Metrics for continuous outcomes.

Each function receives float arrays (truth, estimate) already stripped of
missing values by the numeric adapter, plus an optional sample_weight
array when the caller passes sample_weight=<column>.

    rmse → root mean squared error        (minimize)
    mae  → mean absolute error            (minimize)
    rsq  → squared Pearson correlation    (maximize)
    msd  → mean signed deviation          (zero)
"""

from __future__ import annotations

import math

import numpy as np
from sklearn.metrics import mean_absolute_error, mean_squared_error

from predeval.metric import new_numeric_metric


def _rmse(truth, estimate, sample_weight=None) -> float:
    return math.sqrt(mean_squared_error(truth, estimate, sample_weight=sample_weight))


def _mae(truth, estimate, sample_weight=None) -> float:
    return float(mean_absolute_error(truth, estimate, sample_weight=sample_weight))


def _rsq(truth, estimate, sample_weight=None) -> float:
    """
    Squared correlation between truth and estimate.

    Unlike the coefficient of determination this is always in [0, 1];
    it is undefined (NaN) when either column is constant.
    """
    cov = np.cov(truth, estimate, aweights=sample_weight)
    denom = math.sqrt(cov[0, 0] * cov[1, 1])
    if denom == 0:
        return float("nan")
    return float((cov[0, 1] / denom) ** 2)


def _msd(truth, estimate, sample_weight=None) -> float:
    # truth - estimate: positive when the model under-predicts
    return float(np.average(truth - estimate, weights=sample_weight))


rmse = new_numeric_metric(_rmse, "minimize", name="rmse")
mae  = new_numeric_metric(_mae,  "minimize", name="mae")
rsq  = new_numeric_metric(_rsq,  "maximize", name="rsq")
msd  = new_numeric_metric(_msd,  "zero",     name="msd")
