"""
metrics/probability.py
======================
Metrics for predicted class probabilities.

    gain_capture → area between the gain curve and the random-ordering
                   diagonal, relative to the same area for a perfect model
                   (maximize). 1 is a perfect ranking, 0 is random.
    mn_log_loss  → mean log loss (minimize)

gain_capture is built on curves.gain_curve_vec, so ties, event polarity
and the one-vs-all expansion behave exactly as they do for the curves.
Multiclass gain_capture is the mean of the per-level values ("macro",
also the automatic choice) or their mean weighted by level prevalence
("macro_weighted").
"""

from __future__ import annotations

import warnings

import numpy as np
import pandas as pd
from sklearn.metrics import log_loss

from predeval.config import CLASS_LEVEL_COL, PERCENT_FOUND_COL, PERCENT_TESTED_COL
from predeval.curves import gain_curve_vec
from predeval.exceptions import MalformedInputError
from predeval.metric import new_prob_metric


def _gain_capture(truth, estimate, estimator, event_level) -> float:
    curve  = gain_curve_vec(truth, estimate, na_rm=False, event_level=event_level)
    levels = list(truth.cat.categories)
    n      = len(truth)

    if CLASS_LEVEL_COL not in curve.columns:
        if estimator != "binary":
            raise MalformedInputError(
                f"gain_capture with a single score column only supports "
                f"estimator='binary', got '{estimator}'."
            )
        event = levels[0] if event_level == "first" else levels[1]
        return _capture(curve, int((truth == event).sum()) / n)

    if estimator not in ("multiclass", "macro", "macro_weighted"):
        raise MalformedInputError(
            f"gain_capture supports 'macro' and 'macro_weighted' averaging for "
            f"multiclass input, got '{estimator}'."
        )

    captures, weights = [], []
    for level in levels:
        n_events = int((truth == level).sum())
        block = curve[curve[CLASS_LEVEL_COL] == level]
        captures.append(_capture(block, n_events / n))
        weights.append(n_events)

    if estimator == "macro_weighted":
        return float(np.average(captures, weights=weights))
    return float(np.mean(captures))


def _mn_log_loss(truth, estimate, estimator, event_level) -> float:
    levels = list(truth.cat.categories)

    if isinstance(estimate, pd.Series):
        event = levels[0] if event_level == "first" else levels[1]
        y_true = (truth == event).astype(int).to_numpy()
        return float(log_loss(y_true, estimate.to_numpy(dtype=float), labels=[0, 1]))

    return float(log_loss(
        truth.cat.codes.to_numpy(),
        estimate.to_numpy(dtype=float),
        labels=list(range(len(levels))),
    ))


gain_capture = new_prob_metric(_gain_capture, "maximize", name="gain_capture")
mn_log_loss  = new_prob_metric(_mn_log_loss,  "minimize", name="mn_log_loss")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _capture(curve: pd.DataFrame, prevalence: float) -> float:
    """
    Normalised area above the diagonal for one gain curve.

    The curve starts at (0, 0); the perfect model's curve rises straight to
    100% found at prevalence * 100% tested, so its area is 1 - prevalence / 2.
    """
    x = np.r_[0.0, curve[PERCENT_TESTED_COL].to_numpy(dtype=float) / 100]
    y = np.r_[0.0, curve[PERCENT_FOUND_COL].to_numpy(dtype=float) / 100]
    area = float(np.sum(np.diff(x) * (y[1:] + y[:-1]) / 2))

    perfect = 1 - prevalence / 2
    if perfect == 0.5:
        warnings.warn(
            "[gain_capture] every row is an event; no ranking can beat random "
            "ordering and gain capture is undefined (NaN)."
        )
        return float("nan")
    return (area - 0.5) / (perfect - 0.5)
