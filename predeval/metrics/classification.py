"""
metrics/classification.py
=========================
Metrics for hard predicted class labels.

Truth and estimate arrive as categoricals sharing the same levels, so
both are compared through their integer level codes.

    accuracy  → fraction of exact matches
    kap       → Cohen's kappa
    precision → positive predictive value
    recall    → sensitivity
    f_meas    → F1 score

precision, recall and f_meas average over levels when there are more
than two: "multiclass" (automatic) and "macro" give the unweighted mean,
"macro_weighted" weights by level support, "micro" pools the counts. For
two levels the event level decides which class counts as positive.
"""

from __future__ import annotations

from sklearn.metrics import (
    accuracy_score,
    cohen_kappa_score,
    f1_score,
    precision_score,
    recall_score,
)

from predeval.metric import new_class_metric

# predeval estimator → sklearn `average`
_AVERAGE = {
    "binary":         "binary",
    "multiclass":     "macro",
    "macro":          "macro",
    "macro_weighted": "weighted",
    "micro":          "micro",
}


def _accuracy(truth, estimate, estimator, event_level) -> float:
    y_true, y_pred, _ = _codes(truth, estimate)
    return float(accuracy_score(y_true, y_pred))


def _kap(truth, estimate, estimator, event_level) -> float:
    y_true, y_pred, labels = _codes(truth, estimate)
    return float(cohen_kappa_score(y_true, y_pred, labels=labels))


def _precision(truth, estimate, estimator, event_level) -> float:
    return _averaged(precision_score, truth, estimate, estimator, event_level)


def _recall(truth, estimate, estimator, event_level) -> float:
    return _averaged(recall_score, truth, estimate, estimator, event_level)


def _f_meas(truth, estimate, estimator, event_level) -> float:
    return _averaged(f1_score, truth, estimate, estimator, event_level)


accuracy  = new_class_metric(_accuracy,  "maximize", name="accuracy")
kap       = new_class_metric(_kap,       "maximize", name="kap")
precision = new_class_metric(_precision, "maximize", name="precision")
recall    = new_class_metric(_recall,    "maximize", name="recall")
f_meas    = new_class_metric(_f_meas,    "maximize", name="f_meas")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _codes(truth, estimate):
    labels = list(range(len(truth.cat.categories)))
    return truth.cat.codes.to_numpy(), estimate.cat.codes.to_numpy(), labels


def _averaged(score_fn, truth, estimate, estimator, event_level) -> float:
    y_true, y_pred, labels = _codes(truth, estimate)
    average = _AVERAGE[estimator]

    if average == "binary":
        pos_label = 0 if event_level == "first" else 1
        return float(score_fn(
            y_true, y_pred, labels=labels, pos_label=pos_label,
            average="binary", zero_division=0,
        ))

    return float(score_fn(
        y_true, y_pred, labels=labels, average=average, zero_division=0,
    ))
