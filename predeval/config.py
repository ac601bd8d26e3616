"""
config.py
=========
Central configuration for the predeval library.

All output column names, the fixed enumerations (directions, event levels,
estimators) and the environment-driven defaults live here. If the shape of
a result table changes, this is the only file that needs to be updated.
"""

from __future__ import annotations

import os


# ---------------------------------------------------------------------------
# Environment-driven defaults
# ---------------------------------------------------------------------------

# Which truth level counts as the event when a call passes event_level=None.
# Example: export PREDEVAL_EVENT_LEVEL=second
DEFAULT_EVENT_LEVEL = os.environ.get("PREDEVAL_EVENT_LEVEL", "first")

# Show a tqdm progress bar while iterating over partitions.
# Example: export PREDEVAL_PROGRESS=1
SHOW_PROGRESS = os.environ.get("PREDEVAL_PROGRESS", "").strip().lower() in {
    "1", "true", "yes",
}


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

VALID_DIRECTIONS   = ("maximize", "minimize", "zero")
VALID_EVENT_LEVELS = ("first", "second")

# "multiclass" is what automatic estimator resolution yields for > 2 levels;
# averaging metrics treat it as macro.
VALID_ESTIMATORS = ("binary", "multiclass", "macro", "macro_weighted", "micro")

NUMERIC_ESTIMATOR = "standard"


# ---------------------------------------------------------------------------
# Metric result columns
# ---------------------------------------------------------------------------

METRIC_COL    = "metric_name"
ESTIMATOR_COL = "estimator"
ESTIMATE_COL  = "estimate_value"
DIRECTION_COL = "direction"
KIND_COL      = "kind"

RESULT_COLUMNS = [METRIC_COL, ESTIMATOR_COL, ESTIMATE_COL, DIRECTION_COL, KIND_COL]


# ---------------------------------------------------------------------------
# Curve result columns
# ---------------------------------------------------------------------------

SAMPLE_INDEX_COL   = "sample_index"
DISTINCT_RANK_COL  = "distinct_rank_index"
PERCENT_TESTED_COL = "percent_tested"
PERCENT_FOUND_COL  = "percent_found"
LIFT_COL           = ".lift"
CLASS_LEVEL_COL    = "class_level"


# ---------------------------------------------------------------------------
# DataFrame.attrs markers
# ---------------------------------------------------------------------------

GROUP_VARS_ATTR = "group_vars"
CURVE_ATTR      = "curve"
