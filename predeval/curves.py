"""
curves.py
=========
Rank-based cumulative curves: gain and lift.

The motivation behind gain and lift curves is to compare a model against
what one would expect without a model. Contacting a random 10% of a
customer base should capture about 10% of all responders; a model that
ranks customers well captures more than 10% in the same budget.

Construction (binary case)
--------------------------
1. Rows are sorted by the event probability, highest first. The sort is
   stable so tied scores keep their input order.
2. Cumulative event counts are taken down the ranking and divided by the
   total number of events (percent_found) while the row position is
   divided by the number of rows (percent_tested).
3. Rows with identical scores share a distinct_rank_index and collapse to
   a single output row carrying the cumulative values of the last row in
   the tie block: the model cannot separate tied scores, so no curve point
   may sit inside a tie.
4. Lift is percent_found / percent_tested, computed from the gain result.

Multiclass input (one score column per truth level) is handled one level
versus all: one binary curve per level, tagged with class_level and
stacked in level order.

Result columns
--------------
    [group cols...] [class_level] sample_index distinct_rank_index
    percent_tested  percent_found | .lift
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from predeval.config import (
    CLASS_LEVEL_COL,
    CURVE_ATTR,
    DISTINCT_RANK_COL,
    LIFT_COL,
    PERCENT_FOUND_COL,
    PERCENT_TESTED_COL,
    SAMPLE_INDEX_COL,
)
from predeval.exceptions import MalformedInputError, NoPositiveEventsError
from predeval.partition import apply_partitions, partition_frame
from predeval.validation import (
    as_factor,
    as_series,
    check_same_length,
    handle_missing,
    require_columns,
    require_numeric,
    resolve_event_level,
    truth_levels,
)


# ---------------------------------------------------------------------------
# Table interface
# ---------------------------------------------------------------------------

def gain_curve(
    data,
    truth: str,
    *scores: str,
    na_rm: bool = True,
    event_level: str | None = None,
    progress: bool | None = None,
) -> pd.DataFrame:
    """
    Compute the gain curve for every partition of data.

    Parameters
    ----------
    data        : DataFrame, or a DataFrameGroupBy to get one curve per group.
    truth       : Name of the truth column (class labels).
    *scores     : One column with the event probability (binary), or one
                  column per truth level in level order (multiclass).
    na_rm       : Drop rows with missing truth/scores (True) or fail (False).
    event_level : "first" or "second" truth level is the event (binary only).
                  Defaults to DEFAULT_EVENT_LEVEL from config.py.
    progress    : Show a progress bar over partitions.

    Returns
    -------
    DataFrame with attrs["curve"] == "gain" and the grouping recorded in
    attrs["group_vars"].
    """
    return _curve_table(
        data, truth, scores, gain_curve_vec,
        na_rm=na_rm, event_level=event_level, progress=progress, kind="gain",
    )


def lift_curve(
    data,
    truth: str,
    *scores: str,
    na_rm: bool = True,
    event_level: str | None = None,
    progress: bool | None = None,
) -> pd.DataFrame:
    """
    Compute the lift curve for every partition of data.

    Same arguments as gain_curve(). The result has a .lift column in place
    of percent_found; values above 1 mean the model beats random ordering.
    """
    return _curve_table(
        data, truth, scores, lift_curve_vec,
        na_rm=na_rm, event_level=event_level, progress=progress, kind="lift",
    )


# ---------------------------------------------------------------------------
# Vector interface
# ---------------------------------------------------------------------------

def gain_curve_vec(
    truth,
    estimate,
    na_rm: bool = True,
    event_level: str | None = None,
    levels: list | None = None,
) -> pd.DataFrame:
    """
    Gain curve for a single set of vectors.

    Parameters
    ----------
    truth       : Class labels (array-like, ideally a pandas Categorical).
    estimate    : 1-D scores for a binary curve, or a DataFrame / 2-D array
                  with one column per truth level for a multiclass curve.
    na_rm       : Drop rows with any missing value (True) or fail (False).
    event_level : "first" or "second"; ignored for multiclass.
    levels      : Truth levels to use instead of those of truth itself, e.g.
                  the levels of the whole table when truth is one group.
    """
    level = resolve_event_level(event_level)
    truth, estimate = _prepare(truth, estimate, na_rm, levels)
    levels = list(truth.cat.categories)

    if estimate.shape[1] == 1:
        if len(levels) != 2:
            raise MalformedInputError(
                f"A binary curve needs exactly 2 truth levels, got {len(levels)}: "
                f"{levels}. Pass one score column per level for a multiclass curve."
            )
        event = levels[0] if level == "first" else levels[1]
        return _binary_gain(
            (truth == event).to_numpy(),
            estimate.iloc[:, 0].to_numpy(dtype=float),
            event,
        )

    if estimate.shape[1] != len(levels):
        raise MalformedInputError(
            f"Multiclass curves need one score column per truth level: "
            f"got {estimate.shape[1]} column(s) for {len(levels)} level(s) {levels}."
        )

    blocks = []
    for k, lvl in enumerate(levels):
        block = _binary_gain(
            (truth == lvl).to_numpy(),
            estimate.iloc[:, k].to_numpy(dtype=float),
            lvl,
        )
        block.insert(0, CLASS_LEVEL_COL, lvl)
        blocks.append(block)
    return pd.concat(blocks, ignore_index=True)


def lift_curve_vec(
    truth,
    estimate,
    na_rm: bool = True,
    event_level: str | None = None,
    levels: list | None = None,
) -> pd.DataFrame:
    """Lift curve for a single set of vectors: the gain curve, found / tested."""
    res = gain_curve_vec(
        truth, estimate, na_rm=na_rm, event_level=event_level, levels=levels,
    )
    res[LIFT_COL] = res[PERCENT_FOUND_COL] / res[PERCENT_TESTED_COL]
    return res.drop(columns=PERCENT_FOUND_COL)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _curve_table(data, truth, scores, curve_fn, na_rm, event_level, progress, kind):
    if not scores:
        raise MalformedInputError(
            f"{kind}_curve() needs at least one score column after truth."
        )
    parted = partition_frame(data)
    require_columns(parted.source, [truth, *scores])
    levels = truth_levels(parted.source[truth])
    event_level = resolve_event_level(event_level)

    def _one(frame: pd.DataFrame) -> pd.DataFrame:
        return curve_fn(
            frame[truth],
            frame[list(scores)],
            na_rm=na_rm,
            event_level=event_level,
            levels=levels,
        )

    res = apply_partitions(parted, _one, progress=progress, desc=f"{kind} curve")
    res.attrs[CURVE_ATTR] = kind
    return res


def _prepare(truth, estimate, na_rm: bool, levels=None) -> tuple[pd.Series, pd.DataFrame]:
    """Align truth and scores, check types, and handle missing values."""
    truth = as_series(truth)
    if isinstance(estimate, pd.DataFrame):
        estimate = estimate.reset_index(drop=True)
    elif isinstance(estimate, pd.Series):
        estimate = estimate.reset_index(drop=True).to_frame()
    else:
        arr = np.asarray(estimate)
        if arr.ndim > 2:
            raise MalformedInputError(
                f"estimate must be 1-D or 2-D, got {arr.ndim} dimensions."
            )
        estimate = pd.DataFrame(arr.reshape(len(arr), -1) if arr.ndim == 1 else arr)

    check_same_length(truth, estimate)
    for col in estimate.columns:
        require_numeric(estimate[col], str(col))

    # Positional column names: truth is 0, scores are 1..k.
    frame = pd.concat([truth, estimate], axis=1, ignore_index=True)
    frame = handle_missing(frame, list(frame.columns), na_rm, context="curves")

    # Levels come from the full truth vector (or the caller's table) so a
    # Categorical keeps its order and dropped rows keep their level.
    if levels is None:
        levels = truth_levels(truth)
    factor = as_factor(frame[0], levels=levels)
    return factor.reset_index(drop=True), frame.iloc[:, 1:].reset_index(drop=True)


def _binary_gain(is_event: np.ndarray, score: np.ndarray, event) -> pd.DataFrame:
    """Sort-then-scan gain computation for one event definition."""
    n = len(score)
    n_events = int(is_event.sum())
    if n_events == 0:
        raise NoPositiveEventsError(
            f"No rows have the event level {event!r} as truth "
            f"({n} row(s) evaluated); percent found is undefined."
        )

    order    = np.argsort(-score, kind="stable")
    score    = score[order]
    is_event = is_event[order]

    sample_index = np.arange(1, n + 1)
    new_block = np.ones(n, dtype=bool)
    new_block[1:] = score[1:] != score[:-1]
    block_end = np.ones(n, dtype=bool)
    block_end[:-1] = new_block[1:]

    distinct_rank = np.cumsum(new_block)
    events_found  = np.cumsum(is_event)

    return pd.DataFrame({
        SAMPLE_INDEX_COL:   sample_index[block_end],
        DISTINCT_RANK_COL:  distinct_rank[block_end],
        PERCENT_TESTED_COL: sample_index[block_end] / n * 100,
        PERCENT_FOUND_COL:  events_found[block_end] / n_events * 100,
    })
