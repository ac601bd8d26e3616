"""
validation.py
=============
Input checks shared by the metric adapters and the curve engine.

Everything here raises immediately with a message naming the offending
column, level or option. Nothing is coerced silently: the only data
transformation is dropping rows with missing values when na_rm=True,
and that is always reported with a warning.
"""

from __future__ import annotations

import warnings

import pandas as pd
from pandas.api.types import is_bool_dtype, is_numeric_dtype

from predeval.config import DEFAULT_EVENT_LEVEL, VALID_ESTIMATORS, VALID_EVENT_LEVELS
from predeval.exceptions import MalformedInputError, MissingValueError


# ---------------------------------------------------------------------------
# Columns
# ---------------------------------------------------------------------------

def require_columns(df: pd.DataFrame, cols: list[str]) -> None:
    """Raise a clear error if any required columns are missing."""
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise MalformedInputError(
            f"data is missing required column(s): {missing}. "
            f"Available columns: {list(df.columns)}"
        )


def handle_missing(
    frame: pd.DataFrame,
    cols: list[str],
    na_rm: bool,
    context: str,
) -> pd.DataFrame:
    """
    Drop rows with a missing value in any of cols, or fail.

    Parameters
    ----------
    frame   : Partition (or vector frame) being evaluated.
    cols    : Columns whose missing values matter (truth + estimate(s)).
    na_rm   : True  → drop the rows and warn.
              False → raise MissingValueError.
    context : Short label used as the warning/error prefix.
    """
    mask = frame[cols].isna().any(axis=1)
    n_missing = int(mask.sum())
    if n_missing == 0:
        return frame

    if not na_rm:
        raise MissingValueError(
            f"[{context}] {n_missing} row(s) have missing values in {cols} "
            f"and na_rm=False."
        )

    warnings.warn(
        f"[{context}] {n_missing} row(s) with missing values in {cols} "
        f"were removed before computing."
    )
    return frame.loc[~mask]


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------

def resolve_event_level(event_level: str | None) -> str:
    """Return the effective event level, falling back to the configured default."""
    level = DEFAULT_EVENT_LEVEL if event_level is None else event_level
    if level not in VALID_EVENT_LEVELS:
        raise MalformedInputError(
            f"Unknown event_level '{level}'. Valid options: {list(VALID_EVENT_LEVELS)}"
        )
    return level


def resolve_estimator(estimator: str | None, multiclass: bool) -> str:
    """
    Resolve the averaging strategy for a class or probability metric.

    multiclass is True for class labels with more than two levels and for
    probability metrics given one score column per level. None (or "auto")
    then picks "multiclass", otherwise "binary". An explicit "binary" on
    multiclass input is an error.
    """
    if estimator is None or estimator == "auto":
        return "multiclass" if multiclass else "binary"

    if estimator not in VALID_ESTIMATORS:
        raise MalformedInputError(
            f"Unknown estimator '{estimator}'. "
            f"Valid options: {['auto', *VALID_ESTIMATORS]}"
        )
    if estimator == "binary" and multiclass:
        raise MalformedInputError(
            "estimator='binary' is not valid for multiclass input."
        )
    return estimator


# ---------------------------------------------------------------------------
# Vectors
# ---------------------------------------------------------------------------

def as_series(values) -> pd.Series:
    """Return values as a Series with a fresh 0..n-1 index."""
    if isinstance(values, pd.Series):
        return values.reset_index(drop=True)
    return pd.Series(values)


def as_factor(values, levels: list | None = None) -> pd.Series:
    """
    Return values as a categorical Series.

    Levels are, in order of precedence: the explicit levels argument, the
    categories of an existing Categorical, the sorted distinct non-missing
    values.
    """
    series = as_series(values)
    if levels is None:
        if isinstance(series.dtype, pd.CategoricalDtype):
            return series
        levels = _sorted_levels(series.dropna().unique().tolist())
    return series.astype(pd.CategoricalDtype(categories=list(levels)))


def truth_levels(truth, estimate=None) -> list:
    """
    Levels of a whole truth column.

    A Categorical keeps its categories. Otherwise the levels are the sorted
    distinct non-missing values of truth, joined with those of estimate when
    hard labels are given. Resolve these once per table and pass them to
    every partition so that a group missing a level still sees it.
    """
    truth = as_series(truth)
    if isinstance(truth.dtype, pd.CategoricalDtype):
        return list(truth.cat.categories)
    observed = set(truth.dropna().tolist())
    if estimate is not None:
        observed |= set(as_series(estimate).dropna().tolist())
    return _sorted_levels(list(observed))


def factor_pair(truth, estimate, levels: list | None = None) -> tuple[pd.Series, pd.Series]:
    """
    Return truth and estimate as categoricals sharing the same levels.

    levels defaults to truth_levels(truth, estimate). An estimate value that
    is not a level is an error.
    """
    truth    = as_series(truth)
    estimate = as_series(estimate)
    check_same_length(truth, estimate)

    if levels is None:
        levels = truth_levels(truth, estimate)
    levels = list(levels)

    unknown = set(estimate.dropna().tolist()) - set(levels)
    if unknown:
        raise MalformedInputError(
            f"estimate contains values that are not truth levels: "
            f"{sorted(map(str, unknown))}. Truth levels: {levels}"
        )
    return as_factor(truth, levels), as_factor(estimate, levels)


def require_numeric(values, name: str) -> None:
    """Raise if values are not a numeric (non-boolean) column."""
    if not is_numeric_dtype(values) or is_bool_dtype(values):
        raise MalformedInputError(
            f"'{name}' must be numeric, got dtype {getattr(values, 'dtype', type(values))}."
        )


def check_same_length(truth, estimate) -> None:
    if len(truth) != len(estimate):
        raise MalformedInputError(
            f"truth and estimate must be the same length "
            f"(got {len(truth)} vs {len(estimate)})"
        )


def _sorted_levels(values: list) -> list:
    try:
        return sorted(values)
    except TypeError as e:
        raise MalformedInputError(
            f"Cannot order truth levels of mixed types: {values[:10]}. "
            f"Pass truth as a pandas Categorical to fix the level order."
        ) from e
