"""
conftest.py
===========
Shared pytest fixtures for the predeval test suite.

All fixtures are small synthetic tables; no data files are needed.

Run with:
    pytest tests/ -v

Location in project:
    predeval/
    └── tests/
        └── conftest.py
"""

import pandas as pd
import pytest


# ---------------------------------------------------------------------------
# Binary class / probability data
# ---------------------------------------------------------------------------

@pytest.fixture
def example_df():
    """
    Five rows already in descending score order, 1 is the event.

    obs is a Categorical with the event as its first level; obs_int holds
    the same labels as plain integers (levels sort as [0, 1]).
    """
    truth = [1, 1, 0, 1, 0]
    return pd.DataFrame({
        "obs":     pd.Categorical(truth, categories=[1, 0]),
        "obs_int": truth,
        "score":   [0.9, 0.8, 0.7, 0.6, 0.5],
    })


@pytest.fixture
def two_class_df():
    """Two folds of four rows; fold A is ranked perfectly, fold B is not."""
    return pd.DataFrame({
        "fold":     ["A", "A", "A", "A", "B", "B", "B", "B"],
        "obs":      pd.Categorical(
            ["yes", "yes", "no", "no", "yes", "no", "yes", "no"],
            categories=["yes", "no"],
        ),
        "pred":     ["yes", "yes", "no", "no", "yes", "yes", "no", "no"],
        "prob_yes": [0.9, 0.6, 0.4, 0.2, 0.8, 0.7, 0.3, 0.1],
    })


@pytest.fixture
def plain_label_df():
    """Plain string labels (levels a, b); fold B never sees level "a"."""
    return pd.DataFrame({
        "fold":   ["A", "A", "A", "A", "B", "B"],
        "obs":    ["a", "b", "a", "b", "b", "b"],
        "pred":   ["a", "b", "b", "b", "b", "b"],
        "prob_a": [0.9, 0.2, 0.6, 0.3, 0.7, 0.1],
    })


# ---------------------------------------------------------------------------
# Multiclass data
# ---------------------------------------------------------------------------

@pytest.fixture
def multiclass_df():
    """Three levels, one probability column per level, each row sums to 1."""
    return pd.DataFrame({
        "obs":  ["a", "b", "c", "a", "b", "c"],
        "pred": ["a", "b", "c", "a", "a", "c"],
        "pa":   [0.7, 0.2, 0.1, 0.6, 0.3, 0.2],
        "pb":   [0.2, 0.6, 0.3, 0.3, 0.5, 0.2],
        "pc":   [0.1, 0.2, 0.6, 0.1, 0.2, 0.6],
    })


# ---------------------------------------------------------------------------
# Numeric data
# ---------------------------------------------------------------------------

@pytest.fixture
def numeric_df():
    """Regression results over two folds, with a weight column."""
    return pd.DataFrame({
        "fold":  ["A", "A", "A", "A", "B", "B", "B", "B"],
        "y":     [1.0, 2.0, 3.0, 4.0, 2.0, 4.0, 6.0, 8.0],
        "y_hat": [1.0, 2.0, 3.0, 6.0, 3.0, 3.0, 7.0, 7.0],
        "w":     [1.0, 1.0, 1.0, 3.0, 1.0, 1.0, 1.0, 1.0],
    })
