"""
test_curves.py
==============
Unit tests for predeval.curves: gain and lift curves.

Location in project:
    predeval/
    └── tests/
        └── test_curves.py
"""

import warnings

import numpy as np
import pandas as pd
import pytest


def _quiet(fn, *args, **kwargs):
    """Call fn with expected warnings (dropped missing rows) silenced."""
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        return fn(*args, **kwargs)


# ---------------------------------------------------------------------------
# Binary gain curve
# ---------------------------------------------------------------------------

class TestGainCurveBinary:

    def test_worked_example(self, example_df):
        from predeval.curves import gain_curve
        r = gain_curve(example_df, "obs", "score")
        assert list(r["sample_index"])        == [1, 2, 3, 4, 5]
        assert list(r["distinct_rank_index"]) == [1, 2, 3, 4, 5]
        assert list(r["percent_tested"]) == pytest.approx([20, 40, 60, 80, 100])
        assert list(r["percent_found"])  == pytest.approx(
            [100 / 3, 200 / 3, 200 / 3, 100, 100]
        )

    def test_result_columns(self, example_df):
        from predeval.curves import gain_curve
        r = gain_curve(example_df, "obs", "score")
        assert list(r.columns) == [
            "sample_index", "distinct_rank_index", "percent_tested", "percent_found",
        ]
        assert r.attrs["curve"] == "gain"

    def test_input_order_does_not_matter(self, example_df):
        from predeval.curves import gain_curve
        shuffled = example_df.iloc[[3, 0, 4, 2, 1]]
        pd.testing.assert_frame_equal(
            gain_curve(shuffled, "obs", "score"),
            gain_curve(example_df, "obs", "score"),
        )

    def test_percent_tested_monotone_and_ends_at_100(self, two_class_df):
        from predeval.curves import gain_curve
        r = gain_curve(two_class_df, "obs", "prob_yes")
        tested = r["percent_tested"].to_numpy()
        found  = r["percent_found"].to_numpy()
        assert (np.diff(tested) >= 0).all()
        assert (np.diff(found)  >= 0).all()
        assert tested.min() > 0
        assert tested[-1] == 100
        assert found[-1]  == pytest.approx(100)

    def test_event_level_second_with_swapped_levels_is_identical(self, example_df):
        from predeval.curves import gain_curve
        # obs lists 1 first; obs_int levels sort as [0, 1] so 1 is second
        first  = gain_curve(example_df, "obs",     "score", event_level="first")
        second = gain_curve(example_df, "obs_int", "score", event_level="second")
        pd.testing.assert_frame_equal(first, second)

    def test_event_level_changes_which_rows_count(self, example_df):
        from predeval.curves import gain_curve
        r = gain_curve(example_df, "obs", "score", event_level="second")
        # events are now the 0s, found at ranks 3 and 5
        assert list(r["percent_found"]) == pytest.approx([0, 0, 50, 50, 100])

    def test_default_event_level_comes_from_config(self, example_df, monkeypatch):
        import predeval.validation
        from predeval.curves import gain_curve
        monkeypatch.setattr(predeval.validation, "DEFAULT_EVENT_LEVEL", "second")
        r = gain_curve(example_df, "obs", "score")
        assert list(r["percent_found"]) == pytest.approx([0, 0, 50, 50, 100])

    def test_invalid_event_level_raises(self, example_df):
        from predeval.curves import gain_curve
        from predeval.exceptions import MalformedInputError
        with pytest.raises(MalformedInputError):
            gain_curve(example_df, "obs", "score", event_level="last")


# ---------------------------------------------------------------------------
# Ties
# ---------------------------------------------------------------------------

class TestTies:

    def _tied(self, truth):
        return pd.DataFrame({
            "obs":   pd.Categorical(truth, categories=[1, 0]),
            "score": [0.9, 0.9, 0.5, 0.5, 0.1],
        })

    def test_tied_scores_collapse_to_last_row_of_block(self):
        from predeval.curves import gain_curve
        r = gain_curve(self._tied([1, 0, 1, 0, 0]), "obs", "score")
        assert list(r["sample_index"])        == [2, 4, 5]
        assert list(r["distinct_rank_index"]) == [1, 2, 3]
        assert list(r["percent_tested"]) == pytest.approx([40, 80, 100])
        assert list(r["percent_found"])  == pytest.approx([50, 100, 100])

    def test_reordering_tied_rows_gives_same_curve(self):
        from predeval.curves import gain_curve
        a = gain_curve(self._tied([1, 0, 1, 0, 0]), "obs", "score")
        b = gain_curve(self._tied([0, 1, 0, 1, 0]), "obs", "score")
        pd.testing.assert_frame_equal(a, b)

    def test_distinct_rank_never_exceeds_sample_index(self):
        from predeval.curves import gain_curve
        r = gain_curve(self._tied([1, 0, 1, 0, 0]), "obs", "score")
        assert (r["distinct_rank_index"] <= r["sample_index"]).all()


# ---------------------------------------------------------------------------
# Lift curve
# ---------------------------------------------------------------------------

class TestLiftCurve:

    def test_first_point_of_worked_example(self, example_df):
        from predeval.curves import lift_curve
        r = lift_curve(example_df, "obs", "score")
        assert r[".lift"].iloc[0] == pytest.approx((100 / 3) / 20)

    def test_lift_is_found_over_tested(self, two_class_df):
        from predeval.curves import gain_curve, lift_curve
        gain = gain_curve(two_class_df, "obs", "prob_yes")
        lift = lift_curve(two_class_df, "obs", "prob_yes")
        expected = gain["percent_found"] / gain["percent_tested"]
        assert list(lift[".lift"]) == pytest.approx(list(expected))

    def test_percent_found_is_dropped(self, example_df):
        from predeval.curves import lift_curve
        r = lift_curve(example_df, "obs", "score")
        assert "percent_found" not in r.columns
        assert list(r.columns)[-1] == ".lift"
        assert r.attrs["curve"] == "lift"

    def test_last_point_is_one(self, example_df):
        from predeval.curves import lift_curve
        r = lift_curve(example_df, "obs", "score")
        assert r[".lift"].iloc[-1] == pytest.approx(1.0)


# ---------------------------------------------------------------------------
# Multiclass
# ---------------------------------------------------------------------------

class TestMulticlassCurves:

    def test_one_block_per_level_in_level_order(self, multiclass_df):
        from predeval.curves import gain_curve
        r = gain_curve(multiclass_df, "obs", "pa", "pb", "pc")
        assert list(r.columns)[0] == "class_level"
        assert list(pd.unique(r["class_level"])) == ["a", "b", "c"]

    def test_each_level_is_a_self_contained_curve(self, multiclass_df):
        from predeval.curves import gain_curve
        r = gain_curve(multiclass_df, "obs", "pa", "pb", "pc")
        for _, block in r.groupby("class_level", sort=False):
            assert block["percent_tested"].iloc[-1] == pytest.approx(100)
            assert block["percent_found"].iloc[-1]  == pytest.approx(100)

    def test_level_block_values(self, multiclass_df):
        from predeval.curves import gain_curve
        r = gain_curve(multiclass_df, "obs", "pa", "pb", "pc")
        a = r[r["class_level"] == "a"]
        # pa has one tie (0.2, 0.2) so 6 rows collapse to 5 points
        assert list(a["sample_index"]) == [1, 2, 3, 5, 6]
        assert list(a["percent_found"]) == pytest.approx([50, 100, 100, 100, 100])

    def test_lift_multiclass(self, multiclass_df):
        from predeval.curves import lift_curve
        r = lift_curve(multiclass_df, "obs", "pa", "pb", "pc")
        assert "class_level" in r.columns
        assert ".lift" in r.columns

    def test_wrong_number_of_score_columns_raises(self, multiclass_df):
        from predeval.curves import gain_curve
        from predeval.exceptions import MalformedInputError
        with pytest.raises(MalformedInputError):
            gain_curve(multiclass_df, "obs", "pa", "pb")

    def test_single_score_column_on_three_levels_raises(self, multiclass_df):
        from predeval.curves import gain_curve
        from predeval.exceptions import MalformedInputError
        with pytest.raises(MalformedInputError):
            gain_curve(multiclass_df, "obs", "pa")


# ---------------------------------------------------------------------------
# Grouped data
# ---------------------------------------------------------------------------

class TestGroupedCurves:

    def test_group_column_comes_first(self, two_class_df):
        from predeval.curves import gain_curve
        r = gain_curve(two_class_df.groupby("fold"), "obs", "prob_yes")
        assert list(r.columns)[0] == "fold"
        assert list(pd.unique(r["fold"])) == ["A", "B"]

    def test_grouped_equals_per_group(self, two_class_df):
        from predeval.curves import gain_curve
        r = gain_curve(two_class_df.groupby("fold"), "obs", "prob_yes")
        for fold in ["A", "B"]:
            expected = gain_curve(two_class_df[two_class_df["fold"] == fold], "obs", "prob_yes")
            got = r[r["fold"] == fold].drop(columns="fold").reset_index(drop=True)
            pd.testing.assert_frame_equal(got, expected)

    def test_grouped_marker(self, two_class_df):
        from predeval.curves import gain_curve
        from predeval.partition import is_grouped
        assert is_grouped(gain_curve(two_class_df.groupby("fold"), "obs", "prob_yes"))
        assert not is_grouped(gain_curve(two_class_df, "obs", "prob_yes"))

    def test_grouped_multiclass_orders_by_group_then_level(self, multiclass_df):
        from predeval.curves import gain_curve
        df = pd.concat(
            [multiclass_df.assign(rep=1), multiclass_df.assign(rep=2)],
            ignore_index=True,
        )
        r = gain_curve(df.groupby("rep"), "obs", "pa", "pb", "pc")
        keys = list(zip(r["rep"], r["class_level"]))
        assert keys == sorted(keys)


# ---------------------------------------------------------------------------
# Errors and missing values
# ---------------------------------------------------------------------------

class TestCurveErrors:

    def test_no_events_raises(self):
        from predeval.curves import gain_curve
        from predeval.exceptions import NoPositiveEventsError
        df = pd.DataFrame({
            "obs":   pd.Categorical([0, 0, 0], categories=[1, 0]),
            "score": [0.3, 0.2, 0.1],
        })
        with pytest.raises(NoPositiveEventsError):
            gain_curve(df, "obs", "score")

    def test_no_events_raises_for_lift_too(self):
        from predeval.curves import lift_curve
        from predeval.exceptions import NoPositiveEventsError
        df = pd.DataFrame({
            "obs":   pd.Categorical([0, 0, 0], categories=[1, 0]),
            "score": [0.3, 0.2, 0.1],
        })
        with pytest.raises(NoPositiveEventsError):
            lift_curve(df, "obs", "score")

    def test_missing_dropped_with_na_rm(self, example_df):
        from predeval.curves import gain_curve
        df = example_df.copy()
        df.loc[2, "score"] = np.nan
        with pytest.warns(UserWarning):
            r = gain_curve(df, "obs", "score")
        assert list(r["sample_index"]) == [1, 2, 3, 4]
        assert r["percent_tested"].iloc[-1] == pytest.approx(100)

    def test_missing_raises_without_na_rm(self, example_df):
        from predeval.curves import gain_curve
        from predeval.exceptions import MissingValueError
        df = example_df.copy()
        df.loc[0, "score"] = np.nan
        with pytest.raises(MissingValueError):
            gain_curve(df, "obs", "score", na_rm=False)

    def test_missing_truth_is_handled_too(self, example_df):
        from predeval.curves import gain_curve
        df = example_df.copy()
        df["obs_int"] = df["obs_int"].astype(float)
        df.loc[4, "obs_int"] = np.nan
        r = _quiet(gain_curve, df, "obs_int", "score", event_level="second")
        assert len(r) == 4

    def test_non_numeric_score_raises(self, example_df):
        from predeval.curves import gain_curve
        from predeval.exceptions import MalformedInputError
        df = example_df.assign(score=["a", "b", "c", "d", "e"])
        with pytest.raises(MalformedInputError):
            gain_curve(df, "obs", "score")

    def test_single_level_truth_raises(self):
        from predeval.curves import gain_curve
        from predeval.exceptions import MalformedInputError
        df = pd.DataFrame({"obs": ["x", "x", "x"], "score": [0.3, 0.2, 0.1]})
        with pytest.raises(MalformedInputError):
            gain_curve(df, "obs", "score")

    def test_missing_column_raises(self, example_df):
        from predeval.curves import gain_curve
        from predeval.exceptions import MalformedInputError
        with pytest.raises(MalformedInputError):
            gain_curve(example_df, "obs", "not_a_column")

    def test_no_score_columns_raises(self, example_df):
        from predeval.curves import gain_curve
        from predeval.exceptions import MalformedInputError
        with pytest.raises(MalformedInputError):
            gain_curve(example_df, "obs")

    def test_length_mismatch_raises(self):
        from predeval.curves import gain_curve_vec
        from predeval.exceptions import MalformedInputError
        with pytest.raises(MalformedInputError):
            gain_curve_vec([1, 0, 1], [0.9, 0.1])


# ---------------------------------------------------------------------------
# Vector interface
# ---------------------------------------------------------------------------

class TestVectorInterface:

    def test_vec_matches_table(self, example_df):
        from predeval.curves import gain_curve, gain_curve_vec
        vec = gain_curve_vec(example_df["obs"], example_df["score"])
        tab = gain_curve(example_df, "obs", "score")
        pd.testing.assert_frame_equal(vec, tab)

    def test_vec_accepts_lists(self):
        from predeval.curves import lift_curve_vec
        r = lift_curve_vec([1, 1, 0, 1, 0], [0.9, 0.8, 0.7, 0.6, 0.5], event_level="second")
        assert r[".lift"].iloc[0] == pytest.approx((100 / 3) / 20)

    def test_vec_accepts_2d_array_for_multiclass(self, multiclass_df):
        from predeval.curves import gain_curve, gain_curve_vec
        vec = gain_curve_vec(multiclass_df["obs"], multiclass_df[["pa", "pb", "pc"]].to_numpy())
        tab = gain_curve(multiclass_df, "obs", "pa", "pb", "pc")
        pd.testing.assert_frame_equal(vec, tab)

    def test_series_index_is_ignored(self, example_df):
        from predeval.curves import gain_curve_vec
        truth = example_df["obs"].set_axis([10, 11, 12, 13, 14])
        r = gain_curve_vec(truth, example_df["score"])
        assert len(r) == 5


# ---------------------------------------------------------------------------
# Plain (non-categorical) labels
# ---------------------------------------------------------------------------

class TestPlainLabelLevels:

    def test_plain_labels_use_table_levels(self, plain_label_df):
        from predeval.curves import gain_curve
        # event "b": fold B holds only events and still gets a curve
        r = gain_curve(plain_label_df.groupby("fold"), "obs", "prob_a", event_level="second")
        b = r[r["fold"] == "B"]
        assert list(b["percent_tested"]) == pytest.approx([50, 100])
        assert list(b["percent_found"])  == pytest.approx([50, 100])

    def test_plain_labels_group_without_event_raises(self, plain_label_df):
        from predeval.curves import gain_curve
        from predeval.exceptions import NoPositiveEventsError
        # event "a" never occurs in fold B
        with pytest.raises(NoPositiveEventsError):
            gain_curve(plain_label_df.groupby("fold"), "obs", "prob_a")

    def test_vec_levels_override(self):
        from predeval.curves import gain_curve_vec
        r = gain_curve_vec(["b", "b"], [0.7, 0.1], event_level="second", levels=["a", "b"])
        assert list(r["percent_found"]) == pytest.approx([50, 100])
