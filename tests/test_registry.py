"""
test_registry.py
================
Unit tests for predeval.registry: built-in lookup and YAML metric sets.

Location in project:
    predeval/
    └── tests/
        └── test_registry.py
"""

import pytest


def _write(tmp_path, text):
    path = tmp_path / "metrics.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestGetMetric:

    def test_known_metric(self):
        from predeval.metrics import kap
        from predeval.registry import get_metric
        assert get_metric("kap") is kap

    def test_unknown_metric_lists_options(self):
        from predeval.exceptions import InvalidMetricError
        from predeval.registry import get_metric
        with pytest.raises(InvalidMetricError, match="rmse"):
            get_metric("roc_auc")

    def test_list_metrics_is_sorted(self):
        from predeval.registry import list_metrics
        names = list_metrics()
        assert names == sorted(names)
        assert {"rmse", "accuracy", "gain_capture"} <= set(names)


class TestLoadMetricSet:

    def test_names_in_file_order(self, tmp_path):
        from predeval.registry import load_metric_set
        ms = load_metric_set(_write(tmp_path, "metrics:\n  - kap\n  - gain_capture\n  - accuracy\n"))
        assert ms.names == ["kap", "gain_capture", "accuracy"]

    def test_loaded_set_evaluates(self, tmp_path, numeric_df):
        from predeval.registry import load_metric_set
        ms = load_metric_set(_write(tmp_path, "metrics: [rmse, mae]\n"))
        r = ms(numeric_df.groupby("fold"), "y", "y_hat")
        assert len(r) == 4

    def test_mixed_kinds_raise(self, tmp_path):
        from predeval.exceptions import IncompatibleMetricKindsError
        from predeval.registry import load_metric_set
        with pytest.raises(IncompatibleMetricKindsError):
            load_metric_set(_write(tmp_path, "metrics: [rmse, accuracy]\n"))

    def test_empty_list_raises(self, tmp_path):
        from predeval.exceptions import EmptySetError
        from predeval.registry import load_metric_set
        with pytest.raises(EmptySetError):
            load_metric_set(_write(tmp_path, "metrics: []\n"))

    def test_missing_file_raises(self, tmp_path):
        from predeval.registry import load_metric_set
        with pytest.raises(FileNotFoundError):
            load_metric_set(tmp_path / "nope.yaml")

    @pytest.mark.parametrize("text", ["- rmse\n", "metrics: rmse\n", "metrics: [1, 2]\n", ""])
    def test_bad_structure_raises(self, tmp_path, text):
        from predeval.exceptions import MalformedInputError
        from predeval.registry import load_metric_set
        with pytest.raises(MalformedInputError):
            load_metric_set(_write(tmp_path, text))
