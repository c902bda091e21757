"""Unit tests for z-score feature scaling."""

import numpy as np
import pytest

from cvselect.core.data import Dataset
from cvselect.core.errors import DegenerateFeature, InvalidArgument
from cvselect.core.scaling import FeatureScaler


class TestFeatureScaler:

    def test_known_mean_and_std(self):
        X = np.array([[1.0, 10.0], [2.0, 20.0], [3.0, 30.0], [4.0, 40.0]])
        stats = FeatureScaler.fit(X)
        np.testing.assert_allclose(stats.mean, [2.5, 25.0])
        np.testing.assert_allclose(stats.std, np.std(X, axis=0, ddof=1))

        v = np.array([[5.0, 0.0]])
        expected = (v - stats.mean) / stats.std
        np.testing.assert_allclose(FeatureScaler.transform(v, stats), expected)

    def test_reference_becomes_standardized(self, blob_dataset):
        stats = FeatureScaler.fit(blob_dataset.features)
        Z = FeatureScaler.transform(blob_dataset.features, stats)
        np.testing.assert_allclose(Z.mean(axis=0), 0.0, atol=1e-12)
        np.testing.assert_allclose(Z.std(axis=0, ddof=1), 1.0, atol=1e-12)

    def test_inputs_not_modified(self):
        X = np.array([[1.0, 2.0], [3.0, 5.0], [4.0, 9.0]])
        before = X.copy()
        stats = FeatureScaler.fit(X)
        FeatureScaler.transform(X, stats)
        np.testing.assert_array_equal(X, before)

    def test_constant_column_is_degenerate(self):
        X = np.array([[1.0, 7.0], [2.0, 7.0], [3.0, 7.0]])
        with pytest.raises(DegenerateFeature) as exc_info:
            FeatureScaler.fit(X)
        assert exc_info.value.column == 1

    def test_single_row_is_degenerate(self):
        with pytest.raises(DegenerateFeature):
            FeatureScaler.fit(np.array([[1.0, 2.0]]))

    def test_column_mismatch(self):
        stats = FeatureScaler.fit(np.array([[1.0, 2.0], [2.0, 4.0]]))
        with pytest.raises(InvalidArgument):
            FeatureScaler.transform(np.ones((3, 3)), stats)

    def test_transform_dataset_keeps_labels(self, blob_dataset):
        stats = FeatureScaler.fit(blob_dataset.features)
        scaled = FeatureScaler.transform_dataset(blob_dataset, stats)
        assert isinstance(scaled, Dataset)
        np.testing.assert_array_equal(scaled.labels, blob_dataset.labels)
        assert scaled.feature_names == blob_dataset.feature_names
