import unittest
import numpy as np
import pandas as pd
from tests.conftest import copy_on_write, make_iris_frame
from cluster_explorer.errors import ConfigurationError, ValidationError
from cluster_explorer.data_processing.clustering_utils import fit_kmeans
from cluster_explorer.data_processing.pca_utils import project, zero_variance_columns


def _labeled_iris():
    df = make_iris_frame()
    fit = fit_kmeans(df, 3, seed=123)
    df['cluster'] = pd.Categorical(fit.labels, categories=[1, 2, 3])
    return df


class TestProject(unittest.TestCase):
    def test_variance_conservation(self):
        bundle = project(_labeled_iris())
        self.assertEqual(len(bundle.explained), 4)
        self.assertAlmostEqual(bundle.explained.sum(), 100.0, places=2)
        self.assertAlmostEqual(bundle.cumulative['cumulative'].iloc[-1], 100.0, places=2)
        self.assertEqual(bundle.cumulative['PC'].tolist(), ['PC1', 'PC2', 'PC3', 'PC4'])

    def test_components_ordered(self):
        bundle = project(_labeled_iris())
        self.assertEqual(bundle.explained.idxmax(), 'PC1')
        self.assertTrue((bundle.explained.diff().dropna() <= 0).all())

    def test_rows_align_and_label_kept(self):
        labeled = _labeled_iris()
        bundle = project(labeled)
        self.assertEqual(len(bundle.pcadf), 150)
        self.assertTrue(bundle.pcadf.index.equals(labeled.index))
        self.assertEqual(bundle.pcadf.columns[-1], 'cluster')
        self.assertEqual(bundle.pcadf['cluster'].tolist(), labeled['cluster'].tolist())
        self.assertLessEqual(len(bundle.components), 4)

    def test_retention_threshold(self):
        labeled = _labeled_iris()
        with copy_on_write():
            bundle = project(labeled, min_variance_pct=5.0)
        expected = [pc for pc, v in bundle.explained.items() if v > 5.0]
        self.assertEqual(bundle.components, expected)
        only_first = project(labeled, min_variance_pct=100.0)
        self.assertEqual(only_first.components, ['PC1'])

    def test_only_first_component_passes_threshold(self):
        a = np.arange(1.0, 11.0)
        noise = np.array([1, -1, 2, -2, 1, 0, -1, 2, -2, 0]) * 1e-6
        labeled = pd.DataFrame({
            'a': a,
            'b': 2 * a,
            'c': 3 * a + noise,
            'cluster': pd.Categorical([1] * 5 + [2] * 5),
        })
        with copy_on_write():
            bundle = project(labeled)
        self.assertEqual(bundle.components, ['PC1'])
        self.assertEqual(list(bundle.pcadf.columns), ['PC1', 'cluster'])
        self.assertEqual(len(bundle.explained), 3)
        self.assertGreater(bundle.explained['PC1'], 99.9)

    def test_scale_is_sample_standard_deviation(self):
        labeled = _labeled_iris()
        bundle = project(labeled)
        features = labeled.drop(columns='cluster')
        np.testing.assert_allclose(bundle.decomposition.scale.to_numpy(), features.std(ddof=1).to_numpy())
        np.testing.assert_allclose(bundle.decomposition.center.to_numpy(), features.mean().to_numpy())
        self.assertAlmostEqual(float((bundle.decomposition.sdev ** 2).sum()), 4.0, places=8)

    def test_zero_variance_and_label_excluded(self):
        labeled = _labeled_iris()
        labeled.insert(0, 'constant', 1.0)
        self.assertEqual(zero_variance_columns(labeled.drop(columns='cluster')), ['constant'])
        bundle = project(labeled)
        self.assertNotIn('constant', bundle.decomposition.rotation.index)
        self.assertNotIn('cluster', bundle.decomposition.rotation.index)
        self.assertEqual(bundle.decomposition.rotation.shape, (4, 4))

    def test_decomposition_scores_reproducible(self):
        labeled = _labeled_iris()
        bundle = project(labeled)
        dec = bundle.decomposition
        features = labeled.drop(columns='cluster')
        z = (features - dec.center) / dec.scale
        scores = z.to_numpy() @ dec.rotation.to_numpy()
        np.testing.assert_allclose(scores[:, 0], bundle.pcadf['PC1'].to_numpy(), atol=1e-8)

    def test_missing_label_column(self):
        with self.assertRaises(ConfigurationError):
            project(make_iris_frame())

    def test_all_constant(self):
        df = pd.DataFrame({'a': [1.0, 1.0, 1.0], 'cluster': [1, 1, 2]})
        with self.assertRaises(ValidationError):
            project(df)


if __name__ == '__main__':
    unittest.main()
