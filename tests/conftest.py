from contextlib import contextmanager

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
from sklearn.datasets import load_iris


def make_iris_frame():
    """150 rows x 4 numeric columns, no NAs, no categoricals."""
    iris = load_iris()
    cols = ['sepal_length', 'sepal_width', 'petal_length', 'petal_width']
    return pd.DataFrame(iris.data, columns=cols)


def make_iris_with_species():
    df = make_iris_frame()
    df['species'] = pd.Categorical.from_codes(load_iris().target, ['setosa', 'versicolor', 'virginica'])
    return df


def make_customer_frame():
    """Small mixed-type frame with an identifier, a categorical and a constant column."""
    return pd.DataFrame({
        'customer_id': [101, 102, 103, 104, 105, 106, 107, 108],
        'region': ['north', 'south', 'east', 'north', 'south', 'east', 'north', 'south'],
        'spend': [10.0, 200.0, 35.0, 12.0, 210.0, 40.0, 11.0, 190.0],
        'orders': [1, 20, 4, 2, 22, 5, 1, 18],
        'channel_code': [7, 7, 7, 7, 7, 7, 7, 7],
    })


def make_blobs_frame(n_per_cluster=20, seed=0):
    rng = np.random.default_rng(seed)
    centers = np.array([[0.0, 0.0], [10.0, 10.0], [0.0, 10.0]])
    rows = [c + rng.normal(scale=0.5, size=(n_per_cluster, 2)) for c in centers]
    return pd.DataFrame(np.vstack(rows), columns=['x', 'y'])


@contextmanager
def copy_on_write():
    """Run the block with pandas copy-on-write on; pandas 3 has it always on."""
    try:
        ctx = pd.option_context("mode.copy_on_write", True)
        ctx.__enter__()
    except (KeyError, AttributeError):
        yield
        return
    try:
        yield
    finally:
        ctx.__exit__(None, None, None)
