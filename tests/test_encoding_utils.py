import unittest
import pandas as pd
from cluster_explorer.data_processing.column_utils import ColumnKind, infer_column_kinds
from cluster_explorer.data_processing.encoding_utils import (
    expand_dates,
    lump_levels,
    one_hot_encode,
)


class TestColumnKinds(unittest.TestCase):
    def test_kinds(self):
        df = pd.DataFrame({
            'num': [1.5, 2.5],
            'flag': [True, False],
            'cat': ['a', 'b'],
            'when': pd.to_datetime(['2024-01-01', '2024-02-15']),
        })
        kinds = infer_column_kinds(df)
        self.assertIs(kinds['num'], ColumnKind.NUMERIC)
        self.assertIs(kinds['flag'], ColumnKind.NUMERIC)
        self.assertIs(kinds['cat'], ColumnKind.CATEGORICAL)
        self.assertIs(kinds['when'], ColumnKind.DATE)


class TestOneHotEncode(unittest.TestCase):
    def test_three_levels_give_two_indicators(self):
        df = pd.DataFrame({'x': [1, 2, 3, 4], 'color': ['red', 'green', 'blue', 'red']})
        out = one_hot_encode(df)
        self.assertNotIn('color', out.columns)
        indicators = [c for c in out.columns if c.startswith('color_')]
        self.assertEqual(len(indicators), 2)
        self.assertEqual(out.shape[1], df.shape[1] + 1)
        # first sorted level ('blue') is the redundant one
        self.assertEqual(sorted(indicators), ['color_green', 'color_red'])
        self.assertEqual(out['color_red'].tolist(), [1, 0, 0, 1])

    def test_keep_redundant(self):
        df = pd.DataFrame({'color': ['red', 'green', 'blue']})
        out = one_hot_encode(df, drop_redundant=False)
        self.assertEqual(out.shape[1], 3)

    def test_column_order_preserved(self):
        df = pd.DataFrame({'a': [1, 2], 'cat': ['u', 'v'], 'b': [3, 4]})
        out = one_hot_encode(df)
        self.assertEqual(list(out.columns), ['a', 'cat_v', 'b'])

    def test_limit_lumps_infrequent_levels(self):
        s = pd.Series(['a'] * 5 + ['b'] * 4 + ['c', 'd', 'e'], name='lvl')
        lumped = lump_levels(s, limit=2)
        self.assertEqual(set(lumped.unique()), {'a', 'b', 'OTHER'})
        out = one_hot_encode(s.to_frame(), limit=2)
        self.assertEqual(out.shape[1], 2)

    def test_dates_expanded(self):
        df = pd.DataFrame({'when': pd.to_datetime(['2024-03-01', '2023-12-31'])})
        out = one_hot_encode(df)
        self.assertEqual(
            list(out.columns),
            ['when_year', 'when_month', 'when_day', 'when_weekday', 'when_yday'],
        )
        self.assertEqual(out['when_year'].tolist(), [2024, 2023])
        self.assertEqual(out['when_yday'].tolist(), [61, 365])
        self.assertEqual(one_hot_encode(df, dates=False).shape[1], 0)

    def test_expand_dates_names(self):
        s = pd.Series(pd.to_datetime(['2024-01-01']), name='d')
        self.assertIn('d_month', expand_dates(s).columns)

    def test_booleans_become_int(self):
        df = pd.DataFrame({'flag': [True, False, True]})
        out = one_hot_encode(df)
        self.assertEqual(out['flag'].tolist(), [1, 0, 1])


if __name__ == '__main__':
    unittest.main()
