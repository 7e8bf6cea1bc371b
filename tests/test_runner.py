"""Run the suite without pytest: python tests/test_runner.py"""
import os
import sys
import unittest

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

if __name__ == '__main__':
    sys.path.insert(0, ROOT)
    suite = unittest.defaultTestLoader.discover(
        os.path.join(ROOT, 'tests'), pattern='test_*.py', top_level_dir=ROOT
    )
    result = unittest.TextTestRunner(verbosity=2).run(suite)
    sys.exit(0 if result.wasSuccessful() else 1)
