from __future__ import annotations
from .validate import expect_columns, expect_non_empty, expect_no_missing

__all__ = ["expect_columns", "expect_non_empty", "expect_no_missing"]
