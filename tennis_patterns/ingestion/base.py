"""
Shared utilities for row parsing.

Column lookup tolerates the header spellings seen across charting exports.
"""

from __future__ import annotations

import datetime
import logging
from enum import Enum
from typing import Optional, TypeVar

import pandas as pd

log = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


def find_column(df: pd.DataFrame, candidates: list[str]) -> str | None:
    """Find first matching column name from candidates."""
    for c in candidates:
        if c in df.columns:
            return c
    return None


def get_value(row: pd.Series, candidates: list[str]):
    """Get value from first matching column in a row."""
    for c in candidates:
        if c in row.index and pd.notna(row[c]):
            return row[c]
    return None


def safe_int(val, default: int | None = 0) -> int | None:
    """Convert value to int, returning default on failure."""
    if val is None or (isinstance(val, float) and pd.isna(val)):
        return default
    try:
        return int(float(val))
    except (ValueError, TypeError):
        return default


def safe_date(val) -> Optional[datetime.date]:
    """Parse a date or YYYYMMDD stamp, None on failure."""
    if val is None or (isinstance(val, float) and pd.isna(val)):
        return None
    text = str(val).strip()
    fmt = "%Y%m%d" if text.isdigit() and len(text) == 8 else None
    ts = pd.to_datetime(text, format=fmt, errors="coerce")
    if pd.isna(ts):
        return None
    return ts.date()


def parse_enum(val, enum_cls: type[E], default: Optional[E]) -> Optional[E]:
    """Match ``val`` against an enum's values or names, case-insensitively."""
    if val is None or (isinstance(val, float) and pd.isna(val)):
        return default
    text = str(val).strip()
    if not text:
        return default
    for member in enum_cls:
        if text.upper() in (str(member.value).upper(), member.name):
            return member
    return default
