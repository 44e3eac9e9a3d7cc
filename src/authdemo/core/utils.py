# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from typing import Iterable, List

import pandas as pd


def norm_key(s: object) -> str:
    """Normalise a header/field key to a stable snake_case-like lower format."""
    return str(s or "").strip().replace(" ", "_").replace("-", "_").lower()


def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Normalise dataframe column names with ``norm_key``."""
    df = df.copy()
    df.columns = pd.Index(df.columns).map(norm_key)
    return df


def missing_columns(df: pd.DataFrame, expected: Iterable[str]) -> List[str]:
    return [c for c in expected if c not in df.columns]
