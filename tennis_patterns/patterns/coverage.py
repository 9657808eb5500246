"""Data coverage per (year, surface) for one player."""

import pandas as pd

from tennis_patterns.core.schema import PlayerRows

UNKNOWN_SURFACE = "Unknown"


def coverage_frame(rows: PlayerRows) -> pd.DataFrame:
    """One row per charted point with its match's year and surface."""
    records = []
    for p in rows.points:
        m = rows.matches[p.match_id]
        records.append({
            "match_id": p.match_id,
            "point": p.number,
            "year": m.year,
            "surface": m.surface.value if m.surface else UNKNOWN_SURFACE,
        })
    return pd.DataFrame.from_records(records, columns=["match_id", "point", "year", "surface"])


def coverage(rows: PlayerRows) -> dict:
    """Matches and points per (year, surface), newest year first, plus totals."""
    df = coverage_frame(rows)
    if df.empty:
        return {"breakdown": [], "totals": {"matches": 0, "points": 0}}

    df["year"] = df["year"].astype("Int64")
    grouped = (
        df.groupby(["year", "surface"], dropna=False)
        .agg(matches=("match_id", "nunique"), points=("point", "size"))
        .reset_index()
        .sort_values(["year", "surface"], ascending=[False, True], na_position="last")
    )
    breakdown = [
        {
            "year": None if pd.isna(r.year) else int(r.year),
            "surface": r.surface,
            "matches": int(r.matches),
            "points": int(r.points),
        }
        for r in grouped.itertuples(index=False)
    ]
    return {
        "breakdown": breakdown,
        "totals": {"matches": int(df["match_id"].nunique()), "points": int(len(df))},
    }
