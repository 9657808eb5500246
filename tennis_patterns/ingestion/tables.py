"""
CSV row source.

Reads three tables from a data directory and turns them into PlayerRows:

  matches.csv  match_id, first_player_name, second_player_name,
               surface, date, best_of
  points.csv   match_id, number, game_score, set1, set2, gm1, gm2,
               player_won (may be blank), server_side (optional)
  shots.csv    point_match_id, point_number, number, shot_type,
               direction, serve_direction, depth, outcome

Rows missing a required field are skipped and counted. A blank point
winner is inferred from the score progression to the next point.
"""

from __future__ import annotations

import logging
import threading
from collections import Counter
from pathlib import Path
from typing import Optional

import pandas as pd

from tennis_patterns.core.errors import UpstreamUnavailableError
from tennis_patterns.core.interfaces import RowSource
from tennis_patterns.core.schema import (
    Depth, Direction, MatchContext, PlayerRows, PointOutcome,
    ServeDirection, ShotEvent, ShotOutcome, ShotType, Surface,
)
from tennis_patterns.ingestion.base import (
    find_column, get_value, parse_enum, safe_date, safe_int,
)
from tennis_patterns.patterns.filters import GAME_POINTS

log = logging.getLogger(__name__)

MATCH_ID = ["match_id", "id", "matchid", "Match Id"]
PLAYER1 = ["first_player_name", "player1", "Player 1"]
PLAYER2 = ["second_player_name", "player2", "Player 2"]
POINT_MATCH_ID = ["point_match_id", "match_id", "matchid"]
POINT_NUMBER = ["point_number", "number", "Pt"]


# ── Point winner inference ─────────────────────────────────────────────

def _ladder(game_score) -> tuple[int, int]:
    parts = str(game_score or "").strip().upper().split("-")
    if len(parts) != 2:
        return 0, 0
    return GAME_POINTS.get(parts[0], 0), GAME_POINTS.get(parts[1], 0)


def infer_point_winners(points: list[dict]) -> list[Optional[int]]:
    """Winner side for each point of one match, ordered by point number.

    Each dict carries number, game_score, set1, set2, gm1, gm2 and
    server_side. A game or set counter that rises on the next point decides
    it; otherwise the server-perspective game score must step for exactly
    one side. The last point goes to whoever leads in sets.
    """
    winners: list[Optional[int]] = []
    for i, pt in enumerate(points):
        if i + 1 == len(points):
            winners.append(1 if pt["set1"] > pt["set2"] else 2)
            continue
        nxt = points[i + 1]
        if nxt["gm1"] > pt["gm1"] or nxt["set1"] > pt["set1"]:
            winners.append(1)
        elif nxt["gm2"] > pt["gm2"] or nxt["set2"] > pt["set2"]:
            winners.append(2)
        else:
            server = pt["server_side"]
            cur_s, cur_r = _ladder(pt["game_score"])
            nxt_s, nxt_r = _ladder(nxt["game_score"])
            if nxt_s > cur_s and nxt_r <= cur_r:
                winners.append(server)
            elif nxt_r > cur_r and nxt_s <= cur_s:
                winners.append(2 if server == 1 else 1)
            else:
                winners.append(None)
    return winners


# ── Row builders ───────────────────────────────────────────────────────

def build_match(row: pd.Series) -> Optional[MatchContext]:
    match_id = get_value(row, MATCH_ID)
    p1 = get_value(row, PLAYER1)
    p2 = get_value(row, PLAYER2)
    if match_id is None or p1 is None or p2 is None or str(p1) == str(p2):
        return None
    winner = safe_int(get_value(row, ["winner_side"]), 1)
    return MatchContext(
        match_id=str(match_id),
        player1=str(p1),
        player2=str(p2),
        surface=parse_enum(get_value(row, ["surface", "Surface"]), Surface, None),
        date=safe_date(get_value(row, ["date", "Date"])),
        best_of=safe_int(get_value(row, ["best_of", "Best of"]), None),
        winner_side=winner if winner in (1, 2) else 1,
    )


def build_shot(row: pd.Series) -> Optional[ShotEvent]:
    index = safe_int(get_value(row, ["number", "shot_number", "shot_num"]), None)
    if index is None or index < 0:
        return None
    return ShotEvent(
        index=index,
        shot_type=parse_enum(get_value(row, ["shot_type"]), ShotType, ShotType.UNKNOWN_SHOT_TYPE),
        direction=parse_enum(get_value(row, ["direction"]), Direction, Direction.UNKNOWN_DIRECTION),
        serve_direction=parse_enum(
            get_value(row, ["serve_direction"]), ServeDirection,
            ServeDirection.UNKNOWN_SERVE_DIRECTION,
        ),
        depth=parse_enum(get_value(row, ["depth"]), Depth, None),
        outcome=parse_enum(get_value(row, ["outcome"]), ShotOutcome, None),
    )


def _point_record(row: pd.Series) -> Optional[dict]:
    number = safe_int(get_value(row, POINT_NUMBER), None)
    if number is None or number < 1:
        return None
    server = safe_int(get_value(row, ["server_side", "Svr"]), None)
    if server not in (1, 2):
        server = 1 if number % 2 == 1 else 2
    won = safe_int(get_value(row, ["player_won", "winner_side"]), None)
    return {
        "number": number,
        "game_score": str(get_value(row, ["game_score", "Pts"]) or ""),
        "set1": safe_int(get_value(row, ["set1", "Set1"])),
        "set2": safe_int(get_value(row, ["set2", "Set2"])),
        "gm1": safe_int(get_value(row, ["gm1", "Gm1"])),
        "gm2": safe_int(get_value(row, ["gm2", "Gm2"])),
        "server_side": server,
        "player_won": won if won in (1, 2) else None,
    }


def build_player_rows(
    player: str,
    matches_df: pd.DataFrame,
    points_df: pd.DataFrame,
    shots_df: pd.DataFrame,
) -> tuple[PlayerRows, Counter]:
    """Assemble one player's rows. Returns the rows and a Counter of skips."""
    skipped = Counter()
    matches: dict[str, MatchContext] = {}
    for _, row in matches_df.iterrows():
        m = build_match(row)
        if m is None:
            skipped["matches"] += 1
            continue
        if m.involves(player):
            matches[m.match_id] = m

    shots_by_point: dict[tuple[str, int], list[ShotEvent]] = {}
    if matches and not shots_df.empty:
        mid_col = find_column(shots_df, POINT_MATCH_ID)
        pt_col = find_column(shots_df, POINT_NUMBER)
        if mid_col is None or pt_col is None:
            raise ValueError("shots table needs point_match_id and point_number columns")
        mine = shots_df[shots_df[mid_col].astype(str).isin(list(matches))]
        for _, row in mine.iterrows():
            shot = build_shot(row)
            number = safe_int(row[pt_col], None)
            if shot is None or number is None:
                skipped["shots"] += 1
                continue
            shots_by_point.setdefault((str(row[mid_col]), number), []).append(shot)

    points: list[PointOutcome] = []
    if matches and not points_df.empty:
        mid_col = find_column(points_df, MATCH_ID)
        if mid_col is None:
            raise ValueError("points table needs a match_id column")
        mine = points_df[points_df[mid_col].astype(str).isin(list(matches))]
        for match_id, group in mine.groupby(mid_col, sort=True):
            records = [r for r in (_point_record(row) for _, row in group.iterrows()) if r]
            skipped["points"] += len(group) - len(records)
            records.sort(key=lambda r: r["number"])
            inferred = infer_point_winners(records)
            for rec, guess in zip(records, inferred):
                winner = rec["player_won"] or guess
                if winner is None:
                    skipped["points"] += 1
                    continue
                shots = shots_by_point.get((str(match_id), rec["number"]), [])
                try:
                    points.append(PointOutcome(
                        match_id=str(match_id),
                        number=rec["number"],
                        winner_side=winner,
                        shots=tuple(shots),
                        game_score=rec["game_score"],
                        server_side=rec["server_side"],
                    ))
                except ValueError as e:
                    log.warning(f"Skipping point: {e}")
                    skipped["points"] += 1

    if sum(skipped.values()):
        log.warning(f"{player}: skipped rows {dict(skipped)}")
    return PlayerRows(player=player, matches=matches, points=points), skipped


# ── Source ─────────────────────────────────────────────────────────────

class CsvRowSource(RowSource):
    """RowSource over matches.csv / points.csv / shots.csv in one directory.

    Tables are read once, on first use, and shared read-only afterwards.
    """

    def __init__(self, data_dir: str):
        self.data_dir = Path(data_dir)
        self._tables: Optional[tuple[pd.DataFrame, pd.DataFrame, pd.DataFrame]] = None
        self._lock = threading.Lock()

    def _load(self) -> tuple[pd.DataFrame, pd.DataFrame, pd.DataFrame]:
        with self._lock:
            if self._tables is None:
                frames = []
                for name in ("matches", "points", "shots"):
                    path = self.data_dir / f"{name}.csv"
                    if not path.exists():
                        raise FileNotFoundError(f"Missing table: {path}")
                    frames.append(pd.read_csv(path, low_memory=False))
                    log.info(f"Loaded {len(frames[-1])} rows from {path}")
                self._tables = tuple(frames)
            return self._tables

    def players(self) -> list[str]:
        matches_df, _, _ = self._load()
        names = set()
        for cols in (PLAYER1, PLAYER2):
            col = find_column(matches_df, cols)
            if col is not None:
                names.update(str(v) for v in matches_df[col].dropna())
        return sorted(names)

    def fetch(self, player: str) -> PlayerRows:
        try:
            matches_df, points_df, shots_df = self._load()
            rows, _ = build_player_rows(player, matches_df, points_df, shots_df)
        except (OSError, ValueError, pd.errors.ParserError) as e:
            raise UpstreamUnavailableError(player, str(e)) from e
        return rows
