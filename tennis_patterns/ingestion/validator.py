"""
Post-load data quality validation.

Runs integrity checks on a player's rows before they enter aggregation.
Nothing here rejects data; the report is for humans and the CLI audit.
"""

import logging
from collections import Counter

from tennis_patterns.core.schema import PlayerRows
from tennis_patterns.patterns.attribution import player_side
from tennis_patterns.patterns.filters import AD_SCORES, DEUCE_SCORES

log = logging.getLogger(__name__)

KNOWN_SCORES = DEUCE_SCORES | AD_SCORES


class DataValidator:
    """Validates one player's rows for quality issues."""

    def validate(self, rows: PlayerRows) -> dict:
        """Run all checks. Returns summary dict + logs warnings."""
        issues = []
        stats = Counter()
        stats["matches"] = rows.n_matches
        stats["points"] = rows.n_points

        points_per_match = Counter(p.match_id for p in rows.points)
        for match_id in rows.matches:
            if points_per_match[match_id] == 0:
                issues.append(("error", f"{match_id}: zero points"))

        won = 0
        for p in rows.points:
            side = player_side(rows.matches[p.match_id], rows.player)
            won += p.winner_side == side

            if not p.has_shots:
                stats["points_without_shots"] += 1
                continue
            stats["shots"] += len(p.shots)

            if p.shot_at(0) is None:
                issues.append(("warn", f"{p.match_id}#{p.number}: no serve (index 0)"))

            missing = sum(1 for s in p.shots if s.outcome is None)
            if missing:
                stats["shots_without_outcome"] += missing

            indices = [s.index for s in p.shots]
            if indices != list(range(indices[0], indices[0] + len(indices))):
                issues.append((
                    "warn",
                    f"{p.match_id}#{p.number}: shot indices {indices} are not contiguous",
                ))

            if p.game_score and p.game_score not in KNOWN_SCORES:
                stats["unusual_scores"] += 1

        if rows.n_points:
            win_rate = won / rows.n_points
            if win_rate < 0.3 or win_rate > 0.7:
                issues.append((
                    "warn",
                    f"{rows.player} point win rate is {win_rate:.2%}, "
                    f"possible winner encoding issue",
                ))
            stats["point_win_rate"] = round(win_rate, 4)

        errors = [msg for level, msg in issues if level == "error"]
        warns = [msg for level, msg in issues if level == "warn"]

        if errors:
            log.error(f"Data validation: {len(errors)} errors")
            for e in errors[:10]:
                log.error(f"  {e}")
        if warns:
            log.warning(f"Data validation: {len(warns)} warnings")
            for w in warns[:10]:
                log.warning(f"  {w}")

        return {
            "stats": dict(stats),
            "errors": errors,
            "warnings": warns,
            "is_clean": len(errors) == 0,
        }
