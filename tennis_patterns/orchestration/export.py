"""
JSON records and files for the HTTP / static-site consumers.

All presentation rounding happens here; the engine itself never rounds.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Optional

import numpy as np

from tennis_patterns.core.buckets import PatternStatistic
from tennis_patterns.core.schema import Interval, OutcomeModel, SequenceNGram
from tennis_patterns.orchestration.pipeline import BatchResult, PlayerReport
from tennis_patterns.radar.model import DirectionalSplit, PlayerRadarProfile

log = logging.getLogger(__name__)


def _r(x: Optional[float], precision: int) -> Optional[float]:
    return None if x is None else round(float(x), precision)


def interval_record(ci: Interval, precision: int = 6) -> dict:
    return {
        "lower": _r(ci.lower, precision),
        "upper": _r(ci.upper, precision),
        "center": _r(ci.center, precision),
    }


def pattern_record(stat: PatternStatistic, precision: int = 6) -> dict:
    rec = dict(stat.key.fields())
    rec["total"] = stat.total
    if stat.model is OutcomeModel.DESCRIPTIVE:
        rec["winners"] = stat.winners
        rec["unforcedErrors"] = stat.unforced_errors
        rec["forcedErrors"] = stat.forced_errors
    rec["winnerRate"] = _r(stat.winner_rate, precision)
    rec["errorRate"] = _r(stat.error_rate, precision)
    eff_name = "effectiveness" if stat.model is OutcomeModel.DESCRIPTIVE else "adjustedEffectiveness"
    rec[eff_name] = _r(stat.effectiveness, precision)
    rec["winnerCI"] = interval_record(stat.winner_ci, precision)
    rec["errorCI"] = interval_record(stat.error_ci, precision)
    rec["confidence"] = stat.confidence.value
    return rec


def sequence_record(gram: SequenceNGram, precision: int = 6) -> dict:
    return {
        "sequence": list(gram.sequence),
        "total": gram.total,
        "winnerRate": _r(gram.win_rate, precision),
        "uplift": _r(gram.uplift, precision),
        "rankScore": _r(gram.rank_score, precision),
    }


def profile_record(profile: PlayerRadarProfile, precision: int = 6) -> dict:
    rec = {
        axis: {"raw": _r(s.raw, precision), "percentile": s.percentile}
        for axis, s in profile.axes.items()
    }
    rec["valid"] = profile.valid
    rec["archetype"] = profile.archetype
    return rec


def directional_record(split: DirectionalSplit, precision: int = 6) -> dict:
    return {
        "left": _r(split.left, precision),
        "center": _r(split.center, precision),
        "right": _r(split.right, precision),
        "leftN": split.left_n,
        "rightN": split.right_n,
        "asymmetry": _r(split.asymmetry, precision),
    }


def report_records(report: PlayerReport, precision: int = 6) -> dict[str, object]:
    """Every metric family of one report, keyed by output file name."""
    def patterns(stats):
        return [pattern_record(s, precision) for s in stats]

    return {
        "coverage": {"filters": report.filters.describe(), **report.coverage},
        "patterns": patterns(report.shot_types),
        "shot-outcomes": patterns(report.shot_outcomes),
        "direction-patterns": {
            "patterns": patterns(report.directions),
            "splits": directional_record(report.directional, precision),
        },
        "serve": patterns(report.serve),
        "serve-plus-one": patterns(report.serve_plus_one),
        "compare": {side: patterns(stats) for side, stats in report.compare.items()},
        "insights": {
            "baseline": [asdict(i) for i in report.insights],
            "divergence": [asdict(i) for i in report.divergence],
        },
        "pattern-inference": {
            "winning": [sequence_record(g, precision) for g in report.sequences.winning],
            "losing": [sequence_record(g, precision) for g in report.sequences.losing],
        },
        "radar": {
            "baseline": _r(report.baselines.overall, precision),
            "serveBaseline": _r(report.baselines.serve, precision),
            "raw": {k: _r(v, precision) for k, v in report.raw_scores.items()},
            "profile": profile_record(report.radar, precision),
        },
    }


def _make_serializable(obj):
    """Recursively convert numpy types to Python native types."""
    if isinstance(obj, dict):
        return {k: _make_serializable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_make_serializable(v) for v in obj]
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, np.bool_):
        return bool(obj)
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    return obj


def _write_json(path: Path, data) -> None:
    with open(path, "w") as f:
        json.dump(_make_serializable(data), f, indent=2)


def export_reports(batch: BatchResult, output_dir: str, precision: int = 6) -> str:
    """Write one directory per player plus players.json and failures.json."""
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    for name, report in sorted(batch.reports.items()):
        player_dir = out / name
        player_dir.mkdir(parents=True, exist_ok=True)
        for file_name, data in report_records(report, precision).items():
            _write_json(player_dir / f"{file_name}.json", data)

    _write_json(out / "players.json", sorted(batch.reports))
    _write_json(out / "failures.json", {
        "generated_at": datetime.now().isoformat(),
        "failures": batch.failures,
    })
    log.info(f"Exported {batch.n_ok} players to {out} ({len(batch.failures)} failures)")
    return str(out)
