#!/usr/bin/env python3
"""
Tennis Patterns CLI.

Usage:
    python main.py analyze Roger_Federer --surface Hard --min-n 30
    python main.py export --rebuild-distributions
    python main.py distributions
    python main.py audit --player Rafael_Nadal
"""

import sys
import json
import logging
import argparse
import dataclasses
from pathlib import Path

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
log = logging.getLogger("tennis_patterns")


def _engine(args):
    from tennis_patterns.orchestration.config import EngineConfig
    from tennis_patterns.radar.distributions import EMPTY_DISTRIBUTIONS, TourDistributions

    cfg = EngineConfig.load(args.config)
    if getattr(args, "min_n", None) is not None:
        cfg = dataclasses.replace(
            cfg, thresholds=dataclasses.replace(cfg.thresholds, min_sample=args.min_n),
        )

    dist_path = cfg.paths.get("distributions")
    if dist_path and Path(dist_path).exists():
        dists = TourDistributions.from_json(dist_path)
    else:
        log.warning(f"No distribution snapshot at {dist_path}; radar percentiles will be null")
        dists = EMPTY_DISTRIBUTIONS
    return cfg, dists


def _filters(args, cfg):
    from tennis_patterns.core.schema import Surface
    from tennis_patterns.ingestion.base import parse_enum, safe_date
    from tennis_patterns.patterns.filters import ContextFilter, CourtSide

    return ContextFilter(
        surface=parse_enum(args.surface, Surface, None),
        date_from=safe_date(args.date_from),
        date_to=safe_date(args.date_to),
        side=parse_enum(args.side, CourtSide, None),
        side_rule=cfg.side_rule,
    )


def cmd_analyze(args):
    from tennis_patterns.core.errors import PatternEngineError
    from tennis_patterns.ingestion.tables import CsvRowSource
    from tennis_patterns.orchestration.export import report_records
    from tennis_patterns.orchestration.pipeline import PlayerAnalyzer, analyze_player

    cfg, dists = _engine(args)
    source = CsvRowSource(cfg.paths["data_dir"])
    try:
        report = analyze_player(source, args.player, PlayerAnalyzer(cfg, dists), _filters(args, cfg))
    except (PatternEngineError, ValueError) as e:
        log.error(str(e))
        sys.exit(1)

    records = report_records(report, cfg.precision)
    if args.family:
        records = {args.family: records[args.family]}
    json.dump(records, sys.stdout, indent=2)
    sys.stdout.write("\n")


def cmd_export(args):
    from tennis_patterns.ingestion.tables import CsvRowSource
    from tennis_patterns.orchestration.export import export_reports
    from tennis_patterns.orchestration.pipeline import (
        PlayerAnalyzer, rescore, run_batch, tour_distributions,
    )
    from tennis_patterns.radar.distributions import write_snapshot

    cfg, dists = _engine(args)
    source = CsvRowSource(cfg.paths["data_dir"])
    players = args.players or source.players()
    batch = run_batch(source, players, PlayerAnalyzer(cfg, dists), max_workers=args.workers)

    if args.rebuild_distributions:
        dists = tour_distributions(batch)
        write_snapshot(dists, cfg.paths["distributions"])
        rescore(batch, dists, cfg)

    export_reports(batch, args.output or cfg.paths["output_dir"], cfg.precision)
    if batch.failures:
        log.warning(f"{len(batch.failures)} players failed: {sorted(batch.failures)[:10]}")


def cmd_distributions(args):
    from tennis_patterns.ingestion.tables import CsvRowSource
    from tennis_patterns.orchestration.pipeline import PlayerAnalyzer, run_batch, tour_distributions
    from tennis_patterns.radar.distributions import write_snapshot

    cfg, dists = _engine(args)
    source = CsvRowSource(cfg.paths["data_dir"])
    batch = run_batch(source, source.players(), PlayerAnalyzer(cfg, dists), max_workers=args.workers)
    write_snapshot(tour_distributions(batch), args.output or cfg.paths["distributions"])


def cmd_audit(args):
    from tennis_patterns.core.errors import PatternEngineError
    from tennis_patterns.ingestion.tables import CsvRowSource
    from tennis_patterns.ingestion.validator import DataValidator
    from tennis_patterns.orchestration.config import EngineConfig

    cfg = EngineConfig.load(args.config)
    data_dir = Path(cfg.paths["data_dir"])
    for name in ("matches", "points", "shots"):
        f = data_dir / f"{name}.csv"
        if f.exists():
            log.info(f"{name}.csv: {f.stat().st_size / (1024 * 1024):.1f} MB")
        else:
            log.info(f"{name}.csv: NOT FOUND")

    source = CsvRowSource(str(data_dir))
    validator = DataValidator()
    for player in ([args.player] if args.player else source.players()):
        try:
            result = validator.validate(source.fetch(player))
        except PatternEngineError as e:
            log.error(str(e))
            continue
        log.info(f"{player}: {result['stats']}")


def _add_filter_args(p):
    p.add_argument("--surface", choices=["Hard", "Clay", "Grass", "Carpet"])
    p.add_argument("--from", dest="date_from")
    p.add_argument("--to", dest="date_to")
    p.add_argument("--side", choices=["Deuce", "Ad"])
    p.add_argument("--min-n", dest="min_n", type=int)


def main():
    p = argparse.ArgumentParser(description="Tennis Patterns CLI")
    p.add_argument("--config", default="configs/default.yaml")
    sub = p.add_subparsers(dest="command")

    an = sub.add_parser("analyze")
    an.add_argument("player")
    an.add_argument("--family", choices=[
        "coverage", "patterns", "shot-outcomes", "direction-patterns", "serve",
        "serve-plus-one", "compare", "insights", "pattern-inference", "radar",
    ])
    _add_filter_args(an)

    ex = sub.add_parser("export")
    ex.add_argument("--players", nargs="*")
    ex.add_argument("--output")
    ex.add_argument("--workers", type=int)
    ex.add_argument("--rebuild-distributions", action="store_true")

    di = sub.add_parser("distributions")
    di.add_argument("--output")
    di.add_argument("--workers", type=int)

    au = sub.add_parser("audit")
    au.add_argument("--player")

    args = p.parse_args()
    if args.command == "analyze":
        cmd_analyze(args)
    elif args.command == "export":
        cmd_export(args)
    elif args.command == "distributions":
        cmd_distributions(args)
    elif args.command == "audit":
        cmd_audit(args)
    else:
        p.print_help()


if __name__ == "__main__":
    main()
