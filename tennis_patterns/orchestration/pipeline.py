"""
Per-player analysis and the batch runner.

PlayerAnalyzer is the one place that wires attribution, baselines,
aggregation, sequences and the radar model together. The request-scoped
path (one player) and the export path (every player) both go through it,
so they produce identical numbers for identical rows.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Iterable, Optional

from tennis_patterns.core.buckets import PatternStatistic
from tennis_patterns.core.interfaces import RowSource
from tennis_patterns.core.schema import OutcomeModel, PlayerRows
from tennis_patterns.orchestration.config import EngineConfig
from tennis_patterns.patterns.aggregator import (
    aggregate, by_serve_direction, by_serve_response, by_shot_direction,
    by_shot_type, compare_buckets, compare_wins_losses, finalize,
)
from tennis_patterns.patterns.attribution import own_shot_stream, player_points, serve_stream
from tennis_patterns.patterns.baseline import Baselines, compute_baselines
from tennis_patterns.patterns.coverage import coverage
from tennis_patterns.patterns.filters import ContextFilter
from tennis_patterns.patterns.insights import Insight, baseline_insights, divergence_insights
from tennis_patterns.patterns.sequences import SequenceReport, mine_sequences
from tennis_patterns.radar.distributions import EMPTY_DISTRIBUTIONS, TourDistributions, build_distributions
from tennis_patterns.radar.model import (
    RAW_KEYS, DirectionalSplit, PlayerRadarProfile, build_profile,
    compute_raw_scores, directional_splits,
)

log = logging.getLogger(__name__)


@dataclass
class PlayerReport:
    player: str
    filters: ContextFilter
    baselines: Baselines
    coverage: dict
    shot_types: list[PatternStatistic]
    shot_outcomes: list[PatternStatistic]
    directions: list[PatternStatistic]
    serve: list[PatternStatistic]
    serve_plus_one: list[PatternStatistic]
    compare: dict[str, list[PatternStatistic]]
    divergence: list[Insight]
    insights: list[Insight]
    sequences: SequenceReport
    directional: DirectionalSplit
    raw_scores: dict[str, Optional[float]]
    radar: PlayerRadarProfile


class PlayerAnalyzer:
    """Computes every metric family for one player's rows."""

    def __init__(
        self,
        config: EngineConfig | None = None,
        distributions: TourDistributions = EMPTY_DISTRIBUTIONS,
    ):
        self.config = config or EngineConfig()
        self.distributions = distributions

    def default_filter(self) -> ContextFilter:
        return ContextFilter(side_rule=self.config.side_rule)

    def analyze(self, rows: PlayerRows, filters: ContextFilter | None = None) -> PlayerReport:
        cfg = self.config
        t = cfg.thresholds
        filters = filters or self.default_filter()
        if not filters.is_empty:
            log.info(f"{rows.player}: filters {filters.describe()}")

        points = player_points(rows, filters)
        # Every adjusted figure below is measured against these two values.
        baselines = compute_baselines(points)

        own = list(own_shot_stream(points))
        serves = list(serve_stream(points))

        def adjusted(stream, key_fn, baseline, min_n=t.min_sample):
            return finalize(
                aggregate(stream, key_fn), OutcomeModel.ADJUSTED,
                baseline, min_n, t.high_confidence, t.z,
            )

        shot_types = adjusted(own, by_shot_type, baselines.overall)
        directions = adjusted(own, by_shot_direction, baselines.overall)
        serve = adjusted(serves, by_serve_direction, baselines.serve, t.display_floor)
        serve_plus_one = adjusted(serves, by_serve_response, baselines.serve)

        shot_outcomes = finalize(
            aggregate(own, by_shot_type), OutcomeModel.DESCRIPTIVE,
            0.0, t.descriptive_min_sample, t.high_confidence, t.z,
        )

        win_buckets, loss_buckets = compare_buckets(points, by_shot_type)
        compare = compare_wins_losses(
            points, by_shot_type, OutcomeModel.DESCRIPTIVE, 0.0,
            t.display_floor, t.high_confidence, t.z, buckets=(win_buckets, loss_buckets),
        )
        divergence = divergence_insights(win_buckets, loss_buckets, {
            "min_total": t.insight_min_sample,
            "strong_delta": cfg.insights.strong_delta,
            "mild_delta": cfg.insights.mild_delta,
        })

        seq = cfg.sequences
        sequences = mine_sequences(
            points, baselines.overall, seq.min_total, seq.top_k, seq.min_n, seq.max_n,
        )

        raw_scores = compute_raw_scores(shot_types, serve, serve_plus_one, cfg.radar)

        log.info(
            f"{rows.player}: {baselines.n_points} points, baseline={baselines.overall:.3f}, "
            f"{len(shot_types)} shot types, {len(sequences.winning)}+{len(sequences.losing)} sequences"
        )
        return PlayerReport(
            player=rows.player,
            filters=filters,
            baselines=baselines,
            coverage=coverage(rows),
            shot_types=shot_types,
            shot_outcomes=shot_outcomes,
            directions=directions,
            serve=serve,
            serve_plus_one=serve_plus_one,
            compare=compare,
            divergence=divergence,
            insights=baseline_insights(shot_types, cfg.insights.limit),
            sequences=sequences,
            directional=directional_splits(directions, cfg.radar),
            raw_scores=raw_scores,
            radar=build_profile(raw_scores, self.distributions, cfg.radar),
        )


# ── Batch ──────────────────────────────────────────────────────────────

@dataclass
class BatchResult:
    reports: dict[str, PlayerReport] = field(default_factory=dict)
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def n_ok(self) -> int:
        return len(self.reports)


def analyze_player(
    source: RowSource, player: str, analyzer: PlayerAnalyzer,
    filters: ContextFilter | None = None,
) -> PlayerReport:
    """Request-scoped entry point. Upstream failures propagate to the caller."""
    return analyzer.analyze(source.fetch(player), filters)


def run_batch(
    source: RowSource,
    players: Iterable[str],
    analyzer: PlayerAnalyzer,
    filters: ContextFilter | None = None,
    max_workers: int | None = None,
) -> BatchResult:
    """Analyze many players with at most ``max_workers`` in flight.

    Any failure for one player, from fetching or from analysis, is
    recorded in ``failures`` and the batch carries on.
    """
    players = list(players)
    workers = max(1, max_workers or analyzer.config.max_workers)
    result = BatchResult()
    log.info(f"Batch: {len(players)} players, {workers} workers")

    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = {
            pool.submit(analyze_player, source, name, analyzer, filters): name
            for name in players
        }
        for fut in as_completed(futures):
            name = futures[fut]
            try:
                result.reports[name] = fut.result()
            except Exception as e:
                log.exception(f"Batch: {name} failed: {e}")
                result.failures[name] = str(e)

    log.info(f"Batch done: {result.n_ok} ok, {len(result.failures)} failed")
    return result


def tour_distributions(batch: BatchResult) -> TourDistributions:
    """Reference distributions from every analyzed player's raw scores."""
    return build_distributions(
        {name: r.raw_scores for name, r in batch.reports.items()}, RAW_KEYS,
    )


def rescore(batch: BatchResult, distributions: TourDistributions, config: EngineConfig) -> None:
    """Recompute every radar profile against ``distributions``."""
    for report in batch.reports.values():
        report.radar = build_profile(report.raw_scores, distributions, config.radar)
