"""Config loading with validation."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from tennis_patterns.patterns.filters import AD_SCORES, DEUCE_SCORES, SideRule
from tennis_patterns.radar.model import AXES, RadarSettings

REQUIRED_SECTIONS = ("thresholds", "radar", "sequences")


def load_config(path: str = "configs/default.yaml") -> dict:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config not found: {path}")
    with open(p) as f:
        cfg = yaml.safe_load(f) or {}

    # Validate required keys
    for key in REQUIRED_SECTIONS:
        if key not in cfg:
            raise ValueError(f"Missing config key: {key}")
    return cfg


@dataclass(frozen=True)
class Thresholds:
    min_sample: int = 15
    high_confidence: int = 30
    descriptive_min_sample: int = 10
    display_floor: int = 5
    insight_min_sample: int = 30
    z: float = 1.96

    def __post_init__(self):
        if self.min_sample < 0 or self.descriptive_min_sample < 0:
            raise ValueError("minimum sample sizes must be >= 0")
        if self.high_confidence < self.min_sample:
            raise ValueError(
                f"high_confidence ({self.high_confidence}) must be >= min_sample ({self.min_sample})"
            )
        if self.z <= 0:
            raise ValueError(f"z must be > 0, got {self.z}")


@dataclass(frozen=True)
class SequenceSettings:
    min_total: int = 15
    min_n: int = 2
    max_n: int = 4
    top_k: int = 15

    def __post_init__(self):
        if not 1 <= self.min_n <= self.max_n:
            raise ValueError(f"need 1 <= min_n <= max_n, got {self.min_n}..{self.max_n}")


@dataclass(frozen=True)
class InsightSettings:
    strong_delta: float = 0.10
    mild_delta: float = 0.05
    limit: int = 3


@dataclass(frozen=True)
class EngineConfig:
    thresholds: Thresholds = field(default_factory=Thresholds)
    radar: RadarSettings = field(default_factory=RadarSettings)
    sequences: SequenceSettings = field(default_factory=SequenceSettings)
    insights: InsightSettings = field(default_factory=InsightSettings)
    side_rule: SideRule = field(default_factory=SideRule)
    max_workers: int = 25
    precision: int = 6
    paths: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, cfg: dict) -> "EngineConfig":
        radar = dict(cfg.get("radar", {}))
        radar["axes"] = tuple(radar.get("axes", AXES))
        if "k" in cfg.get("shrinkage", {}):
            radar["shrinkage_k"] = cfg["shrinkage"]["k"]

        side = cfg.get("side_rule", {})
        return cls(
            thresholds=Thresholds(**cfg.get("thresholds", {})),
            radar=RadarSettings(**radar),
            sequences=SequenceSettings(**cfg.get("sequences", {})),
            insights=InsightSettings(**cfg.get("insights", {})),
            side_rule=SideRule(
                mode=side.get("mode", "score_sets"),
                deuce_scores=frozenset(side.get("deuce_scores", DEUCE_SCORES)),
                ad_scores=frozenset(side.get("ad_scores", AD_SCORES)),
            ),
            max_workers=cfg.get("batch", {}).get("max_workers", 25),
            precision=cfg.get("presentation", {}).get("precision", 6),
            paths=dict(cfg.get("paths", {})),
        )

    @classmethod
    def load(cls, path: str = "configs/default.yaml") -> "EngineConfig":
        return cls.from_dict(load_config(path))
