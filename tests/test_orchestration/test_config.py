"""Tests for config loading."""

from pathlib import Path

import pytest
import yaml

from tennis_patterns.orchestration.config import (
    EngineConfig, SequenceSettings, Thresholds, load_config,
)
from tennis_patterns.radar.model import AXES

DEFAULT_CONFIG = Path(__file__).resolve().parents[2] / "configs" / "default.yaml"


class TestLoadConfig:
    def test_default_file(self):
        cfg = load_config(str(DEFAULT_CONFIG))
        assert cfg["thresholds"]["min_sample"] == 15
        assert cfg["shrinkage"]["k"] == 50

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.yaml"))

    def test_missing_section(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text(yaml.safe_dump({"thresholds": {}, "radar": {}}))
        with pytest.raises(ValueError, match="sequences"):
            load_config(str(path))


class TestEngineConfig:
    def test_default_values(self):
        cfg = EngineConfig.load(str(DEFAULT_CONFIG))
        assert cfg.thresholds.min_sample == 15
        assert cfg.thresholds.high_confidence == 30
        assert cfg.thresholds.display_floor == 5
        assert cfg.radar.min_total == 300
        assert cfg.radar.shrinkage_k == 50
        assert cfg.radar.exploitability_min_total == 50
        assert cfg.radar.axes == AXES
        assert cfg.sequences.top_k == 15
        assert cfg.max_workers == 25
        assert cfg.side_rule.mode == "score_sets"
        assert "40-15" in cfg.side_rule.deuce_scores and "40-15" in cfg.side_rule.ad_scores
        assert cfg.paths["distributions"].endswith(".json")

    def test_matches_dataclass_defaults(self):
        assert EngineConfig.load(str(DEFAULT_CONFIG)) == EngineConfig(
            paths=load_config(str(DEFAULT_CONFIG))["paths"],
        )

    def test_overrides(self):
        cfg = EngineConfig.from_dict({
            "thresholds": {"min_sample": 20, "high_confidence": 40},
            "radar": {"axes": ["serve", "forehand"], "min_valid_axes": 2},
            "sequences": {"max_n": 3},
            "shrinkage": {"k": 25},
            "side_rule": {"mode": "parity"},
            "batch": {"max_workers": 4},
        })
        assert cfg.thresholds.min_sample == 20
        assert cfg.radar.axes == ("serve", "forehand")
        assert cfg.radar.shrinkage_k == 25
        assert cfg.sequences.max_n == 3
        assert cfg.side_rule.mode == "parity"
        assert cfg.max_workers == 4

    def test_unknown_key(self):
        with pytest.raises(TypeError):
            EngineConfig.from_dict({"thresholds": {"min_samples": 20}})


class TestValidation:
    def test_high_below_min(self):
        with pytest.raises(ValueError, match="high_confidence"):
            Thresholds(min_sample=30, high_confidence=15)

    def test_negative_minimum(self):
        with pytest.raises(ValueError):
            Thresholds(min_sample=-1)

    def test_bad_z(self):
        with pytest.raises(ValueError, match="z"):
            Thresholds(z=0)

    def test_sequence_lengths(self):
        with pytest.raises(ValueError):
            SequenceSettings(min_n=3, max_n=2)
