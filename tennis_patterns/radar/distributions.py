"""
Tour-wide reference distributions.

A snapshot is a JSON object mapping axis key → list of raw scores. It is
loaded once and handed to whoever needs it; the object is read-only.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

import numpy as np

log = logging.getLogger(__name__)


class TourDistributions:
    """Immutable axis → sorted tuple of raw scores."""

    def __init__(self, axes: Mapping[str, Iterable[Optional[float]]]):
        frozen = {}
        for axis, values in axes.items():
            if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
                raise ValueError(f"Distribution for '{axis}' must be a list of numbers")
            clean = [float(v) for v in values if v is not None]
            frozen[axis] = tuple(sorted(v for v in clean if not np.isnan(v)))
        self._axes = MappingProxyType(frozen)

    @classmethod
    def from_json(cls, path: str) -> "TourDistributions":
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(f"Distribution snapshot not found: {path}")
        with open(p) as f:
            raw = json.load(f)
        if not isinstance(raw, dict):
            raise ValueError(f"Distribution snapshot must be a JSON object: {path}")
        dists = cls(raw)
        log.info(f"Loaded distributions from {path}: " + ", ".join(
            f"{k}={len(v)}" for k, v in dists.items()
        ))
        return dists

    def get(self, axis: str) -> tuple[float, ...]:
        return self._axes.get(axis, ())

    def items(self):
        return self._axes.items()

    @property
    def axes(self) -> tuple[str, ...]:
        return tuple(self._axes)

    def __contains__(self, axis: str) -> bool:
        return axis in self._axes

    def __len__(self) -> int:
        return len(self._axes)

    def to_dict(self) -> dict[str, list[float]]:
        return {k: list(v) for k, v in self._axes.items()}


EMPTY_DISTRIBUTIONS = TourDistributions({})


def build_distributions(
    raw_scores: Mapping[str, Mapping[str, Optional[float]]],
    axes: Iterable[str],
) -> TourDistributions:
    """Collect every player's non-null raw score per axis."""
    axes = list(axes)
    collected: dict[str, list[float]] = {a: [] for a in axes}
    for scores in raw_scores.values():
        for a in axes:
            v = scores.get(a)
            if v is not None:
                collected[a].append(v)
    return TourDistributions(collected)


def write_snapshot(dists: TourDistributions, path: str) -> str:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with open(out, "w") as f:
        json.dump(dists.to_dict(), f, indent=2)
    log.info(f"Distribution snapshot saved to {out}")
    return str(out)
