"""
Pattern taxonomy for radar axes.

Labels are shot-type / direction strings such as "BACKHAND_SLICE" or
"FOREHAND_LEFT". Matching is case-insensitive substring matching, except
that the serve target "T" only counts as a whole underscore-delimited token.
"""

from __future__ import annotations

from typing import Optional

DEFENSIVE_MARKERS = ("SLICE", "LOB")
FINISHING_MARKERS = ("VOLLEY", "SMASH", "DROP_SHOT")
TOUCH_MARKERS = ("DROP_SHOT", "SLICE", "TOUCH")
CENTER_MARKERS = ("CENTER", "BODY")

CORE_SHOTS = frozenset({
    "FOREHAND", "BACKHAND", "FOREHAND_VOLLEY",
    "BACKHAND_VOLLEY", "OVERHEAD", "DROP_SHOT",
})


def _mentions(label: Optional[str], markers: tuple[str, ...]) -> bool:
    if not label:
        return False
    upper = label.upper()
    return any(m in upper for m in markers)


def is_defensive(label: Optional[str]) -> bool:
    return _mentions(label, DEFENSIVE_MARKERS)


def is_finishing(label: Optional[str]) -> bool:
    return _mentions(label, FINISHING_MARKERS)


def is_touch(label: Optional[str]) -> bool:
    return _mentions(label, TOUCH_MARKERS)


def is_forehand_drive(label: Optional[str]) -> bool:
    return _mentions(label, ("FOREHAND",)) and not is_defensive(label) and not is_finishing(label)


def is_backhand_drive(label: Optional[str]) -> bool:
    return _mentions(label, ("BACKHAND",)) and not is_defensive(label) and not is_finishing(label)


def is_core_shot(label: Optional[str]) -> bool:
    return bool(label) and label.upper() in CORE_SHOTS


def direction_tag(label: Optional[str]) -> Optional[str]:
    """LEFT, RIGHT or CENTER, or None when the label carries no direction."""
    if not label:
        return None
    upper = label.upper()
    if "LEFT" in upper:
        return "LEFT"
    if "RIGHT" in upper:
        return "RIGHT"
    if _mentions(upper, CENTER_MARKERS) or "T" in upper.split("_"):
        return "CENTER"
    return None
