"""
Abstract base classes defining contracts between modules.

The engine never issues queries itself. A RowSource hands it row sets;
orchestration wires the two together.
"""

from abc import ABC, abstractmethod

from tennis_patterns.core.schema import PlayerRows


class RowSource(ABC):
    """Contract: player name → PlayerRows."""

    @abstractmethod
    def players(self) -> list[str]:
        """Return every player with at least one charted match."""
        ...

    @abstractmethod
    def fetch(self, player: str) -> PlayerRows:
        """Return the player's matches and points.

        Raises UpstreamUnavailableError when the rows cannot be read.
        """
        ...
