"""Exceptions raised across module boundaries."""


class PatternEngineError(Exception):
    """Base class for errors raised by tennis_patterns."""


class UpstreamUnavailableError(PatternEngineError):
    """The data-access layer could not supply rows for a player."""

    def __init__(self, player: str, reason: str):
        self.player = player
        self.reason = reason
        super().__init__(f"Rows unavailable for '{player}': {reason}")


class UnknownPlayerError(PatternEngineError):
    """A player was attributed to a match they did not play."""

    def __init__(self, player: str, match_id: str):
        self.player = player
        self.match_id = match_id
        super().__init__(f"'{player}' did not play match {match_id}")
