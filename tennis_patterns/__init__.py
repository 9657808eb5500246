"""Tennis Patterns: shot-pattern statistics and player radar profiles from charted matches."""

__version__ = "0.1.0"
