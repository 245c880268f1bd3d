"""JobHonter relevance matching and multi-source job discovery engine."""

__version__ = "0.3.0"
