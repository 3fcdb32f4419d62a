"""Real-time progress streaming for long-running import and sync jobs."""

__version__ = "0.1.0"
