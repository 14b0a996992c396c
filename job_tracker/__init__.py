"""Job Tracker: local-first job application tracking core."""

__version__ = "0.1.0"
