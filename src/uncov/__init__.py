"""uncov — report source files with low test line coverage."""

__version__ = "0.1.0"
