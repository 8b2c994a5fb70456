"""GitHub Weekly Report - correlated weekly activity reports for GitHub repositories."""

__version__ = "0.1.0"
