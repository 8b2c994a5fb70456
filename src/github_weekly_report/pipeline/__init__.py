"""Bounded-context summarization pipeline."""

from github_weekly_report.pipeline.budget import allocate, squeeze_comment
from github_weekly_report.pipeline.chain import (
    ChainResult,
    CompletionError,
    CompletionOptions,
    CompletionService,
    chain,
)
from github_weekly_report.pipeline.correlate import correlate, no_data_message
from github_weekly_report.pipeline.sources import ActivityFetcher, run_source, run_sources

__all__ = [
    # Budget allocator
    "allocate",
    "squeeze_comment",
    # Chained summarizer
    "chain",
    "ChainResult",
    "CompletionError",
    "CompletionOptions",
    "CompletionService",
    # Source pipeline
    "ActivityFetcher",
    "run_source",
    "run_sources",
    # Correlator
    "correlate",
    "no_data_message",
]
