"""Data ingestion module - HTTP client, fetcher, aggregator, normalizer and schemas."""

from formdesk.ingestion.aggregator import SourceAggregator
from formdesk.ingestion.fetcher import SourceFetcher
from formdesk.ingestion.http_client import HTTPClient, HTTPClientError, RateLimitError, RetryConfig
from formdesk.ingestion.normalizer import classify_source, normalize_records
from formdesk.ingestion.schemas import CacheEntry, Submission, SubmissionType

__all__ = [
    "CacheEntry",
    "HTTPClient",
    "HTTPClientError",
    "RateLimitError",
    "RetryConfig",
    "SourceAggregator",
    "SourceFetcher",
    "Submission",
    "SubmissionType",
    "classify_source",
    "normalize_records",
]
