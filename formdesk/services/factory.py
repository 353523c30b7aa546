"""Construction of the data service from settings."""

from formdesk.config.settings import Settings
from formdesk.ingestion.aggregator import SourceAggregator
from formdesk.ingestion.http_client import HTTPClient
from formdesk.services.data_service import DataService
from formdesk.sources.registry import SourceRegistry
from formdesk.storage.cache import SubmissionCache
from formdesk.storage.kv import KeyValueStore


def create_data_service(settings: Settings, store: KeyValueStore) -> DataService:
    """Wire registry, aggregator and cache for the configured environment."""
    registry = SourceRegistry.from_settings(settings.sources_file)
    aggregator = SourceAggregator(
        registry,
        client_factory=lambda: HTTPClient.from_settings(settings),
    )
    cache = SubmissionCache(
        store,
        key=settings.cache_key,
        expiry_minutes=settings.cache_expiry_minutes,
    )
    return DataService(aggregator, cache)
