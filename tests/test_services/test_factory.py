"""Tests for data service construction."""

from formdesk.services.factory import create_data_service
from formdesk.sources.registry import SourceRegistry
from formdesk.storage.kv import MemoryStore


def test_uses_configured_cache(test_settings):
    test_settings.cache_key = "alt_cache"
    test_settings.cache_expiry_minutes = 2

    service = create_data_service(test_settings, MemoryStore())

    assert service.cache.key == "alt_cache"
    assert service.cache.expiry_ms == 120_000


def test_defaults_to_built_in_sources(test_settings):
    service = create_data_service(test_settings, MemoryStore())

    assert service._aggregator.registry.names == SourceRegistry.default().names
