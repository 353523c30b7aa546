"""Service layer - data orchestration and wiring."""

from formdesk.services.data_service import FALLBACK_ERROR, DataService, LoadResult

__all__ = ["FALLBACK_ERROR", "DataService", "LoadResult"]
