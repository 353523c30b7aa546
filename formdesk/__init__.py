"""Formdesk - aggregation, caching and admin tooling for Apps Script form submissions."""

__version__ = "0.1.0"
