"""Concurrent RSS/Atom/RDF headline ingestion with cross-run deduplication."""

__version__ = "0.1.0"
