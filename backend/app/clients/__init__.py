"""Record sources."""

from app.clients.record_stream import JsonLinesRecordSource

__all__ = [
    "JsonLinesRecordSource",
]
