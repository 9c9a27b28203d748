"""Ingestion layer.

Turns decoded vendor payloads into validated device records and the
attribute sets that get published for them.
"""

__all__: list[str] = []
