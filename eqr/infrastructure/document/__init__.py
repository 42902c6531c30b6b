"""Structured document codec backed by JSON."""

from eqr.infrastructure.document.json_document import JsonDocumentBuilder, JsonDocumentParser

__all__ = [
    "JsonDocumentBuilder",
    "JsonDocumentParser",
]
