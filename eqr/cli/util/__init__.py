"""CLI utilities (codec setup, response file I/O)."""

from eqr.cli.util.files import build_codec, is_json, load_response

__all__ = [
    "build_codec",
    "is_json",
    "load_response",
]
