"""Loading and saving response files for the CLI."""

from pathlib import Path

from eqr.application.codec import ResponseCodec
from eqr.config import Config, configure_logging
from eqr.domain.response.model import SearchResponse

JSON_SUFFIXES = frozenset({".json"})


def build_codec(*, pretty: bool | None = None, strict: bool | None = None) -> ResponseCodec:
    """Load configuration, set up logging and build a codec.

    Explicit flags override the configured codec settings.
    """
    config = Config()
    configure_logging(config.logging)
    overrides = {k: v for k, v in (("pretty", pretty), ("strict", strict)) if v is not None}
    return ResponseCodec(config=config.codec.model_copy(update=overrides))


def is_json(path: Path) -> bool:
    return path.suffix.lower() in JSON_SUFFIXES


def load_response(path: Path, codec: ResponseCodec) -> SearchResponse:
    """Read a response from a JSON document or a binary file, chosen by suffix."""
    data = path.read_bytes()
    if is_json(path):
        return codec.from_json(data)
    return codec.from_bytes(data)
