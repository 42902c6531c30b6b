"""Binary stream codec backed by in-memory buffers."""

from eqr.infrastructure.stream.bytes_stream import BytesStreamInput, BytesStreamOutput

__all__ = [
    "BytesStreamInput",
    "BytesStreamOutput",
]
