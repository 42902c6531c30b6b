"""Error hierarchy for EQR.

Error layers:
- EQRError: Base class for all EQR errors
- DomainError: Model invariant violations raised while building or reshaping results
- CodecError: Failures while encoding to or decoding from a wire form
  (binary stream or structured document)

Codec errors are never retried here; they propagate to the transport layer
that owns the stream.
"""

from typing import Any


class EQRError(Exception):
    """Base class for all EQR errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(message)


# =============================================================================
# Domain Errors (result model invariants)
# =============================================================================


class DomainError(EQRError):
    """Base class for domain errors."""


class ValidationError(DomainError):
    """Input validation failed."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class InvalidStateError(DomainError):
    """Operation not allowed in current state."""


class ConflictingPayloadError(DomainError):
    """A payload carries more than one result variant."""

    def __init__(self, variants: list[str]) -> None:
        super().__init__(
            f"payload carries more than one result variant: {', '.join(variants)}",
            code="CONFLICTING_PAYLOAD",
        )
        self.variants = variants


# =============================================================================
# Codec Errors (wire-level failures)
# =============================================================================


class CodecError(EQRError):
    """Base class for encode/decode failures."""


class EncodeError(CodecError):
    """A value cannot be represented in the target wire form."""


class DecodeError(CodecError):
    """Binary stream is truncated or malformed."""

    def __init__(self, message: str, offset: int | None = None) -> None:
        if offset is not None:
            message = f"{message} (at byte {offset})"
        super().__init__(message, code="DECODE_ERROR")
        self.offset = offset


class DocumentParseError(CodecError):
    """Structured document does not have the expected shape."""

    def __init__(
        self,
        message: str,
        *,
        expected: Any = None,
        location: str | None = None,
    ) -> None:
        if location is not None:
            message = f"[{location}] {message}"
        super().__init__(message, code="DOCUMENT_PARSE_ERROR")
        self.expected = expected
        self.location = location
