from abc import abstractmethod
from typing import Protocol, Self

from eqr.domain.shared.port.document import DocumentBuilder, DocumentParser
from eqr.domain.shared.port.stream import StreamInput, StreamOutput


class Entry(Protocol):
    """Capabilities a record needs to live inside a named collection."""

    @abstractmethod
    def write_to(self, out: StreamOutput) -> None: ...

    @abstractmethod
    def to_document(self, builder: DocumentBuilder) -> None:
        """Write this record as one object value."""
        ...

    @classmethod
    @abstractmethod
    def read_from(cls, stream: StreamInput) -> Self: ...

    @classmethod
    @abstractmethod
    def from_document(cls, parser: DocumentParser) -> Self: ...
