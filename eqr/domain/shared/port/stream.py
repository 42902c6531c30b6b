from abc import abstractmethod
from typing import Protocol


class StreamOutput(Protocol):
    """Sequential writer of primitive values. Strings and blobs are length-prefixed."""

    @abstractmethod
    def write_byte(self, value: int) -> None: ...

    @abstractmethod
    def write_bool(self, value: bool) -> None: ...

    @abstractmethod
    def write_vint(self, value: int) -> None: ...

    @abstractmethod
    def write_vlong(self, value: int) -> None: ...

    @abstractmethod
    def write_float(self, value: float) -> None: ...

    @abstractmethod
    def write_double(self, value: float) -> None: ...

    @abstractmethod
    def write_string(self, value: str) -> None: ...

    @abstractmethod
    def write_bytes(self, value: bytes) -> None: ...

    @abstractmethod
    def write_string_list(self, values: list[str] | tuple[str, ...]) -> None: ...

    @abstractmethod
    def write_optional_string(self, value: str | None) -> None: ...


class StreamInput(Protocol):
    """Sequential reader mirroring StreamOutput. No seeking."""

    @property
    @abstractmethod
    def remaining(self) -> int:
        """Number of unread bytes."""
        ...

    @abstractmethod
    def read_byte(self) -> int: ...

    @abstractmethod
    def read_bool(self) -> bool: ...

    @abstractmethod
    def read_vint(self) -> int: ...

    @abstractmethod
    def read_vlong(self) -> int: ...

    @abstractmethod
    def read_float(self) -> float: ...

    @abstractmethod
    def read_double(self) -> float: ...

    @abstractmethod
    def read_string(self) -> str: ...

    @abstractmethod
    def read_bytes(self) -> bytes: ...

    @abstractmethod
    def read_string_list(self) -> list[str]: ...

    @abstractmethod
    def read_optional_string(self) -> str | None: ...
