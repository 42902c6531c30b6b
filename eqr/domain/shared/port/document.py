from abc import abstractmethod
from enum import StrEnum
from typing import Any, Protocol


class Token(StrEnum):
    START_OBJECT = "START_OBJECT"
    END_OBJECT = "END_OBJECT"
    START_ARRAY = "START_ARRAY"
    END_ARRAY = "END_ARRAY"
    FIELD_NAME = "FIELD_NAME"
    VALUE_STRING = "VALUE_STRING"
    VALUE_NUMBER = "VALUE_NUMBER"
    VALUE_BOOLEAN = "VALUE_BOOLEAN"
    VALUE_NULL = "VALUE_NULL"

    @property
    def is_value(self) -> bool:
        return self in _VALUE_TOKENS


_VALUE_TOKENS = frozenset(
    {Token.VALUE_STRING, Token.VALUE_NUMBER, Token.VALUE_BOOLEAN, Token.VALUE_NULL}
)


class DocumentBuilder(Protocol):
    """Writer for nested objects, arrays and scalar values."""

    @abstractmethod
    def start_object(self, name: str | None = None) -> "DocumentBuilder": ...

    @abstractmethod
    def end_object(self) -> "DocumentBuilder": ...

    @abstractmethod
    def start_array(self, name: str | None = None) -> "DocumentBuilder": ...

    @abstractmethod
    def end_array(self) -> "DocumentBuilder": ...

    @abstractmethod
    def name(self, key: str) -> "DocumentBuilder":
        """Set the key for the next value, object or array."""
        ...

    @abstractmethod
    def field(self, name: str, value: Any) -> "DocumentBuilder": ...

    @abstractmethod
    def value(self, value: Any) -> "DocumentBuilder": ...

    @abstractmethod
    def build(self) -> Any:
        """Return the finished document."""
        ...


class DocumentParser(Protocol):
    """Streaming token reader with a peekable current token."""

    @property
    @abstractmethod
    def current_token(self) -> Token | None: ...

    @property
    @abstractmethod
    def current_name(self) -> str | None:
        """Field name the current token belongs to, if inside an object."""
        ...

    @property
    @abstractmethod
    def token_location(self) -> str:
        """Path of the current token, e.g. ``$.hits.events[1]``."""
        ...

    @abstractmethod
    def next_token(self) -> Token | None: ...

    @abstractmethod
    def text(self) -> str: ...

    @abstractmethod
    def int_value(self) -> int: ...

    @abstractmethod
    def float_value(self) -> float: ...

    @abstractmethod
    def bool_value(self) -> bool: ...

    @abstractmethod
    def skip_children(self) -> None:
        """Skip past the end of the object or array the current token opens."""
        ...

    @abstractmethod
    def map_value(self) -> dict[str, Any]:
        """Read the object the current token opens into a dict."""
        ...
