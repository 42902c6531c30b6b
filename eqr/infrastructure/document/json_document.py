"""JSON implementations of the document builder and token parser.

The parser walks a decoded JSON value tree lazily and exposes it as a token
stream, so decoders can be written as field-name driven state machines.
"""

import json
from collections.abc import Iterator
from typing import Any, NamedTuple

from eqr.domain.shared.error import DocumentParseError, InvalidStateError
from eqr.domain.shared.port.document import Token

_UNSET = object()


def _plain(value: Any) -> Any:
    """Convert tuples to lists so built documents compare equal to parsed JSON."""
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    return value


class JsonDocumentBuilder:
    """Builds a nested dict/list document one token at a time."""

    def __init__(self) -> None:
        self._stack: list[dict | list] = []
        self._root: Any = _UNSET
        self._pending_name: str | None = None

    def start_object(self, name: str | None = None) -> "JsonDocumentBuilder":
        self._open({}, name)
        return self

    def end_object(self) -> "JsonDocumentBuilder":
        self._close(dict, "object")
        return self

    def start_array(self, name: str | None = None) -> "JsonDocumentBuilder":
        self._open([], name)
        return self

    def end_array(self) -> "JsonDocumentBuilder":
        self._close(list, "array")
        return self

    def name(self, key: str) -> "JsonDocumentBuilder":
        if not self._stack or not isinstance(self._stack[-1], dict):
            raise InvalidStateError(f"field [{key}] can only be written inside an object")
        if self._pending_name is not None:
            raise InvalidStateError(f"field [{self._pending_name}] has no value")
        self._pending_name = key
        return self

    def field(self, name: str, value: Any) -> "JsonDocumentBuilder":
        self.name(name)
        self._attach(_plain(value))
        return self

    def value(self, value: Any) -> "JsonDocumentBuilder":
        self._attach(_plain(value))
        return self

    def build(self) -> Any:
        if self._stack:
            raise InvalidStateError(f"document has {len(self._stack)} unclosed containers")
        if self._root is _UNSET:
            raise InvalidStateError("document is empty")
        return self._root

    def to_json(self, *, indent: int | None = None) -> str:
        separators = None if indent is not None else (",", ":")
        return json.dumps(self.build(), indent=indent, separators=separators, ensure_ascii=False)

    def _open(self, container: dict | list, name: str | None) -> None:
        if name is not None:
            self.name(name)
        self._attach(container)
        self._stack.append(container)

    def _attach(self, value: Any) -> None:
        if not self._stack:
            if self._root is not _UNSET:
                raise InvalidStateError("document already has a root value")
            self._root = value
            return
        parent = self._stack[-1]
        if isinstance(parent, dict):
            if self._pending_name is None:
                raise InvalidStateError("value inside an object needs a field name")
            parent[self._pending_name] = value
            self._pending_name = None
        else:
            parent.append(value)

    def _close(self, kind: type, label: str) -> None:
        if not self._stack or not isinstance(self._stack[-1], kind):
            raise InvalidStateError(f"no open {label} to end")
        if self._pending_name is not None:
            raise InvalidStateError(f"field [{self._pending_name}] has no value")
        self._stack.pop()


class _Event(NamedTuple):
    token: Token
    node: Any
    location: str
    name: str | None


def _scalar_token(value: Any, location: str) -> Token:
    if value is None:
        return Token.VALUE_NULL
    if isinstance(value, bool):
        return Token.VALUE_BOOLEAN
    if isinstance(value, (int, float)):
        return Token.VALUE_NUMBER
    if isinstance(value, str):
        return Token.VALUE_STRING
    raise DocumentParseError(f"unsupported value of type [{type(value).__name__}]", location=location)


def _walk(node: Any, location: str, name: str | None) -> Iterator[_Event]:
    if isinstance(node, dict):
        yield _Event(Token.START_OBJECT, node, location, name)
        for key, child in node.items():
            child_location = f"{location}.{key}"
            yield _Event(Token.FIELD_NAME, key, child_location, key)
            yield from _walk(child, child_location, key)
        yield _Event(Token.END_OBJECT, node, location, name)
    elif isinstance(node, (list, tuple)):
        yield _Event(Token.START_ARRAY, node, location, name)
        for i, child in enumerate(node):
            yield from _walk(child, f"{location}[{i}]", None)
        yield _Event(Token.END_ARRAY, node, location, name)
    else:
        yield _Event(_scalar_token(node, location), node, location, name)


class JsonDocumentParser:
    """Token reader over a JSON value. Starts positioned before the first token."""

    def __init__(self, document: Any) -> None:
        self._events = _walk(document, "$", None)
        self._current: _Event | None = None

    @classmethod
    def from_json(cls, text: str | bytes) -> "JsonDocumentParser":
        try:
            document = json.loads(text)
        except json.JSONDecodeError as e:
            raise DocumentParseError(
                f"malformed JSON: {e.msg}", location=f"line {e.lineno} column {e.colno}"
            ) from e
        return cls(document)

    @property
    def current_token(self) -> Token | None:
        return self._current.token if self._current else None

    @property
    def current_name(self) -> str | None:
        return self._current.name if self._current else None

    @property
    def token_location(self) -> str:
        return self._current.location if self._current else "$"

    def next_token(self) -> Token | None:
        self._current = next(self._events, None)
        return self.current_token

    def text(self) -> str:
        if self.current_token is Token.FIELD_NAME:
            return self._current.node
        return self._scalar(Token.VALUE_STRING)

    def int_value(self) -> int:
        value = self._scalar(Token.VALUE_NUMBER)
        if isinstance(value, float):
            if not value.is_integer():
                raise DocumentParseError(
                    f"expected an integer but found [{value}]",
                    expected=Token.VALUE_NUMBER,
                    location=self.token_location,
                )
            return int(value)
        return value

    def float_value(self) -> float:
        return float(self._scalar(Token.VALUE_NUMBER))

    def bool_value(self) -> bool:
        return self._scalar(Token.VALUE_BOOLEAN)

    def skip_children(self) -> None:
        if self.current_token not in (Token.START_OBJECT, Token.START_ARRAY):
            return
        depth = 1
        while depth:
            token = self.next_token()
            if token is None:
                break
            if token in (Token.START_OBJECT, Token.START_ARRAY):
                depth += 1
            elif token in (Token.END_OBJECT, Token.END_ARRAY):
                depth -= 1

    def map_value(self) -> dict[str, Any]:
        if self.current_token is not Token.START_OBJECT:
            raise DocumentParseError(
                "expected an object",
                expected=Token.START_OBJECT,
                location=self.token_location,
            )
        node = self._current.node
        self.skip_children()
        return _plain(node)

    def _scalar(self, expected: Token) -> Any:
        if self.current_token is not expected:
            found = self.current_token.value if self.current_token else "end of document"
            raise DocumentParseError(
                f"expected [{expected.value}] but found [{found}]",
                expected=expected,
                location=self.token_location,
            )
        return self._current.node
