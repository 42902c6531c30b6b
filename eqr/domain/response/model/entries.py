"""Named result collections and the records they hold.

A named collection is an ordered, homogeneous tuple of one record kind,
tagged with the fixed field name it is rendered under. The record kind
supplies the per-entry hooks (see ``eqr.domain.shared.port.entry.Entry``);
the collection supplies the count-prefixed binary layout and the named
array document layout.
"""

import logging
import math
import struct
from typing import Any, ClassVar, Generic, Self, TypeVar

from pydantic import Field, field_validator

from eqr.domain.response.model.record import MatchedRecord
from eqr.domain.shared.error import DecodeError
from eqr.domain.shared.model.value import ValueObject
from eqr.domain.shared.port.document import DocumentBuilder, DocumentParser, Token
from eqr.domain.shared.port.entry import Entry
from eqr.domain.shared.port.stream import StreamInput, StreamOutput
from eqr.domain.shared.util.document import (
    ensure_expected_token,
    ensure_start_object,
    missing_field,
    read_string_array,
)
from eqr.domain.shared.util.model import build_decoded, build_parsed

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=ValueObject)

_SINGLE = struct.Struct(">f")


class Entries(ValueObject, Generic[T]):
    """Ordered collection of one record kind, keyed by ``name`` in documents."""

    name: ClassVar[str]
    entry_type: ClassVar[type[Entry]]

    entries: tuple[T, ...] = ()

    @field_validator("entries", mode="before")
    @classmethod
    def _none_is_empty(cls, v: Any) -> Any:
        return () if v is None else v

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, i: int) -> T:
        return self.entries[i]

    def write_to(self, out: StreamOutput) -> None:
        out.write_vint(len(self.entries))
        for entry in self.entries:
            entry.write_to(out)

    @classmethod
    def read_from(cls, stream: StreamInput) -> Self:
        size = stream.read_vint()
        # every entry takes at least one byte
        if size > stream.remaining:
            raise DecodeError(
                f"[{cls.name}] declares {size} entries but only {stream.remaining} bytes remain"
            )
        entries = [cls.entry_type.read_from(stream) for _ in range(size)]
        logger.debug("Decoded %d %s", size, cls.name)
        return cls(entries=entries)

    def to_document(self, builder: DocumentBuilder) -> None:
        builder.start_array(self.name)
        for entry in self.entries:
            entry.to_document(builder)
        builder.end_array()

    @classmethod
    def parse_array(cls, parser: DocumentParser) -> Self:
        """Read the array the current token opens."""
        ensure_expected_token(Token.START_ARRAY, parser.current_token, parser.token_location)
        entries = []
        while (token := parser.next_token()) is not Token.END_ARRAY:
            if token is None:
                ensure_expected_token(Token.END_ARRAY, token, parser.token_location)
            ensure_expected_token(Token.START_OBJECT, token, parser.token_location)
            entries.append(cls.entry_type.from_document(parser))
        return cls(entries=entries)


class Events(Entries[MatchedRecord]):
    EMPTY: ClassVar["Events"]
    name: ClassVar[str] = "events"
    entry_type: ClassVar[type[Entry]] = MatchedRecord


Events.EMPTY = Events()


class Sequence(ValueObject):
    """An ordered run of matched records sharing the same join key values."""

    join_keys: tuple[str, ...] = ()
    events: Events = Events.EMPTY

    @field_validator("join_keys", mode="before")
    @classmethod
    def _no_join_keys(cls, v: Any) -> Any:
        return () if v is None else v

    @field_validator("events", mode="before")
    @classmethod
    def _no_events(cls, v: Any) -> Any:
        return Events.EMPTY if v is None else v

    def write_to(self, out: StreamOutput) -> None:
        out.write_string_list(self.join_keys)
        # events are written inline, not through Events.write_to
        out.write_vint(len(self.events))
        for event in self.events.entries:
            event.write_to(out)

    @classmethod
    def read_from(cls, stream: StreamInput) -> Self:
        join_keys = stream.read_string_list()
        events = Events.read_from(stream)
        return cls(join_keys=join_keys, events=events)

    def to_document(self, builder: DocumentBuilder) -> None:
        builder.start_object()
        builder.start_array("join_keys")
        for key in self.join_keys:
            builder.value(key)
        builder.end_array()
        self.events.to_document(builder)
        builder.end_object()

    @classmethod
    def from_document(cls, parser: DocumentParser) -> Self:
        ensure_start_object(parser)
        join_keys: list[str] | None = None
        events: Events | None = None

        while (token := parser.next_token()) is Token.FIELD_NAME:
            name = parser.current_name
            token = parser.next_token()
            if token is Token.VALUE_NULL:
                continue
            if name == "join_keys":
                join_keys = read_string_array(parser)
            elif name == Events.name:
                events = Events.parse_array(parser)
            else:
                parser.skip_children()
        ensure_expected_token(Token.END_OBJECT, token, parser.token_location)
        return cls(join_keys=join_keys, events=events)


class Count(ValueObject):
    """An aggregated count for one combination of key values.

    ``percent`` is held at single precision, the precision it has on the wire.
    """

    count: int = Field(ge=0, le=2**31 - 1)
    keys: tuple[str, ...] = ()
    percent: float

    @field_validator("keys", mode="before")
    @classmethod
    def _no_keys(cls, v: Any) -> Any:
        return () if v is None else v

    @field_validator("percent", mode="after")
    @classmethod
    def _single_precision(cls, v: float) -> float:
        if math.isnan(v):
            raise ValueError("percent must be a number, got NaN")
        try:
            return _SINGLE.unpack(_SINGLE.pack(v))[0]
        except OverflowError:
            raise ValueError("percent is out of single-precision range") from None

    def write_to(self, out: StreamOutput) -> None:
        out.write_vint(self.count)
        out.write_string_list(self.keys)
        out.write_float(self.percent)

    @classmethod
    def read_from(cls, stream: StreamInput) -> Self:
        count = stream.read_vint()
        keys = stream.read_string_list()
        percent = stream.read_float()
        return build_decoded(cls, count=count, keys=keys, percent=percent)

    def to_document(self, builder: DocumentBuilder) -> None:
        builder.start_object()
        builder.field("_count", self.count)
        builder.field("_keys", self.keys)
        builder.field("_percent", self.percent)
        builder.end_object()

    @classmethod
    def from_document(cls, parser: DocumentParser) -> Self:
        ensure_start_object(parser)
        location = parser.token_location
        fields: dict[str, Any] = {}

        while (token := parser.next_token()) is Token.FIELD_NAME:
            name = parser.current_name
            token = parser.next_token()
            if name == "_count":
                fields["count"] = parser.int_value()
            elif name == "_keys":
                fields["keys"] = read_string_array(parser)
            elif name == "_percent":
                fields["percent"] = parser.float_value()
            else:
                parser.skip_children()
        ensure_expected_token(Token.END_OBJECT, token, parser.token_location)

        for field, key in (("count", "_count"), ("keys", "_keys"), ("percent", "_percent")):
            if field not in fields:
                raise missing_field(key, location)
        return build_parsed(cls, location, **fields)


class Sequences(Entries[Sequence]):
    name: ClassVar[str] = "sequences"
    entry_type: ClassVar[type[Entry]] = Sequence


class Counts(Entries[Count]):
    name: ClassVar[str] = "counts"
    entry_type: ClassVar[type[Entry]] = Count
