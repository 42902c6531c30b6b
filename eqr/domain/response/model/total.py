from enum import StrEnum
from typing import Self

from pydantic import Field

from eqr.domain.shared.error import DecodeError, DocumentParseError
from eqr.domain.shared.model.value import ValueObject
from eqr.domain.shared.port.document import DocumentBuilder, DocumentParser, Token
from eqr.domain.shared.port.stream import StreamInput, StreamOutput
from eqr.domain.shared.util.document import ensure_expected_token, ensure_start_object, missing_field
from eqr.domain.shared.util.model import build_decoded, build_parsed


class Relation(StrEnum):
    """Whether a total count is exact or a lower bound.

    The values are the literals used in rendered documents.
    """

    EQUAL_TO = "eq"
    GREATER_THAN_OR_EQUAL_TO = "gte"

    @property
    def wire_id(self) -> int:
        return _WIRE_IDS[self]

    @classmethod
    def from_wire_id(cls, wire_id: int) -> "Relation":
        for relation, value in _WIRE_IDS.items():
            if value == wire_id:
                return relation
        raise DecodeError(f"unknown total relation id [{wire_id}]")


_WIRE_IDS = {
    Relation.EQUAL_TO: 0,
    Relation.GREATER_THAN_OR_EQUAL_TO: 1,
}


class TotalHits(ValueObject):
    """Total number of matches, exact or as a lower bound."""

    value: int = Field(ge=0)
    relation: Relation = Relation.EQUAL_TO

    def write_to(self, out: StreamOutput) -> None:
        out.write_vlong(self.value)
        out.write_byte(self.relation.wire_id)

    @classmethod
    def read_from(cls, stream: StreamInput) -> Self:
        value = stream.read_vlong()
        relation = Relation.from_wire_id(stream.read_byte())
        return build_decoded(cls, value=value, relation=relation)

    def to_document(self, builder: DocumentBuilder) -> None:
        builder.start_object()
        builder.field("value", self.value)
        builder.field("relation", self.relation.value)
        builder.end_object()

    @classmethod
    def from_document(cls, parser: DocumentParser) -> Self:
        """Parse ``{"value": n, "relation": "eq"|"gte"}``.

        A missing relation, or a bare number in place of the object, is read
        as an exact total.
        """
        if parser.current_token is Token.VALUE_NUMBER:
            return build_parsed(cls, parser.token_location, value=parser.int_value())

        ensure_start_object(parser)
        location = parser.token_location
        value: int | None = None
        relation = Relation.EQUAL_TO

        while (token := parser.next_token()) is Token.FIELD_NAME:
            name = parser.current_name
            token = parser.next_token()
            if name == "value":
                value = parser.int_value()
            elif name == "relation":
                text = parser.text()
                try:
                    relation = Relation(text)
                except ValueError:
                    raise DocumentParseError(
                        f"unknown total relation [{text}], expected one of "
                        f"{[r.value for r in Relation]}",
                        expected=Token.VALUE_STRING,
                        location=parser.token_location,
                    ) from None
            else:
                parser.skip_children()
        ensure_expected_token(Token.END_OBJECT, token, parser.token_location)

        if value is None:
            raise missing_field("value", location)
        return build_parsed(cls, location, value=value, relation=relation)
