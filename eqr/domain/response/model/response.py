from typing import Any, Self

from pydantic import Field, field_validator

from eqr.domain.response.model.hits import Hits
from eqr.domain.shared.model.value import ValueObject
from eqr.domain.shared.port.document import DocumentBuilder, DocumentParser, Token
from eqr.domain.shared.port.stream import StreamInput, StreamOutput
from eqr.domain.shared.util.document import ensure_expected_token, ensure_start_object, missing_field
from eqr.domain.shared.util.model import build_decoded, build_parsed
from eqr.infrastructure.document.json_document import JsonDocumentBuilder


class SearchResponse(ValueObject):
    """Top-level result of one completed query: timing, timeout flag and hits."""

    hits: Hits = Hits.EMPTY
    took: int = Field(ge=0)
    timed_out: bool = False

    @field_validator("hits", mode="before")
    @classmethod
    def _no_hits(cls, v: Any) -> Any:
        return Hits.EMPTY if v is None else v

    def write_to(self, out: StreamOutput) -> None:
        out.write_vlong(self.took)
        out.write_bool(self.timed_out)
        self.hits.write_to(out)

    @classmethod
    def read_from(cls, stream: StreamInput, *, strict: bool = False) -> Self:
        took = stream.read_vlong()
        timed_out = stream.read_bool()
        hits = Hits.read_from(stream, strict=strict)
        return build_decoded(cls, hits=hits, took=took, timed_out=timed_out)

    def to_document(self, builder: DocumentBuilder) -> None:
        builder.start_object()
        builder.field("took", self.took)
        builder.field("timed_out", self.timed_out)
        builder.name("hits")
        self.hits.to_document(builder)
        builder.end_object()

    @classmethod
    def from_document(cls, parser: DocumentParser, *, strict: bool = False) -> Self:
        ensure_start_object(parser)
        location = parser.token_location
        fields: dict[str, Any] = {}

        while (token := parser.next_token()) is Token.FIELD_NAME:
            name = parser.current_name
            token = parser.next_token()
            if name == "took":
                fields["took"] = parser.int_value()
            elif name == "timed_out":
                fields["timed_out"] = parser.bool_value()
            elif name == "hits":
                fields["hits"] = Hits.from_document(parser, strict=strict)
            else:
                parser.skip_children()
        ensure_expected_token(Token.END_OBJECT, token, parser.token_location)

        for field in ("took", "timed_out", "hits"):
            if field not in fields:
                raise missing_field(field, location)
        return build_parsed(cls, location, **fields)

    def __str__(self) -> str:
        builder = JsonDocumentBuilder()
        self.to_document(builder)
        return builder.to_json()
