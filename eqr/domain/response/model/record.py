"""A matched document as it appears in a result collection."""

import json
import math
from typing import Any, Self

from pydantic import Field, field_validator

from eqr.domain.shared.model.value import ValueObject
from eqr.domain.shared.port.document import DocumentBuilder, DocumentParser, Token
from eqr.domain.shared.port.stream import StreamInput, StreamOutput
from eqr.domain.shared.util.document import ensure_expected_token, ensure_start_object, missing_field
from eqr.domain.shared.util.model import build_decoded, build_parsed


class MatchedRecord(ValueObject):
    """A single document matched by a query.

    ``source`` holds the document body as canonical compact JSON text, so two
    records with the same body compare and hash equal regardless of how the
    body was supplied (mapping, JSON text or UTF-8 bytes).
    """

    id: str
    index: str | None = None
    score: float | None = None
    version: int | None = Field(default=None, ge=0)
    source: str | None = None

    @field_validator("score", mode="after")
    @classmethod
    def _nan_score_is_absent(cls, v: float | None) -> float | None:
        if v is not None and math.isnan(v):
            return None
        return v

    @field_validator("source", mode="before")
    @classmethod
    def _canonical_source(cls, v: Any) -> str | None:
        if v is None:
            return None
        if isinstance(v, (bytes, bytearray)):
            v = v.decode("utf-8")
        if isinstance(v, str):
            v = json.loads(v)
        if not isinstance(v, dict):
            raise ValueError(f"source must be a JSON object, got {type(v).__name__}")
        return json.dumps(v, separators=(",", ":"), ensure_ascii=False)

    @property
    def source_as_map(self) -> Any:
        """Decoded document body, or None when the record carries no source."""
        return json.loads(self.source) if self.source is not None else None

    def write_to(self, out: StreamOutput) -> None:
        out.write_optional_string(self.index)
        out.write_string(self.id)
        out.write_bool(self.score is not None)
        if self.score is not None:
            out.write_double(self.score)
        out.write_bool(self.version is not None)
        if self.version is not None:
            out.write_vlong(self.version)
        out.write_bool(self.source is not None)
        if self.source is not None:
            out.write_bytes(self.source.encode("utf-8"))

    @classmethod
    def read_from(cls, stream: StreamInput) -> Self:
        index = stream.read_optional_string()
        id = stream.read_string()
        score = stream.read_double() if stream.read_bool() else None
        version = stream.read_vlong() if stream.read_bool() else None
        source = stream.read_bytes() if stream.read_bool() else None
        return build_decoded(cls, id=id, index=index, score=score, version=version, source=source)

    def to_document(self, builder: DocumentBuilder) -> None:
        builder.start_object()
        if self.index is not None:
            builder.field("_index", self.index)
        builder.field("_id", self.id)
        if self.version is not None:
            builder.field("_version", self.version)
        builder.field("_score", self.score)
        if self.source is not None:
            builder.field("_source", self.source_as_map)
        builder.end_object()

    @classmethod
    def from_document(cls, parser: DocumentParser) -> Self:
        ensure_start_object(parser)
        location = parser.token_location
        fields: dict[str, Any] = {}

        while (token := parser.next_token()) is Token.FIELD_NAME:
            name = parser.current_name
            token = parser.next_token()
            if token is Token.VALUE_NULL:
                continue
            if name == "_id":
                fields["id"] = parser.text()
            elif name == "_index":
                fields["index"] = parser.text()
            elif name == "_score":
                fields["score"] = parser.float_value()
            elif name == "_version":
                fields["version"] = parser.int_value()
            elif name == "_source":
                fields["source"] = parser.map_value()
            else:
                parser.skip_children()
        ensure_expected_token(Token.END_OBJECT, token, parser.token_location)

        if "id" not in fields:
            raise missing_field("_id", location)
        return build_parsed(cls, location, **fields)
