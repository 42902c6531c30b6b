"""ResponseCodec - entry point for moving responses across both wire forms."""

import logging
from dataclasses import dataclass
from typing import Any

import logfire

from eqr.config import CodecConfig
from eqr.domain.response.model import Entries, Hits, SearchResponse
from eqr.domain.shared.error import DecodeError, ValidationError
from eqr.infrastructure.document import JsonDocumentBuilder, JsonDocumentParser
from eqr.infrastructure.stream import BytesStreamInput, BytesStreamOutput

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResponseCodec:
    """Encodes and decodes SearchResponse objects.

    Binary form is for internal transport; the JSON document form is what
    clients see. Failures propagate unchanged to the caller, and a decode
    never returns a partially populated response.
    """

    config: CodecConfig

    # -------------------------------------------------------------------------
    # Binary
    # -------------------------------------------------------------------------

    def to_bytes(self, response: SearchResponse) -> bytes:
        with logfire.span("EncodeResponse", variant=response.hits.variant):
            out = BytesStreamOutput()
            response.write_to(out)
            logger.debug("Encoded response into %d bytes", len(out))
            return out.getvalue()

    def from_bytes(self, data: bytes) -> SearchResponse:
        with logfire.span("DecodeResponse", size=len(data)):
            stream = BytesStreamInput(data)
            response = SearchResponse.read_from(stream, strict=self.config.strict)
            if self.config.strict:
                if stream.remaining:
                    raise DecodeError(
                        f"{stream.remaining} trailing bytes after response", stream.position
                    )
                self._check_percents(response.hits)
            logger.debug("Decoded response with variant [%s]", response.hits.variant)
            return response

    # -------------------------------------------------------------------------
    # Document
    # -------------------------------------------------------------------------

    def to_document(self, model: SearchResponse | Hits | Entries | Any) -> Any:
        """Render a response, a hits payload, a collection or a single record.

        Collections render as ``{name: [...]}``, everything else as its own object.
        """
        builder = JsonDocumentBuilder()
        if isinstance(model, Entries):
            builder.start_object()
            model.to_document(builder)
            builder.end_object()
        else:
            model.to_document(builder)
        return builder.build()

    def from_document(self, document: dict[str, Any]) -> SearchResponse:
        with logfire.span("ParseResponse"):
            return self._parse(JsonDocumentParser(document))

    def to_json(self, response: SearchResponse) -> str:
        with logfire.span("RenderResponse", variant=response.hits.variant):
            builder = JsonDocumentBuilder()
            response.to_document(builder)
            return builder.to_json(indent=2 if self.config.pretty else None)

    def from_json(self, text: str | bytes) -> SearchResponse:
        with logfire.span("ParseResponse"):
            return self._parse(JsonDocumentParser.from_json(text))

    def _parse(self, parser: JsonDocumentParser) -> SearchResponse:
        response = SearchResponse.from_document(parser, strict=self.config.strict)
        if self.config.strict:
            self._check_percents(response.hits)
        return response

    @staticmethod
    def _check_percents(hits: Hits) -> None:
        if hits.counts is None:
            return
        for i, bucket in enumerate(hits.counts.entries):
            if not 0.0 <= bucket.percent <= 1.0:
                raise ValidationError(
                    f"count bucket {i} has percent {bucket.percent} outside [0, 1]",
                    field="_percent",
                )
