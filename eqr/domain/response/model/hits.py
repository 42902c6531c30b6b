"""Result payload: an optional total plus at most one result collection."""

import logging
from collections.abc import Iterable
from typing import ClassVar, Self

from eqr.domain.response.model.entries import Count, Counts, Entries, Events, Sequence, Sequences
from eqr.domain.response.model.record import MatchedRecord
from eqr.domain.response.model.total import TotalHits
from eqr.domain.shared.error import ConflictingPayloadError, DocumentParseError
from eqr.domain.shared.model.value import ValueObject
from eqr.domain.shared.port.document import DocumentBuilder, DocumentParser, Token
from eqr.domain.shared.port.stream import StreamInput, StreamOutput
from eqr.domain.shared.util.document import ensure_expected_token, ensure_start_object

logger = logging.getLogger(__name__)

# Binary flag order and document sniffing precedence.
VARIANTS: tuple[type[Entries], ...] = (Events, Sequences, Counts)


class Hits(ValueObject):
    """The result data of one query.

    ``entries`` holds whichever single collection the query produced, so the
    three variants are exclusive by construction. ``None`` means the query
    produced no result collection at all, which is distinct from an empty one.
    """

    EMPTY: ClassVar["Hits"]

    total: TotalHits | None = None
    entries: Events | Sequences | Counts | None = None

    @classmethod
    def of_events(
        cls,
        events: Events | Iterable[MatchedRecord] | None,
        total: TotalHits | None = None,
    ) -> "Hits":
        if events is not None and not isinstance(events, Events):
            events = Events(entries=list(events))
        return cls(total=total, entries=events)

    @classmethod
    def of_sequences(
        cls,
        sequences: Sequences | Iterable[Sequence] | None,
        total: TotalHits | None = None,
    ) -> "Hits":
        if sequences is not None and not isinstance(sequences, Sequences):
            sequences = Sequences(entries=list(sequences))
        return cls(total=total, entries=sequences)

    @classmethod
    def of_counts(
        cls,
        counts: Counts | Iterable[Count] | None,
        total: TotalHits | None = None,
    ) -> "Hits":
        if counts is not None and not isinstance(counts, Counts):
            counts = Counts(entries=list(counts))
        return cls(total=total, entries=counts)

    @property
    def events(self) -> Events | None:
        return self.entries if isinstance(self.entries, Events) else None

    @property
    def sequences(self) -> Sequences | None:
        return self.entries if isinstance(self.entries, Sequences) else None

    @property
    def counts(self) -> Counts | None:
        return self.entries if isinstance(self.entries, Counts) else None

    @property
    def variant(self) -> str | None:
        """Field name of the populated collection, if any."""
        return self.entries.name if self.entries is not None else None

    def write_to(self, out: StreamOutput) -> None:
        out.write_bool(self.total is not None)
        if self.total is not None:
            self.total.write_to(out)
        for kind in VARIANTS:
            present = isinstance(self.entries, kind)
            out.write_bool(present)
            if present:
                self.entries.write_to(out)

    @classmethod
    def read_from(cls, stream: StreamInput, *, strict: bool = False) -> Self:
        """Decode the flag sequence written by ``write_to``.

        The variant flags are independent on the wire. If a stream sets more
        than one, the last populated collection is kept, or
        ConflictingPayloadError is raised when ``strict``.
        """
        total = TotalHits.read_from(stream) if stream.read_bool() else None
        found: list[Entries] = []
        for kind in VARIANTS:
            if stream.read_bool():
                found.append(kind.read_from(stream))

        if len(found) > 1:
            names = [f.name for f in found]
            if strict:
                raise ConflictingPayloadError(names)
            logger.warning("Stream sets variants %s, keeping [%s]", names, names[-1])
        return cls(total=total, entries=found[-1] if found else None)

    def to_document(self, builder: DocumentBuilder) -> None:
        builder.start_object()
        if self.total is not None:
            builder.name("total")
            self.total.to_document(builder)
        if self.entries is not None:
            self.entries.to_document(builder)
        builder.end_object()

    @classmethod
    def from_document(cls, parser: DocumentParser, *, strict: bool = False) -> Self:
        """Parse a hits object, inferring the variant from which array key is present.

        Unknown fields are skipped. If more than one variant array is present,
        events win over sequences, which win over counts, unless ``strict``.
        """
        ensure_start_object(parser)
        total: TotalHits | None = None
        found: dict[str, Entries] = {}
        by_name = {kind.name: kind for kind in VARIANTS}

        while (token := parser.next_token()) is Token.FIELD_NAME:
            name = parser.current_name
            token = parser.next_token()
            if name == "total":
                if token in (Token.START_OBJECT, Token.VALUE_NUMBER):
                    total = TotalHits.from_document(parser)
                elif token is not Token.VALUE_NULL:
                    raise DocumentParseError(
                        f"expected [{Token.START_OBJECT.value}] for [total] but found [{token}]",
                        expected=Token.START_OBJECT,
                        location=parser.token_location,
                    )
            elif name in by_name and token is Token.START_ARRAY:
                found[name] = by_name[name].parse_array(parser)
            else:
                parser.skip_children()
        ensure_expected_token(Token.END_OBJECT, token, parser.token_location)

        present = [kind.name for kind in VARIANTS if kind.name in found]
        if len(present) > 1:
            if strict:
                raise ConflictingPayloadError(present)
            logger.warning("Document carries variants %s, keeping [%s]", present, present[0])
        entries = found[present[0]] if present else None
        logger.debug("Parsed hits with variant [%s]", present[0] if present else None)
        return cls(total=total, entries=entries)


Hits.EMPTY = Hits()
