"""Tests for the Hits result payload."""

import logging

import pytest

from eqr.domain.response.model import (
    Counts,
    Events,
    Hits,
    MatchedRecord,
    Relation,
    Sequence,
    Sequences,
    TotalHits,
)
from eqr.domain.shared.error import ConflictingPayloadError, DocumentParseError
from eqr.infrastructure.document import JsonDocumentBuilder, JsonDocumentParser
from eqr.infrastructure.stream import BytesStreamInput, BytesStreamOutput


def _encode(hits: Hits) -> bytes:
    out = BytesStreamOutput()
    hits.write_to(out)
    return out.getvalue()


def _render(hits: Hits) -> dict:
    builder = JsonDocumentBuilder()
    hits.to_document(builder)
    return builder.build()


class TestHitsConstruction:
    def test_of_events_exposes_only_events(self, hit1: MatchedRecord) -> None:
        hits = Hits.of_events([hit1])
        assert hits.events == Events(entries=[hit1])
        assert hits.sequences is None
        assert hits.counts is None
        assert hits.variant == "events"

    def test_of_sequences_exposes_only_sequences(self) -> None:
        hits = Hits.of_sequences([Sequence(join_keys=["k"])])
        assert hits.events is None
        assert hits.sequences is not None
        assert hits.counts is None
        assert hits.variant == "sequences"

    def test_of_counts_exposes_only_counts(self, counts: Counts) -> None:
        hits = Hits.of_counts(counts, TotalHits(value=55))
        assert hits.events is None
        assert hits.sequences is None
        assert hits.counts == counts
        assert hits.total == TotalHits(value=55)

    def test_none_collection_means_no_variant(self) -> None:
        hits = Hits.of_events(None)
        assert hits.entries is None
        assert hits.variant is None
        assert hits == Hits.EMPTY

    def test_empty_collection_is_not_none(self) -> None:
        assert Hits.of_counts([]).counts == Counts()
        assert Hits.of_counts([]) != Hits.EMPTY

    def test_equality_includes_total(self, hit1: MatchedRecord) -> None:
        assert Hits.of_events([hit1], TotalHits(value=1)) != Hits.of_events([hit1])


class TestHitsBinary:
    def test_empty_layout(self) -> None:
        assert _encode(Hits.EMPTY) == b"\x00\x00\x00\x00"

    def test_total_only_layout(self) -> None:
        hits = Hits(total=TotalHits(value=5, relation=Relation.GREATER_THAN_OR_EQUAL_TO))
        assert _encode(hits) == b"\x01\x05\x01\x00\x00\x00"

    def test_single_variant_flag_written(self) -> None:
        assert _encode(Hits.of_sequences([])) == b"\x00\x00\x01\x00\x00"
        assert _encode(Hits.of_counts([])) == b"\x00\x00\x00\x01\x00"

    def test_round_trip(self, hit1: MatchedRecord, sequences: Sequences, counts: Counts) -> None:
        for hits in (
            Hits.of_events([hit1], TotalHits(value=1)),
            Hits.of_sequences(sequences),
            Hits.of_counts(counts, TotalHits(value=9, relation=Relation.GREATER_THAN_OR_EQUAL_TO)),
            Hits.EMPTY,
        ):
            assert Hits.read_from(BytesStreamInput(_encode(hits))) == hits

    def test_conflicting_flags_keep_last(self, caplog: pytest.LogCaptureFixture) -> None:
        # events (empty) and sequences (empty) both flagged
        data = b"\x00\x01\x00\x01\x00\x00"
        with caplog.at_level(logging.WARNING):
            hits = Hits.read_from(BytesStreamInput(data))
        assert hits.sequences == Sequences()
        assert hits.events is None
        assert "keeping [sequences]" in caplog.text

    def test_conflicting_flags_strict(self) -> None:
        data = b"\x00\x01\x00\x01\x00\x00"
        with pytest.raises(ConflictingPayloadError) as exc_info:
            Hits.read_from(BytesStreamInput(data), strict=True)
        assert exc_info.value.variants == ["events", "sequences"]


class TestHitsDocument:
    def test_total_precedes_variant(self, hit1: MatchedRecord) -> None:
        doc = _render(Hits.of_events([hit1], TotalHits(value=1)))
        assert list(doc) == ["total", "events"]

    def test_no_total_key_when_absent(self, counts: Counts) -> None:
        assert list(_render(Hits.of_counts(counts))) == ["counts"]

    def test_empty_payload(self) -> None:
        assert _render(Hits.EMPTY) == {}

    def test_round_trip(self, hit1: MatchedRecord, sequences: Sequences, counts: Counts) -> None:
        for hits in (
            Hits.of_events([hit1], TotalHits(value=1)),
            Hits.of_events([]),
            Hits.of_sequences(sequences, TotalHits(value=3, relation=Relation.GREATER_THAN_OR_EQUAL_TO)),
            Hits.of_counts(counts),
            Hits(total=TotalHits(value=0)),
            Hits.EMPTY,
        ):
            assert Hits.from_document(JsonDocumentParser(_render(hits))) == hits

    def test_variant_sniffed_from_array_key(self) -> None:
        doc = {"counts": [{"_count": 2, "_keys": ["x"], "_percent": 1.0}]}
        hits = Hits.from_document(JsonDocumentParser(doc))
        assert hits.variant == "counts"
        assert hits.counts[0].keys == ("x",)

    def test_unknown_fields_skipped(self) -> None:
        doc = {
            "max_score": 1.0,
            "shards": {"total": 1, "events": []},
            "other": [{"a": 1}, [2]],
            "sequences": [{"join_keys": ["a"], "events": []}],
        }
        hits = Hits.from_document(JsonDocumentParser(doc))
        assert hits == Hits.of_sequences([Sequence(join_keys=["a"])])

    def test_bare_number_total(self) -> None:
        hits = Hits.from_document(JsonDocumentParser({"total": 12}))
        assert hits.total == TotalHits(value=12, relation=Relation.EQUAL_TO)

    def test_null_total(self) -> None:
        assert Hits.from_document(JsonDocumentParser({"total": None})).total is None

    def test_string_total_rejected(self) -> None:
        with pytest.raises(DocumentParseError) as exc_info:
            Hits.from_document(JsonDocumentParser({"total": "12"}))
        assert exc_info.value.location == "$.total"

    def test_non_array_variant_skipped(self) -> None:
        assert Hits.from_document(JsonDocumentParser({"events": None})) == Hits.EMPTY

    def test_multiple_variant_arrays(self, caplog: pytest.LogCaptureFixture) -> None:
        doc = {"counts": [], "events": [{"_id": "1"}]}
        with caplog.at_level(logging.WARNING):
            hits = Hits.from_document(JsonDocumentParser(doc))
        assert hits.events == Events(entries=[MatchedRecord(id="1")])
        assert "keeping [events]" in caplog.text

    def test_multiple_variant_arrays_strict(self) -> None:
        doc = {"counts": [], "events": []}
        with pytest.raises(ConflictingPayloadError):
            Hits.from_document(JsonDocumentParser(doc), strict=True)

    def test_requires_object(self) -> None:
        with pytest.raises(DocumentParseError):
            Hits.from_document(JsonDocumentParser([]))
