"""Global test fixtures."""

import logfire
import pytest

from eqr.application.codec import ResponseCodec
from eqr.config import CodecConfig
from eqr.domain.response.model import (
    Count,
    Counts,
    Events,
    Hits,
    MatchedRecord,
    Relation,
    SearchResponse,
    Sequence,
    Sequences,
    TotalHits,
)

# Keep spans local during tests
logfire.configure(send_to_logfire=False, console=False)


@pytest.fixture
def hit1() -> MatchedRecord:
    return MatchedRecord(
        id="111",
        index="logs-endpoint",
        score=1.5,
        version=3,
        source={"event": {"category": "process"}, "process": {"pid": 4021, "name": "cmd.exe"}},
    )


@pytest.fixture
def hit2() -> MatchedRecord:
    return MatchedRecord(id="222", index="logs-endpoint", source={"event": {"category": "network"}})


@pytest.fixture
def hit3() -> MatchedRecord:
    return MatchedRecord(id="333")


@pytest.fixture
def sequences(hit1: MatchedRecord, hit2: MatchedRecord, hit3: MatchedRecord) -> Sequences:
    return Sequences(
        entries=[
            Sequence(join_keys=["4021"], events=Events(entries=[hit1, hit2])),
            Sequence(join_keys=["2343", "host-a"], events=Events(entries=[hit3])),
            Sequence(),
        ]
    )


@pytest.fixture
def counts() -> Counts:
    return Counts(
        entries=[
            Count(count=40, keys=["foo", "bar"], percent=0.42233),
            Count(count=15, keys=["foo", "baz"], percent=0.170275),
            Count(count=0, keys=[], percent=0.0),
        ]
    )


@pytest.fixture
def all_responses(
    hit1: MatchedRecord,
    hit2: MatchedRecord,
    hit3: MatchedRecord,
    sequences: Sequences,
    counts: Counts,
) -> list[SearchResponse]:
    """One response per payload shape, with and without totals and empty collections."""
    exact = TotalHits(value=100, relation=Relation.EQUAL_TO)
    lower = TotalHits(value=10_000, relation=Relation.GREATER_THAN_OR_EQUAL_TO)
    return [
        SearchResponse(hits=Hits.of_events([hit1, hit2, hit3], exact), took=5),
        SearchResponse(hits=Hits.of_events(Events(), None), took=0),
        SearchResponse(hits=Hits.of_sequences(sequences, lower), took=120, timed_out=True),
        SearchResponse(hits=Hits.of_sequences([], None), took=1),
        SearchResponse(hits=Hits.of_counts(counts, exact), took=7),
        SearchResponse(hits=Hits.of_counts(Counts(), lower), took=7),
        SearchResponse(hits=Hits(total=exact), took=2),
        SearchResponse(hits=None, took=3, timed_out=True),
    ]


@pytest.fixture
def codec() -> ResponseCodec:
    return ResponseCodec(config=CodecConfig())


@pytest.fixture
def strict_codec() -> ResponseCodec:
    return ResponseCodec(config=CodecConfig(strict=True))
