from eqr.domain.response.model.entries import Count, Counts, Entries, Events, Sequence, Sequences
from eqr.domain.response.model.hits import Hits
from eqr.domain.response.model.record import MatchedRecord
from eqr.domain.response.model.response import SearchResponse
from eqr.domain.response.model.total import Relation, TotalHits

__all__ = [
    "Count",
    "Counts",
    "Entries",
    "Events",
    "Hits",
    "MatchedRecord",
    "Relation",
    "SearchResponse",
    "Sequence",
    "Sequences",
    "TotalHits",
]
