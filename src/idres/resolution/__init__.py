"""Identity resolution: name and institution matching, confidence, clustering."""

from .confidence import (
    AdjustedMatch,
    ConfidenceAdjuster,
    ConfidenceLevel,
    adjust_confidence,
    confidence_level,
)
from .conflicts import filter_conflicts
from .funding import filter_by_institution, score_records
from .institutions import InstitutionMatch, InstitutionMatcher, match_institutions
from .matcher import MatchResult, MatchTier, NameMatch, TieredNameMatcher, match_names
from .ranking import RelevanceRanker, keyword_relevance, rank_entities
from .resolver import (
    EntityResolver,
    MergeEvent,
    Publication,
    RawRecord,
    ResolutionReport,
    ResolvedEntity,
    SkippedRecord,
    resolve_records,
)
from .screening import (
    AuthorMatch,
    RecordScreening,
    ScreeningSummary,
    ScreeningWarning,
    build_search_terms,
    build_text_search_patterns,
    find_matches_in_authors,
    screen_record,
    screen_records,
)

__all__ = [
    # Name matching
    "MatchResult",
    "MatchTier",
    "NameMatch",
    "TieredNameMatcher",
    "match_names",
    # Institutions and confidence
    "InstitutionMatch",
    "InstitutionMatcher",
    "match_institutions",
    "AdjustedMatch",
    "ConfidenceAdjuster",
    "ConfidenceLevel",
    "adjust_confidence",
    "confidence_level",
    # Resolution
    "EntityResolver",
    "MergeEvent",
    "Publication",
    "RawRecord",
    "ResolutionReport",
    "ResolvedEntity",
    "SkippedRecord",
    "resolve_records",
    # Ranking
    "RelevanceRanker",
    "keyword_relevance",
    "rank_entities",
    # Screening
    "AuthorMatch",
    "RecordScreening",
    "ScreeningSummary",
    "ScreeningWarning",
    "build_search_terms",
    "build_text_search_patterns",
    "find_matches_in_authors",
    "screen_record",
    "screen_records",
    # Collaborator filters
    "filter_conflicts",
    "filter_by_institution",
    "score_records",
]
