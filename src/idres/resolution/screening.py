"""Integrity screening helpers.

Matches a person against author lists of retraction-style records and
prepares the search terms a caller needs to query its record store.
Warnings ("common name", "insufficient confidence") are annotations for the
reviewer and never remove a match.
"""

import re
from enum import Enum
from typing import Any, Iterable, Mapping

from pydantic import BaseModel, Field

from ..errors import ErrorKind
from ..logging import log_screening_result
from ..names.common import DEFAULT_REGISTRY, CommonNameRegistry
from ..names.normalize import normalize_name
from ..names.variants import get_name_variants
from .confidence import DEFAULT_ADJUSTER, ConfidenceAdjuster, ConfidenceLevel, confidence_level
from .matcher import DEFAULT_MATCHER, MatchTier, TieredNameMatcher

DEFAULT_MIN_CONFIDENCE = 50

_AUTHOR_SPLIT_RE = re.compile(r"[;,]")


class ScreeningWarning(str, Enum):
    """Non-blocking warnings surfaced with screening results."""

    COMMON_NAME = "common_name"
    INSUFFICIENT_CONFIDENCE = "insufficient_confidence"


class AuthorMatch(BaseModel):
    """An author string that matched the searched name."""

    matched_name: str
    confidence: int = Field(ge=0, le=100)
    tier: MatchTier
    level: ConfidenceLevel


class RecordScreening(BaseModel):
    """Best author match within one record."""

    record_id: str | None = None
    title: str | None = None
    matched_author: str
    confidence: int = Field(ge=0, le=100)
    level: ConfidenceLevel
    tier: MatchTier
    institution: str | None = None
    record: dict[str, Any] = Field(default_factory=dict)


class ScreeningSummary(BaseModel):
    """Screening outcome for one person across many records."""

    name: str
    institution: str | None = None
    is_common_name: bool = False
    matches: list[RecordScreening] = Field(default_factory=list)
    rejected: int = 0
    warnings: list[ScreeningWarning] = Field(default_factory=list)

    @property
    def has_concerns(self) -> bool:
        return bool(self.matches)


def split_authors(authors: str | Iterable[str] | None) -> list[str]:
    """Split an author field on ';' or ',' into trimmed names."""
    if not authors:
        return []
    if isinstance(authors, str):
        authors = _AUTHOR_SPLIT_RE.split(authors)
    return [author.strip() for author in authors if author and author.strip()]


def _match_authors(
    search_name: str,
    search_institution: str | None,
    authors: Iterable[str],
    matcher: TieredNameMatcher,
    adjuster: ConfidenceAdjuster,
) -> list[AuthorMatch]:
    search = normalize_name(search_name)
    if search.is_empty:
        return []

    found = []
    for author in authors:
        result = matcher.match(search, author)
        if not result.is_match:
            continue
        # Author lists carry no per-author institution
        confidence = adjuster.adjust(result.confidence, search_institution, None)
        found.append(
            AuthorMatch(
                matched_name=author,
                confidence=confidence,
                tier=result.tier,
                level=confidence_level(confidence),
            )
        )
    return found


def find_matches_in_authors(
    search_name: str,
    search_institution: str | None,
    authors: str | Iterable[str],
    min_confidence: int = DEFAULT_MIN_CONFIDENCE,
    matcher: TieredNameMatcher | None = None,
    adjuster: ConfidenceAdjuster | None = None,
) -> list[AuthorMatch]:
    """Find authors matching a name at or above a confidence threshold.

    Args:
        search_name: Person being screened
        search_institution: Their institution, if known
        authors: Author names, or a ';'/','-separated author field
        min_confidence: Minimum confidence to report

    Returns:
        Matches in author-list order
    """
    found = _match_authors(
        search_name,
        search_institution,
        split_authors(authors),
        matcher or DEFAULT_MATCHER,
        adjuster or DEFAULT_ADJUSTER,
    )
    return [m for m in found if m.confidence >= min_confidence]


def screen_record(
    search_name: str,
    search_institution: str | None,
    record: Mapping[str, Any],
    min_confidence: int = DEFAULT_MIN_CONFIDENCE,
    matcher: TieredNameMatcher | None = None,
    adjuster: ConfidenceAdjuster | None = None,
) -> RecordScreening | None:
    """Screen one record's author list and keep its best match.

    The best author confidence is boosted once more against the record's
    own institution when both sides have one.
    """
    adjuster = adjuster or DEFAULT_ADJUSTER
    matches = find_matches_in_authors(
        search_name,
        search_institution,
        record.get("authors"),
        min_confidence=min_confidence,
        matcher=matcher,
        adjuster=adjuster,
    )
    if not matches:
        return None

    best = max(matches, key=lambda m: m.confidence)

    institution = record.get("institution")
    confidence = best.confidence
    if search_institution and institution:
        confidence = adjuster.adjust(confidence, search_institution, institution)

    record_id = record.get("record_id")
    return RecordScreening(
        record_id=str(record_id) if record_id is not None else None,
        title=record.get("title"),
        matched_author=best.matched_name,
        confidence=confidence,
        level=confidence_level(confidence),
        tier=best.tier,
        institution=institution,
        record=dict(record),
    )


def screen_records(
    search_name: str,
    search_institution: str | None,
    records: Iterable[Mapping[str, Any]],
    min_confidence: int = DEFAULT_MIN_CONFIDENCE,
    matcher: TieredNameMatcher | None = None,
    adjuster: ConfidenceAdjuster | None = None,
    registry: CommonNameRegistry | None = None,
) -> ScreeningSummary:
    """Screen a person against many records.

    Records whose authors match only below `min_confidence` are counted as
    rejected and raise the insufficient-confidence warning.
    """
    matcher = matcher or DEFAULT_MATCHER
    adjuster = adjuster or DEFAULT_ADJUSTER
    registry = registry if registry is not None else DEFAULT_REGISTRY

    summary = ScreeningSummary(
        name=search_name,
        institution=search_institution,
        is_common_name=registry.is_common(search_name),
    )

    seen_ids = set()
    for record in records:
        record_id = record.get("record_id")
        if record_id is not None:
            if record_id in seen_ids:
                continue
            seen_ids.add(record_id)

        screening = screen_record(
            search_name,
            search_institution,
            record,
            min_confidence=min_confidence,
            matcher=matcher,
            adjuster=adjuster,
        )
        if screening is not None:
            summary.matches.append(screening)
            continue

        candidates = _match_authors(
            search_name,
            search_institution,
            split_authors(record.get("authors")),
            matcher,
            adjuster,
        )
        if candidates:
            summary.rejected += 1

    summary.matches.sort(key=lambda m: m.confidence, reverse=True)

    if summary.is_common_name:
        summary.warnings.append(ScreeningWarning.COMMON_NAME)
    if summary.rejected:
        summary.warnings.append(ScreeningWarning.INSUFFICIENT_CONFIDENCE)

    log_screening_result(
        search_name,
        len(summary.matches),
        summary.matches[0].confidence if summary.matches else None,
        summary.is_common_name,
    )
    return summary


def rejection_kind(summary: ScreeningSummary) -> ErrorKind | None:
    """Typed outcome for a summary with only below-threshold matches."""
    if summary.rejected and not summary.matches:
        return ErrorKind.THRESHOLD_REJECTED
    return None


def build_search_terms(name: str) -> list[str]:
    """Exact terms for matching against a normalized author array.

    Includes the full name, last name, first+last, initial+last, the
    reversed order, and the same forms for every nickname variant.
    """
    parts = normalize_name(name)
    if parts.is_empty:
        return []

    terms = [parts.full]
    if parts.last:
        terms.append(parts.last)

    if parts.first and parts.last:
        terms.append(f"{parts.first} {parts.last}")
        terms.append(f"{parts.first_initial} {parts.last}")
        terms.append(f"{parts.last} {parts.first}")

        for variant in get_name_variants(parts.first):
            if variant == parts.first:
                continue
            terms.append(f"{variant} {parts.last}")
            terms.append(f"{parts.last} {variant}")
            terms.append(f"{variant[0]} {parts.last}")

    return list(dict.fromkeys(terms))


def build_text_search_patterns(name: str) -> list[str]:
    """SQL LIKE patterns for a fallback text search on author fields."""
    parts = normalize_name(name)

    if not parts.first or not parts.last:
        return [f"%{parts.last}%"] if parts.last else []

    patterns = [
        f"%{parts.first}%{parts.last}%",
        f"%{parts.last}%{parts.first}%",
    ]
    for variant in get_name_variants(parts.first):
        if variant != parts.first:
            patterns.append(f"%{variant}%{parts.last}%")
            patterns.append(f"%{parts.last}%{variant}%")

    return list(dict.fromkeys(patterns))
