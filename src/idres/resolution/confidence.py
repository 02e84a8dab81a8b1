"""Institutional corroboration of name-match confidence.

A name match between two people at the same organization is more likely to
be a true match. The adjuster boosts a base confidence when the institution
strings agree and never lowers it.
"""

import re
from enum import Enum

from pydantic import BaseModel, Field

from ..names.common import DEFAULT_REGISTRY, CommonNameRegistry
from .institutions import (
    DEFAULT_INSTITUTION_MATCHER,
    NO_INSTITUTION_MATCH,
    InstitutionMatch,
    InstitutionMatcher,
)

EXACT_INSTITUTION_BOOST = 15
CONTAINED_INSTITUTION_BOOST = 10
OVERLAP_INSTITUTION_BOOST = 10
MIN_SHARED_WORDS = 2

INSTITUTION_STOP_WORDS: frozenset[str] = frozenset({
    "of", "the", "and", "at", "in", "for", "university", "college", "institute",
})

_NON_LETTER_RE = re.compile(r"[^a-z\s]")
_WHITESPACE_RE = re.compile(r"\s+")


class ConfidenceLevel(str, Enum):
    """Display bands for a 0-100 confidence."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INSUFFICIENT = "insufficient"


def confidence_level(confidence: int) -> ConfidenceLevel:
    """Map a confidence to its display band."""
    if confidence >= 90:
        return ConfidenceLevel.HIGH
    if confidence >= 70:
        return ConfidenceLevel.MEDIUM
    if confidence >= 50:
        return ConfidenceLevel.LOW
    return ConfidenceLevel.INSUFFICIENT


def normalize_institution(institution: str | None) -> str:
    """Lowercase, drop non-letters and collapse whitespace."""
    if not institution:
        return ""
    text = _NON_LETTER_RE.sub("", institution.lower())
    return _WHITESPACE_RE.sub(" ", text).strip()


def _significant_words(institution: str) -> set[str]:
    return {
        word
        for word in institution.split()
        if len(word) > 2 and word not in INSTITUTION_STOP_WORDS
    }


class AdjustedMatch(BaseModel):
    """Adjusted confidence with the evidence used to reach it."""

    confidence: int = Field(ge=0, le=100)
    level: ConfidenceLevel
    institution_match: InstitutionMatch
    is_common_name: bool = False


class ConfidenceAdjuster:
    """Boosts a name-match confidence with institutional agreement."""

    def __init__(
        self,
        institution_matcher: InstitutionMatcher | None = None,
        registry: CommonNameRegistry | None = None,
    ):
        self.institution_matcher = institution_matcher or DEFAULT_INSTITUTION_MATCHER
        self.registry = registry if registry is not None else DEFAULT_REGISTRY

    def adjust(
        self,
        base: int,
        search_institution: str | None,
        candidate_institution: str | None,
    ) -> int:
        """Return the boosted confidence, capped at 100.

        Args:
            base: Name-match confidence (0-100)
            search_institution: Institution of the person being searched for
            candidate_institution: Institution of the candidate record

        Returns:
            Confidence >= base
        """
        if not search_institution or not candidate_institution:
            return base

        search_norm = normalize_institution(search_institution)
        cand_norm = normalize_institution(candidate_institution)
        if not search_norm or not cand_norm:
            return base

        if search_norm == cand_norm:
            return min(100, base + EXACT_INSTITUTION_BOOST)

        if search_norm in cand_norm or cand_norm in search_norm:
            return min(100, base + CONTAINED_INSTITUTION_BOOST)

        shared = _significant_words(search_norm) & _significant_words(cand_norm)
        if len(shared) >= MIN_SHARED_WORDS:
            return min(100, base + OVERLAP_INSTITUTION_BOOST)

        return base

    def assess(
        self,
        base: int,
        search_institution: str | None,
        candidate_institution: str | None,
        name: str | None = None,
    ) -> AdjustedMatch:
        """Adjust a confidence and report the institution match and name risk."""
        confidence = self.adjust(base, search_institution, candidate_institution)

        if search_institution and candidate_institution:
            institution_match = self.institution_matcher.match(
                search_institution, candidate_institution
            )
        else:
            institution_match = NO_INSTITUTION_MATCH

        return AdjustedMatch(
            confidence=confidence,
            level=confidence_level(confidence),
            institution_match=institution_match,
            is_common_name=self.registry.is_common(name),
        )


DEFAULT_ADJUSTER = ConfidenceAdjuster()


def adjust_confidence(
    base: int,
    search_institution: str | None,
    candidate_institution: str | None,
) -> int:
    """Adjust a confidence with the default adjuster."""
    return DEFAULT_ADJUSTER.adjust(base, search_institution, candidate_institution)
