"""Institution matching with campus-level disambiguation.

Institutions are reduced to sets of significant lowercase tokens. Two
institutions match when they share a non-generic token, unless both name a
specific campus and the campuses differ:

    "University of California, Berkeley" vs "University of California, San Diego"
        → shared "california", campuses {berkeley} vs {diego} → no match
    "Regents of the University of California" vs "UC Berkeley"
        → shared "california", only one side names a campus → match
"""

import re
from typing import Iterable, Mapping

from pydantic import BaseModel, Field

from ..config import Settings, get_settings
from ..errors import ConfigurationError
from ..names.normalize import strip_accents

# Applied as whole words before stop-phrase removal
ABBREVIATIONS: Mapping[str, str] = {
    "uc": "university of california",
    "ucla": "university of california los angeles",
    "ucsd": "university of california san diego",
    "ucsf": "university of california san francisco",
    "ucsb": "university of california santa barbara",
    "ucsc": "university of california santa cruz",
    "mit": "massachusetts institute of technology",
    "univ": "university",
}

# Removed in this order, as whole words
STOP_PHRASES: tuple[str, ...] = (
    "regents of",
    "regents of the",
    "the regents of",
    "the",
    "university of",
    "college of",
    "institute of",
    "inc",
    "incorporated",
    "foundation",
    "center",
    "centre",
)

CONNECTIVES: frozenset[str] = frozenset({"and", "for", "the"})

GENERIC_TERMS: frozenset[str] = frozenset({"university", "college", "school", "academy"})

CAMPUS_TOKENS: frozenset[str] = frozenset({
    "berkeley", "davis", "irvine", "angeles", "merced", "riverside",
    "diego", "francisco", "barbara", "cruz", "boulder", "denver", "springs",
})

# Leading words of multi-word place names; shared alone they name no campus
PLACE_PREFIXES: frozenset[str] = frozenset({"san", "santa", "los", "las", "saint"})

_TOKEN_SPLIT_RE = re.compile(r"[^a-z0-9]+")
_MIN_TOKEN_LENGTH = 3


class InstitutionMatch(BaseModel):
    """Result of comparing two institution strings."""

    is_match: bool
    shared_campus_token: str | None = None
    shared_tokens: list[str] = Field(default_factory=list)


NO_INSTITUTION_MATCH = InstitutionMatch(is_match=False)


class InstitutionMatcher:
    """Token-overlap institution matcher.

    Vocabularies are fixed at construction and validated so that a campus
    token can never be erased by the stop lists.
    """

    def __init__(
        self,
        campus_tokens: Iterable[str] = CAMPUS_TOKENS,
        extra_campus_tokens: Iterable[str] = (),
        abbreviations: Mapping[str, str] = ABBREVIATIONS,
        stop_phrases: Iterable[str] = STOP_PHRASES,
        generic_terms: Iterable[str] = GENERIC_TERMS,
    ):
        self.campus_tokens = frozenset(campus_tokens) | frozenset(extra_campus_tokens)
        self.abbreviations = dict(abbreviations)
        self.stop_phrases = tuple(stop_phrases)
        self.generic_terms = frozenset(generic_terms)

        self._validate()

        self._stop_patterns = [
            re.compile(rf"\b{re.escape(phrase)}\b") for phrase in self.stop_phrases
        ]
        self._abbreviation_re = (
            re.compile(r"\b(" + "|".join(map(re.escape, self.abbreviations)) + r")\b")
            if self.abbreviations
            else None
        )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "InstitutionMatcher":
        """Build a matcher with campus tokens extended from settings."""
        settings = settings or get_settings()
        return cls(extra_campus_tokens=settings.extra_campus_tokens_list)

    def _validate(self) -> None:
        stop_words = {word for phrase in self.stop_phrases for word in phrase.split()}
        reserved = stop_words | CONNECTIVES | PLACE_PREFIXES | self.generic_terms

        overlapping = sorted(self.campus_tokens & reserved)
        if overlapping:
            raise ConfigurationError(
                f"Campus tokens overlap stop or generic vocabulary: {overlapping}"
            )

        malformed = sorted(
            token
            for token in self.campus_tokens
            if not token.isalpha() or not token.islower() or len(token) < _MIN_TOKEN_LENGTH
        )
        if malformed:
            raise ConfigurationError(
                f"Campus tokens must be lowercase words of {_MIN_TOKEN_LENGTH}+ letters: {malformed}"
            )

    def tokenize(self, institution: str | None) -> set[str]:
        """Reduce an institution string to its significant tokens."""
        if not institution:
            return set()

        text = strip_accents(institution).lower()

        if self._abbreviation_re is not None:
            text = self._abbreviation_re.sub(lambda m: self.abbreviations[m.group(1)], text)

        for pattern in self._stop_patterns:
            text = pattern.sub("", text)

        return {
            token
            for token in _TOKEN_SPLIT_RE.split(text)
            if len(token) >= _MIN_TOKEN_LENGTH and token not in CONNECTIVES
        }

    def match(self, a: str | None, b: str | None) -> InstitutionMatch:
        """Decide whether two institution strings denote the same organization."""
        tokens_a = self.tokenize(a)
        tokens_b = self.tokenize(b)

        shared = tokens_a & tokens_b
        if not shared:
            return NO_INSTITUTION_MATCH

        campus_a = tokens_a & self.campus_tokens
        campus_b = tokens_b & self.campus_tokens

        shared_campus: str | None = None
        if campus_a and campus_b:
            common_campus = campus_a & campus_b
            if not common_campus:
                return InstitutionMatch(is_match=False, shared_tokens=sorted(shared))
            shared_campus = sorted(common_campus)[0]

        significant = shared - self.generic_terms - PLACE_PREFIXES
        if not significant:
            return InstitutionMatch(is_match=False, shared_tokens=sorted(shared))

        return InstitutionMatch(
            is_match=True,
            shared_campus_token=shared_campus,
            shared_tokens=sorted(shared),
        )

    def matches(self, a: str | None, b: str | None) -> bool:
        return self.match(a, b).is_match


DEFAULT_INSTITUTION_MATCHER = InstitutionMatcher()


def match_institutions(a: str | None, b: str | None) -> InstitutionMatch:
    """Match two institutions with the default vocabularies."""
    return DEFAULT_INSTITUTION_MATCHER.match(a, b)
