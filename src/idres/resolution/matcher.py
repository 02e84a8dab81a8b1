"""Tiered person-name matching for idres.

Evaluates an ordered cascade of name-matching rules. Each rule (tier) has a
fixed confidence, tiers are tried in descending confidence order and the
first one that fires is the result. Confidence is never an aggregate of
several tiers.

Default cascade:
1. Exact normalized match → 100
2. Same first and last name → 95
3. Same last name, first initial matches an initial → 85
4. Same last name, full-name similarity > 0.9 → 80
5. Full-name similarity > 0.9 → 75
6. Same last name, one first name prefixes the other → 60
7. Same last name, full names within 3 characters in length → 50

Nickname and name-order tiers (Bob/Robert, "Zhang Wei"/"Wei Zhang") are
available behind `name_variants=True`.
"""

from enum import Enum
from typing import Iterable

from pydantic import BaseModel, Field

from ..config import Settings, get_settings
from ..names.normalize import NormalizedName, normalize_name
from ..names.similarity import SimilarityFunc, dice_coefficient, get_similarity
from ..names.variants import are_name_variants


DEFAULT_SIMILARITY_THRESHOLD = 0.9
DEFAULT_LENGTH_WINDOW = 3


class MatchTier(str, Enum):
    """Name-matching rules, one per cascade step."""

    EXACT = "exact"
    FIRST_LAST_EXACT = "first_last_exact"
    NAME_VARIANT = "name_variant"
    LAST_NAME_FIRST_INITIAL = "last_first_initial"
    NAME_ORDER_SWAP = "name_order_swap"
    HIGH_SIMILARITY_SAME_LAST = "high_similarity"
    FULL_NAME_SIMILARITY = "full_similarity"
    NAME_ORDER_SWAP_VARIANT = "name_order_swap_variant"
    PARTIAL_FIRST_SAME_LAST = "partial_first"
    LAST_NAME_ONLY = "last_name_only"
    NO_MATCH = "no_match"


TIER_CONFIDENCE: dict[MatchTier, int] = {
    MatchTier.EXACT: 100,
    MatchTier.FIRST_LAST_EXACT: 95,
    MatchTier.NAME_VARIANT: 90,
    MatchTier.LAST_NAME_FIRST_INITIAL: 85,
    MatchTier.NAME_ORDER_SWAP: 85,
    MatchTier.HIGH_SIMILARITY_SAME_LAST: 80,
    MatchTier.FULL_NAME_SIMILARITY: 75,
    MatchTier.NAME_ORDER_SWAP_VARIANT: 75,
    MatchTier.PARTIAL_FIRST_SAME_LAST: 60,
    MatchTier.LAST_NAME_ONLY: 50,
    MatchTier.NO_MATCH: 0,
}


class MatchResult(BaseModel):
    """Result of matching two names."""

    is_match: bool
    confidence: int = Field(ge=0, le=100)
    tier: MatchTier

    @classmethod
    def for_tier(cls, tier: MatchTier) -> "MatchResult":
        return cls(
            is_match=tier is not MatchTier.NO_MATCH,
            confidence=TIER_CONFIDENCE[tier],
            tier=tier,
        )


NO_MATCH = MatchResult.for_tier(MatchTier.NO_MATCH)


class NameMatch(BaseModel):
    """A candidate name paired with its match result."""

    candidate: str
    result: MatchResult


class TieredNameMatcher:
    """Graded matcher for person names.

    Thresholds are contract values. Override them only together with a
    recalibrated similarity metric.
    """

    def __init__(
        self,
        similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
        length_window: int = DEFAULT_LENGTH_WINDOW,
        similarity: SimilarityFunc = dice_coefficient,
        name_variants: bool = False,
    ):
        """Initialize the matcher.

        Args:
            similarity_threshold: Strict lower bound for the similarity tiers
            length_window: Max full-name length difference for last-name-only
            similarity: Symmetric string similarity in [0, 1]
            name_variants: Enable nickname and name-order tiers
        """
        if not 0.0 <= similarity_threshold <= 1.0:
            raise ValueError("similarity_threshold must be within [0, 1]")
        if length_window < 0:
            raise ValueError("length_window must be non-negative")

        self.similarity_threshold = similarity_threshold
        self.length_window = length_window
        self.similarity = similarity
        self.name_variants = name_variants

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "TieredNameMatcher":
        """Build a matcher from engine settings."""
        settings = settings or get_settings()
        return cls(
            similarity_threshold=settings.similarity_threshold,
            length_window=settings.length_window,
            similarity=get_similarity(settings.similarity_metric),
            name_variants=settings.enable_name_variants,
        )

    def match(
        self,
        search: str | NormalizedName,
        candidate: str | NormalizedName,
    ) -> MatchResult:
        """Match two names, normalizing raw strings once.

        Names that normalize to no tokens never match.
        """
        s = search if isinstance(search, NormalizedName) else normalize_name(search)
        c = candidate if isinstance(candidate, NormalizedName) else normalize_name(candidate)

        if s.is_empty or c.is_empty:
            return NO_MATCH

        return MatchResult.for_tier(self._evaluate(s, c))

    def match_many(
        self,
        search: str | NormalizedName,
        candidates: Iterable[str],
        min_confidence: int = 0,
    ) -> list[NameMatch]:
        """Match one name against a reference list.

        Args:
            search: Name to look for
            candidates: Raw candidate names
            min_confidence: Minimum confidence to keep a match

        Returns:
            Matches sorted by confidence (descending, stable)
        """
        s = search if isinstance(search, NormalizedName) else normalize_name(search)

        matches = []
        for candidate in candidates:
            result = self.match(s, candidate)
            if result.is_match and result.confidence >= min_confidence:
                matches.append(NameMatch(candidate=candidate, result=result))

        return sorted(matches, key=lambda m: m.result.confidence, reverse=True)

    def _evaluate(self, s: NormalizedName, c: NormalizedName) -> MatchTier:
        same_last = s.last == c.last
        both_first = bool(s.first and c.first)

        if s.full == c.full:
            return MatchTier.EXACT

        if same_last and s.first == c.first:
            return MatchTier.FIRST_LAST_EXACT

        if self.name_variants and same_last and both_first:
            if are_name_variants(s.first, c.first):
                return MatchTier.NAME_VARIANT

        if same_last and both_first and s.first_initial == c.first_initial:
            if len(s.first) == 1 or len(c.first) == 1:
                return MatchTier.LAST_NAME_FIRST_INITIAL

        if self.name_variants and both_first and s.last and c.last:
            if s.first == c.last and s.last == c.first:
                return MatchTier.NAME_ORDER_SWAP

        similarity = self.similarity(s.full, c.full)

        if same_last and similarity > self.similarity_threshold:
            return MatchTier.HIGH_SIMILARITY_SAME_LAST

        if similarity > self.similarity_threshold:
            return MatchTier.FULL_NAME_SIMILARITY

        if self.name_variants and both_first:
            if s.last == c.first and are_name_variants(s.first, c.last):
                return MatchTier.NAME_ORDER_SWAP_VARIANT

        if same_last and both_first:
            if s.first.startswith(c.first) or c.first.startswith(s.first):
                return MatchTier.PARTIAL_FIRST_SAME_LAST

        if same_last and abs(len(s.full) - len(c.full)) <= self.length_window:
            return MatchTier.LAST_NAME_ONLY

        return MatchTier.NO_MATCH


DEFAULT_MATCHER = TieredNameMatcher()


def match_names(search: str, candidate: str) -> MatchResult:
    """Match two raw names with the default contract thresholds."""
    return DEFAULT_MATCHER.match(search, candidate)
