"""Keyword relevance scoring for resolved entities.

Each keyword scores 1 point when it appears as a case-insensitive substring
of the text, otherwise 0.5 when any of its words longer than 3 characters
does. The score is the average over keywords, in [0, 1].
"""

from typing import Iterable, Sequence

from .resolver import ResolvedEntity

FULL_MATCH_POINTS = 1.0
PARTIAL_MATCH_POINTS = 0.5
MIN_PARTIAL_WORD_LENGTH = 4


def _clean_keywords(keywords: Iterable[str]) -> list[str]:
    return [kw.strip().lower() for kw in keywords if kw and kw.strip()]


def keyword_relevance(text: str | Iterable[str], keywords: Sequence[str]) -> float:
    """Score text against a keyword set.

    Blank keywords score nothing but still count toward the average.

    Args:
        text: A string or several text fields
        keywords: Caller-supplied keywords

    Returns:
        Relevance fraction in [0, 1]; 0.0 for an empty keyword set
    """
    if not keywords:
        return 0.0

    if not isinstance(text, str):
        text = "\n".join(text)
    haystack = text.lower()

    points = 0.0
    for keyword in _clean_keywords(keywords):
        if keyword in haystack:
            points += FULL_MATCH_POINTS
        elif any(
            len(word) >= MIN_PARTIAL_WORD_LENGTH and word in haystack
            for word in keyword.split()
        ):
            points += PARTIAL_MATCH_POINTS

    return points / len(keywords)


class RelevanceRanker:
    """Orders resolved entities by keyword relevance."""

    def score(self, entity: ResolvedEntity, keywords: Sequence[str]) -> float:
        return keyword_relevance(entity.text_fields(), keywords)

    def rank(
        self,
        entities: Iterable[ResolvedEntity],
        keywords: Sequence[str],
    ) -> list[ResolvedEntity]:
        """Return copies of the entities with `relevance` set, best first.

        The sort is stable, so equally relevant entities keep input order.
        """
        scored = [
            entity.model_copy(update={"relevance": self.score(entity, keywords)})
            for entity in entities
        ]
        return sorted(scored, key=lambda e: e.relevance, reverse=True)


DEFAULT_RANKER = RelevanceRanker()


def rank_entities(
    entities: Iterable[ResolvedEntity],
    keywords: Sequence[str],
) -> list[ResolvedEntity]:
    """Rank entities with the default ranker."""
    return DEFAULT_RANKER.rank(entities, keywords)
