"""Conflict-of-interest filtering for reviewer candidates."""

from typing import Iterable

from ..logging import get_context_logger
from ..names.normalize import NormalizedName, normalize_name
from .institutions import DEFAULT_INSTITUTION_MATCHER, InstitutionMatcher
from .matcher import DEFAULT_MATCHER, TieredNameMatcher
from .resolver import ResolvedEntity

logger = get_context_logger(__name__, feature="conflict_filter")

DEFAULT_CONFLICT_MIN_CONFIDENCE = 85


def _conflict_reason(
    entity: ResolvedEntity,
    author_institution: str | None,
    excluded: list[NormalizedName],
    min_confidence: int,
    institution_matcher: InstitutionMatcher,
    matcher: TieredNameMatcher,
) -> str | None:
    if author_institution and entity.affiliation:
        if institution_matcher.matches(author_institution, entity.affiliation):
            return "same_institution"

    names = [entity.canonical_name] + [normalize_name(alias) for alias in entity.alias_names]
    for excluded_name in excluded:
        for name in names:
            result = matcher.match(name, excluded_name)
            if result.is_match and result.confidence >= min_confidence:
                return "excluded_name"

    return None


def filter_conflicts(
    entities: Iterable[ResolvedEntity],
    author_institution: str | None,
    exclude_names: Iterable[str] = (),
    min_confidence: int = DEFAULT_CONFLICT_MIN_CONFIDENCE,
    institution_matcher: InstitutionMatcher | None = None,
    matcher: TieredNameMatcher | None = None,
) -> list[ResolvedEntity]:
    """Drop candidates with a conflict of interest.

    A candidate conflicts when its affiliation matches the author
    institution, or when its canonical name or any alias matches an
    excluded name at or above `min_confidence`. The name check runs even
    without an author institution.

    Args:
        entities: Resolved reviewer candidates
        author_institution: Institution of the proposal author
        exclude_names: Names that must not be suggested
        min_confidence: Minimum name-match confidence for exclusion

    Returns:
        Non-conflicting entities in input order
    """
    institution_matcher = institution_matcher or DEFAULT_INSTITUTION_MATCHER
    matcher = matcher or DEFAULT_MATCHER
    excluded = [normalize_name(name) for name in exclude_names]
    excluded = [name for name in excluded if not name.is_empty]

    kept = []
    for entity in entities:
        reason = _conflict_reason(
            entity,
            author_institution,
            excluded,
            min_confidence,
            institution_matcher,
            matcher,
        )
        if reason is None:
            kept.append(entity)
        else:
            logger.debug(
                f"Excluded {entity.display_name!r}: {reason}",
                extra={"entity_id": entity.id, "reason": reason},
            )

    return kept
