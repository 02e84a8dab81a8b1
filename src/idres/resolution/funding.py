"""Funding-gap record filters.

Award searches by principal-investigator last name return every PI with
that surname. These helpers keep the records from the PI's institution and
score each record's title against research keywords.
"""

from typing import Any, Iterable, Mapping, Sequence

from .institutions import DEFAULT_INSTITUTION_MATCHER, InstitutionMatcher
from .ranking import keyword_relevance


def filter_by_institution(
    records: Iterable[Mapping[str, Any]],
    institution: str | None,
    field: str = "organization",
    matcher: InstitutionMatcher | None = None,
) -> list[Mapping[str, Any]]:
    """Keep records whose `field` matches the institution.

    Records without the field are dropped. Without an institution every
    record is kept.
    """
    records = list(records)
    if not institution:
        return records

    matcher = matcher or DEFAULT_INSTITUTION_MATCHER
    return [
        record
        for record in records
        if record.get(field) and matcher.matches(institution, record[field])
    ]


def score_records(
    records: Iterable[Mapping[str, Any]],
    keywords: Sequence[str],
    field: str = "title",
    min_relevance: float = 0.0,
) -> list[dict[str, Any]]:
    """Score each record's `field` text against keywords.

    Returns:
        Copies of the records with a `relevance` key, in input order,
        keeping only those at or above `min_relevance`
    """
    scored = []
    for record in records:
        relevance = keyword_relevance(record.get(field) or "", keywords)
        if relevance >= min_relevance:
            scored.append({**record, "relevance": relevance})
    return scored
