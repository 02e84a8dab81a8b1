"""Shared pytest fixtures for idres tests."""

import logging

import pytest

from idres.config import get_settings
from idres.logging import JSONFormatter, TextFormatter
from idres.names.normalize import normalize_name
from idres.resolution.resolver import Publication, ResolvedEntity

# =========================
# Candidate record fixtures
# =========================

REVIEWER_CANDIDATES = [
    {"name": "J. Smith", "source": "pubmed"},
    {"name": "John Smith", "affiliation": "MIT", "source": "arxiv"},
    {"name": "Jane Doe", "source": "scholar"},
]

RICH_CANDIDATES = [
    {
        "name": "J. Smith",
        "source": "pubmed",
        "publications": [{"title": "Quantum Error Correction", "doi": "10.1000/ABC"}],
        "keywords": ["Quantum"],
        "hIndex": 12,
    },
    {
        "name": "John Smith",
        "source": "arxiv",
        "affiliation": "MIT",
        "email": "js@mit.edu",
        "publications": [
            {"title": "Quantum error correction!", "doi": "10.1000/abc"},
            {"title": "Topological Codes"},
        ],
        "keywords": ["quantum", "codes"],
        "h_index": 30,
        "orcid": "0000-0001",
    },
    {
        "name": "John A. Smith",
        "source": "scholar",
        "affiliation": "Harvard",
        "publications": [{"title": "Topological codes"}],
    },
]


@pytest.fixture(autouse=True)
def clean_settings_and_logging():
    """Reset the settings cache and drop handlers installed by setup_logging."""
    root = logging.getLogger()
    level = root.level
    get_settings.cache_clear()

    yield

    get_settings.cache_clear()
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, (JSONFormatter, TextFormatter)):
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def reviewer_candidates() -> list[dict]:
    """Three candidates where the first two are the same person."""
    return [dict(record) for record in REVIEWER_CANDIDATES]


@pytest.fixture
def rich_candidates() -> list[dict]:
    """Candidates exercising the per-field merge policy."""
    return [dict(record) for record in RICH_CANDIDATES]


@pytest.fixture
def make_entity():
    """Factory for standalone resolved entities."""

    def _make(
        entity_id: int = 1,
        name: str = "Ada Lovelace",
        affiliation: str | None = None,
        titles: list[str] | None = None,
        keywords: list[str] | None = None,
        reason: str | None = None,
        aliases: list[str] | None = None,
    ) -> ResolvedEntity:
        return ResolvedEntity(
            id=entity_id,
            canonical_name=normalize_name(name),
            display_name=name,
            alias_names=aliases or [name],
            sources=["test"],
            affiliation=affiliation,
            publications=[Publication(title=t) for t in titles or []],
            keywords=keywords or [],
            reason=reason,
        )

    return _make
