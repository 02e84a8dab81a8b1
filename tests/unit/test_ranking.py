"""Tests for keyword relevance scoring and ranking."""

import pytest

from idres.resolution.ranking import RelevanceRanker, keyword_relevance, rank_entities
from idres.resolution.resolver import resolve_records


class TestKeywordRelevance:
    """Tests for the per-text scorer."""

    def test_partial_credit(self):
        """Test a keyword word present on its own scores half a point."""
        score = keyword_relevance("Studies in quantum mechanics", ["quantum computing"])

        assert score == pytest.approx(0.5)

    def test_full_match(self):
        assert keyword_relevance("Advances in Quantum Computing", ["quantum computing"]) == 1.0

    def test_averaged_over_keywords(self):
        score = keyword_relevance("CRISPR screens", ["crispr", "protein folding"])

        assert score == pytest.approx(0.5)

    def test_short_words_get_no_partial_credit(self):
        """Test only keyword words longer than 3 characters count."""
        assert keyword_relevance("big ideas", ["big data"]) == 0.0

    def test_multiple_text_fields(self):
        score = keyword_relevance(["Topological codes", "quantum"], ["quantum codes"])

        assert score == pytest.approx(0.5)

    def test_empty_keywords(self):
        assert keyword_relevance("anything", []) == 0.0
        assert keyword_relevance("anything", ["", "  "]) == 0.0

    def test_blank_keyword_counts_toward_average(self):
        assert keyword_relevance("quantum", ["quantum", " "]) == pytest.approx(0.5)


class TestRelevanceRanker:
    """Tests for ranking resolved entities."""

    def test_rank_example(self, make_entity):
        entity = make_entity(reason="Studies in quantum mechanics")

        ranked = rank_entities([entity], ["quantum computing"])

        assert ranked[0].relevance == pytest.approx(0.5)

    def test_stable_descending(self, make_entity):
        """Test best first, ties in input order, inputs untouched."""
        entities = [
            make_entity(1, "Ann Able", titles=["Soil chemistry"]),
            make_entity(2, "Bea Bell", titles=["Quantum computing hardware"]),
            make_entity(3, "Cal Cole", keywords=["quantum sensing"]),
            make_entity(4, "Dee Dunn", reason="Built a quantum computing stack"),
        ]

        ranked = RelevanceRanker().rank(entities, ["quantum computing"])

        assert [e.id for e in ranked] == [2, 4, 3, 1]
        assert [e.relevance for e in ranked] == [1.0, 1.0, 0.5, 0.0]
        assert all(e.relevance is None for e in entities)

    def test_empty_keywords_preserve_order(self, make_entity):
        entities = [make_entity(i, f"Person Number{chr(96 + i)}") for i in (1, 2, 3)]

        ranked = rank_entities(entities, [])

        assert [e.id for e in ranked] == [1, 2, 3]
        assert all(e.relevance == 0.0 for e in ranked)

    def test_rank_resolved_entities(self, rich_candidates):
        """Test merged publications and keywords feed the score."""
        report = resolve_records(rich_candidates + [{"name": "Ada Lovelace", "source": "x"}])

        ranked = rank_entities(report.entities, ["topological codes"])

        assert ranked[0].display_name == "John A. Smith"
        assert ranked[0].relevance == 1.0
        assert ranked[1].relevance == 0.0
