"""Tests for integrity screening helpers."""

from idres.errors import ErrorKind
from idres.resolution.confidence import ConfidenceLevel
from idres.resolution.matcher import MatchTier
from idres.resolution.screening import (
    ScreeningWarning,
    build_search_terms,
    build_text_search_patterns,
    find_matches_in_authors,
    rejection_kind,
    screen_record,
    screen_records,
    split_authors,
)

RETRACTION_RECORDS = [
    {
        "record_id": 7,
        "title": "Retracted quantum result",
        "authors": "J. Smith; Jane Doe",
        "institution": "Stanford University",
    },
    {
        "record_id": 8,
        "title": "Unrelated paper",
        "authors": "Mary Smith; Ada Lovelace",
    },
    {
        "record_id": 7,
        "title": "Duplicate row",
        "authors": "John Smith",
    },
]


class TestFindMatchesInAuthors:
    """Tests for author-list matching."""

    def test_matches_in_author_order(self):
        matches = find_matches_in_authors("John Smith", None, ["J. Smith", "Jane Doe", "John Smith"])

        assert [m.matched_name for m in matches] == ["J. Smith", "John Smith"]
        assert [m.confidence for m in matches] == [85, 100]
        assert matches[0].tier == MatchTier.LAST_NAME_FIRST_INITIAL
        assert matches[1].level == ConfidenceLevel.HIGH

    def test_author_field_string(self):
        """Test a ';'/','-separated author field is split."""
        matches = find_matches_in_authors("John Smith", None, "John Smith; Jane Doe, J. Smith")

        assert [m.matched_name for m in matches] == ["John Smith", "J. Smith"]

    def test_min_confidence(self):
        assert find_matches_in_authors("John Smith", None, ["Mary Smith"], min_confidence=60) == []
        assert len(find_matches_in_authors("John Smith", None, ["Mary Smith"])) == 1

    def test_institution_without_author_institution(self):
        """Test author lists carry no institution, so there is no boost."""
        matches = find_matches_in_authors("John Smith", "MIT", ["J. Smith"])

        assert matches[0].confidence == 85

    def test_empty_search_name(self):
        assert find_matches_in_authors("", None, ["John Smith"]) == []

    def test_split_authors(self):
        assert split_authors(" A One ;B Two,, ") == ["A One", "B Two"]
        assert split_authors(None) == []


class TestScreenRecord:
    """Tests for screening one record."""

    def test_best_match_boosted_by_record_institution(self):
        screening = screen_record("John Smith", "Stanford University", RETRACTION_RECORDS[0])

        assert screening is not None
        assert screening.record_id == "7"
        assert screening.matched_author == "J. Smith"
        assert screening.confidence == 100
        assert screening.level == ConfidenceLevel.HIGH
        assert screening.tier == MatchTier.LAST_NAME_FIRST_INITIAL

    def test_no_match(self):
        assert screen_record("Grace Hopper", None, RETRACTION_RECORDS[0]) is None


class TestScreenRecords:
    """Tests for screening a person across records."""

    def test_summary_and_warnings(self):
        """Test matches, rejected records and non-blocking warnings."""
        summary = screen_records("John Smith", None, RETRACTION_RECORDS, min_confidence=60)

        assert [m.record_id for m in summary.matches] == ["7"]
        assert summary.rejected == 1
        assert summary.is_common_name is True
        assert summary.warnings == [
            ScreeningWarning.COMMON_NAME,
            ScreeningWarning.INSUFFICIENT_CONFIDENCE,
        ]
        assert summary.has_concerns
        assert rejection_kind(summary) is None

    def test_only_rejected_matches(self):
        summary = screen_records("Ada Byron", None, [RETRACTION_RECORDS[1]], min_confidence=80)

        assert summary.matches == []
        assert rejection_kind(summary) is None

        summary = screen_records("Jane Smith", None, [RETRACTION_RECORDS[1]], min_confidence=60)

        assert summary.matches == []
        assert summary.warnings == [ScreeningWarning.INSUFFICIENT_CONFIDENCE]
        assert rejection_kind(summary) == ErrorKind.THRESHOLD_REJECTED

    def test_matches_sorted_by_confidence(self):
        records = [
            {"record_id": 1, "authors": "Mary Smith"},
            {"record_id": 2, "authors": "John Smith"},
        ]

        summary = screen_records("John Smith", None, records)

        assert [m.confidence for m in summary.matches] == [100, 50]


class TestSearchTerms:
    """Tests for database search terms and text patterns."""

    def test_search_terms(self):
        terms = build_search_terms("Robert Smith")

        assert terms[:4] == ["robert smith", "smith", "r smith", "smith robert"]
        assert "bob smith" in terms
        assert "smith bob" in terms
        assert "b smith" in terms
        assert len(terms) == len(set(terms))

    def test_single_name_terms(self):
        assert build_search_terms("Smith") == ["smith"]
        assert build_search_terms("") == []

    def test_text_patterns(self):
        patterns = build_text_search_patterns("John Smith")

        assert patterns[:2] == ["%john%smith%", "%smith%john%"]
        assert "%jack%smith%" in patterns
        assert len(patterns) == len(set(patterns))

    def test_single_name_patterns(self):
        assert build_text_search_patterns("Smith") == ["%smith%"]
        assert build_text_search_patterns("!!") == []
