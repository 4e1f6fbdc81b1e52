"""Tests for text normalization helpers."""

from app.utils.normalizers import (
    count_keyword_matches,
    normalize_for_search,
    searchable_text,
    split_sentences,
)


class TestSearchableText:
    """Tests for searchable_text."""

    def test_joins_title_and_content_lowercased(self):
        assert searchable_text("Annual REPORT", "Budget Lines") == "annual report budget lines"

    def test_missing_title(self):
        assert searchable_text(None, "Body") == " body"

    def test_missing_content(self):
        assert searchable_text("Title", None) == "title "

    def test_both_missing(self):
        assert searchable_text(None, None) == " "


class TestNormalizeForSearch:
    """Tests for normalize_for_search."""

    def test_none_is_empty(self):
        assert normalize_for_search(None) == ""

    def test_lowercases(self):
        assert normalize_for_search("MiXeD") == "mixed"


class TestSplitSentences:
    """Tests for split_sentences."""

    def test_splits_on_terminators(self):
        assert split_sentences("One. Two! Three?") == ["One", " Two", " Three", ""]

    def test_consecutive_terminators_are_one_split(self):
        assert split_sentences("Wait... What?!") == ["Wait", " What", ""]

    def test_no_terminator(self):
        assert split_sentences("no terminator here") == ["no terminator here"]

    def test_none(self):
        assert split_sentences(None) == [""]


class TestCountKeywordMatches:
    """Tests for count_keyword_matches."""

    def test_counts_all_occurrences(self):
        assert count_keyword_matches("فاتورة", "فاتورة ثم فاتورة") == 2

    def test_case_insensitive(self):
        assert count_keyword_matches("Report", "report REPORT Report") == 3

    def test_matches_inside_longer_words(self):
        assert count_keyword_matches("مالي", "مالية") == 1

    def test_non_overlapping(self):
        assert count_keyword_matches("aa", "aaaa") == 2
        assert count_keyword_matches("aa", "aaa") == 1

    def test_regex_metacharacters_are_literal(self):
        assert count_keyword_matches("a.b", "axb a.b") == 1

    def test_empty_keyword(self):
        assert count_keyword_matches("", "anything") == 0

    def test_multi_word_keyword(self):
        assert count_keyword_matches("تقرير مالي", "هذا تقرير مالية") == 1
