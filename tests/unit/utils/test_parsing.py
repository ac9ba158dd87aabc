"""
Tests for lenient response parsing.

These tests verify:
1. YES/NO verdicts with surrounding prose
2. Ratings in several shapes
3. Doc/Relevance lines for LLM reranking
4. RankGPT permutations
"""

import pytest

from ragcore.errors import ParseError
from ragcore.utils.parsing import (
    parse_doc_relevance,
    parse_permutation,
    parse_rating,
    parse_yes_no,
)


class TestParseYesNo:

    @pytest.mark.parametrize("response,expected", [
        ("YES", True),
        ("no", False),
        ("Yes, the context supports it.", True),
        ("  \nNO.\nThe claim about 2015 is unsupported.", False),
        ("After reviewing, my answer is yes", True),
    ])
    def test_verdicts(self, response, expected):
        assert parse_yes_no(response) is expected

    def test_first_line_wins(self):
        """A verdict on the first line beats words in the explanation."""
        assert parse_yes_no("NO\nyes, some of it matches, but not the claim") is False

    def test_words_containing_yes_do_not_count(self):
        with pytest.raises(ParseError):
            parse_yes_no("Eyesight is not relevant here. Nothing to say.")

    def test_unparseable(self):
        with pytest.raises(ParseError) as exc_info:
            parse_yes_no("maybe")
        assert exc_info.value.response == "maybe"


class TestParseRating:

    @pytest.mark.parametrize("response,expected", [
        ("4.0\nThe answer is close to the reference.", 4.0),
        ("Score: 3", 3.0),
        ("I would rate this 4/5 overall.", 4.0),
        ("The rating is 2.5.", 2.5),
        ("**5**\nPerfect answer.", 5.0),
    ])
    def test_shapes(self, response, expected):
        assert parse_rating(response) == expected

    def test_out_of_range_skipped(self):
        assert parse_rating("Answer 10 points? No. Score: 3") == 3.0

    def test_first_rating_line_wins(self):
        assert parse_rating("Score: 2\nThe answer is wrong.\n5") == 2.0

    def test_rating_line_beats_earlier_loose_number(self):
        assert parse_rating("Covers 3 of the 4 points.\n4.5") == 4.5

    def test_no_rating(self):
        with pytest.raises(ParseError):
            parse_rating("The answer is fine.")


class TestParseDocRelevance:

    def test_standard_lines(self):
        response = "Doc: 2, Relevance: 9\nDoc: 4, Relevance: 7\nDoc: 1, Relevance: 3"
        assert parse_doc_relevance(response) == {2: 9.0, 4: 7.0, 1: 3.0}

    def test_variants_and_duplicates(self):
        response = "Document 1, Relevance=8\ndoc #3 relevance: 6.5\nDoc: 1, Relevance: 2"
        assert parse_doc_relevance(response) == {1: 8.0, 3: 6.5}

    def test_no_lines(self):
        with pytest.raises(ParseError):
            parse_doc_relevance("None of the documents are relevant.")


class TestParsePermutation:

    def test_full_ranking(self):
        assert parse_permutation("[2] > [3] > [1]", 3) == [1, 2, 0]

    def test_missing_labels_appended(self):
        assert parse_permutation("[3] > [1]", 4) == [2, 0, 1, 3]

    def test_duplicates_and_out_of_range_ignored(self):
        assert parse_permutation("[2] > [2] > [9] > [1]", 3) == [1, 0, 2]

    def test_no_valid_label(self):
        with pytest.raises(ParseError):
            parse_permutation("I cannot rank these.", 3)
