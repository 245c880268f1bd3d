"""Unit tests for the three-tier mode matcher."""

import pytest

from jobhonter.domain.models import SearchMode
from jobhonter.matching import ModeMatcher
from jobhonter.matching import engine
from jobhonter.normalization import build_corpus
from jobhonter.vocabulary import VocabularyEntry, VocabularyTable

SCENARIO_A = build_corpus(
    "PHP Web Developer Needed",
    "Looking for a PHP developer with WordPress experience. WP theme customization required.",
)
SCENARIO_B = build_corpus("Frontend Developer", "React/Vue. Some CMS experience preferred.")


@pytest.fixture
def matcher():
    """Matcher over the built-in vocabulary."""
    return ModeMatcher()


class TestScenarios:
    """Worked examples for each mode."""

    def test_scenario_a_strict(self, matcher):
        assert matcher.matches(SCENARIO_A, "WordPress developer", SearchMode.STRICT) is False

    def test_scenario_a_moderate(self, matcher):
        assert matcher.matches(SCENARIO_A, "WordPress developer", SearchMode.MODERATE) is True

    def test_scenario_a_loose(self, matcher):
        assert matcher.matches(SCENARIO_A, "WordPress developer", SearchMode.LOOSE) is True

    def test_scenario_b_moderate(self, matcher):
        assert matcher.matches(SCENARIO_B, "WordPress developer", SearchMode.MODERATE) is False

    def test_scenario_b_loose(self, matcher):
        assert matcher.matches(SCENARIO_B, "WordPress developer", SearchMode.LOOSE) is True


class TestStrictMode:
    """Tests for exact phrase matching."""

    def test_phrase_substring(self, matcher):
        corpus = build_corpus("Hiring", "Senior WordPress Developer wanted")
        assert matcher.matches(corpus, "wordpress developer", SearchMode.STRICT)

    def test_keyword_case_is_ignored(self, matcher):
        corpus = build_corpus("WordPress Developer", "")
        assert matcher.matches(corpus, "WORDPRESS DEVELOPER", SearchMode.STRICT)

    def test_words_in_wrong_order(self, matcher):
        corpus = build_corpus("Developer for WordPress", "")
        assert not matcher.matches(corpus, "wordpress developer", SearchMode.STRICT)


class TestModerateMode:
    """Tests for word-by-word AND with synonyms."""

    def test_synonym_satisfies_word(self, matcher):
        corpus = build_corpus("WP dev needed", "theme work")
        match = matcher.evaluate(corpus, "WordPress developer", SearchMode.MODERATE)

        assert match.matched
        assert match.analysis.synonym_hits["wordpress"] == "wp"
        assert "developer" in match.analysis.synonym_hits

    def test_one_word_missing_fails(self, matcher):
        corpus = build_corpus("WordPress site fixes", "")
        assert not matcher.matches(corpus, "WordPress developer", SearchMode.MODERATE)

    def test_category_term_does_not_count(self, matcher):
        corpus = build_corpus("CMS developer", "")
        assert not matcher.matches(corpus, "WordPress developer", SearchMode.MODERATE)

    def test_short_words_are_ignored(self, matcher):
        corpus = build_corpus("Head of Marketing", "")
        assert matcher.matches(corpus, "head of marketing", SearchMode.MODERATE)
        corpus = build_corpus("Marketing head wanted", "")
        assert matcher.matches(corpus, "head of marketing", SearchMode.MODERATE)


class TestLooseMode:
    """Tests for word-by-word OR with synonyms and categories."""

    def test_any_direct_word(self, matcher):
        corpus = build_corpus("Developer wanted", "")
        assert matcher.matches(corpus, "WordPress developer", SearchMode.LOOSE)

    def test_category_term_counts(self, matcher):
        corpus = build_corpus("CMS specialist", "")
        match = matcher.evaluate(corpus, "WordPress", SearchMode.LOOSE)

        assert match.matched
        assert match.analysis.category_hits == {"wordpress": "cms"}

    def test_nothing_related(self, matcher):
        corpus = build_corpus("Bakery needs a logo", "")
        assert not matcher.matches(corpus, "WordPress developer", SearchMode.LOOSE)


class TestSkipWordKeywords:
    """Keywords made only of short words fall back to substring search."""

    @pytest.mark.parametrize("mode", list(SearchMode))
    def test_all_short_words_use_phrase(self, matcher, mode):
        assert matcher.matches(build_corpus("UI UX role", ""), "ui ux", mode)
        assert not matcher.matches(build_corpus("UX and UI role", ""), "ui ux", mode)

    def test_analysis_has_no_qualifying_words(self, matcher):
        analysis = matcher.analyze(build_corpus("UI UX role", ""), "UI UX")
        assert analysis.qualifying_words == ()
        assert analysis.coverage == 1.0


class TestAnalysis:
    """Tests for KeywordAnalysis diagnostics."""

    def test_coverage_counts_direct_and_synonym(self, matcher):
        analysis = matcher.analyze(build_corpus("wp expert", "needs php"), "wordpress developer")
        assert analysis.coverage == 0.5
        assert analysis.direct_words == frozenset()

    def test_custom_vocabulary(self):
        vocabulary = VocabularyTable({"shopify": VocabularyEntry.of(["liquid"], ["ecommerce"])})
        matcher = ModeMatcher(vocabulary)
        corpus = build_corpus("Liquid theme developer", "")

        assert matcher.matches(corpus, "shopify developer", SearchMode.MODERATE)

    def test_evaluate_all_keeps_keyword_order(self, matcher):
        results = matcher.evaluate_all(SCENARIO_A, ["python", "wordpress developer"], SearchMode.MODERATE)
        assert [r.keyword for r in results] == ["python", "wordpress developer"]
        assert [r.matched for r in results] == [False, True]

    def test_mode_accepts_string_value(self, matcher):
        assert matcher.matches(SCENARIO_A, "WordPress developer", "moderate")


def test_every_mode_has_a_strategy():
    assert set(engine._STRATEGIES) == set(SearchMode)
