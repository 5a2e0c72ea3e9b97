import pytest
from pydantic import ValidationError

from app.features.scoring.schemas import IssueSeverity, LighthouseScores, SiteContext
from app.features.scoring.services import ScoreWeights, letter_grade, overall_score, score_page


class TestScorePage:
    def test_clean_page_is_grade_a(self, clean_page):
        result = score_page(clean_page())
        assert result.overall_score == 100
        assert result.letter_grade == "A"
        assert result.issues == []

    def test_dimension_scores_are_reported(self, clean_page):
        result = score_page(clean_page(
            canonical_url=None,
            lighthouse=LighthouseScores(performance=0.3, seo=0.95, accessibility=0.95, best_practices=0.95),
        ))
        assert result.technical_score == 92
        assert result.content_score == 100
        assert result.ai_readiness_score == 100
        assert result.performance_score == 80
        # 92*.25 + 100*.30 + 100*.30 + 80*.15 = 95
        assert result.overall_score == 95

    def test_issues_sorted_by_severity_keeping_rule_order(self, clean_page):
        page = clean_page(
            status_code=500,
            canonical_url=None,
            extracted={"og_tags": {}, "structured_data": None, "schema_types": []},
            site_context=SiteContext(has_llms_txt=False),
        )
        result = score_page(page)
        severities = [issue.severity for issue in result.issues]
        assert severities == sorted(severities, key=lambda s: ["critical", "warning", "info"].index(s.value))
        assert [i.code for i in result.issues if i.severity == IssueSeverity.critical] == [
            "HTTP_STATUS",
            "MISSING_LLMS_TXT",
        ]

    def test_scores_stay_in_range(self, clean_page):
        page = clean_page(
            status_code=503,
            title=None,
            meta_description=None,
            canonical_url=None,
            word_count=10,
            lighthouse=LighthouseScores(performance=0.1, seo=0.1, accessibility=0.1, best_practices=0.1),
            extracted={"h1": [], "h2": [], "structured_data": None, "internal_links": []},
            site_context=SiteContext(has_llms_txt=False, has_sitemap=False, ai_crawlers_blocked=["GPTBot"]),
        )
        result = score_page(page)
        for score in (
            result.overall_score,
            result.technical_score,
            result.content_score,
            result.ai_readiness_score,
            result.performance_score,
        ):
            assert 0 <= score <= 100
        assert result.letter_grade == "F"

    def test_fixing_an_issue_never_lowers_the_score(self, clean_page):
        broken = score_page(clean_page(canonical_url=None, extracted={"images_without_alt": 3}))
        fixed = score_page(clean_page(extracted={"images_without_alt": 3}))
        assert fixed.overall_score >= broken.overall_score
        assert fixed.technical_score > broken.technical_score

    def test_custom_weights(self, clean_page):
        page = clean_page(status_code=404)
        only_technical = ScoreWeights(technical=1, content=0, ai_readiness=0, performance=0)
        assert score_page(page, only_technical).overall_score == 75

    def test_missing_weights_fall_back_to_settings(self, clean_page):
        page = clean_page(status_code=404)
        assert score_page(page, None) == score_page(page, ScoreWeights.from_settings())


class TestLetterGrade:
    @pytest.mark.parametrize(
        "score,grade",
        [(100, "A"), (90, "A"), (89, "B"), (80, "B"), (79, "C"), (70, "C"), (69, "D"), (60, "D"), (59, "F"), (0, "F")],
    )
    def test_boundaries(self, score, grade):
        assert letter_grade(score) == grade


class TestOverallScore:
    def test_weights_are_normalised(self):
        weights = ScoreWeights(technical=2, content=2, ai_readiness=2, performance=2)
        assert overall_score(80, 60, 40, 20, weights) == 50

    def test_rounds_half_up(self):
        weights = ScoreWeights(technical=1, content=1, ai_readiness=0, performance=0)
        assert overall_score(90, 91, 0, 0, weights) == 91


class TestScoreWeights:
    def test_defaults(self):
        weights = ScoreWeights()
        assert (weights.technical, weights.content, weights.ai_readiness, weights.performance) == (
            0.25, 0.30, 0.30, 0.15,
        )

    def test_negative_weight_rejected(self):
        with pytest.raises(ValidationError):
            ScoreWeights(technical=-0.1)

    def test_all_zero_rejected(self):
        with pytest.raises(ValueError):
            ScoreWeights(technical=0, content=0, ai_readiness=0, performance=0)

    def test_from_settings(self):
        assert ScoreWeights.from_settings() == ScoreWeights()
