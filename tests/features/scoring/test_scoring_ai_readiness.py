from app.features.scoring.schemas import LLMContentScores, SiteContext
from app.features.scoring.services.dimensions.ai_readiness import score_ai_readiness

COMPLETE_LLMS_TXT = """# Example Coffee
> Guides and reviews for home espresso.

## Guides
- [Grinder guide](https://example.com/guide): how to pick a grinder
"""


def codes(result):
    return [issue.code for issue in result.issues]


def issue(result, code):
    return next(i for i in result.issues if i.code == code)


class TestAIReadinessDimension:
    def test_clean_page_scores_full_marks(self, clean_page):
        result = score_ai_readiness(clean_page())
        assert result.issues == []
        assert result.score == 100

    def test_blocked_ai_crawlers(self, clean_page):
        site = SiteContext(ai_crawlers_blocked=["GPTBot", "ClaudeBot"])
        result = score_ai_readiness(clean_page(site_context=site))
        assert issue(result, "AI_CRAWLER_BLOCKED").data == {"blocked_crawlers": ["GPTBot", "ClaudeBot"]}
        assert result.score == 75

    def test_missing_llms_txt(self, clean_page):
        result = score_ai_readiness(clean_page(site_context=SiteContext(has_llms_txt=False)))
        assert codes(result) == ["MISSING_LLMS_TXT"]
        assert result.score == 80

    def test_complete_llms_txt(self, clean_page):
        site = SiteContext(llms_txt_content=COMPLETE_LLMS_TXT)
        assert score_ai_readiness(clean_page(site_context=site)).issues == []

    def test_llms_txt_missing_one_element(self, clean_page):
        site = SiteContext(llms_txt_content="# Example Coffee\n> Guides for home espresso.\n\n## Guides\n")
        result = score_ai_readiness(clean_page(site_context=site))
        assert codes(result) == ["LLMS_TXT_INCOMPLETE"]
        assert issue(result, "LLMS_TXT_INCOMPLETE").data == {"missing_elements": ["link"]}

    def test_llms_txt_missing_several_elements(self, clean_page):
        site = SiteContext(llms_txt_content="# Example Coffee\nWe write about coffee.")
        result = score_ai_readiness(clean_page(site_context=site))
        assert codes(result) == ["LLMS_TXT_QUALITY"]
        assert issue(result, "LLMS_TXT_QUALITY").data == {"missing_elements": ["description", "section", "link"]}

    def test_site_checks_skipped_without_context(self, clean_page):
        assert score_ai_readiness(clean_page(site_context=None)).score == 100

    def test_no_structured_data(self, clean_page):
        result = score_ai_readiness(clean_page(extracted={"structured_data": None, "schema_types": []}))
        assert codes(result) == ["NO_STRUCTURED_DATA"]
        assert result.score == 85

    def test_incomplete_schema_reported_once(self, clean_page):
        page = clean_page(extracted={
            "structured_data": [
                {"@type": "Article", "headline": "Grinders"},
                {"@type": "Product", "name": "Grinder"},
            ],
            "schema_types": ["Article", "Product"],
        })
        result = score_ai_readiness(page)
        assert codes(result).count("INCOMPLETE_SCHEMA") == 1
        assert issue(result, "INCOMPLETE_SCHEMA").data == {
            "schema_type": "Article",
            "missing_props": ["author", "datePublished"],
        }

    def test_invalid_schema_without_type(self, clean_page):
        page = clean_page(extracted={
            "structured_data": [
                {"@type": "Organization", "name": "Example", "url": "https://example.com"},
                {"name": "Untyped"},
            ],
        })
        assert codes(score_ai_readiness(page)) == ["INVALID_SCHEMA"]

    def test_missing_entity_markup(self, clean_page):
        page = clean_page(extracted={
            "structured_data": [{"@type": "WebPage", "name": "Guide", "description": "Grinders"}],
            "schema_types": ["WebPage"],
        })
        assert codes(score_ai_readiness(page)) == ["MISSING_ENTITY_MARKUP"]

    def test_question_headings_without_faq(self, clean_page):
        page = clean_page(extracted={"h2": ["How do burr grinders work?"]})
        result = score_ai_readiness(page)
        assert codes(result) == ["MISSING_FAQ_STRUCTURE", "NO_DIRECT_ANSWERS"]

        short = clean_page(word_count=120, extracted={"h2": ["Which grinder should I buy"]})
        assert codes(score_ai_readiness(short)) == ["MISSING_FAQ_STRUCTURE"]

    def test_question_headings_with_faq_schema(self, clean_page):
        page = clean_page(extracted={
            "h2": ["How do burr grinders work?"],
            "schema_types": ["Organization", "FAQPage"],
        })
        assert score_ai_readiness(page).issues == []

    def test_model_scores(self, clean_page):
        scores = LLMContentScores(clarity=90, authority=90, comprehensiveness=90, structure=40, citation_worthiness=60)
        result = score_ai_readiness(clean_page(llm_scores=scores))
        assert codes(result) == ["CITATION_WORTHINESS", "POOR_QUESTION_COVERAGE"]
        assert result.score == 82
