from app.features.scoring.schemas import LighthouseScores, SiteContext
from app.features.scoring.services.dimensions.performance import score_performance


def codes(result):
    return [issue.code for issue in result.issues]


def lighthouse(**overrides):
    scores = dict(performance=0.95, seo=0.95, accessibility=0.95, best_practices=0.95)
    scores.update(overrides)
    return LighthouseScores(**scores)


def test_clean_page_scores_full_marks(clean_page):
    assert score_performance(clean_page()).score == 100


def test_no_lighthouse_no_deductions(clean_page):
    result = score_performance(clean_page(lighthouse=None))
    assert result.score == 100
    assert result.issues == []


def test_performance_bands(clean_page):
    assert score_performance(clean_page(lighthouse=lighthouse(performance=0.3))).score == 80
    assert score_performance(clean_page(lighthouse=lighthouse(performance=0.65))).score == 90
    assert score_performance(clean_page(lighthouse=lighthouse(performance=0.8))).score == 100


def test_other_lighthouse_categories(clean_page):
    result = score_performance(clean_page(lighthouse=lighthouse(seo=0.5, accessibility=0.6, best_practices=0.7)))
    assert codes(result) == ["LH_SEO_LOW", "LH_A11Y_LOW", "LH_BP_LOW"]
    assert result.score == 75


def test_slow_response(clean_page):
    result = score_performance(clean_page(site_context=SiteContext(response_time_ms=3400)))
    assert codes(result) == ["SLOW_RESPONSE"]
    assert result.issues[0].data == {"response_time_ms": 3400}

    assert score_performance(clean_page(site_context=SiteContext(response_time_ms=2000))).issues == []


def test_large_page(clean_page):
    result = score_performance(clean_page(page_size_bytes=4 * 1024 * 1024))
    assert codes(result) == ["LARGE_PAGE_SIZE"]
    assert result.issues[0].data["page_size_mb"] == 4.0
