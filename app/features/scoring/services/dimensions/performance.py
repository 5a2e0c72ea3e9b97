from app.features.scoring.schemas.page_data import PageData
from app.features.scoring.schemas.result import DimensionResult
from app.features.scoring.services.helpers import ScoreState
from app.features.scoring.utils import thresholds as t


def score_performance(page: PageData) -> DimensionResult:
    """Lighthouse categories, server response time and page weight."""
    s = ScoreState()
    lh = page.lighthouse

    if lh is not None:
        if lh.performance < t.LH_PERF_LOW:
            s.deduct("LH_PERF_LOW", data={"performance": lh.performance})
        elif lh.performance < t.LH_PERF_MODERATE:
            s.deduct("LH_PERF_LOW", penalty=t.LH_PERF_MODERATE_PENALTY, data={"performance": lh.performance})

        if lh.seo < t.LH_SEO_LOW:
            s.deduct("LH_SEO_LOW", data={"seo": lh.seo})

        if lh.accessibility < t.LH_A11Y_LOW:
            s.deduct("LH_A11Y_LOW", data={"accessibility": lh.accessibility})

        if lh.best_practices < t.LH_BEST_PRACTICES_LOW:
            s.deduct("LH_BP_LOW", data={"best_practices": lh.best_practices})

    site = page.site_context
    if site is not None and site.response_time_ms and site.response_time_ms > t.SLOW_RESPONSE_MS:
        s.deduct("SLOW_RESPONSE", data={"response_time_ms": site.response_time_ms})

    if page.page_size_bytes and page.page_size_bytes > t.LARGE_PAGE_SIZE_BYTES:
        s.deduct(
            "LARGE_PAGE_SIZE",
            data={
                "page_size_bytes": page.page_size_bytes,
                "page_size_mb": round(page.page_size_bytes / (1024 * 1024), 2),
            },
        )

    return s.result()
