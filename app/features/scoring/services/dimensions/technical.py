"""
Technical dimension: status, meta tags, indexability, heading structure,
images, redirects, mixed content and site-level sitemap health.
"""
from app.features.scoring.schemas.page_data import PageData
from app.features.scoring.schemas.result import DimensionResult
from app.features.scoring.services.helpers import ScoreState
from app.features.scoring.utils import thresholds as t

OG_REQUIRED = ("og:title", "og:description", "og:image")


def _skipped_heading_level(page: PageData):
    extracted = page.extracted
    levels = [
        level for level, headings in enumerate(
            (extracted.h1, extracted.h2, extracted.h3,
             extracted.h4, extracted.h5, extracted.h6),
            start=1,
        )
        if headings
    ]
    for previous, current in zip(levels, levels[1:]):
        if current - previous > 1:
            return previous, current
    return None


def score_technical(page: PageData) -> DimensionResult:
    s = ScoreState()
    extracted = page.extracted
    site = page.site_context

    if page.status_code >= t.HTTP_ERROR_STATUS:
        s.deduct("HTTP_STATUS", data={"status_code": page.status_code})

    title_length = len(page.title) if page.title else 0
    if not (t.TITLE_MIN_LENGTH <= title_length <= t.TITLE_MAX_LENGTH):
        s.deduct("MISSING_TITLE", data={"title_length": title_length})

    desc_length = len(page.meta_description) if page.meta_description else 0
    if not (t.META_DESC_MIN_LENGTH <= desc_length <= t.META_DESC_MAX_LENGTH):
        s.deduct("MISSING_META_DESC", data={"description_length": desc_length})

    og_tags = extracted.og_tags or {}
    missing_og = [tag for tag in OG_REQUIRED if not og_tags.get(tag)]
    if missing_og:
        s.deduct("MISSING_OG_TAGS", data={"missing": missing_og})

    if not page.canonical_url:
        s.deduct("MISSING_CANONICAL")

    if extracted.has_robots_meta and "noindex" in [d.lower() for d in extracted.robots_directives]:
        s.deduct("NOINDEX_SET")

    h1_count = len(extracted.h1)
    if h1_count == 0:
        s.deduct("MISSING_H1")
    elif h1_count > 1:
        s.deduct("MULTIPLE_H1", data={"h1_count": h1_count})

    skipped = _skipped_heading_level(page)
    if skipped:
        s.deduct("HEADING_HIERARCHY", data={"skipped_from": f"H{skipped[0]}", "skipped_to": f"H{skipped[1]}"})

    if extracted.images_without_alt > 0:
        s.deduct(
            "MISSING_ALT_TEXT",
            penalty=min(extracted.images_without_alt * t.ALT_TEXT_PENALTY_PER_IMAGE, t.ALT_TEXT_PENALTY_CAP),
            data={"images_without_alt": extracted.images_without_alt},
        )

    if len(page.redirect_chain) >= t.REDIRECT_CHAIN_MAX_HOPS:
        s.deduct(
            "REDIRECT_CHAIN",
            data={
                "hops": len(page.redirect_chain),
                "chain": [f"{hop.status_code} {hop.url}" for hop in page.redirect_chain],
            },
        )

    if extracted.cors_mixed_content > 0:
        s.deduct("CORS_MIXED_CONTENT", data={"mixed_content_count": extracted.cors_mixed_content})

    if extracted.cors_unsafe_blank_links > 0:
        s.deduct("CORS_UNSAFE_LINKS", data={"unsafe_blank_links": extracted.cors_unsafe_blank_links})

    if site is None:
        return s.result()

    # Site-level sitemap checks
    if not site.has_sitemap:
        s.deduct("MISSING_SITEMAP")

    sitemap = site.sitemap_analysis
    if sitemap is not None:
        if site.has_sitemap and not sitemap.is_valid:
            s.deduct("SITEMAP_INVALID_FORMAT")

        if sitemap.stale_url_count > 0:
            s.deduct(
                "SITEMAP_STALE_URLS",
                data={"stale_url_count": sitemap.stale_url_count, "total_urls": sitemap.url_count},
            )

        if sitemap.discovered_page_count > 0:
            coverage = sitemap.url_count / sitemap.discovered_page_count
            if coverage < t.SITEMAP_COVERAGE_MIN:
                s.deduct(
                    "SITEMAP_LOW_COVERAGE",
                    data={
                        "sitemap_urls": sitemap.url_count,
                        "discovered_pages": sitemap.discovered_page_count,
                        "coverage": int(coverage * 100 + 0.5),
                    },
                )

    return s.result()
