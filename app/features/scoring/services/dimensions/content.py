"""
Content dimension: depth, duplication, linking, readability, writing style,
experience signals, citations and model-judged content quality.
"""
from typing import List
from urllib.parse import urlparse

from app.features.scoring.schemas.page_data import PageData
from app.features.scoring.schemas.result import DimensionResult
from app.features.scoring.services.helpers import ScoreState, llm_deduction
from app.features.scoring.utils import thresholds as t

# Stock transitions that read as machine-written when several cluster together
AI_ASSISTANT_PHRASES = {
    "in conclusion",
    "moreover",
    "furthermore",
    "essentially",
    "delve",
    "it's important to note",
    "it is important to note",
    "in today's digital landscape",
    "navigating",
    "tapestry",
    "ultimately",
    "in summary",
}

EXPERIENCE_MARKERS = (
    "experience",
    "tested",
    "testing",
    "hands-on",
    "case study",
    "review",
    "lessons learned",
    "how we",
    "how i",
    "we tried",
    "i tried",
    "our results",
)

SUMMARY_MARKERS = (
    "summary",
    "key takeaways",
    "takeaway",
    "tl;dr",
    "tldr",
    "conclusion",
    "in short",
    "bottom line",
    "recap",
)

AUTHORITATIVE_SUFFIXES = (".gov", ".edu", ".org")


def _all_headings(page: PageData) -> List[str]:
    e = page.extracted
    return [h.lower() for h in e.h1 + e.h2 + e.h3 + e.h4 + e.h5 + e.h6]


def _is_authoritative(link: str) -> bool:
    host = (urlparse(link).hostname or "").lower()
    return any(host.endswith(suffix) or f"{suffix}." in host for suffix in AUTHORITATIVE_SUFFIXES)


def score_content(page: PageData) -> DimensionResult:
    s = ScoreState()
    extracted = page.extracted
    site = page.site_context
    words = page.word_count

    if words < t.THIN_CONTENT_SEVERE_WORDS:
        s.deduct("THIN_CONTENT", data={"word_count": words})
    elif words < t.THIN_CONTENT_WORDS:
        s.deduct("THIN_CONTENT", penalty=t.THIN_CONTENT_MODERATE_PENALTY, data={"word_count": words})

    if site is not None and page.content_hash:
        first_url = site.content_hashes.get(page.content_hash)
        if first_url and first_url != page.url:
            s.deduct("DUPLICATE_CONTENT", data={"duplicate_of": first_url})

    internal = len(extracted.internal_links)
    external = len(extracted.external_links)
    if internal < t.MIN_INTERNAL_LINKS:
        s.deduct("NO_INTERNAL_LINKS", data={"internal_links": internal})

    if external > internal * t.EXTERNAL_TO_INTERNAL_RATIO:
        s.deduct("EXCESSIVE_LINKS", data={"internal_links": internal, "external_links": external})

    flesch = extracted.flesch_score
    if flesch is not None:
        if flesch < t.READABILITY_POOR:
            s.deduct("POOR_READABILITY", data={"flesch_score": flesch, "classification": extracted.flesch_classification})
        elif flesch < t.READABILITY_FAIR:
            s.deduct(
                "POOR_READABILITY",
                penalty=t.READABILITY_FAIR_PENALTY,
                data={"flesch_score": flesch, "classification": extracted.flesch_classification},
            )

    if extracted.text_html_ratio is not None and extracted.text_html_ratio < t.TEXT_HTML_RATIO_MIN:
        s.deduct("LOW_TEXT_HTML_RATIO", data={"text_html_ratio": extracted.text_html_ratio})

    assistant_words = [w for w in extracted.top_transition_words if w.lower() in AI_ASSISTANT_PHRASES]
    if len(assistant_words) >= t.AI_ASSISTANT_WORDS_MIN:
        s.deduct("AI_ASSISTANT_SPEAK", data={"phrases": assistant_words})

    variance = extracted.sentence_length_variance
    if variance is not None and words >= t.SENTENCE_VARIANCE_MIN_WORDS and variance < t.SENTENCE_VARIANCE_MIN:
        s.deduct("UNIFORM_SENTENCE_LENGTH", data={"variance": variance})

    headings = _all_headings(page)

    if words >= t.EEAT_MIN_WORDS and not any(m in h for h in headings for m in EXPERIENCE_MARKERS):
        s.deduct("LOW_EEAT_SCORE")

    if words > t.CITATIONS_MIN_WORDS and not any(_is_authoritative(link) for link in extracted.external_links):
        s.deduct("MISSING_AUTHORITATIVE_CITATIONS")

    if words >= t.SUMMARY_MIN_WORDS and not any(m in h for h in headings for m in SUMMARY_MARKERS):
        s.deduct("NO_SUMMARY_SECTION")

    if extracted.pdf_links and words < t.PDF_ONLY_MAX_WORDS:
        s.deduct("PDF_ONLY_CONTENT", data={"pdf_links": len(extracted.pdf_links)})

    llm = page.llm_scores
    if llm is not None:
        for code, value in (
            ("CONTENT_DEPTH", llm.comprehensiveness),
            ("CONTENT_CLARITY", llm.clarity),
            ("CONTENT_AUTHORITY", llm.authority),
        ):
            if value < 100:
                s.deduct(code, penalty=llm_deduction(value, t.LLM_DEDUCTION_FACTOR), data={"llm_score": value})

    return s.result()
