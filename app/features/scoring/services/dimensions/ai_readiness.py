"""
AI-readiness dimension: crawler access, llms.txt, structured data and
answer-oriented page structure.
"""
import re
from typing import List

from app.features.scoring.schemas.page_data import PageData, SiteContext
from app.features.scoring.schemas.result import DimensionResult
from app.features.scoring.services.helpers import ScoreState, llm_deduction
from app.features.scoring.utils import thresholds as t

SCHEMA_REQUIRED_PROPS = {
    "Article": ["headline", "author", "datePublished"],
    "WebPage": ["name", "description"],
    "Organization": ["name", "url"],
    "Product": ["name", "description"],
    "FAQPage": ["mainEntity"],
    "LocalBusiness": ["name", "address"],
}

ENTITY_TYPES = {"Person", "Organization", "Product", "Place", "Event", "LocalBusiness"}

QUESTION_HEADING = re.compile(
    r"^(what|how|why|when|where|who|which|can|does|do|is|are|should)\b", re.IGNORECASE
)

LLMS_TXT_ELEMENTS = {
    "title": re.compile(r"^# \S", re.MULTILINE),
    "description": re.compile(r"^> \S", re.MULTILINE),
    "section": re.compile(r"^## \S", re.MULTILINE),
    "link": re.compile(r"\[[^\]]+\]\([^)]+\)"),
}


def _missing_llms_txt_elements(content: str) -> List[str]:
    return [name for name, pattern in LLMS_TXT_ELEMENTS.items() if not pattern.search(content)]


def _has_question_headings(page: PageData) -> bool:
    e = page.extracted
    for heading in e.h1 + e.h2 + e.h3 + e.h4 + e.h5 + e.h6:
        text = heading.strip()
        if text.endswith("?") or QUESTION_HEADING.match(text):
            return True
    return False


def _site_checks(s: ScoreState, site: SiteContext) -> None:
    if site.ai_crawlers_blocked:
        s.deduct("AI_CRAWLER_BLOCKED", data={"blocked_crawlers": list(site.ai_crawlers_blocked)})

    if not site.has_llms_txt:
        s.deduct("MISSING_LLMS_TXT")
    elif site.llms_txt_content is not None:
        missing = _missing_llms_txt_elements(site.llms_txt_content)
        if len(missing) >= 2:
            s.deduct("LLMS_TXT_QUALITY", data={"missing_elements": missing})
        elif len(missing) == 1:
            s.deduct("LLMS_TXT_INCOMPLETE", data={"missing_elements": missing})


def score_ai_readiness(page: PageData) -> DimensionResult:
    s = ScoreState()
    extracted = page.extracted

    if page.site_context is not None:
        _site_checks(s, page.site_context)

    structured_data = extracted.structured_data or []
    if not structured_data:
        s.deduct("NO_STRUCTURED_DATA")
    else:
        for item in structured_data:
            schema_type = item.get("@type")
            required = SCHEMA_REQUIRED_PROPS.get(schema_type) if isinstance(schema_type, str) else None
            if not required:
                continue
            missing_props = [prop for prop in required if prop not in item]
            if missing_props:
                s.deduct("INCOMPLETE_SCHEMA", data={"schema_type": schema_type, "missing_props": missing_props})
                break

        if any(not item.get("@type") for item in structured_data):
            s.deduct("INVALID_SCHEMA")

        if not any(schema_type in ENTITY_TYPES for schema_type in extracted.schema_types):
            s.deduct("MISSING_ENTITY_MARKUP")

    if _has_question_headings(page) and "FAQPage" not in extracted.schema_types:
        s.deduct("MISSING_FAQ_STRUCTURE")
        if page.word_count >= t.DIRECT_ANSWERS_MIN_WORDS:
            s.deduct("NO_DIRECT_ANSWERS")

    llm = page.llm_scores
    if llm is not None:
        if llm.citation_worthiness < 100:
            s.deduct(
                "CITATION_WORTHINESS",
                penalty=llm_deduction(llm.citation_worthiness, t.LLM_DEDUCTION_FACTOR),
                data={"llm_score": llm.citation_worthiness},
            )
        if llm.structure < t.LLM_STRUCTURE_MIN:
            s.deduct("POOR_QUESTION_COVERAGE", data={"llm_score": llm.structure})

    return s.result()
