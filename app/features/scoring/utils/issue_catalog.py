"""
Issue Catalog

Every rule code the engine can emit, with its dimension, severity, default
penalty and the human-readable text stored on the Issue row.
"""
from typing import Dict, NamedTuple

from app.features.scoring.schemas.result import IssueCategory, IssueSeverity

T = IssueCategory.technical
C = IssueCategory.content
A = IssueCategory.ai_readiness
P = IssueCategory.performance

CRIT = IssueSeverity.critical
WARN = IssueSeverity.warning
INFO = IssueSeverity.info


class IssueDefinition(NamedTuple):
    category: IssueCategory
    severity: IssueSeverity
    penalty: int
    message: str
    recommendation: str


ISSUE_DEFINITIONS: Dict[str, IssueDefinition] = {
    # ── Technical ───────────────────────────────
    "HTTP_STATUS": IssueDefinition(
        T, CRIT, 25,
        "Page returned an HTTP error status",
        "Fix the server response or remove links pointing to this URL.",
    ),
    "MISSING_TITLE": IssueDefinition(
        T, CRIT, 15,
        "Title tag is missing or not between 30 and 60 characters",
        "Write a unique, descriptive title of 30-60 characters.",
    ),
    "MISSING_META_DESC": IssueDefinition(
        T, WARN, 10,
        "Meta description is missing or not between 120 and 160 characters",
        "Add a meta description of 120-160 characters summarising the page.",
    ),
    "MISSING_OG_TAGS": IssueDefinition(
        T, INFO, 5,
        "Open Graph title, description or image is missing",
        "Add og:title, og:description and og:image tags.",
    ),
    "MISSING_CANONICAL": IssueDefinition(
        T, WARN, 8,
        "No canonical URL is declared",
        "Add a rel=canonical link pointing to the preferred URL.",
    ),
    "NOINDEX_SET": IssueDefinition(
        T, CRIT, 20,
        "Robots meta tag contains noindex",
        "Remove noindex if this page should appear in search and AI answers.",
    ),
    "MISSING_H1": IssueDefinition(
        T, WARN, 8,
        "Page has no H1 heading",
        "Add a single H1 that states the page topic.",
    ),
    "MULTIPLE_H1": IssueDefinition(
        T, INFO, 5,
        "Page has more than one H1 heading",
        "Keep one H1 and demote the others to H2.",
    ),
    "HEADING_HIERARCHY": IssueDefinition(
        T, INFO, 3,
        "Heading levels are skipped",
        "Nest headings sequentially (H1, H2, H3) without skipping levels.",
    ),
    "MISSING_ALT_TEXT": IssueDefinition(
        T, WARN, 3,
        "Images are missing alt text",
        "Describe every meaningful image with alt text.",
    ),
    "REDIRECT_CHAIN": IssueDefinition(
        T, WARN, 8,
        "URL is reached through a chain of redirects",
        "Point links directly at the final URL.",
    ),
    "CORS_MIXED_CONTENT": IssueDefinition(
        T, WARN, 5,
        "Page loads insecure resources over HTTP",
        "Serve every resource over HTTPS.",
    ),
    "CORS_UNSAFE_LINKS": IssueDefinition(
        T, INFO, 3,
        "Links open a new tab without rel=noopener",
        "Add rel=\"noopener noreferrer\" to target=_blank links.",
    ),
    "MISSING_SITEMAP": IssueDefinition(
        T, INFO, 5,
        "No XML sitemap was found for the site",
        "Publish a sitemap.xml and reference it from robots.txt.",
    ),
    "SITEMAP_INVALID_FORMAT": IssueDefinition(
        T, WARN, 8,
        "The sitemap is not valid XML sitemap format",
        "Fix the sitemap so it validates against the sitemap protocol.",
    ),
    "SITEMAP_STALE_URLS": IssueDefinition(
        T, INFO, 3,
        "The sitemap lists URLs that no longer resolve",
        "Remove dead URLs from the sitemap.",
    ),
    "SITEMAP_LOW_COVERAGE": IssueDefinition(
        T, INFO, 5,
        "The sitemap covers less than half of the discovered pages",
        "Add all indexable pages to the sitemap.",
    ),
    # ── Content ─────────────────────────────────
    "THIN_CONTENT": IssueDefinition(
        C, WARN, 15,
        "Page has too little body text",
        "Expand the page to cover its topic in depth (500+ words).",
    ),
    "DUPLICATE_CONTENT": IssueDefinition(
        C, WARN, 15,
        "Page content is identical to another crawled URL",
        "Consolidate duplicates or point them at one canonical URL.",
    ),
    "NO_INTERNAL_LINKS": IssueDefinition(
        C, WARN, 8,
        "Page has fewer than two internal links",
        "Link to related pages on the same site.",
    ),
    "EXCESSIVE_LINKS": IssueDefinition(
        C, INFO, 3,
        "External links outnumber internal links more than three to one",
        "Balance outbound links with links to your own content.",
    ),
    "POOR_READABILITY": IssueDefinition(
        C, WARN, 10,
        "Text is hard to read",
        "Use shorter sentences and plainer words.",
    ),
    "LOW_TEXT_HTML_RATIO": IssueDefinition(
        C, INFO, 8,
        "Very little of the HTML is visible text",
        "Reduce markup bloat or add meaningful text content.",
    ),
    "AI_ASSISTANT_SPEAK": IssueDefinition(
        C, WARN, 10,
        "Text relies on stock assistant phrasing",
        "Rewrite boilerplate transitions in a natural, specific voice.",
    ),
    "UNIFORM_SENTENCE_LENGTH": IssueDefinition(
        C, INFO, 5,
        "Sentence lengths are unusually uniform",
        "Vary sentence length to read more naturally.",
    ),
    "LOW_EEAT_SCORE": IssueDefinition(
        C, WARN, 15,
        "Headings show no first-hand experience or expertise",
        "Add sections describing hands-on experience, testing or credentials.",
    ),
    "MISSING_AUTHORITATIVE_CITATIONS": IssueDefinition(
        C, INFO, 5,
        "No links to authoritative sources",
        "Cite .gov, .edu or established .org sources.",
    ),
    "NO_SUMMARY_SECTION": IssueDefinition(
        C, INFO, 5,
        "Long page has no summary or key takeaways section",
        "Add a short summary or key takeaways section.",
    ),
    "PDF_ONLY_CONTENT": IssueDefinition(
        C, INFO, 5,
        "Most content is only available inside linked PDFs",
        "Publish the key PDF content as HTML.",
    ),
    "CONTENT_DEPTH": IssueDefinition(
        C, WARN, 0,
        "Content does not cover its topic comprehensively",
        "Answer the follow-up questions a reader would have.",
    ),
    "CONTENT_CLARITY": IssueDefinition(
        C, WARN, 0,
        "Content is not clearly written",
        "Tighten the writing and lead with the main point.",
    ),
    "CONTENT_AUTHORITY": IssueDefinition(
        C, WARN, 0,
        "Content lacks authority signals",
        "Support claims with data, sources and author credentials.",
    ),
    # ── AI readiness ────────────────────────────
    "AI_CRAWLER_BLOCKED": IssueDefinition(
        A, CRIT, 25,
        "robots.txt blocks one or more AI crawlers",
        "Allow AI crawlers you want to be cited by in robots.txt.",
    ),
    "MISSING_LLMS_TXT": IssueDefinition(
        A, CRIT, 20,
        "The site has no llms.txt file",
        "Publish /llms.txt describing the site for language models.",
    ),
    "LLMS_TXT_QUALITY": IssueDefinition(
        A, WARN, 10,
        "llms.txt is missing several key elements",
        "Include a title, description, section headings and links in llms.txt.",
    ),
    "LLMS_TXT_INCOMPLETE": IssueDefinition(
        A, INFO, 5,
        "llms.txt is missing one key element",
        "Complete llms.txt with a title, description, sections and links.",
    ),
    "NO_STRUCTURED_DATA": IssueDefinition(
        A, WARN, 15,
        "Page has no structured data",
        "Add JSON-LD schema.org markup describing the page.",
    ),
    "INCOMPLETE_SCHEMA": IssueDefinition(
        A, WARN, 8,
        "Structured data is missing required properties",
        "Fill in the required properties for each schema type.",
    ),
    "INVALID_SCHEMA": IssueDefinition(
        A, WARN, 8,
        "Structured data item has no @type",
        "Give every JSON-LD item a valid @type.",
    ),
    "MISSING_ENTITY_MARKUP": IssueDefinition(
        A, INFO, 5,
        "Structured data describes no key entities",
        "Mark up the Organization, Person or Product behind the page.",
    ),
    "MISSING_FAQ_STRUCTURE": IssueDefinition(
        A, INFO, 5,
        "Question headings are not marked up as FAQ",
        "Add FAQPage structured data for question-and-answer sections.",
    ),
    "NO_DIRECT_ANSWERS": IssueDefinition(
        A, WARN, 10,
        "Questions on the page lack directly extractable answers",
        "Answer each question in the first sentence below its heading.",
    ),
    "CITATION_WORTHINESS": IssueDefinition(
        A, WARN, 0,
        "Content is unlikely to be cited by AI assistants",
        "Add original data, definitions and quotable statements.",
    ),
    "POOR_QUESTION_COVERAGE": IssueDefinition(
        A, WARN, 10,
        "Content structure does not map to the questions users ask",
        "Organise sections around concrete user questions.",
    ),
    # ── Performance ─────────────────────────────
    "LH_PERF_LOW": IssueDefinition(
        P, WARN, 20,
        "Lighthouse performance score is low",
        "Reduce render-blocking resources and heavy scripts.",
    ),
    "LH_SEO_LOW": IssueDefinition(
        P, WARN, 15,
        "Lighthouse SEO score is low",
        "Fix the SEO audits Lighthouse reports.",
    ),
    "LH_A11Y_LOW": IssueDefinition(
        P, INFO, 5,
        "Lighthouse accessibility score is low",
        "Fix contrast, labels and other accessibility audits.",
    ),
    "LH_BP_LOW": IssueDefinition(
        P, INFO, 5,
        "Lighthouse best-practices score is low",
        "Address the best-practice audits Lighthouse reports.",
    ),
    "SLOW_RESPONSE": IssueDefinition(
        P, WARN, 10,
        "Server response time exceeds two seconds",
        "Add caching or a CDN to bring response time under two seconds.",
    ),
    "LARGE_PAGE_SIZE": IssueDefinition(
        P, WARN, 10,
        "Page weighs more than 3 MB",
        "Compress images and trim unused scripts and styles.",
    ),
}
