"""Numeric cut-offs shared by the dimension evaluators."""

TITLE_MIN_LENGTH = 30
TITLE_MAX_LENGTH = 60

META_DESC_MIN_LENGTH = 120
META_DESC_MAX_LENGTH = 160

HTTP_ERROR_STATUS = 400
REDIRECT_CHAIN_MAX_HOPS = 3
SLOW_RESPONSE_MS = 2000
LARGE_PAGE_SIZE_BYTES = 3 * 1024 * 1024

ALT_TEXT_PENALTY_PER_IMAGE = 3
ALT_TEXT_PENALTY_CAP = 15

THIN_CONTENT_SEVERE_WORDS = 200
THIN_CONTENT_WORDS = 500
MIN_INTERNAL_LINKS = 2
EXTERNAL_TO_INTERNAL_RATIO = 3
READABILITY_POOR = 50
READABILITY_FAIR = 60
TEXT_HTML_RATIO_MIN = 15
AI_ASSISTANT_WORDS_MIN = 3
SENTENCE_VARIANCE_MIN = 15
SENTENCE_VARIANCE_MIN_WORDS = 200
EEAT_MIN_WORDS = 500
CITATIONS_MIN_WORDS = 300
SUMMARY_MIN_WORDS = 500
PDF_ONLY_MAX_WORDS = 300
DIRECT_ANSWERS_MIN_WORDS = 200

LLM_DEDUCTION_FACTOR = 0.2
LLM_STRUCTURE_MIN = 50

SITEMAP_COVERAGE_MIN = 0.5

LH_PERF_LOW = 0.5
LH_PERF_MODERATE = 0.8
LH_SEO_LOW = 0.8
LH_A11Y_LOW = 0.7
LH_BEST_PRACTICES_LOW = 0.8

# Reduced penalties for the milder band of two-tier checks
THIN_CONTENT_MODERATE_PENALTY = 8
READABILITY_FAIR_PENALTY = 5
LH_PERF_MODERATE_PENALTY = 10
