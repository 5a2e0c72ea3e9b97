import html
import re

import bleach

_SCRIPT_STYLE = re.compile(r"<(script|style|noscript|template)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
_BLOCK_TAG = re.compile(
    r"<(?:br|/?(?:p|div|li|ul|ol|h[1-6]|tr|td|th|table|section|article|header|footer|main|nav|aside|blockquote|pre))\b[^>]*>",
    re.IGNORECASE,
)
_WHITESPACE = re.compile(r"\s+")


def html_to_text(raw_html: str, max_chars: int = None) -> str:
    """
    Reduce a page body to the plain text a reader would see.

    Script and style blocks are dropped with their contents, every remaining
    tag is stripped by bleach, entities are decoded and whitespace collapsed.
    """
    if not raw_html:
        return ""
    without_code = _SCRIPT_STYLE.sub(" ", raw_html)
    # block boundaries separate words once the tags are gone
    spaced = _BLOCK_TAG.sub(lambda m: f"{m.group(0)} ", without_code)
    stripped = bleach.clean(spaced, tags=set(), attributes={}, strip=True, strip_comments=True)
    text = _WHITESPACE.sub(" ", html.unescape(stripped)).strip()
    if max_chars is not None and len(text) > max_chars:
        text = text[:max_chars]
    return text
