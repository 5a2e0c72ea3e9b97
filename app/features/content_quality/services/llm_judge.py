import json
import logging
from typing import Any, Dict, Optional

from openai import AsyncOpenAI

from app.features.scoring.schemas import LLMContentScores
from app.platform.config import settings

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a content quality analyst. You rate how useful a web page's text is "
    "to a reader and how likely an AI assistant is to cite it. Always respond with valid JSON only."
)

SCORE_PROMPT = """Rate the following page text on five axes, each an integer from 0 to 100:

- clarity: how clearly and directly the text is written
- authority: evidence of expertise, sources, data and credentials
- comprehensiveness: how fully the text covers its topic
- structure: how well the text is organised around the questions a reader asks
- citation_worthiness: how likely an AI assistant would quote or cite this text

You MUST respond with ONLY valid JSON matching this exact structure:
{{"clarity": number, "authority": number, "comprehensiveness": number, "structure": number, "citation_worthiness": number}}

Page URL: {url}

Page text:
\"\"\"
{text}
\"\"\""""


def _parse_scores(response_text: str) -> Dict[str, Any]:
    cleaned = response_text.strip()
    if cleaned.startswith("```"):
        cleaned = cleaned.replace("```json", "").replace("```", "").strip()
    start, end = cleaned.find("{"), cleaned.rfind("}")
    if start == -1 or end <= start:
        raise ValueError(f"Model returned no JSON object: {response_text[:200]!r}")
    return json.loads(cleaned[start:end + 1])


class ContentQualityModel:
    """
    Asks the model provider (OpenRouter, OpenAI-compatible) for a content-quality judgment.
    """

    def __init__(
        self,
        client: Optional[AsyncOpenAI] = None,
        model: Optional[str] = None,
    ):
        self.client = client or AsyncOpenAI(
            base_url=settings.OPENROUTER_BASE_URL,
            api_key=settings.OPENROUTER_API_KEY,
        )
        self.model = model or settings.CONTENT_MODEL

    async def score(self, text: str, url: str = "") -> LLMContentScores:
        completion = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": SCORE_PROMPT.format(url=url, text=text)},
            ],
            response_format={"type": "json_object"},
            temperature=0,
        )
        response_text = completion.choices[0].message.content or ""
        data = _parse_scores(response_text)

        # Models occasionally drift outside the range
        clamped = {
            axis: max(0, min(100, int(round(float(data[axis])))))
            for axis in LLMContentScores.model_fields
        }
        return LLMContentScores(**clamped)
