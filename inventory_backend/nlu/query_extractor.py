"""LLM-backed extraction of product-search filters.

The model is asked for JSON only, but its output is untrusted: the reply is
parsed defensively and every field is re-validated through ProductFilter.
Any failure yields the all-null filter, never an exception.
"""
import json
import re
from typing import Any, Dict, Optional

from ..app.generate import GenerationClient
from ..schemas.io_models import ProductFilter
from ..utils.errors import UpstreamServiceError
from ..utils.logger import get_logger

logger = get_logger("query_extractor")

EXTRACTOR_PROMPT = '''You extract product search filters for an inventory management system.
Return a JSON object with exactly these keys:
- product_name: string or null (words from the product's name, no wildcards)
- min_price: number or null
- max_price: number or null
- product_category: string or null
Use null (not the string "null") for anything the user did not mention.
"under $10" means max_price 10; "over $10" means min_price 10.
Respond with ONLY JSON.

User query: "{query}"
'''

_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def parse_json_object(raw: Any) -> Optional[Dict[str, Any]]:
    """Return the first JSON object in raw, or None."""
    if not isinstance(raw, str):
        return None
    text = _FENCE.sub("", raw.strip())
    start = text.find("{")
    if start < 0:
        return None
    try:
        parsed, _ = json.JSONDecoder().raw_decode(text[start:])
    except ValueError:
        return None
    return parsed if isinstance(parsed, dict) else None


class QueryParameterExtractor:
    def __init__(self, client: Optional[GenerationClient] = None):
        self.client = client or GenerationClient()

    def extract(self, message: str) -> ProductFilter:
        try:
            raw = self.client.generate_answer(
                EXTRACTOR_PROMPT.format(query=message.replace('"', "'")),
                json_mode=True,
                temperature=0.1,
            )
        except UpstreamServiceError as e:
            logger.warning("Filter extraction call failed: %s", e)
            return ProductFilter.empty()

        parsed = parse_json_object(raw)
        if parsed is None:
            logger.warning("Filter extraction returned non-JSON output: %r", raw)
            return ProductFilter.empty()

        product_filter = ProductFilter(**{k: parsed.get(k) for k in ProductFilter.model_fields})
        logger.info("Extracted product filter: %s", product_filter.model_dump())
        return product_filter
