"""Rule-based router for chat messages.

Rules run in order and the first match wins. Specific count/listing intents
are checked before the loose product-search triggers because words such as
"price" or "category" also appear inside those more specific questions.
"""
import enum
import re
from dataclasses import dataclass
from typing import List, Optional


class Route(str, enum.Enum):
    greeting = "greeting"
    product_count = "product_count"
    product_names_only = "product_names_only"
    supplier_count = "supplier_count"
    purchase_order_status = "purchase_order_status"
    total_sales = "total_sales"
    product_search = "product_search"
    general = "general"


@dataclass(frozen=True)
class IntentMatch:
    route: Route
    order_id: Optional[int] = None


GREETING = re.compile(r"\b(hello|hi|hey|greetings|good (morning|afternoon|evening))\b")

PRODUCT_COUNT = ["count of total products", "how many products", "number of products",
                 "total number of products", "product count"]
PRODUCT_NAMES = ["only the names", "list product names", "product names only",
                 "names of products", "names of all products", "just the names"]
SUPPLIER_COUNT = ["how many suppliers", "count suppliers", "count of suppliers",
                  "number of suppliers"]
TOTAL_SALES = ["total sales amount", "sum of sales", "total sales", "sales total",
               "total revenue"]
PRODUCT_SEARCH = ["show me products", "show products", "show me the products", "search for",
                  "search products", "find products", "list products",
                  "list all products", "products in", "products named", "products called"]

PO_STATUS = [
    re.compile(r"status of (?:the )?purchase order\s*#?\s*(\d+)"),
    re.compile(r"purchase order\s*#?\s*(\d+)(?:'s)? status"),
    re.compile(r"\bpo\s*#?\s*(\d+) status"),
    re.compile(r"status of (?:the )?\bpo\s*#?\s*(\d+)"),
]
PO_STATUS_WITHOUT_ID = re.compile(r"status of (?:the |a )?(?:purchase order|po)\b")
PRICE_RANGE = re.compile(r"\bproducts?\b.*\b(under|over|below|above|between|cheaper|costing|less than|more than)\b")
SEARCH_TOKENS = re.compile(r"\b(price|prices|priced|category|categories)\b")


def _contains_any(q: str, vocab: List[str]) -> bool:
    return any(phrase in q for phrase in vocab)


def _purchase_order_id(q: str) -> Optional[int]:
    for pattern in PO_STATUS:
        m = pattern.search(q)
        if m:
            return int(m.group(1))
    return None


def classify(message: str) -> IntentMatch:
    """Route a normalized (English, lower-cased) message."""
    q = (message or "").lower().strip()
    if not q:
        return IntentMatch(Route.general)

    if GREETING.search(q):
        return IntentMatch(Route.greeting)
    if _contains_any(q, PRODUCT_COUNT):
        return IntentMatch(Route.product_count)
    if _contains_any(q, PRODUCT_NAMES):
        return IntentMatch(Route.product_names_only)
    if _contains_any(q, SUPPLIER_COUNT):
        return IntentMatch(Route.supplier_count)

    order_id = _purchase_order_id(q)
    if order_id is not None or PO_STATUS_WITHOUT_ID.search(q):
        return IntentMatch(Route.purchase_order_status, order_id=order_id)
    if _contains_any(q, TOTAL_SALES):
        return IntentMatch(Route.total_sales)

    if _contains_any(q, PRODUCT_SEARCH) or PRICE_RANGE.search(q) or SEARCH_TOKENS.search(q):
        return IntentMatch(Route.product_search)
    return IntentMatch(Route.general)
