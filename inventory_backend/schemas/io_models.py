"""Pydantic models for the chat API and the chat pipeline contracts.

ProductFilter is the boundary schema for language-model output: every field is
coerced independently and anything malformed becomes None instead of raising.
"""
import math
import re
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Any, List, Optional

_NULL_STRINGS = {"", "null", "none", "n/a", "undefined"}
_PRICE_CLEANUP = re.compile(r"[\s$,]")


def _clean_text(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip().strip("%").strip()
    if value.lower() in _NULL_STRINGS:
        return None
    return value


def _clean_price(value: Any) -> Optional[float]:
    # bool is an int subclass; True must not become a price of 1
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = _PRICE_CLEANUP.sub("", value)
        if value.lower() in _NULL_STRINGS:
            return None
    try:
        price = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(price) or math.isinf(price) or price < 0:
        return None
    return price


class ProductFilter(BaseModel):
    product_name: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    product_category: Optional[str] = None

    @field_validator("product_name", "product_category", mode="before")
    @classmethod
    def _text_field(cls, value):
        return _clean_text(value)

    @field_validator("min_price", "max_price", mode="before")
    @classmethod
    def _price_field(cls, value):
        return _clean_price(value)

    @model_validator(mode="after")
    def _ordered_range(self):
        if self.min_price is not None and self.max_price is not None and self.min_price > self.max_price:
            self.min_price, self.max_price = self.max_price, self.min_price
        return self

    @classmethod
    def empty(cls) -> "ProductFilter":
        return cls()

    def is_empty(self) -> bool:
        return all(v is None for v in self.model_dump().values())


class ConversationTurn(BaseModel):
    role: str
    message: str


class ConversationContext(BaseModel):
    """Per-conversation memory owned by the caller; the server keeps none."""
    user_id: Optional[str] = None
    turns: List[ConversationTurn] = Field(default_factory=list)
    max_turns: int = 14

    def add(self, role: str, message: str):
        self.turns.append(ConversationTurn(role=role, message=message))
        if len(self.turns) > self.max_turns:
            del self.turns[: len(self.turns) - self.max_turns]


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[str] = Field(default=None, alias="userId")
    message: str

    @field_validator("user_id", mode="before")
    @classmethod
    def _stringify_user(cls, value):
        return None if value is None else str(value)


class ChatResponse(BaseModel):
    reply: str
