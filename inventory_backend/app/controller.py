"""Controller / Orchestrator for the chat assistant.

Runs the sequential chat pipeline: detect language, translate to English,
classify, answer from the database or the language model, translate back.
Every upstream failure degrades to a default; the caller always gets a reply.
"""
from typing import Optional

from sqlalchemy.orm import Session

from . import chat_queries
from .generate import GenerationClient
from .postprocess import Postprocessor
from .translation import Translator, normalize_text
from ..nlu.intent_classifier import IntentMatch, Route, classify
from ..nlu.query_extractor import QueryParameterExtractor
from ..schemas.io_models import ConversationContext
from ..utils.errors import UpstreamServiceError
from ..utils.logger import get_logger

logger = get_logger("controller")

GREETING_REPLY = "Hello! How can I assist you today?"
GENERAL_FALLBACK_REPLY = "I'm sorry, an error occurred while trying to get that information."
EMPTY_COMPLETION_REPLY = "I couldn't process that request. Could you please rephrase?"

GENERAL_PROMPT = '''You are a helpful assistant for an inventory management system.
Answer general knowledge or conversational questions concisely.
{history}
User: {message}
Assistant:'''


class ChatController:
    def __init__(self, client: Optional[GenerationClient] = None, translator: Optional[Translator] = None,
                 extractor: Optional[QueryParameterExtractor] = None):
        self.client = client or GenerationClient()
        self.translator = translator or Translator(self.client)
        self.extractor = extractor or QueryParameterExtractor(self.client)
        self.postprocessor = Postprocessor()

    def handle(self, db: Session, message: str, context: Optional[ConversationContext] = None) -> str:
        user = context.user_id if context and context.user_id else "anonymous"
        logger.info("[CHAT] 1. Received message from %s: %r", user, message)

        user_language = self.translator.detect_language(message)
        english = self.translator.to_working_language(message, user_language)
        logger.info("[CHAT] 2. Language=%s working text=%r", user_language, english)

        match = classify(normalize_text(english))
        logger.info("[CHAT] 3. Route: %s", match.route.value)

        reply = self.dispatch(db, match, english, context)

        reply = self.translator.from_working_language(reply, user_language)
        logger.info("[CHAT] 4. Reply ready (%d chars)", len(reply))

        if context is not None:
            context.add("user", message)
            context.add("assistant", reply)
        return reply

    def dispatch(self, db: Session, match: IntentMatch, message: str,
                 context: Optional[ConversationContext] = None) -> str:
        route = match.route
        if route == Route.greeting:
            return GREETING_REPLY
        if route == Route.product_count:
            return chat_queries.count_products(db)
        if route == Route.product_names_only:
            return chat_queries.list_product_names(db)
        if route == Route.supplier_count:
            return chat_queries.count_suppliers(db)
        if route == Route.purchase_order_status:
            return chat_queries.purchase_order_status(db, match.order_id)
        if route == Route.total_sales:
            return chat_queries.total_sales_amount(db)
        if route == Route.product_search:
            product_filter = self.extractor.extract(message)
            return chat_queries.search_products(db, product_filter)
        return self.general_reply(message, context)

    def general_reply(self, message: str, context: Optional[ConversationContext] = None) -> str:
        history = ""
        if context is not None and context.turns:
            history = "\n".join(f"{t.role.capitalize()}: {t.message}" for t in context.turns)
        try:
            answer = self.client.generate_answer(
                GENERAL_PROMPT.format(history=history, message=message),
                temperature=0.7,
                max_output_tokens=300,
            )
        except UpstreamServiceError as e:
            logger.warning("General completion failed: %s", e)
            return GENERAL_FALLBACK_REPLY
        return self.postprocessor.format_response(answer) or EMPTY_COMPLETION_REPLY
