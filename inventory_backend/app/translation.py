#!/usr/bin/env python3
"""
Translation adapter for the inventory chat assistant.

Detects the user's language with langdetect and translates between it and the
working language through the language model. Failures never propagate: the
caller gets English as the detected language, or the untranslated text back.
"""

import re
from typing import Optional

from langdetect import DetectorFactory, LangDetectException, detect

from .config import Config
from .generate import GenerationClient
from ..utils.errors import UpstreamServiceError
from ..utils.logger import get_logger

logger = get_logger("translation")

# langdetect is probabilistic; a fixed seed keeps detection repeatable
DetectorFactory.seed = 0

DETECTION_SNIPPET_CHARS = 100

TRANSLATE_PROMPT = '''Translate the text between the markers into the language with ISO 639-1 code "{target}".
Keep numbers, currency amounts, product names and line breaks unchanged.
Respond with ONLY the translated text.

<<<
{text}
>>>
'''


def normalize_text(text: str) -> str:
    """Lower-case and collapse whitespace."""
    if not text:
        return ""
    return re.sub(r"\s+", " ", text.lower()).strip()


def standardise_lang_code(code: Optional[str]) -> str:
    if not code:
        return Config.WORKING_LANGUAGE
    # langdetect reports regional variants such as zh-cn / zh-tw
    return code.lower().split("-")[0]


class Translator:
    """Language detection plus LLM-backed translation."""

    def __init__(self, client: Optional[GenerationClient] = None,
                 working_language: Optional[str] = None, timeout: Optional[float] = None):
        self.client = client or GenerationClient()
        self.working_language = working_language or Config.WORKING_LANGUAGE
        self.timeout = timeout or Config.TRANSLATION_TIMEOUT_SECONDS

    def detect_language(self, text: str) -> str:
        """Return an ISO 639-1 code, defaulting to the working language."""
        if not text or not isinstance(text, str) or not text.strip():
            logger.debug("Language detection skipped for empty input")
            return self.working_language
        try:
            return standardise_lang_code(detect(text[:DETECTION_SNIPPET_CHARS]))
        except LangDetectException as e:
            logger.warning("Language detection failed: %s", e)
            return self.working_language

    def translate(self, text: str, target_language: str) -> str:
        """Translate text into target_language; the original text on any failure."""
        target_language = standardise_lang_code(target_language)
        if not text or not text.strip():
            return text
        try:
            translated = self.client.generate_answer(
                TRANSLATE_PROMPT.format(target=target_language, text=text),
                temperature=0.0,
                timeout=self.timeout,
            )
        except UpstreamServiceError as e:
            logger.warning("Translation to %s failed, keeping original text: %s", target_language, e)
            return text
        translated = translated.strip()
        if not translated:
            return text
        return translated

    def to_working_language(self, text: str, source_language: str) -> str:
        if standardise_lang_code(source_language) == self.working_language:
            return text
        return self.translate(text, self.working_language)

    def from_working_language(self, text: str, target_language: str) -> str:
        if standardise_lang_code(target_language) == self.working_language:
            return text
        return self.translate(text, target_language)
