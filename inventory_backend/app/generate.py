#!/usr/bin/env python3
"""
Generation module for the inventory chat assistant.

This module handles completions using the Gemini LLM API. Every call is
bounded by a timeout and every failure surfaces as UpstreamServiceError so
callers can degrade to a default instead of failing the request.
"""

import requests
from typing import Optional
from .config import Config
from ..utils.errors import UpstreamServiceError
from ..utils.logger import get_logger

logger = get_logger("generate")

class GenerationClient:
    """Client for generating answers using Gemini LLM API."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None,
                 timeout: Optional[float] = None, http=None):
        """Initialize the generation client."""
        self.api_key = api_key if api_key is not None else Config.GEMINI_API_KEY
        self.llm_model = model or Config.GEMINI_MODEL
        self.timeout = timeout or Config.LLM_TIMEOUT_SECONDS
        self.api_base_url = f"https://generativelanguage.googleapis.com/v1beta/models/{self.llm_model}:generateContent"
        self.http = http or requests.Session()

    @property
    def available(self) -> bool:
        return bool(self.api_key)

    def close(self):
        self.http.close()

    def generate_answer(self, prompt: str, json_mode: bool = False, temperature: float = 0.2,
                        max_output_tokens: Optional[int] = None, timeout: Optional[float] = None) -> str:
        """
        Generate an answer using the Gemini LLM.

        Args:
            prompt: Formatted prompt for the LLM
            json_mode: Ask the model for an application/json body
            temperature: Sampling temperature
            max_output_tokens: Output cap, defaults to Config.LLM_MAX_OUTPUT_TOKENS
            timeout: Seconds before the HTTP call is abandoned

        Returns:
            Generated answer text

        Raises:
            UpstreamServiceError: missing key, transport failure or malformed body
        """
        if not self.available:
            raise UpstreamServiceError("Gemini API key is not configured")

        generation_config = {
            "temperature": temperature,
            "maxOutputTokens": max_output_tokens or Config.LLM_MAX_OUTPUT_TOKENS,
        }
        if json_mode:
            generation_config["responseMimeType"] = "application/json"

        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": generation_config,
        }

        logger.debug("Sending request to Gemini model=%s prompt_length=%d json_mode=%s",
                     self.llm_model, len(prompt), json_mode)
        try:
            response = self.http.post(
                self.api_base_url,
                params={"key": self.api_key},
                json=payload,
                timeout=timeout or self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            status = getattr(getattr(e, "response", None), "status_code", None)
            logger.warning("Gemini request failed (status=%s): %s", status, e)
            raise UpstreamServiceError(f"Error generating answer: {e}") from e
        except ValueError as e:
            logger.warning("Gemini returned a non-JSON body: %s", e)
            raise UpstreamServiceError("Error parsing generation response") from e

        # Extract answer from Gemini response
        try:
            answer = data["candidates"][0]["content"]["parts"][0]["text"].strip()
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            logger.warning("Unexpected Gemini response structure: %s", data)
            raise UpstreamServiceError("Error parsing generation response") from e

        logger.debug("Extracted answer, length: %d", len(answer))
        return answer
