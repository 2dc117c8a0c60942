"""
Groq completion client

Two stateless calls, one for profile analysis and one for question
generation. Raw model text is returned; parsing lives in response_parser.
"""
import logging
from typing import List, Optional

import groq
from groq import Groq

from talenthub.config import settings
from talenthub.core.listing_formatter import Listing, format_listing_summary
from talenthub.core.prompts import (
    ANALYSIS_SYSTEM_PROMPT,
    QUESTIONS_SYSTEM_PROMPT,
    build_analysis_prompt,
    build_questions_prompt,
)
from talenthub.exceptions import AIServiceUnavailableError

logger = logging.getLogger(__name__)


class CompletionClient:
    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None, client=None):
        self.api_key = api_key if api_key is not None else settings.GROQ_API_KEY
        self.model = model or settings.GROQ_MODEL
        self._client = client

    @property
    def is_configured(self) -> bool:
        return self._client is not None or bool(self.api_key)

    def _get_client(self):
        if self._client is None:
            if not self.api_key:
                raise AIServiceUnavailableError("AI service not configured")
            self._client = Groq(api_key=self.api_key, timeout=settings.GROQ_TIMEOUT_SECONDS)
        return self._client

    def _complete(self, system_prompt: str, user_prompt: str, temperature: float, max_tokens: int) -> str:
        client = self._get_client()
        try:
            response = client.chat.completions.create(
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                model=self.model,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except groq.APIError as e:
            logger.error(f"Groq completion failed: {e}")
            raise AIServiceUnavailableError("AI service unavailable") from e

        choices = getattr(response, 'choices', None) or []
        if not choices:
            return ""
        return choices[0].message.content or ""

    def analyze_profile(self, listing: Listing, listing_text: str, candidate_text: str) -> str:
        logger.info(f"Requesting profile analysis for {listing.kind} {listing.id}")
        return self._complete(
            ANALYSIS_SYSTEM_PROMPT,
            build_analysis_prompt(listing.kind, listing_text, candidate_text),
            temperature=settings.ANALYSIS_TEMPERATURE,
            max_tokens=settings.ANALYSIS_MAX_TOKENS,
        )

    def generate_questions(self, listing: Listing, weaknesses: List[str]) -> str:
        logger.info(f"Requesting interview questions for {listing.kind} {listing.id}")
        return self._complete(
            QUESTIONS_SYSTEM_PROMPT,
            build_questions_prompt(
                listing.kind,
                format_listing_summary(listing),
                weaknesses,
                count=settings.QUESTION_COUNT,
            ),
            temperature=settings.QUESTIONS_TEMPERATURE,
            max_tokens=settings.QUESTIONS_MAX_TOKENS,
        )
