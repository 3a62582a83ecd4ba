# ai.py
"""
AI layer (max 50 points).

Providers expose a single capability, ``complete(prompt) -> text``; the
classifier builds the prompt, calls the provider and turns the free text
into an intent label and points.
"""
import logging
import re
import textwrap
from typing import Dict, Optional, Protocol

import google.generativeai as genai
from openai import AsyncOpenAI

from config import Settings
from exceptions import ProviderConfigurationError
from models import AIClassification, Intent, Lead, Offer

logger = logging.getLogger(__name__)

DEFAULT_SCORE_TABLE = {"High": 50, "Medium": 30, "Low": 10}

_INTENT_RE = re.compile(r"(high|medium|low)", re.IGNORECASE)


class IntentProvider(Protocol):
    name: str

    async def complete(self, prompt: str) -> str:
        ...


class OpenAIProvider:
    name = "openai"

    def __init__(self, api_key: str, model: str = "gpt-4o-mini", temperature: float = 0.3, max_tokens: int = 200):
        self._client = AsyncOpenAI(api_key=api_key)
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        logger.info(f"OpenAI provider initialized: {model}")

    async def complete(self, prompt: str) -> str:
        try:
            resp = await self._client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except Exception as e:
            logger.error(f"OpenAI request failed: {e}")
            raise
        return resp.choices[0].message.content or ""


class GeminiProvider:
    name = "gemini"

    def __init__(self, api_key: str, model: str = "gemini-2.5-flash", temperature: float = 0.3, max_tokens: int = 200):
        genai.configure(api_key=api_key)
        self._model = genai.GenerativeModel(
            model_name=model,
            generation_config={"temperature": temperature, "max_output_tokens": max_tokens},
        )
        self.model = model
        logger.info(f"Gemini provider initialized: {model}")

    async def complete(self, prompt: str) -> str:
        try:
            response = await self._model.generate_content_async(prompt)
        except Exception as e:
            logger.error(f"Gemini request failed: {e}")
            raise
        return response.text


class MockProvider:
    """Offline provider for local development; must be selected explicitly."""

    name = "mock"

    _ROLE_RE = re.compile(r"role: (.*?), company:")
    _INDUSTRY_RE = re.compile(r"industry: (.*?), location:")

    async def complete(self, prompt: str) -> str:
        role = self._ROLE_RE.search(prompt)
        industry = self._INDUSTRY_RE.search(prompt)
        # label first so a role like "Fellow" cannot be read as the intent
        return (
            f"Medium. Mock: based on role {role.group(1) if role else 'unknown'} "
            f"and industry {industry.group(1) if industry else 'unknown'}."
        )


def build_provider(settings: Settings) -> IntentProvider:
    """Instantiate the provider named by AI_PROVIDER, or fail naming what is missing."""
    provider = settings.ai_provider.strip().lower()
    if provider == "openai":
        if not settings.openai_api_key:
            raise ProviderConfigurationError("AI_PROVIDER is 'openai' but OPENAI_API_KEY is not set")
        return OpenAIProvider(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            temperature=settings.ai_temperature,
            max_tokens=settings.ai_max_tokens,
        )
    if provider == "gemini":
        if not settings.gemini_api_key:
            raise ProviderConfigurationError("AI_PROVIDER is 'gemini' but GEMINI_API_KEY is not set")
        return GeminiProvider(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            temperature=settings.ai_temperature,
            max_tokens=settings.ai_max_tokens,
        )
    if provider == "mock":
        return MockProvider()
    raise ProviderConfigurationError(
        f"Unsupported AI_PROVIDER: {settings.ai_provider}. Use 'openai', 'gemini' or 'mock'"
    )


def build_intent_prompt(offer: Offer, lead: Lead) -> str:
    value_props = ", ".join(offer.value_props) or "N/A"
    use_cases = ", ".join(offer.ideal_use_cases) or "N/A"
    return textwrap.dedent(f"""\
    Analyze this B2B prospect's buying intent for our product.

    PRODUCT/OFFER: {offer.name} | Value props: {value_props} | Ideal use cases: {use_cases}
    PROSPECT: {lead.name}, role: {lead.role}, company: {lead.company}, industry: {lead.industry}, location: {lead.location}
    BIO: {lead.linkedin_bio}

    Classify intent (High/Medium/Low) with a short reasoning.""")


def parse_intent(raw: Optional[str], score_table: Optional[Dict[str, int]] = None) -> AIClassification:
    """First high/medium/low in the text wins; Medium when none is found."""
    score_table = score_table or DEFAULT_SCORE_TABLE
    text = raw or ""
    m = _INTENT_RE.search(text)
    intent = Intent(m.group(1).capitalize()) if m else Intent.MEDIUM
    return AIClassification(
        intent=intent,
        score=score_table[intent.value],
        reasoning=text.strip(),
        raw=text,
    )


class IntentClassifier:
    def __init__(self, provider: IntentProvider, score_table: Optional[Dict[str, int]] = None):
        self.provider = provider
        self.score_table = score_table or DEFAULT_SCORE_TABLE

    async def classify(self, offer: Offer, lead: Lead) -> AIClassification:
        prompt = build_intent_prompt(offer, lead)
        raw = await self.provider.complete(prompt)
        return parse_intent(raw, self.score_table)
