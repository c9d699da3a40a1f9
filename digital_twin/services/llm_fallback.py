"""
Text generation with an ordered chain of LLM providers.

Ollama is tried first, then OpenAI, then Gemini. The first provider that
answers wins. If all of them fail, a static reply is returned so callers
always get text back. Provider health is probed on demand and returned to
the caller; nothing here keeps global state.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence, Tuple

import openai
import requests

from .. import config

logger = logging.getLogger(__name__)

STATIC_PROVIDER = "static"
STATIC_REPLY = "I'm having trouble reaching my language models right now. Please try again in a moment."

# Errors that mean "this provider failed, try the next one"
PROVIDER_ERRORS = (requests.RequestException, openai.OpenAIError, KeyError, IndexError, ValueError)


class ProviderUnavailable(Exception):
    """A provider is not configured and should be skipped."""


class LLMResult:
    def __init__(self, text: str, provider: str, errors: Optional[List[Tuple[str, str]]] = None):
        self.text = text
        self.provider = provider
        self.errors = errors or []

    @property
    def is_fallback(self) -> bool:
        return self.provider == STATIC_PROVIDER

    def __repr__(self):
        return f"LLMResult(provider={self.provider}, errors={len(self.errors)})"


class HealthStatus:
    def __init__(self, ollama: bool, checked_at: datetime, error: Optional[str] = None):
        self.ollama = ollama
        self.checked_at = checked_at
        self.error = error

    def to_dict(self) -> dict:
        return {
            "ollama": self.ollama,
            "checked_at": self.checked_at.isoformat(),
            "error": self.error,
        }


# ================================
# PROVIDERS
# ================================

def ollama_completion(prompt: str, system: Optional[str] = None) -> str:
    payload = {"model": config.OLLAMA_MODEL, "prompt": prompt, "stream": False}
    if system:
        payload["system"] = system
    response = requests.post(f"{config.OLLAMA_URL}/api/generate", json=payload, timeout=config.LLM_TIMEOUT_SECONDS)
    response.raise_for_status()
    text = response.json()["response"].strip()
    if not text:
        raise ValueError("Ollama returned an empty response")
    return text


def openai_completion(prompt: str, system: Optional[str] = None) -> str:
    if not config.OPENAI_API_KEY:
        raise ProviderUnavailable("OPENAI_API_KEY not set")
    client = openai.OpenAI(api_key=config.OPENAI_API_KEY, timeout=config.LLM_TIMEOUT_SECONDS)
    messages = []
    if system:
        messages.append({"role": "system", "content": system})
    messages.append({"role": "user", "content": prompt})
    response = client.chat.completions.create(
        model=config.OPENAI_MODEL,
        messages=messages,
        temperature=0.2,
    )
    message = response.choices[0].message.content
    if not message:
        raise ValueError("OpenAI returned an empty response")
    usage = response.usage
    if usage is not None:
        logger.info(f"OpenAI call used {usage.total_tokens} tokens ({usage.prompt_tokens} prompt, {usage.completion_tokens} completion)")
    return message.strip()


def gemini_completion(prompt: str, system: Optional[str] = None) -> str:
    if not config.GEMINI_API_KEY:
        raise ProviderUnavailable("GEMINI_API_KEY not set")
    url = f"https://generativelanguage.googleapis.com/v1beta/models/{config.GEMINI_MODEL}:generateContent"
    parts = [{"text": system}] if system else []
    parts.append({"text": prompt})
    response = requests.post(
        url,
        params={"key": config.GEMINI_API_KEY},
        json={"contents": [{"parts": parts}]},
        timeout=config.LLM_TIMEOUT_SECONDS,
    )
    response.raise_for_status()
    text = response.json()["candidates"][0]["content"]["parts"][0]["text"].strip()
    if not text:
        raise ValueError("Gemini returned an empty response")
    return text


Provider = Tuple[str, Callable[..., str]]

DEFAULT_PROVIDERS: List[Provider] = [
    ("ollama", ollama_completion),
    ("openai", openai_completion),
    ("gemini", gemini_completion),
]


# ================================
# FALLBACK CHAIN
# ================================

def generate_text(prompt: str, system: Optional[str] = None,
                  providers: Optional[Sequence[Provider]] = None) -> LLMResult:
    """Try each provider in order and return the first answer."""
    errors: List[Tuple[str, str]] = []
    for name, provider in (DEFAULT_PROVIDERS if providers is None else providers):
        try:
            text = provider(prompt, system)
        except ProviderUnavailable as e:
            logger.info(f"Skipping {name}: {e}")
            errors.append((name, str(e)))
            continue
        except PROVIDER_ERRORS as e:
            logger.warning(f"⚠️ {name} failed, trying next provider: {e}")
            errors.append((name, str(e)))
            continue
        logger.info(f"✅ Response generated by {name}")
        return LLMResult(text, name, errors)

    logger.error(f"❌ All LLM providers failed ({', '.join(name for name, _ in errors)}), using static reply")
    return LLMResult(STATIC_REPLY, STATIC_PROVIDER, errors)


def check_ollama(timeout: float = 5.0) -> HealthStatus:
    """Probe the Ollama server and report the result."""
    checked_at = datetime.now(timezone.utc).replace(tzinfo=None)
    try:
        response = requests.get(f"{config.OLLAMA_URL}/api/tags", timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        logger.warning(f"Ollama health check failed: {e}")
        return HealthStatus(ollama=False, checked_at=checked_at, error=str(e))
    return HealthStatus(ollama=True, checked_at=checked_at)
