from __future__ import annotations

from typing import TYPE_CHECKING

from judgedex.config import settings
from judgedex.core.exceptions import ServiceConfigurationError

if TYPE_CHECKING:
    from langchain_core.language_models.chat_models import BaseChatModel

# Valid provider identifiers
VALID_PROVIDERS = ("openai", "anthropic", "ollama")

# Module-level cache, cleared on shutdown or when settings change in tests
_llm_cache: dict[str, BaseChatModel] = {}


def clear_llm_cache() -> None:
    """Drop the cached chat model so it is recreated on next call."""
    _llm_cache.clear()


def require_llm_credentials(provider: str | None = None) -> None:
    """Fail fast, before any upstream I/O, when the model cannot be reached."""
    provider = provider or settings.LLM_PROVIDER
    if provider == "openai" and not settings.OPENAI_API_KEY:
        raise ServiceConfigurationError("AI service configuration error")
    if provider == "anthropic" and not settings.ANTHROPIC_API_KEY:
        raise ServiceConfigurationError("AI service configuration error")
    if provider not in VALID_PROVIDERS:
        raise ServiceConfigurationError("AI service configuration error")


# ---------------------------------------------------------------------------
# Internal constructors (lazy imports to avoid hard dep on unused packages)
# ---------------------------------------------------------------------------

def _create_chat_model(
    provider: str,
    *,
    temperature: float,
    max_tokens: int,
    timeout: float,
    json_mode: bool = False,
) -> BaseChatModel:
    require_llm_credentials(provider)

    if provider == "openai":
        from langchain_openai import ChatOpenAI

        kwargs: dict = dict(
            model=settings.OPENAI_MODEL,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
            max_retries=0,
            api_key=settings.OPENAI_API_KEY,
        )
        if json_mode:
            kwargs["model_kwargs"] = {"response_format": {"type": "json_object"}}
        return ChatOpenAI(**kwargs)

    if provider == "anthropic":
        from langchain_anthropic import ChatAnthropic

        return ChatAnthropic(
            model=settings.ANTHROPIC_MODEL,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
            max_retries=0,
            api_key=settings.ANTHROPIC_API_KEY,
        )

    from langchain_ollama import ChatOllama

    kwargs = dict(
        base_url=settings.OLLAMA_BASE_URL,
        model=settings.OLLAMA_MODEL,
        temperature=temperature,
        num_predict=max_tokens,
        client_kwargs={"timeout": timeout},
    )
    if json_mode:
        kwargs["format"] = "json"
    return ChatOllama(**kwargs)


# ---------------------------------------------------------------------------
# Public factory functions
# ---------------------------------------------------------------------------

def get_analysis_llm() -> BaseChatModel:
    """Judge analysis engine. Fixed temperature and token budget, JSON output."""
    key = "analysis"
    if key not in _llm_cache:
        _llm_cache[key] = _create_chat_model(
            settings.LLM_PROVIDER,
            temperature=settings.LLM_TEMPERATURE,
            max_tokens=settings.LLM_MAX_TOKENS,
            timeout=settings.LLM_TIMEOUT,
            json_mode=True,
        )
    return _llm_cache[key]
