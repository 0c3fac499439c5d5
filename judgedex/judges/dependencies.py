"""Process-wide wiring for the judge routes.

The CourtListener client (and the response cache it owns) is created once
per process and closed by the app lifespan.  Tests replace
``get_profile_service`` through ``app.dependency_overrides``.
"""
from typing import Optional

from judgedex.config import settings
from judgedex.core.cache import build_response_cache
from judgedex.courtlistener.client import CourtListenerClient
from judgedex.judges.analyzer import JudgeAnalyzer
from judgedex.judges.service import JudgeProfileService
from judgedex.llm import get_analysis_llm

_client: Optional[CourtListenerClient] = None


def get_courtlistener_client() -> CourtListenerClient:
    global _client
    if _client is None:
        _client = CourtListenerClient(
            base_url=settings.COURTLISTENER_BASE_URL,
            token=settings.COURTLISTENER_TOKEN,
            cache=build_response_cache(settings),
            timeout=settings.COURTLISTENER_TIMEOUT,
        )
    return _client


async def close_courtlistener_client() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        if hasattr(_client.cache, "aclose"):
            await _client.cache.aclose()
        _client = None


def build_analyzer() -> JudgeAnalyzer:
    return JudgeAnalyzer(get_analysis_llm())


def get_profile_service() -> JudgeProfileService:
    return JudgeProfileService(
        client=get_courtlistener_client(),
        analyzer_factory=build_analyzer,
        opinions_limit=settings.COURTLISTENER_OPINIONS_LIMIT,
    )
