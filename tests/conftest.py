import json
from copy import deepcopy
from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from langchain_core.messages import AIMessage

from judgedex.config import settings
from judgedex.core.cache import InMemoryResponseCache
from judgedex.core.rate_limit import RateLimiter, judge_profile_limiter
from judgedex.courtlistener.client import CourtListenerClient
from judgedex.judges.analyzer import JudgeAnalyzer
from judgedex.judges.dependencies import get_profile_service
from judgedex.judges.service import JudgeProfileService
from judgedex.main import app

BASE_URL = "https://courtlistener.test"

PERSON = {
    "id": 12345,
    "resource_uri": f"{BASE_URL}/people/12345/",
    "name_first": "Jane",
    "name_middle": "",
    "name_last": "Doe",
    "name_suffix": "",
    "slug": "jane-doe",
    "date_dob": "1960-04-02",
    "date_dod": None,
    "gender": "f",
    "has_photo": True,
    "fjc_id": 3000,
    "is_alias_of": None,
    "date_created": "2015-01-01T00:00:00Z",
    "date_modified": "2024-06-01T12:30:00Z",
}

POSITIONS = [
    {
        "id": 1,
        "position_type": "jud",
        "court_name": "Court of Appeals for the Ninth Circuit",
        "court_type": "Federal Appellate",
        "date_start": "2010-01-04",
        "date_termination": None,
    },
    {
        "id": 2,
        "position_type": "jud",
        "court_name": "Superior Court of California",
        "court_type": "State Trial",
        "date_start": "2001-03-01",
        "date_termination": "2009-12-31",
    },
]

OPINIONS = [
    {"id": 100 + i, "type": "010combined", "plain_text": f"Opinion {i} " + "x" * 1500, "date_filed": f"2023-0{i + 1}-15"}
    for i in range(7)
]

EDUCATION = [{"id": 9, "school_name": "Harvard Law School", "degree": "JD", "degree_year": 1985}]

ABA_RATINGS = [{"id": 4, "rating": "wq", "year_rated": 2009}]

VALID_ANALYSIS = {
    "id": "12345",
    "name": "Jane Doe",
    "circuit": "Court of Appeals for the Ninth Circuit",
    "tier": "federal",
    "appointedBy": "Barack Obama",
    "yearsOfService": "16 years",
    "almaMater": "Harvard Law School",
    "rulingTendencies": [
        {"category": "Civil Procedure", "percentage": 65, "description": "Strict on pleading standards."},
    ],
    "recentCases": [
        {"id": 100, "title": "Doe v. Roe", "date": "2023-01-15", "description": "Affirmed dismissal."},
    ],
    "summary": "A measured appellate judge.",
    "courtroomExpectations": "Expect pointed questions on standing.",
    "success": True,
    "lastUpdated": "2026-01-01T00:00:00+00:00",
}


def page(results, next_url=None):
    return {"count": len(results), "next": next_url, "previous": None, "results": results}


def default_routes():
    return {
        "/people/12345/": (200, PERSON),
        "/people/12345/positions/": (200, page(POSITIONS)),
        "/people/12345/opinions/": (200, page(OPINIONS)),
        "/educations/": (200, page(EDUCATION)),
        "/aba-ratings/": (200, page(ABA_RATINGS)),
        "/people/": (200, page([PERSON])),
        "/courts/": (200, page([{"id": "ca9", "full_name": "Court of Appeals for the Ninth Circuit", "jurisdiction": "F"}])),
    }


class FakeCourtListener:
    """MockTransport handler serving canned CourtListener responses by path.

    A route is either ``(status, json_body)`` or a callable taking the
    request. Unknown paths answer 404 the way CourtListener does.
    """

    def __init__(self, routes=None):
        self.routes = deepcopy(routes) if routes is not None else default_routes()
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"detail": "Not found."})
        if callable(route):
            return route(request)
        status, body = route
        return httpx.Response(status, json=body)

    @property
    def paths(self):
        return [r.url.path for r in self.requests]


class FakeClock:
    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StubLLM:
    """Chat model double: answers with fixed content or raises."""

    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    async def ainvoke(self, messages):
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return AIMessage(content=self.content)


@pytest.fixture
def upstream():
    return FakeCourtListener()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return InMemoryResponseCache(clock=clock)


@pytest_asyncio.fixture
async def cl_client(upstream, cache) -> AsyncGenerator[CourtListenerClient, None]:
    client = CourtListenerClient(
        base_url=BASE_URL,
        token="test-token",
        cache=cache,
        transport=httpx.MockTransport(upstream),
    )
    yield client
    await client.aclose()


@pytest.fixture
def llm():
    return StubLLM(content=json.dumps(VALID_ANALYSIS))


@pytest.fixture
def service(cl_client, llm):
    return JudgeProfileService(cl_client, analyzer_factory=lambda: JudgeAnalyzer(llm))


@pytest.fixture
def profile_limiter():
    """Fresh per-test limiter standing in for the process-wide one."""
    return RateLimiter(settings.JUDGE_PROFILE_RATE_LIMIT, scope="judge-profile")


@pytest_asyncio.fixture
async def async_client(service, profile_limiter) -> AsyncGenerator[AsyncClient, None]:
    """Client for testing API endpoints against the fake upstream."""
    app.dependency_overrides[get_profile_service] = lambda: service
    app.dependency_overrides[judge_profile_limiter] = profile_limiter

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
