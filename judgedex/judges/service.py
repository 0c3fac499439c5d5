import asyncio
import logging
import re
from typing import Any, Callable, Dict, Optional

from judgedex.core.exceptions import (
    InvalidJudgeId,
    JudgeNotFound,
    ServiceConfigurationError,
)
from judgedex.courtlistener.client import CourtListenerClient
from judgedex.courtlistener.schemas import Page, Person, SearchFilters
from judgedex.judges.aggregator import JudgeAggregator
from judgedex.judges.analyzer import JudgeAnalyzer
from judgedex.judges.schemas import (
    AIAnalysis,
    BasicJudgeInfo,
    CourtListResponse,
    JudgeRecord,
    JudgeSearchResponse,
    JudgeWithPositions,
)

logger = logging.getLogger(__name__)

# ASCII digits only.
NUMERIC_ID_RE = re.compile(r"[0-9]+")


def is_numeric_id(value: str) -> bool:
    return bool(value) and NUMERIC_ID_RE.fullmatch(value) is not None


class JudgeProfileService:
    def __init__(
        self,
        client: CourtListenerClient,
        analyzer_factory: Callable[[], JudgeAnalyzer],
        opinions_limit: int = 10,
    ):
        self.client = client
        self.aggregator = JudgeAggregator(client, opinions_limit=opinions_limit)
        self._analyzer_factory = analyzer_factory

    @staticmethod
    def validate_judge_id(judge_id: str) -> bool:
        return is_numeric_id(judge_id)

    def _check_judge_id(self, judge_id: str) -> None:
        if not self.validate_judge_id(judge_id):
            raise InvalidJudgeId()

    def _require_token(self) -> None:
        if not self.client.token:
            logger.error("CourtListener token not configured")
            raise ServiceConfigurationError()

    async def get_judge_profile(self, judge_id: str) -> AIAnalysis:
        """Full AI-enriched profile. Checks run before any upstream I/O."""
        self._check_judge_id(judge_id)
        self._require_token()
        analyzer = self._analyzer_factory()

        profile = await self.aggregator.aggregate(judge_id, enhanced=True)
        return await analyzer.analyze(profile)

    async def get_basic_judge_info(self, judge_id: str) -> BasicJudgeInfo:
        self._check_judge_id(judge_id)
        self._require_token()

        profile = await self.aggregator.basic(judge_id)
        return BasicJudgeInfo(
            id=profile.judge.id,
            name=profile.judge.display_name,
            court=profile.court_name,
            positions=profile.positions,
        )

    async def get_judge_record(self, judge_id: str) -> JudgeRecord:
        self._check_judge_id(judge_id)

        profile = await self.aggregator.aggregate(judge_id, enhanced=True)
        return JudgeRecord(
            judge=profile.judge,
            positions=profile.positions,
            opinions=profile.opinions[:5],
            education=profile.education,
            aba_ratings=profile.aba_ratings,
        )

    async def search_judges(
        self,
        query: str,
        filters: Optional[SearchFilters] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> JudgeSearchResponse:
        page = await self.client.search_people(query, filters, limit, offset)
        logger.info("CourtListener search for %r returned %d of %d judges", query, len(page.results), page.count)
        return JudgeSearchResponse(
            judges=await self._with_positions(page),
            total=page.count,
            next=page.next,
            previous=page.previous,
        )

    async def _with_positions(self, page: Page[Person]) -> list[Dict[str, Any]]:
        # list_positions soft-fails, so one judge's failure leaves the others intact.
        positions = await asyncio.gather(*(self.client.list_positions(j.id) for j in page.results))
        return [
            {**judge.model_dump(mode="json"), "positions": [p.model_dump(mode="json") for p in judge_positions]}
            for judge, judge_positions in zip(page.results, positions)
        ]

    async def get_judge_by_slug(self, slug: str) -> JudgeWithPositions:
        judge = await self.client.get_person_by_slug(slug)
        if judge is None:
            raise JudgeNotFound()
        positions = await self.client.list_positions(judge.id)
        return JudgeWithPositions(judge=judge, positions=positions)

    async def list_courts(self) -> CourtListResponse:
        page = await self.client.list_courts()
        return CourtListResponse(**page.model_dump())

    async def search_by_court(self, court_id: int, limit: int = 20) -> JudgeSearchResponse:
        page = await self.client.search_people_by_court(court_id, limit)
        return JudgeSearchResponse(
            judges=[j.model_dump(mode="json") for j in page.results],
            total=page.count,
            next=page.next,
            previous=page.previous,
        )

    async def clear_cache(self) -> None:
        await self.client.clear_cache()
