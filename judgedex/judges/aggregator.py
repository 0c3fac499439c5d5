"""Fan-in of the CourtListener lookups that make up one judge profile.

All sub-fetches are issued together and joined all-settled: every outcome is
observed, none short-circuits the others.  The identity fetch gates the
result; the rest degrade to an empty list at the join.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Dict, Optional

from judgedex.core.exceptions import (
    CourtListenerAuthFailed,
    JudgeNotFound,
    ServiceConfigurationError,
)
from judgedex.courtlistener.client import CourtListenerClient
from judgedex.judges.profile import AggregatedProfile

logger = logging.getLogger(__name__)


@dataclass
class FetchOutcome:
    name: str
    value: Any = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def or_default(self, default: Any) -> Any:
        return self.value if self.ok else default


async def gather_outcomes(fetches: Dict[str, Awaitable[Any]]) -> Dict[str, FetchOutcome]:
    names = list(fetches)
    results = await asyncio.gather(*fetches.values(), return_exceptions=True)

    outcomes = {}
    for name, result in zip(names, results):
        if isinstance(result, BaseException):
            if isinstance(result, asyncio.CancelledError):
                raise result
            outcomes[name] = FetchOutcome(name, error=result)
        else:
            outcomes[name] = FetchOutcome(name, value=result)
    return outcomes


class JudgeAggregator:
    def __init__(self, client: CourtListenerClient, opinions_limit: int = 10):
        self.client = client
        self.opinions_limit = opinions_limit

    async def aggregate(self, judge_id: str, enhanced: bool = False) -> AggregatedProfile:
        fetches: Dict[str, Awaitable[Any]] = {
            "judge": self.client.get_person(judge_id),
            "positions": self.client.list_positions(judge_id),
            "opinions": self.client.list_opinions(judge_id, self.opinions_limit),
        }
        if enhanced:
            fetches["education"] = self.client.list_education(judge_id)
            fetches["aba_ratings"] = self.client.list_aba_ratings(judge_id)

        outcomes = await gather_outcomes(fetches)
        judge = self._require_identity(judge_id, outcomes["judge"])

        return AggregatedProfile(
            judge=judge,
            **{
                name: self._degrade(judge_id, outcome)
                for name, outcome in outcomes.items()
                if name != "judge"
            },
        )

    async def basic(self, judge_id: str) -> AggregatedProfile:
        outcomes = await gather_outcomes({
            "judge": self.client.get_person(judge_id),
            "positions": self.client.list_positions(judge_id),
        })
        judge = self._require_identity(judge_id, outcomes["judge"])
        return AggregatedProfile(judge=judge, positions=self._degrade(judge_id, outcomes["positions"]))

    def _require_identity(self, judge_id: str, outcome: FetchOutcome):
        if outcome.ok:
            return outcome.value

        error = outcome.error
        if isinstance(error, CourtListenerAuthFailed):
            logger.error("CourtListener rejected our credentials while fetching judge %s", judge_id)
            raise ServiceConfigurationError() from error

        logger.warning("Identity fetch failed for judge %s: %s", judge_id, error)
        raise JudgeNotFound() from error

    def _degrade(self, judge_id: str, outcome: FetchOutcome) -> list:
        if not outcome.ok:
            logger.warning("Fetching %s for judge %s failed, continuing without it: %s", outcome.name, judge_id, outcome.error)
        return outcome.or_default([])
