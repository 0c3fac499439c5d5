"""AI analysis of an aggregated judge profile.

``JudgeAnalyzer.run`` returns one of three tagged outcomes:

``Validated``
    The model answered with a JSON object carrying every required field.
``StructuredFallback``
    The model answered, but not with usable JSON.  The analysis is rebuilt
    from upstream data and the raw text is kept (truncated) as the summary.
    Still ``success=True``.
``Fallback``
    The model call itself failed (timeout, auth, quota, empty reply).  A
    minimal analysis is built from upstream data with ``success=False``.

The analyzer never raises for model problems; callers read ``success`` to
tell a full analysis from a degraded one.
"""
import json
import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Callable, ClassVar, List, Optional

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from pydantic import ValidationError

from judgedex.judges.profile import AggregatedProfile, determine_tier, years_of_service
from judgedex.judges.prompts import JUDGE_ANALYSIS_USER_PROMPT, JUDGE_ANALYST_SYSTEM_PROMPT
from judgedex.judges.schemas import (
    REQUIRED_ANALYSIS_FIELDS,
    AIAnalysis,
    RecentCase,
    RulingTendency,
)

logger = logging.getLogger(__name__)

OPINION_TEXT_PROMPT_CHARS = 1000
SUMMARY_CHARS = 500
CASE_DESCRIPTION_CHARS = 200
FALLBACK_CASES = 5

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


class OutcomeKind(str, Enum):
    VALIDATED = "validated"
    STRUCTURED_FALLBACK = "structured_fallback"
    FALLBACK = "fallback"


@dataclass
class AnalysisOutcome:
    analysis: AIAnalysis
    kind: ClassVar[OutcomeKind]


@dataclass
class Validated(AnalysisOutcome):
    kind: ClassVar[OutcomeKind] = OutcomeKind.VALIDATED


@dataclass
class StructuredFallback(AnalysisOutcome):
    raw_text: str = ""
    reason: str = ""
    kind: ClassVar[OutcomeKind] = OutcomeKind.STRUCTURED_FALLBACK


@dataclass
class Fallback(AnalysisOutcome):
    reason: str = ""
    kind: ClassVar[OutcomeKind] = OutcomeKind.FALLBACK


class AnalysisSchemaError(ValueError):
    def __init__(self, missing: List[str]):
        self.missing = missing
        super().__init__(f"Missing required fields: {', '.join(missing)}")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _content_text(content: Any) -> str:
    # Anthropic returns a list of content blocks; OpenAI and Ollama a plain string.
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(
            block if isinstance(block, str) else block.get("text", "")
            for block in content
            if isinstance(block, (str, dict))
        )
    return str(content or "")


def parse_analysis(text: str) -> AIAnalysis:
    """Parse and validate the model's reply.

    Raises ``json.JSONDecodeError``, ``AnalysisSchemaError`` (every missing
    field listed at once) or ``pydantic.ValidationError``; all are
    ``ValueError`` subclasses.
    """
    stripped = text.strip()
    fenced = _FENCE_RE.match(stripped)
    if fenced:
        stripped = fenced.group(1)

    data = json.loads(stripped)
    if not isinstance(data, dict):
        raise AnalysisSchemaError(list(REQUIRED_ANALYSIS_FIELDS))

    missing = [name for name in REQUIRED_ANALYSIS_FIELDS if name not in data]
    if missing:
        raise AnalysisSchemaError(missing)
    return AIAnalysis.model_validate(data)


def _identity_fields(profile: AggregatedProfile, today: date) -> dict:
    position = profile.current_position
    alma_mater = next(
        (e.institution for e in profile.education if e.institution),
        "Unknown",
    )
    return dict(
        id=str(profile.judge.id),
        name=profile.judge.display_name,
        circuit=profile.court_name,
        tier=determine_tier(position.court_type if position else None),
        appointed_by="Unknown",
        years_of_service=years_of_service(position, today),
        alma_mater=alma_mater,
    )


def build_structured_analysis(profile: AggregatedProfile, raw_text: str, now: datetime) -> AIAnalysis:
    recent_cases = []
    for opinion in profile.opinions[:FALLBACK_CASES]:
        if opinion.plain_text:
            description = opinion.plain_text[:CASE_DESCRIPTION_CHARS] + "..."
        else:
            description = "No description available"
        recent_cases.append(RecentCase(
            id=opinion.id,
            title=f"Case {opinion.id}",
            date=opinion.date_filed,
            description=description,
        ))

    return AIAnalysis(
        **_identity_fields(profile, now.date()),
        ruling_tendencies=[
            RulingTendency(category="General", percentage=50, description="Based on available data"),
        ],
        recent_cases=recent_cases,
        summary=raw_text[:SUMMARY_CHARS] + "...",
        courtroom_expectations="Expectations based on available data",
        success=True,
        last_updated=now.isoformat(),
    )


def build_fallback_analysis(profile: AggregatedProfile, now: datetime) -> AIAnalysis:
    return AIAnalysis(
        **_identity_fields(profile, now.date()),
        ruling_tendencies=[
            RulingTendency(category="General", percentage=50, description="Analysis unavailable"),
        ],
        recent_cases=[],
        summary="Analysis temporarily unavailable. Please try again later.",
        courtroom_expectations="Unable to provide expectations at this time.",
        success=False,
        last_updated=now.isoformat(),
    )


class JudgeAnalyzer:
    def __init__(self, llm: Any, clock: Callable[[], datetime] = _utcnow):
        self.llm = llm
        self._clock = clock

    async def analyze(self, profile: AggregatedProfile) -> AIAnalysis:
        outcome = await self.run(profile)
        return outcome.analysis

    async def run(self, profile: AggregatedProfile) -> AnalysisOutcome:
        messages = self.compose(profile)

        try:
            response = await self.llm.ainvoke(messages)
            text = _content_text(response.content)
            if not text.strip():
                raise ValueError("No response from model")
        except Exception as e:
            logger.warning("AI analysis failed for judge %s, using fallback: %s", profile.judge.id, e)
            return Fallback(build_fallback_analysis(profile, self._clock()), reason=str(e))

        return self.interpret(text, profile)

    def interpret(self, text: str, profile: AggregatedProfile) -> AnalysisOutcome:
        try:
            return Validated(parse_analysis(text))
        except (ValueError, ValidationError) as e:
            logger.warning("AI analysis for judge %s was not usable JSON (%s), building structured response", profile.judge.id, e)
            return StructuredFallback(
                build_structured_analysis(profile, text, self._clock()),
                raw_text=text,
                reason=str(e),
            )

    def compose(self, profile: AggregatedProfile) -> List[BaseMessage]:
        return [
            SystemMessage(content=JUDGE_ANALYST_SYSTEM_PROMPT),
            HumanMessage(content=self.build_user_prompt(profile)),
        ]

    def build_user_prompt(self, profile: AggregatedProfile, timestamp: Optional[str] = None) -> str:
        positions = [p.model_dump(mode="json", exclude_none=True) for p in profile.positions]
        opinions = []
        for opinion in profile.opinions:
            item = opinion.model_dump(mode="json", exclude_none=True)
            if opinion.plain_text:
                item["plain_text"] = opinion.plain_text[:OPINION_TEXT_PROMPT_CHARS]
            opinions.append(item)

        supplementary = []
        if profile.education:
            education = [e.model_dump(mode="json", exclude_none=True) for e in profile.education]
            supplementary.append(f"Education: {json.dumps(education)}")
        if profile.aba_ratings:
            ratings = [r.model_dump(mode="json", exclude_none=True) for r in profile.aba_ratings]
            supplementary.append(f"ABA Ratings: {json.dumps(ratings)}")

        return JUDGE_ANALYSIS_USER_PROMPT.format(
            name=profile.judge.display_name,
            judge_id=profile.judge.id,
            positions=json.dumps(positions),
            opinions=json.dumps(opinions),
            supplementary="".join(line + "\n" for line in supplementary),
            timestamp=timestamp or self._clock().isoformat(),
        )
