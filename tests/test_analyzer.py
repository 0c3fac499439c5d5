"""Tests for the judge analyzer and its three outcomes."""
import json
from datetime import datetime, timezone

import pytest
from langchain_core.messages import HumanMessage, SystemMessage

from judgedex.courtlistener.schemas import ABARating, Education, Opinion, Person, Position
from judgedex.judges.analyzer import (
    AnalysisSchemaError,
    Fallback,
    JudgeAnalyzer,
    OutcomeKind,
    StructuredFallback,
    Validated,
    parse_analysis,
)
from judgedex.judges.profile import AggregatedProfile
from judgedex.judges.schemas import REQUIRED_ANALYSIS_FIELDS

from tests.conftest import ABA_RATINGS, EDUCATION, OPINIONS, PERSON, POSITIONS, VALID_ANALYSIS, StubLLM

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_profile(**overrides):
    fields = dict(
        judge=Person.model_validate(PERSON),
        positions=[Position.model_validate(p) for p in POSITIONS],
        opinions=[Opinion.model_validate(o) for o in OPINIONS],
        education=[Education.model_validate(e) for e in EDUCATION],
        aba_ratings=[ABARating.model_validate(r) for r in ABA_RATINGS],
    )
    fields.update(overrides)
    return AggregatedProfile(**fields)


def make_analyzer(content=None, error=None):
    llm = StubLLM(content=content, error=error)
    return JudgeAnalyzer(llm, clock=lambda: NOW), llm


def wire(analysis):
    return analysis.model_dump(by_alias=True)


# ---------------------------------------------------------------------------
# parse_analysis
# ---------------------------------------------------------------------------

class TestParseAnalysis:
    def test_valid_object(self):
        analysis = parse_analysis(json.dumps(VALID_ANALYSIS))
        assert analysis.appointed_by == "Barack Obama"
        assert analysis.ruling_tendencies[0].percentage == 65

    def test_markdown_fence_stripped(self):
        text = "```json\n" + json.dumps(VALID_ANALYSIS) + "\n```"
        assert parse_analysis(text).name == "Jane Doe"

    def test_numeric_id_coerced_to_string(self):
        data = dict(VALID_ANALYSIS, id=12345)
        assert parse_analysis(json.dumps(data)).id == "12345"

    def test_every_missing_field_reported(self):
        data = {k: v for k, v in VALID_ANALYSIS.items() if k not in ("almaMater", "summary")}
        with pytest.raises(AnalysisSchemaError) as exc_info:
            parse_analysis(json.dumps(data))
        assert exc_info.value.missing == ["almaMater", "summary"]

    def test_non_object_rejected(self):
        with pytest.raises(AnalysisSchemaError):
            parse_analysis("[1, 2, 3]")

    def test_not_json(self):
        with pytest.raises(ValueError):
            parse_analysis("The judge is fair.")


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------

class TestRun:
    @pytest.mark.asyncio
    async def test_validated(self):
        analyzer, _ = make_analyzer(content=json.dumps(VALID_ANALYSIS))
        outcome = await analyzer.run(make_profile())

        assert isinstance(outcome, Validated)
        assert outcome.kind is OutcomeKind.VALIDATED
        assert wire(outcome.analysis) == VALID_ANALYSIS

    @pytest.mark.asyncio
    async def test_prose_reply_becomes_structured_fallback(self):
        prose = "Judge Doe is known for careful opinions. " * 30
        analyzer, _ = make_analyzer(content=prose)
        outcome = await analyzer.run(make_profile())

        assert isinstance(outcome, StructuredFallback)
        analysis = outcome.analysis
        assert analysis.success is True
        assert analysis.summary == prose[:500] + "..."
        assert analysis.id == "12345"
        assert analysis.name == "Jane Doe"
        assert analysis.circuit == "Court of Appeals for the Ninth Circuit"
        assert analysis.tier == "federal"
        assert analysis.alma_mater == "Harvard Law School"
        assert analysis.appointed_by == "Unknown"
        assert analysis.years_of_service == "16 years"
        assert analysis.last_updated == NOW.isoformat()

    @pytest.mark.asyncio
    async def test_structured_fallback_recent_cases(self):
        analyzer, _ = make_analyzer(content="not json")
        analysis = (await analyzer.run(make_profile())).analysis

        assert len(analysis.recent_cases) == 5
        case = analysis.recent_cases[0]
        assert case.title == "Case 100"
        assert case.date == "2023-01-15"
        assert case.description == OPINIONS[0]["plain_text"][:200] + "..."
        assert analysis.ruling_tendencies[0].description == "Based on available data"

    @pytest.mark.asyncio
    async def test_opinion_without_text(self):
        profile = make_profile(opinions=[Opinion(id=1, plain_text="")])
        analyzer, _ = make_analyzer(content="not json")
        analysis = (await analyzer.run(profile)).analysis
        assert analysis.recent_cases[0].description == "No description available"

    @pytest.mark.asyncio
    async def test_missing_field_becomes_structured_fallback(self):
        data = {k: v for k, v in VALID_ANALYSIS.items() if k != "courtroomExpectations"}
        analyzer, _ = make_analyzer(content=json.dumps(data))
        outcome = await analyzer.run(make_profile())

        assert isinstance(outcome, StructuredFallback)
        assert "courtroomExpectations" in outcome.reason

    @pytest.mark.asyncio
    async def test_model_timeout_becomes_fallback(self):
        analyzer, _ = make_analyzer(error=TimeoutError("model timed out"))
        outcome = await analyzer.run(make_profile())

        assert isinstance(outcome, Fallback)
        analysis = outcome.analysis
        assert analysis.success is False
        assert analysis.recent_cases == []
        assert analysis.summary == "Analysis temporarily unavailable. Please try again later."
        assert analysis.courtroom_expectations == "Unable to provide expectations at this time."
        assert analysis.ruling_tendencies[0].description == "Analysis unavailable"
        assert analysis.name == "Jane Doe"

    @pytest.mark.asyncio
    async def test_empty_reply_becomes_fallback(self):
        analyzer, _ = make_analyzer(content="   ")
        assert isinstance(await analyzer.run(make_profile()), Fallback)

    @pytest.mark.asyncio
    async def test_content_blocks_joined(self):
        blocks = [{"type": "text", "text": json.dumps(VALID_ANALYSIS)}]
        analyzer, _ = make_analyzer(content=blocks)
        assert isinstance(await analyzer.run(make_profile()), Validated)

    @pytest.mark.asyncio
    async def test_every_outcome_is_schema_complete(self):
        for analyzer, _ in (
            make_analyzer(content=json.dumps(VALID_ANALYSIS)),
            make_analyzer(content="prose"),
            make_analyzer(error=RuntimeError("quota")),
        ):
            analysis = await analyzer.analyze(make_profile())
            assert set(wire(analysis)) == set(REQUIRED_ANALYSIS_FIELDS)

    @pytest.mark.asyncio
    async def test_no_education_means_unknown_alma_mater(self):
        analyzer, _ = make_analyzer(error=RuntimeError("down"))
        analysis = await analyzer.analyze(make_profile(education=[], positions=[]))
        assert analysis.alma_mater == "Unknown"
        assert analysis.tier == "unknown"
        assert analysis.years_of_service == "Unknown"
        assert analysis.circuit == "Unknown Court"


# ---------------------------------------------------------------------------
# Prompt
# ---------------------------------------------------------------------------

class TestPrompt:
    def test_messages(self):
        analyzer, _ = make_analyzer()
        messages = analyzer.compose(make_profile())
        assert isinstance(messages[0], SystemMessage)
        assert isinstance(messages[1], HumanMessage)

    def test_opinion_text_truncated(self):
        analyzer, _ = make_analyzer()
        prompt = analyzer.build_user_prompt(make_profile())
        assert OPINIONS[0]["plain_text"][:1000] in prompt
        assert OPINIONS[0]["plain_text"][:1001] not in prompt

    def test_supplementary_sections(self):
        analyzer, _ = make_analyzer()
        prompt = analyzer.build_user_prompt(make_profile(), timestamp="T0")
        assert "Education: " in prompt
        assert "ABA Ratings: " in prompt
        assert '"id": "12345"' in prompt
        assert '"lastUpdated": "T0"' in prompt

    def test_supplementary_sections_omitted_when_empty(self):
        analyzer, _ = make_analyzer()
        prompt = analyzer.build_user_prompt(make_profile(education=[], aba_ratings=[]))
        assert "Education:" not in prompt
        assert "ABA Ratings:" not in prompt

    @pytest.mark.asyncio
    async def test_prompt_sent_to_model(self):
        analyzer, llm = make_analyzer(content=json.dumps(VALID_ANALYSIS))
        await analyzer.run(make_profile())
        assert "Name: Jane Doe" in llm.calls[0][1].content
