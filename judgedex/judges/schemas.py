from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from judgedex.courtlistener.schemas import (
    ABARating,
    Court,
    Education,
    Opinion,
    Person,
    Position,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RulingTendency(CamelModel):
    category: str
    percentage: Union[int, float]
    description: str


class RecentCase(CamelModel):
    id: Any
    title: str
    date: Optional[str] = None
    description: str


class AIAnalysis(CamelModel):
    """Enriched judge profile returned to clients.

    Always schema-complete.  ``success`` is false when the model could not be
    reached and the payload was assembled from upstream data alone.
    """

    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    name: str
    circuit: str
    tier: str
    appointed_by: str
    years_of_service: str
    alma_mater: str
    ruling_tendencies: List[RulingTendency]
    recent_cases: List[RecentCase]
    summary: str
    courtroom_expectations: str
    success: bool
    last_updated: str


# Wire names the model must return; checked before pydantic validation so a
# missing key is reported by name.
REQUIRED_ANALYSIS_FIELDS = tuple(
    field.alias or name for name, field in AIAnalysis.model_fields.items()
)


class BasicJudgeInfo(BaseModel):
    id: int
    name: str
    court: str
    positions: List[Position]
    success: bool = True


class JudgeRecord(CamelModel):
    judge: Person
    positions: List[Position] = Field(default_factory=list)
    opinions: List[Opinion] = Field(default_factory=list)
    education: List[Education] = Field(default_factory=list)
    aba_ratings: List[ABARating] = Field(default_factory=list)


class JudgeWithPositions(BaseModel):
    judge: Person
    positions: List[Position] = Field(default_factory=list)


class JudgeSearchResponse(BaseModel):
    judges: List[Dict[str, Any]]
    total: int = 0
    next: Optional[str] = None
    previous: Optional[str] = None


class CourtListResponse(BaseModel):
    count: int = 0
    next: Optional[str] = None
    previous: Optional[str] = None
    results: List[Court] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str
    service: str
    timestamp: str


class ErrorResponse(BaseModel):
    error: str
    message: str
    success: bool = False
