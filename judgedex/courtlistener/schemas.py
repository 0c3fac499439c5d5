from datetime import date
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

T = TypeVar("T")


class CourtListenerRecord(BaseModel):
    """Base for upstream records: unknown fields are kept, blank dates read as None."""

    model_config = ConfigDict(extra="allow")

    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and value == "":
            return None
        return value


class Person(CourtListenerRecord):
    id: int
    name_full: Optional[str] = None
    name_first: Optional[str] = None
    name_middle: Optional[str] = None
    name_last: Optional[str] = None
    name_suffix: Optional[str] = None
    slug: Optional[str] = None
    date_dob: Optional[date] = None
    date_dod: Optional[date] = None
    gender: Optional[str] = None
    has_photo: Optional[bool] = False
    fjc_id: Optional[int] = None
    is_alias_of: Optional[Any] = None
    date_created: Optional[str] = None
    date_modified: Optional[str] = None
    resource_uri: Optional[str] = None

    @property
    def display_name(self) -> str:
        if self.name_full:
            return self.name_full
        parts = [self.name_first, self.name_middle, self.name_last, self.name_suffix]
        return " ".join(p for p in parts if p)


class Position(CourtListenerRecord):
    id: int
    position_type: Optional[str] = None
    job_title: Optional[str] = None
    court: Optional[Any] = None
    court_name: Optional[str] = None
    court_type: Optional[str] = None
    date_start: Optional[date] = None
    date_termination: Optional[date] = None
    appointer: Optional[Any] = None
    how_selected: Optional[str] = None


class Opinion(CourtListenerRecord):
    id: int
    type: Optional[str] = None
    plain_text: Optional[str] = None
    date_filed: Optional[str] = None
    absolute_url: Optional[str] = None
    author_str: Optional[str] = None
    per_curiam: Optional[bool] = False
    cluster: Optional[Any] = None


class Education(CourtListenerRecord):
    id: int
    school: Optional[Any] = None
    school_name: Optional[str] = None
    degree: Optional[str] = None
    degree_level: Optional[str] = None
    degree_year: Optional[int] = None

    @property
    def institution(self) -> Optional[str]:
        if self.school_name:
            return self.school_name
        if isinstance(self.school, dict):
            return self.school.get("name")
        return None


class ABARating(CourtListenerRecord):
    id: int
    rating: Optional[str] = None
    year_rated: Optional[int] = None
    date_created: Optional[str] = None


class Court(CourtListenerRecord):
    id: Any
    full_name: Optional[str] = None
    short_name: Optional[str] = None
    jurisdiction: Optional[str] = None


class Page(BaseModel, Generic[T]):
    count: int = 0
    next: Optional[str] = None
    previous: Optional[str] = None
    results: List[T] = Field(default_factory=list)


class SearchFilters(BaseModel):
    court_type: Optional[str] = None
    position_type: Optional[str] = None
    is_active: Optional[bool] = None
    state: Optional[str] = None
    has_photo: Optional[bool] = None
