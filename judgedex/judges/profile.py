from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Sequence

from judgedex.courtlistener.schemas import ABARating, Education, Opinion, Person, Position


def current_position(positions: Sequence[Position]) -> Optional[Position]:
    """First position still held, else the first listed (API order is most recent first)."""
    for position in positions:
        if position.date_termination is None:
            return position
    return positions[0] if positions else None


def determine_tier(court_type: Optional[str]) -> str:
    if not court_type:
        return "unknown"

    lower_type = court_type.lower()
    if "federal" in lower_type or "supreme" in lower_type:
        return "federal"
    if "state" in lower_type:
        return "state"
    return "local"


def years_of_service(position: Optional[Position], today: Optional[date] = None) -> str:
    if position is None or position.date_start is None:
        return "Unknown"

    end = position.date_termination or today or date.today()
    years = (end - position.date_start).days // 365
    return f"{years} years"


@dataclass
class AggregatedProfile:
    """One request's merge of identity, positions and opinions (plus education and ratings on the enhanced path)."""

    judge: Person
    positions: List[Position] = field(default_factory=list)
    opinions: List[Opinion] = field(default_factory=list)
    education: List[Education] = field(default_factory=list)
    aba_ratings: List[ABARating] = field(default_factory=list)

    @property
    def current_position(self) -> Optional[Position]:
        return current_position(self.positions)

    @property
    def court_name(self) -> str:
        position = self.current_position
        return (position.court_name if position else None) or "Unknown Court"
