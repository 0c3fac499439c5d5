from datetime import date

import pytest

from judgedex.courtlistener.schemas import Position
from judgedex.judges.profile import current_position, determine_tier, years_of_service


@pytest.mark.parametrize(
    "court_type, tier",
    [
        ("Federal Appellate", "federal"),
        ("U.S. Supreme Court", "federal"),
        ("State Supreme Court", "federal"),
        ("State Trial", "state"),
        ("Municipal", "local"),
        ("", "unknown"),
        (None, "unknown"),
    ],
)
def test_determine_tier(court_type, tier):
    assert determine_tier(court_type) == tier


class TestYearsOfService:
    def test_open_ended_position_counts_to_today(self):
        position = Position(id=1, date_start="2010-01-04")
        assert years_of_service(position, today=date(2020, 1, 4)) == "10 years"

    def test_terminated_position_counts_to_termination(self):
        position = Position(id=1, date_start="2001-03-01", date_termination="2009-12-31")
        assert years_of_service(position, today=date(2030, 1, 1)) == "8 years"

    def test_unknown_without_start(self):
        assert years_of_service(Position(id=1)) == "Unknown"
        assert years_of_service(None) == "Unknown"


class TestCurrentPosition:
    def test_prefers_position_still_held(self):
        positions = [
            Position(id=1, date_start="2001-01-01", date_termination="2009-01-01"),
            Position(id=2, date_start="2010-01-01"),
        ]
        assert current_position(positions).id == 2

    def test_falls_back_to_first(self):
        positions = [
            Position(id=1, date_termination="2009-01-01"),
            Position(id=2, date_termination="2001-01-01"),
        ]
        assert current_position(positions).id == 1

    def test_empty(self):
        assert current_position([]) is None

    def test_blank_termination_counts_as_open(self):
        positions = [Position(id=1, date_start="2001-01-01", date_termination="")]
        assert current_position(positions).id == 1
