from datetime import datetime, timezone
from sqlalchemy import Boolean, Column, Date, DateTime, Float, Integer, String
from judgedex.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Judge(Base):
    """A CourtListener person mirrored locally. Only written by the sync job."""

    __tablename__ = "courtlistener_judges"

    id = Column(Integer, primary_key=True, autoincrement=False)
    slug = Column(String, nullable=True, index=True)
    fjc_id = Column(Integer, nullable=True)

    name_first = Column(String, nullable=True)
    name_middle = Column(String, nullable=True)
    name_last = Column(String, nullable=True, index=True)
    name_suffix = Column(String, nullable=True)

    date_dob = Column(Date, nullable=True)
    date_granularity_dob = Column(String, nullable=True)
    date_dod = Column(Date, nullable=True)
    date_granularity_dod = Column(String, nullable=True)
    dob_city = Column(String, nullable=True)
    dob_state = Column(String, nullable=True)
    dob_country = Column(String, nullable=True)
    dod_city = Column(String, nullable=True)
    dod_state = Column(String, nullable=True)
    dod_country = Column(String, nullable=True)

    gender = Column(String, nullable=True)
    religion = Column(String, nullable=True)
    ftm_total_received = Column(Float, nullable=True)
    ftm_eid = Column(String, nullable=True)
    has_photo = Column(Boolean, default=False, nullable=False)
    is_alias_of_id = Column(Integer, nullable=True)

    date_created = Column(DateTime(timezone=True), nullable=True)
    date_modified = Column(DateTime(timezone=True), nullable=True)
    synced_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)
