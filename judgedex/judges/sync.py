import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from judgedex.core.exceptions import CourtListenerError
from judgedex.courtlistener.client import CourtListenerClient
from judgedex.courtlistener.schemas import Person
from judgedex.judges.models import Judge

logger = logging.getLogger(__name__)

_DATETIME_COLUMNS = ("date_created", "date_modified")
_COPIED_COLUMNS = tuple(
    c.name for c in Judge.__table__.columns
    if c.name not in ("is_alias_of_id", "has_photo", "synced_at")
)
_TRAILING_ID_RE = re.compile(r"(\d+)/?$")


def _alias_id(value: Any) -> Optional[int]:
    # v4 returns a resource URL (".../people/123/"), older versions a bare id.
    if value is None:
        return None
    if isinstance(value, int):
        return value
    match = _TRAILING_ID_RE.search(str(value))
    return int(match.group(1)) if match else None


def _parse_datetime(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def person_to_row(person: Person) -> Dict[str, Any]:
    data = person.model_dump()
    row = {}
    for name in _COPIED_COLUMNS:
        value = data.get(name)
        row[name] = None if value == "" else value
    for name in _DATETIME_COLUMNS:
        row[name] = _parse_datetime(row[name])
    row["has_photo"] = bool(data.get("has_photo"))
    row["is_alias_of_id"] = _alias_id(data.get("is_alias_of"))
    row["synced_at"] = datetime.now(timezone.utc)
    return row


class JudgeSyncService:
    """Mirrors CourtListener people into ``courtlistener_judges`` (insert or update by id)."""

    def __init__(self, db: AsyncSession, client: CourtListenerClient):
        self.db = db
        self.client = client

    async def upsert_judge(self, person: Person) -> bool:
        try:
            row = person_to_row(person)
            stmt = pg_insert(Judge).values(**row)
            stmt = stmt.on_conflict_do_update(
                index_elements=[Judge.id],
                set_={name: stmt.excluded[name] for name in row if name != "id"},
            )
            async with self.db.begin_nested():
                await self.db.execute(stmt)
            return True
        except Exception:
            # One bad record must not stop the rest of the page.
            logger.exception("Error inserting judge %s", person.id)
            return False

    async def sync_judges(self, limit: int = 100, offset: int = 0, max_pages: Optional[int] = None) -> int:
        synced = 0
        pages = 0
        while True:
            logger.info("Syncing judges from CourtListener (limit: %d, offset: %d)", limit, offset)
            page = await self.client.list_people(limit, offset)
            for person in page.results:
                if await self.upsert_judge(person):
                    synced += 1
            await self.db.commit()
            pages += 1
            logger.info("Synced %d judges from page at offset %d", len(page.results), offset)

            if not page.next or (max_pages is not None and pages >= max_pages):
                break
            offset += limit

        logger.info("Sync finished: %d judges written", synced)
        return synced

    async def search_and_sync_judge(self, term: str) -> Optional[Person]:
        try:
            page = await self.client.search_people(term, limit=10)
        except CourtListenerError as e:
            logger.error("Error searching for judge %r: %s", term, e)
            return None

        if not page.results:
            return None

        judge = page.results[0]
        if await self.upsert_judge(judge):
            await self.db.commit()
            logger.info("Synced judge: %s", judge.display_name)
        return judge
