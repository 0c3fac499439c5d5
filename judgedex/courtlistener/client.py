"""Async client for the CourtListener REST API.

Translates directory queries (judge by id, positions, opinions, search...)
into authenticated GET requests and normalises transport failures into the
``CourtListenerError`` family.  Every successful response goes through the
injected ``ResponseCache`` before it is returned.

Identity lookups (``get_person``) raise.  The supplementary lookups
(positions, opinions, education, ABA ratings) soft-fail to an empty list,
since a profile is still useful without them.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from judgedex.core.cache import ResponseCache
from judgedex.core.exceptions import (
    CourtListenerAuthFailed,
    CourtListenerError,
    CourtListenerNotFound,
    CourtListenerRateLimited,
    CourtListenerTransportError,
)
from judgedex.courtlistener.schemas import (
    ABARating,
    Court,
    Education,
    Opinion,
    Page,
    Person,
    Position,
    SearchFilters,
)

logger = logging.getLogger(__name__)

NOT_FOUND_SENTINEL = "Not found."


def build_search_params(
    query: str,
    filters: Optional[SearchFilters] = None,
    limit: int = 20,
    offset: int = 0,
) -> Dict[str, Any]:
    """Query parameters for a ``/people/`` search.

    A query containing whitespace is split into a first-name prefix and a
    last name made of the remaining words; a single word goes to the
    full-text ``search`` parameter.  The split is a heuristic: "Mary Ann
    Smith" searches first name "Mary", last name "Ann Smith".
    """
    params: Dict[str, Any] = {"limit": limit, "ordering": "-date_modified"}

    words = query.split()
    if len(words) >= 2:
        params["name_first__icontains"] = words[0]
        params["name_last__icontains"] = " ".join(words[1:])
    elif words:
        params["search"] = words[0]

    filters = filters or SearchFilters()
    if filters.court_type:
        params["positions__court__jurisdiction"] = filters.court_type
    if filters.position_type:
        params["positions__position_type"] = filters.position_type
    if filters.is_active is not None:
        params["positions__date_termination__isnull"] = filters.is_active
    if filters.state:
        params["positions__court__state"] = filters.state
    if filters.has_photo is not None:
        params["has_photo"] = filters.has_photo
    if offset:
        params["offset"] = offset
    return params


def _wire_params(params: Dict[str, Any]) -> Dict[str, str]:
    wire = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        wire[key] = str(value)
    return wire


class CourtListenerClient:
    def __init__(
        self,
        base_url: str,
        token: str,
        cache: ResponseCache,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.cache = cache
        self.timeout = timeout
        self._transport = transport
        self._http: Optional[httpx.AsyncClient] = None

        if not token:
            logger.warning("COURTLISTENER_TOKEN is not set; upstream calls will be anonymous and heavily rate limited")

    @property
    def http(self) -> httpx.AsyncClient:
        if self._http is None:
            headers = {"Accept": "application/json", "Content-Type": "application/json"}
            if self.token:
                headers["Authorization"] = f"Token {self.token}"
            self._http = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._http

    async def aclose(self) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    async def clear_cache(self) -> None:
        await self.cache.clear()
        logger.info("CourtListener response cache cleared")

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _request(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        params = params or {}
        cache_key = self.cache.make_key(endpoint, params)

        cached = await self.cache.get(cache_key)
        if cached is not None:
            logger.debug("Cache hit for %s", cache_key)
            return cached

        try:
            response = await self.http.get(endpoint, params=_wire_params(params))
        except httpx.HTTPError as e:
            raise CourtListenerTransportError(f"CourtListener request to {endpoint} failed: {e}") from e

        if response.status_code == 404:
            raise CourtListenerNotFound(f"Resource not found: {endpoint}")
        if response.status_code in (401, 403):
            raise CourtListenerAuthFailed()
        if response.status_code == 429:
            raise CourtListenerRateLimited()
        if response.is_error:
            raise CourtListenerTransportError(
                f"CourtListener request to {endpoint} failed: {response.status_code} {response.reason_phrase}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise CourtListenerTransportError(f"CourtListener returned invalid JSON for {endpoint}") from e

        await self.cache.set(cache_key, data)
        return data

    async def _list(self, endpoint: str, params: Dict[str, Any], model: type, what: str) -> List[Any]:
        try:
            data = await self._request(endpoint, params)
            return [model.model_validate(item) for item in data.get("results") or []]
        except (CourtListenerError, ValidationError, AttributeError) as e:
            logger.warning("Error fetching %s (%s): %s", what, endpoint, e)
            return []

    # ------------------------------------------------------------------
    # People
    # ------------------------------------------------------------------

    async def get_person(self, person_id: int | str) -> Person:
        data = await self._request(f"/people/{person_id}/")
        if not data or data.get("detail") == NOT_FOUND_SENTINEL:
            raise CourtListenerNotFound(f"Judge {person_id} not found")
        return Person.model_validate(data)

    async def list_positions(self, person_id: int | str) -> List[Position]:
        return await self._list(f"/people/{person_id}/positions/", {}, Position, "judge positions")

    async def list_opinions(self, person_id: int | str, limit: int = 10) -> List[Opinion]:
        return await self._list(f"/people/{person_id}/opinions/", {"limit": limit}, Opinion, "recent opinions")

    async def list_education(self, person_id: int | str) -> List[Education]:
        params = {"person": person_id, "ordering": "-degree_year"}
        return await self._list("/educations/", params, Education, "judge education")

    async def list_aba_ratings(self, person_id: int | str) -> List[ABARating]:
        params = {"person": person_id, "ordering": "-date_created"}
        return await self._list("/aba-ratings/", params, ABARating, "ABA ratings")

    async def search_people(
        self,
        query: str,
        filters: Optional[SearchFilters] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Page[Person]:
        params = build_search_params(query, filters, limit, offset)
        logger.info("Searching judges with params: %s", params)
        data = await self._request("/people/", params)
        return Page[Person].model_validate(data)

    async def list_people(self, limit: int = 100, offset: int = 0) -> Page[Person]:
        data = await self._request("/people/", {"limit": limit, "offset": offset or None})
        return Page[Person].model_validate(data)

    async def get_person_by_slug(self, slug: str) -> Optional[Person]:
        data = await self._request("/people/", {"slug": slug, "limit": 1})
        page = Page[Person].model_validate(data)
        return page.results[0] if page.results else None

    async def search_people_by_court(self, court_id: int, limit: int = 20) -> Page[Person]:
        params = {"positions__court": court_id, "ordering": "-date_modified", "limit": limit}
        data = await self._request("/people/", params)
        return Page[Person].model_validate(data)

    # ------------------------------------------------------------------
    # Courts
    # ------------------------------------------------------------------

    async def list_courts(self) -> Page[Court]:
        data = await self._request("/courts/", {"ordering": "full_name"})
        return Page[Court].model_validate(data)
