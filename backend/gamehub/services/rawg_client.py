"""
GameHub API — RAWG Upstream Client
===================================

What:  Fetches games from the RAWG API and returns normalized GameRecords.
How:   Validates the endpoint, appends credentials and fixed parameters,
       issues one GET with a total deadline, decodes the JSON into the RAWG
       schemas and hands every game to the shared normalizer.
Who:   One instance per application, attached to `app.state.rawg_client`
       and injected into route handlers.
When:  Once per inbound /games request. There is no cache and no retry.

Failure Modes:
    Endpoint has disallowed characters   → InvalidEndpointError (no I/O)
    RAWG_API_KEY missing                 → MissingCredentialError (no I/O)
    Connection error or deadline expired → UpstreamUnavailableError
    RAWG answers non-2xx                 → UpstreamRejectedError
    Body is not JSON / wrong shape       → UpstreamMalformedError

    A single-game lookup that RAWG answers with 404, or with an object whose
    id is missing or zero, returns None instead of raising.
"""

import asyncio
import logging
import re
import time
from typing import List, Mapping, Optional, Sequence, Tuple, Type, TypeVar
from urllib.parse import urlencode

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from gamehub.config import Settings, settings
from gamehub.exceptions import (
    InvalidArgumentError,
    InvalidEndpointError,
    MissingCredentialError,
    UpstreamMalformedError,
    UpstreamRejectedError,
    UpstreamUnavailableError,
)
from gamehub.schemas.game import GameRecord
from gamehub.schemas.rawg import RawgEnvelope, RawgGame
from gamehub.services.normalizer import normalize_game

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# Letters, digits and the separators a RAWG path or preset query may use.
ENDPOINT_PATTERN = re.compile(r"[a-zA-Z0-9/_?=&-]*")


def validate_endpoint(endpoint: str) -> None:
    """
    Reject endpoint paths that could inject into the outbound URL.

    Raises:
        InvalidEndpointError: if the path does not start with '/' or contains
            a character outside [a-zA-Z0-9/_?=&-].
    """
    if not endpoint.startswith("/"):
        raise InvalidEndpointError(endpoint, "endpoint must start with /")
    if not ENDPOINT_PATTERN.fullmatch(endpoint):
        raise InvalidEndpointError(endpoint, "invalid characters in endpoint")


def build_url(base_url: str, endpoint: str, params: Sequence[Tuple[str, str]]) -> str:
    """
    Join base URL, endpoint and URL-encoded parameters.

    Uses '&' when the endpoint already carries a query string, '?' otherwise.
    Commas are left unescaped so list values read naturally in logs.
    """
    separator = "&" if "?" in endpoint else "?"
    return f"{base_url.rstrip('/')}{endpoint}{separator}{urlencode(params, safe=',')}"


class RawgClient:
    """
    Async client for the RAWG games API.

    Every constructor argument defaults to the matching field of `config`.
    The API key is resolved on each call, so a process can start without it
    and fail on the first fetch.

    Args:
        config:    Settings to read defaults from (the module settings if omitted).
        transport: Optional httpx transport (tests pass httpx.MockTransport).
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        page_size: Optional[int] = None,
        store_ids: Optional[Sequence[str]] = None,
        user_agent: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        config: Settings = settings,
    ):
        self.config = config
        self.base_url = base_url or config.rawg_base_url
        self.timeout = timeout or config.upstream_timeout
        self.page_size = page_size or config.upstream_page_size
        self.store_ids = list(store_ids) if store_ids is not None else config.store_filter
        self.user_agent = user_agent or config.upstream_user_agent
        self._api_key = api_key
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def api_key(self) -> str:
        return self._api_key if self._api_key is not None else self.config.rawg_api_key

    def _require_api_key(self) -> str:
        api_key = self.api_key
        if not api_key:
            raise MissingCredentialError()
        return api_key

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers={"User-Agent": self.user_agent},
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the pooled HTTP client. Safe to call more than once."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    # ── Public API ────────────────────────────────────────────────────────

    async def fetch_collection(
        self,
        endpoint_path: str,
        query_params: Optional[Mapping[str, str]] = None,
    ) -> List[GameRecord]:
        """
        Fetch one page of games from a RAWG list endpoint.

        Args:
            endpoint_path: RAWG path such as "/games" or "/games?ordering=-rating".
            query_params:  Extra parameters, URL-encoded and appended after the
                           fixed key/page_size/stores parameters.

        Returns:
            Normalized games in upstream order (possibly empty).
        """
        validate_endpoint(endpoint_path)
        api_key = self._require_api_key()

        params = [("key", api_key), ("page_size", str(self.page_size))]
        if self.store_ids:
            params.append(("stores", ",".join(self.store_ids)))
        params.extend((query_params or {}).items())

        response = await self._get(endpoint_path, params)
        if not response.is_success:
            raise UpstreamRejectedError(response.status_code, context={"endpoint": endpoint_path})

        envelope = self._decode(response, RawgEnvelope, endpoint_path)
        logger.debug(
            "RAWG %s returned %d of %d games",
            endpoint_path,
            len(envelope.results),
            envelope.count,
        )
        return [normalize_game(game) for game in envelope.results]

    async def fetch_by_id(self, game_id: str) -> Optional[GameRecord]:
        """
        Fetch a single game.

        Returns:
            The normalized game, or None when RAWG does not know the id.

        Raises:
            InvalidArgumentError: if game_id is empty.
            InvalidEndpointError: if game_id contains disallowed characters.
        """
        if not game_id:
            raise InvalidArgumentError("game ID cannot be empty", field="id")

        endpoint = f"/games/{game_id}"
        validate_endpoint(endpoint)
        api_key = self._require_api_key()

        params = [("key", api_key), ("page_size", str(self.page_size))]
        response = await self._get(endpoint, params)
        if response.status_code == 404:
            return None
        if not response.is_success:
            raise UpstreamRejectedError(response.status_code, context={"endpoint": endpoint})

        raw = self._decode(response, RawgGame, endpoint)
        if not raw.id:
            return None
        return normalize_game(raw)

    # ── Internals ─────────────────────────────────────────────────────────

    async def _get(self, endpoint: str, params: Sequence[Tuple[str, str]]) -> httpx.Response:
        """
        Issue the GET under a total deadline.

        httpx's timeout bounds each phase separately; asyncio.wait_for bounds
        the whole call. The URL is never logged because it carries the key.
        """
        url = build_url(self.base_url, endpoint, params)
        client = self._get_client()
        start_time = time.perf_counter()

        try:
            response = await asyncio.wait_for(client.get(url), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.warning("RAWG %s timed out after %.1fs", endpoint, self.timeout)
            raise UpstreamUnavailableError(
                message="RAWG request timed out",
                context={"endpoint": endpoint, "timeout": self.timeout},
            ) from e
        except httpx.HTTPError as e:
            logger.warning("RAWG %s failed: %s", endpoint, type(e).__name__)
            raise UpstreamUnavailableError(
                context={"endpoint": endpoint, "error_type": type(e).__name__},
            ) from e

        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.debug("RAWG %s -> %d in %.0fms", endpoint, response.status_code, duration_ms)
        if not response.is_success:
            logger.warning("RAWG %s responded with HTTP %d", endpoint, response.status_code)
        return response

    @staticmethod
    def _decode(response: httpx.Response, model: Type[ModelT], endpoint: str) -> ModelT:
        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamMalformedError(
                message="RAWG response is not valid JSON",
                context={"endpoint": endpoint},
            ) from e

        try:
            return model.model_validate(payload)
        except PydanticValidationError as e:
            raise UpstreamMalformedError(
                message="RAWG response has an unexpected shape",
                context={"endpoint": endpoint, "errors": e.error_count()},
            ) from e
