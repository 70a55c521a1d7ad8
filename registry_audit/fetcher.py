"""
Chain Fetcher

Fetches the code enumeration and the governance proposal history over
the chain's REST API.

PRINCIPLES:
===========
1. No retries: a failed fetch aborts the run with TransportError
2. Listings are paginated; every page is followed until next_key is empty
3. Parsing here is structural only: JSON in, raw dicts / ChainCodeEntry out
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Tuple
import asyncio
import logging

import httpx

from .config import AuditConfig
from .contracts import ChainCodeEntry
from .errors import TransportError

logger = logging.getLogger(__name__)


class ChainClient:
    """
    Fetch collaborator for chain and governance data.

    `transport` is handed to both the sync and the async httpx client;
    tests pass an httpx.MockTransport.
    """

    def __init__(
        self,
        config: Optional[AuditConfig] = None,
        transport: Optional[Any] = None
    ):
        self._config = config or AuditConfig()
        self._transport = transport

    # -------------------------------------------------------------------------
    # Sync
    # -------------------------------------------------------------------------

    def fetch_code_infos(self) -> List[ChainCodeEntry]:
        with self._client() as client:
            infos = self._collect_sync(client, self._config.code_url, {}, 'code_infos')
        return self._to_code_entries(infos)

    def fetch_proposals(self) -> List[dict]:
        with self._client() as client:
            return self._collect_sync(
                client, self._config.proposals_url, {'proposal_status': '0'}, 'proposals'
            )

    def _collect_sync(
        self, client: httpx.Client, url: str, params: Dict[str, str], list_key: str
    ) -> List[dict]:
        collected: List[dict] = []
        next_key: Optional[str] = None
        while True:
            try:
                response = client.get(url, params=self._page_params(params, next_key))
            except httpx.HTTPError as e:
                raise TransportError(url, f"Request failed: {e}") from e
            items, key = self._parse_page(response, url, list_key)
            collected.extend(items)
            next_key = self._advance(url, next_key, key)
            if next_key is None:
                break
        logger.info("Fetched %d %s from %s", len(collected), list_key, url)
        return collected

    # -------------------------------------------------------------------------
    # Async
    # -------------------------------------------------------------------------

    async def afetch_code_infos(self) -> List[ChainCodeEntry]:
        async with self._async_client() as client:
            infos = await self._collect_async(client, self._config.code_url, {}, 'code_infos')
        return self._to_code_entries(infos)

    async def afetch_proposals(self) -> List[dict]:
        async with self._async_client() as client:
            return await self._collect_async(
                client, self._config.proposals_url, {'proposal_status': '0'}, 'proposals'
            )

    async def afetch_all(self) -> Tuple[List[ChainCodeEntry], List[dict]]:
        """Both listings concurrently; neither depends on the other."""
        code_infos, proposals = await asyncio.gather(
            self.afetch_code_infos(),
            self.afetch_proposals()
        )
        return code_infos, proposals

    async def _collect_async(
        self, client: httpx.AsyncClient, url: str, params: Dict[str, str], list_key: str
    ) -> List[dict]:
        collected: List[dict] = []
        next_key: Optional[str] = None
        while True:
            try:
                response = await client.get(url, params=self._page_params(params, next_key))
            except httpx.HTTPError as e:
                raise TransportError(url, f"Request failed: {e}") from e
            items, key = self._parse_page(response, url, list_key)
            collected.extend(items)
            next_key = self._advance(url, next_key, key)
            if next_key is None:
                break
        logger.info("Fetched %d %s from %s", len(collected), list_key, url)
        return collected

    # -------------------------------------------------------------------------
    # Shared
    # -------------------------------------------------------------------------

    def _client(self) -> httpx.Client:
        return httpx.Client(
            timeout=self._config.timeout_seconds,
            headers=self._headers(),
            follow_redirects=True,
            transport=self._transport
        )

    def _async_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._config.timeout_seconds,
            headers=self._headers(),
            follow_redirects=True,
            transport=self._transport
        )

    def _headers(self) -> Dict[str, str]:
        return {'User-Agent': self._config.user_agent, 'Accept': 'application/json'}

    def _page_params(self, params: Dict[str, str], next_key: Optional[str]) -> Dict[str, str]:
        page = dict(params)
        page['pagination.limit'] = str(self._config.page_limit)
        if next_key:
            page['pagination.key'] = next_key
        return page

    def _parse_page(
        self, response: httpx.Response, url: str, list_key: str
    ) -> Tuple[List[dict], Optional[str]]:
        if response.status_code != 200:
            raise TransportError(
                url,
                f"HTTP {response.status_code} {response.reason_phrase}",
                status_code=response.status_code
            )
        try:
            body = response.json()
        except ValueError as e:
            raise TransportError(url, f"Response is not valid JSON: {e}") from e
        if not isinstance(body, dict):
            raise TransportError(url, "Response is not a JSON object")

        items = body.get(list_key) or []
        if not isinstance(items, list):
            raise TransportError(url, f"Response field '{list_key}' is not a list")
        pagination = body.get('pagination') or {}
        return items, pagination.get('next_key') or None

    def _advance(self, url: str, current: Optional[str], next_key: Optional[str]) -> Optional[str]:
        if next_key is not None and next_key == current:
            raise TransportError(url, f"Pagination did not advance past key {next_key}")
        return next_key

    def _to_code_entries(self, infos: List[dict]) -> List[ChainCodeEntry]:
        try:
            return [ChainCodeEntry.from_api(info) for info in infos]
        except (KeyError, TypeError) as e:
            raise TransportError(self._config.code_url, f"Malformed code info: {e!r}") from e
