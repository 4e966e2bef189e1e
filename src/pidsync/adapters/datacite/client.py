"""DataCite REST API client."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from pidsync.adapters.http_resilience import ResilientClient
from pidsync.domain.ports import RegistrarError

from .schema import DataCiteDoiAttributes, DataCiteDoiResponse, DataCiteErrorResponse

if TYPE_CHECKING:
    from collections.abc import Callable

    from pidsync.config.datacite import DataCiteConfig
    from pidsync.config.http_resilience import ResilienceConfig
    from pidsync.domain.model import Pid

log = getLogger(__name__)


class DataCiteAPIError(RegistrarError):
    """Raised when the DataCite API fails or returns an unexpected response."""


class DataCiteClient:
    """Low-level HTTP client for the DataCite ``/dois`` endpoint."""

    def __init__(
        self,
        *,
        config: DataCiteConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient
        self._auth = httpx.BasicAuth(config.username, config.password)

    def fetch_doi(self, pid: Pid) -> DataCiteDoiAttributes | None:
        """Return the registrar attributes of ``pid``, or ``None`` when DataCite has no record."""

        return asyncio.run(self._fetch_doi_async(pid))

    async def _fetch_doi_async(self, pid: Pid) -> DataCiteDoiAttributes | None:
        if self._resilience.base_url is None:
            raise DataCiteAPIError("Missing DataCite base_url in resilience configuration")

        try:
            async with self._client_factory(self._resilience) as client:
                response = await client.get(_doi_path(pid), auth=self._auth)
        except httpx.TimeoutException as exc:
            raise DataCiteAPIError(f"DataCite timed out for {pid}") from exc
        except httpx.HTTPError as exc:
            raise DataCiteAPIError(f"DataCite request failed for {pid}: {exc}") from exc

        if response.status_code == httpx.codes.NOT_FOUND:
            log.debug("DOI %s not found at DataCite", pid)
            return None
        if response.is_error:
            raise DataCiteAPIError(
                f"DataCite returned {response.status_code} for {pid}: {_error_summary(response)}"
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise DataCiteAPIError(f"DataCite returned a non-JSON body for {pid}") from exc
        if not isinstance(payload, dict):
            raise DataCiteAPIError("Unexpected DataCite response payload")

        try:
            return DataCiteDoiResponse.model_validate(payload).data.attributes
        except ValidationError as exc:
            raise DataCiteAPIError(f"Unexpected DataCite payload for {pid}: {exc}") from exc


def _error_summary(response: httpx.Response) -> str:
    try:
        return DataCiteErrorResponse.model_validate(response.json()).summary()
    except (ValueError, ValidationError):
        return response.reason_phrase


def _doi_path(pid: Pid) -> str:
    # Suffixes may contain "?" or "#", which would otherwise end the path.
    return f"/dois/{quote(pid.name, safe='/')}"
