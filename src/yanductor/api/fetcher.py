"""HTTP client for Conductor's ansible-inventory generator."""

from __future__ import annotations

from collections.abc import Sequence

import httpx

from yanductor.errors import NetworkError
from yanductor.logging_config import get_logger

log = get_logger("fetcher")

GENERATOR_PATH = "/api/generator/rivik.ansible-inventory"


class RemoteFetcher:
    """Issues a single GET for the configured projects. No retries."""

    def __init__(
        self,
        base_url: str,
        workgroup_names: Sequence[str],
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.workgroup_names = list(workgroup_names)
        self._timeout = timeout
        self._transport = transport

    @property
    def url(self) -> str:
        projects = ",".join(self.workgroup_names)
        return f"{self.base_url}{GENERATOR_PATH}?projects={projects}"

    def _client(self) -> httpx.Client:
        kwargs: dict = {"follow_redirects": True}
        if self._timeout is not None:
            kwargs["timeout"] = self._timeout
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return httpx.Client(**kwargs)

    def fetch(self) -> bytes:
        url = self.url
        try:
            with self._client() as client:
                response = client.get(url)
                # redirects are followed; only the final response must be 200
                data = response.content
        except httpx.HTTPError as e:
            raise NetworkError(url, f"{type(e).__name__}: {e}") from e

        if response.status_code != 200:
            raise NetworkError(
                url, f"status code {response.status_code}", status_code=response.status_code
            )

        log.debug("inventory fetched", url=url, size=len(data))
        return data
