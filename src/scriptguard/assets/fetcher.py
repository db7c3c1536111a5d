"""Asset fetcher — load protected script content from the GitHub contents API."""

import base64
import binascii
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, Union
from urllib.parse import quote

import httpx


class FetchErrorKind(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    UPSTREAM = "UPSTREAM"
    TIMEOUT = "TIMEOUT"


@dataclass(frozen=True)
class FetchOk:
    content: bytes


@dataclass(frozen=True)
class FetchErr:
    kind: FetchErrorKind
    detail: str = ""


FetchResult = Union[FetchOk, FetchErr]


class AssetFetcher(Protocol):
    async def fetch(
        self, owner: str, repo: str, path: str, token: Optional[str] = None
    ) -> FetchResult:
        ...


class GitHubAssetFetcher:
    """Reads a single file through ``GET /repos/{owner}/{repo}/contents/{path}``."""

    def __init__(
        self,
        base_url: str = "https://api.github.com",
        token: str = "",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._transport = transport
        self._http_client: httpx.AsyncClient | None = None

    def _get_http_client(self) -> httpx.AsyncClient:
        """Lazy-init httpx.AsyncClient."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(transport=self._transport)
        return self._http_client

    async def close(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def fetch(
        self, owner: str, repo: str, path: str, token: Optional[str] = None
    ) -> FetchResult:
        url = (
            f"{self.base_url}/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"
            f"/contents/{quote(path.lstrip('/'), safe='/')}"
        )
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        auth_token = token or self.token
        if auth_token:
            headers["Authorization"] = f"Bearer {auth_token}"

        try:
            resp = await self._get_http_client().get(
                url, headers=headers, timeout=self.timeout
            )
        except httpx.TimeoutException:
            return FetchErr(FetchErrorKind.TIMEOUT, "timeout")
        except httpx.HTTPError as e:
            return FetchErr(FetchErrorKind.UPSTREAM, str(e))

        if resp.status_code == 404:
            return FetchErr(FetchErrorKind.NOT_FOUND, f"{owner}/{repo}/{path}")
        if resp.status_code != 200:
            return FetchErr(FetchErrorKind.UPSTREAM, f"HTTP {resp.status_code}")

        try:
            data = resp.json()
        except ValueError:
            return FetchErr(FetchErrorKind.UPSTREAM, "invalid JSON body")

        # Directories come back as a JSON list
        if not isinstance(data, dict) or data.get("type", "file") != "file":
            return FetchErr(FetchErrorKind.NOT_FOUND, "path is not a file")
        if data.get("encoding") != "base64":
            return FetchErr(
                FetchErrorKind.UPSTREAM,
                f"unsupported encoding {data.get('encoding')!r}",
            )

        encoded = data.get("content", "")
        if not isinstance(encoded, str):
            return FetchErr(FetchErrorKind.UPSTREAM, "missing file content")
        try:
            content = base64.b64decode(encoded)
        except (binascii.Error, ValueError) as e:
            return FetchErr(FetchErrorKind.UPSTREAM, f"bad content: {e}")
        return FetchOk(content)
