"""Text fetchers behind the UrlFetcher seam.

The negotiation layer only needs "give me the body of this URL". Anything
with an ``async fetch(url) -> str`` method will do; two are shipped:

1. HttpxFetcher: the real thing, one shared httpx.AsyncClient
2. LocalFileFetcher: serves a saved payload whatever the URL (offline runs)
"""

from pathlib import Path
from typing import Optional, Protocol

import httpx
from rich.console import Console

from indico_pipeline.exceptions import FetchError

console = Console()

DEFAULT_USER_AGENT = "indico-pipeline/0.1 (+https://github.com/indico/indico)"
DEFAULT_TIMEOUT = 30.0


class UrlFetcher(Protocol):
    """Anything able to return the text body of a URL."""

    async def fetch(self, url: str) -> str:
        ...


class HttpxFetcher:
    """Plain GET with httpx. No retries: a failure is reported, not hidden."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            headers={
                "User-Agent": user_agent,
                "Accept": "application/xml,application/json,text/calendar;q=0.9,*/*;q=0.8",
            },
        )

    async def fetch(self, url: str) -> str:
        try:
            response = await self._client.get(url)
            response.raise_for_status()
            return response.text
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            console.print(f"[dim]HTTP {status} for {url}[/dim]")
            raise FetchError(url, status=status, reason=str(status)) from e
        except httpx.TimeoutException as e:
            raise FetchError(url, reason="timeout") from e
        except httpx.ConnectError as e:
            raise FetchError(url, reason="connection") from e
        except httpx.HTTPError as e:
            raise FetchError(url, reason=type(e).__name__.lower()) from e

    async def aclose(self) -> None:
        """Close the client if we created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpxFetcher":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


class LocalFileFetcher:
    """Returns the content of one local file for every URL asked."""

    def __init__(self, path: Path | str, encoding: str = "utf-8"):
        self.path = Path(path)
        self.encoding = encoding

    async def fetch(self, url: str) -> str:
        try:
            return self.path.read_text(encoding=self.encoding)
        except OSError as e:
            raise FetchError(url, reason=f"cannot read {self.path}: {e.strerror}") from e
