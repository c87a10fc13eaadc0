from __future__ import annotations

import httpx

from core.errors import ExternalServiceError
from core.models import TextResponse


class HttpTextReader:
    """GET an object as text. Redirects are returned, never followed."""

    def __init__(self, *, timeout: float = 20.0, verify: bool = False) -> None:
        self._timeout = timeout
        self._verify = verify

    async def read_text(self, url: str) -> TextResponse:
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                verify=self._verify,
                follow_redirects=False,
            ) as c:
                r = await c.get(url)
                # get() reads the whole body, so body read failures raise inside this block
                return TextResponse(
                    status_code=r.status_code,
                    reason_phrase=r.reason_phrase,
                    text=r.text,
                )
        except httpx.HTTPError as e:
            raise ExternalServiceError(f"Failed to fetch {url}: {e}") from e
