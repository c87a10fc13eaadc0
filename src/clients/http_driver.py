"""HTTP storage driver: persist objects with a plain PUT.

Writes `<write_url_prefix><storage_top_level>/<path>` and reports where
the object can be read back from, so any object store that accepts PUTs
(or a small proxy in front of one) can hold the auth timestamp files.
"""

from __future__ import annotations

from typing import Optional

import httpx

from core.errors import ExternalServiceError, ValidationError
from core.models import PerformWriteArgs


class HttpStorageDriver:
    def __init__(
        self,
        *,
        write_url_prefix: str,
        read_url_prefix: str,
        timeout: float = 20.0,
        verify: bool = False,
        token: Optional[str] = None,
    ) -> None:
        self._write_url_prefix = write_url_prefix or ""
        self._read_url_prefix = read_url_prefix or ""
        self._timeout = timeout
        self._verify = verify
        self._headers = self._build_headers(token)

    async def perform_write(self, args: PerformWriteArgs) -> str:
        # Async clients can't consume sync streams; the payloads are tiny anyway
        content = args.stream.read()
        if len(content) != args.content_length:
            raise ValidationError(
                f"Stream length {len(content)} does not match content length {args.content_length}"
            )

        object_path = f"{args.storage_top_level}/{args.path}"
        url = f"{self._write_url_prefix}{object_path}"
        headers = {
            **self._headers,
            "Content-Type": args.content_type,
            "Content-Length": str(args.content_length),
        }

        try:
            async with httpx.AsyncClient(timeout=self._timeout, verify=self._verify) as c:
                r = await c.put(url, content=content, headers=headers)
                r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ExternalServiceError(f"Storage rejected write of {object_path}: {e}") from e
        except httpx.HTTPError as e:
            raise ExternalServiceError(f"Failed to write {object_path}: {e}") from e

        return f"{self._read_url_prefix}{object_path}"

    def _build_headers(self, token: Optional[str]) -> dict[str, str]:
        headers = {"User-Agent": "auth-timestamp-mcp"}
        token = (token or "").strip()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers
