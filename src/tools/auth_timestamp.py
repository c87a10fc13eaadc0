"""MCP tools that read bucket revocation timestamps.

Registers 'get_auth_timestamp' and 'check_token_revoked', both answered
from the shared AuthTimestampCache.
"""

from __future__ import annotations

from mcp.server.fastmcp import FastMCP

from core.errors import ValidationError
from revocations.auth_timestamp_cache import AuthTimestampCache


def register(mcp: FastMCP, *, cache: AuthTimestampCache) -> None:
    @mcp.tool(name="get_auth_timestamp")
    async def get_auth_timestamp(bucket: str = "") -> int:
        """Return the revocation timestamp of a bucket.

        Params:
          - bucket: bucket address (required).

        Returns:
          Unix time in seconds; tokens issued before it are revoked. 0 means
          no revocation was ever made.

        Raises:
          ValidationError for a missing bucket, RevocationReadError when the
          stored value cannot be fetched or parsed.
        """
        if not bucket or not bucket.strip():
            raise ValidationError("Missing bucket address")
        return await cache.get_auth_timestamp(bucket)

    @mcp.tool(name="check_token_revoked")
    async def check_token_revoked(bucket: str = "", issued_at: int = 0) -> bool:
        """Tell whether a token issued for a bucket has been revoked.

        Params:
          - bucket: bucket address (required).
          - issued_at: token issue time in Unix seconds (must not be negative).

        Returns:
          True when issued_at predates the bucket's revocation timestamp.

        Raises:
          ValidationError for a missing bucket or negative issued_at,
          RevocationReadError when the stored value cannot be fetched or parsed.
        """
        if not bucket or not bucket.strip():
            raise ValidationError("Missing bucket address")
        if issued_at < 0:
            raise ValidationError("issued_at must not be negative")
        return await cache.is_revoked(bucket, issued_at)
