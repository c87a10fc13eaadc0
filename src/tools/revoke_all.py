"""MCP tool that revokes every outstanding token of a bucket.

Registers 'revoke_all', which advances the bucket's revocation timestamp
to the current time.
"""

from __future__ import annotations

from mcp.server.fastmcp import FastMCP

from core.errors import ValidationError
from revocations.auth_timestamp_cache import AuthTimestampCache


def register(mcp: FastMCP, *, cache: AuthTimestampCache) -> None:
    @mcp.tool(name="revoke_all")
    async def revoke_all(bucket: str = "") -> int:
        """Revoke all tokens issued for a bucket until now.

        Params:
          - bucket: bucket address (required).

        Returns:
          The revocation timestamp now in effect. It never moves backwards,
          so it may be later than the current time if a later value was
          already set.

        Raises:
          ValidationError for a missing bucket, RevocationWriteError when
          storage rejects the write.
        """
        if not bucket or not bucket.strip():
            raise ValidationError("Missing bucket address")
        return await cache.revoke_all(bucket)
