"""Per-bucket authentication revocation timestamps with an in-memory cache.

Every bucket owns a watermark: tokens issued before it are revoked. The
authoritative value lives in `<bucket>-auth/authTimestamp` on eventually
consistent storage, so this module keeps the last known value of each
bucket in a bounded LRU cache and only ever lets it move forward.

Reads and writes both compare against the cache around their slow I/O and
keep the larger value. There is no lock: cache access never awaits, so the
compare-and-store steps cannot interleave with other tasks. Two concurrent
writes may still reach storage in either order; the cache keeps the larger
value regardless.
"""

from __future__ import annotations

import io
import logging
import time
from typing import Optional, Union

from clients.http_reader import HttpTextReader
from core.cache import LRUCache
from core.errors import (
    ExternalServiceError,
    RevocationReadError,
    RevocationWriteError,
    ValidationError,
)
from core.eviction_monitor import DEFAULT_INTERVAL_SECONDS, EvictionMonitor
from core.interfaces import StorageDriver, TextReader
from core.models import PerformWriteArgs
from core.timestamps import (
    AUTH_TIMESTAMP_FILE_NAME,
    CONTENT_TYPE,
    auth_timestamp_dir,
    encode_timestamp,
    parse_timestamp_text,
    to_int32,
)

logger = logging.getLogger(__name__)


def _require_bucket(bucket_address: str) -> str:
    if not isinstance(bucket_address, str) or not bucket_address.strip():
        raise ValidationError("Missing bucket address")
    return bucket_address


class AuthTimestampCache:
    """Cached reads and monotonic writes of bucket revocation timestamps.

    Purpose:
      - get_auth_timestamp(bucket) -> int
      - set_auth_timestamp(bucket, timestamp) -> None
      - revoke_all(bucket) -> int, is_revoked(bucket, issued_at) -> bool

    Key behavior:
      - A cached value is returned without any I/O.
      - Missing remote objects read as 0.
      - Neither path ever stores a value lower than the cached one.
      - Evictions are counted and reported by an EvictionMonitor.
    """

    def __init__(
        self,
        read_url_prefix: str,
        driver: StorageDriver,
        max_cache_size: int,
        *,
        reader: Optional[TextReader] = None,
        monitor: Optional[EvictionMonitor] = None,
        eviction_interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
    ) -> None:
        self._read_url_prefix = read_url_prefix or ""
        self._driver = driver
        self._reader = reader or HttpTextReader()
        self._monitor = monitor or EvictionMonitor(interval_seconds=eviction_interval_seconds)
        self._cache: LRUCache[str, int] = LRUCache(
            maxsize=max_cache_size,
            on_evict=self._monitor.record_eviction,
        )

    @property
    def monitor(self) -> EvictionMonitor:
        return self._monitor

    @property
    def cache(self) -> LRUCache[str, int]:
        return self._cache

    # --- lifecycle ---

    def start(self) -> None:
        self._monitor.start()

    async def stop(self) -> None:
        await self._monitor.stop()

    async def __aenter__(self) -> "AuthTimestampCache":
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()

    def check_evictions(self) -> int:
        return self._monitor.check()

    # --- read path ---

    def auth_timestamp_url(self, bucket_address: str) -> str:
        return f"{self._read_url_prefix}{auth_timestamp_dir(bucket_address)}/{AUTH_TIMESTAMP_FILE_NAME}"

    async def read_auth_timestamp(self, bucket_address: str) -> int:
        """Fetch the persisted timestamp, bypassing the cache."""
        bucket = _require_bucket(bucket_address)
        url = self.auth_timestamp_url(bucket)

        try:
            resp = await self._reader.read_text(url)
        except ExternalServiceError as e:
            raise RevocationReadError(
                f"Error trying to fetch bucket authentication revocation timestamp: {e}"
            ) from e

        if resp.ok:
            value = parse_timestamp_text(resp.text)
            if value is None:
                raise RevocationReadError(
                    f"Bucket contained an invalid authentication revocation timestamp: {resp.text!r}"
                )
            return value

        if resp.status_code == 404:
            # No revocation has ever been written for this bucket
            return 0

        raise RevocationReadError(
            "Error trying to fetch bucket authentication revocation timestamp: "
            f"server returned {resp.status_code} - {resp.reason_phrase}"
        )

    async def get_auth_timestamp(self, bucket_address: str) -> int:
        bucket = _require_bucket(bucket_address)

        cached = self._cache.get(bucket)
        if cached is not None:
            logger.debug("Auth timestamp cache hit for %s", bucket)
            return cached

        logger.debug("Auth timestamp cache miss for %s", bucket)
        timestamp = await self.read_auth_timestamp(bucket)

        # A write may have landed while the read was in flight
        cached = self._cache.get(bucket)
        if cached is not None and cached > timestamp:
            timestamp = cached

        self._cache.set(bucket, timestamp)
        return timestamp

    async def is_revoked(self, bucket_address: str, issued_at: Union[int, float]) -> bool:
        """True if a credential issued at `issued_at` (seconds) is revoked."""
        return issued_at < await self.get_auth_timestamp(bucket_address)

    # --- write path ---

    async def write_auth_timestamp(self, bucket_address: str, timestamp: int) -> int:
        """Persist `timestamp`, or the cached value if larger. Returns what was written."""
        bucket = _require_bucket(bucket_address)

        cached = self._cache.get(bucket)
        if cached is not None and cached > timestamp:
            timestamp = cached

        # Cache first so fast-path reads see the new value before storage does
        self._cache.set(bucket, timestamp)

        # Raises AuthTimestampSizeError past MAX_AUTH_FILE_BYTES; the cache keeps the value
        content = encode_timestamp(timestamp)

        args = PerformWriteArgs(
            storage_top_level=auth_timestamp_dir(bucket),
            path=AUTH_TIMESTAMP_FILE_NAME,
            stream=io.BytesIO(content),
            content_length=len(content),
            content_type=CONTENT_TYPE,
        )
        try:
            await self._driver.perform_write(args)
        except Exception as e:
            raise RevocationWriteError(
                f"Error trying to write bucket authentication revocation timestamp: {e}"
            ) from e

        logger.debug("Wrote auth timestamp %d for %s", timestamp, bucket)
        return timestamp

    async def set_auth_timestamp(self, bucket_address: str, timestamp: Union[int, float]) -> None:
        await self.write_auth_timestamp(bucket_address, to_int32(timestamp))

    async def revoke_all(self, bucket_address: str, *, now: Optional[float] = None) -> int:
        """Revoke every credential issued before `now` (default: current time)."""
        requested = to_int32(time.time() if now is None else now)
        return await self.write_auth_timestamp(bucket_address, requested)
