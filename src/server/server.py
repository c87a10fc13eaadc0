"""Server bootstrap for the auth timestamp MCP service.

Creates the FastMCP instance, wires the storage driver and the auth
timestamp cache, registers tools, and starts the MCP server (stdio
transport). The eviction monitor runs for the lifetime of the server.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from mcp.server.fastmcp import FastMCP

from clients.http_driver import HttpStorageDriver
from clients.http_reader import HttpTextReader
from config import (
    AUTH_TIMESTAMP_CACHE_SIZE,
    EVICTION_REPORT_INTERVAL,
    HTTP_TIMEOUT,
    HTTP_VERIFY,
    LOG_LEVEL,
    READ_URL_PREFIX,
    STORAGE_TOKEN,
    WRITE_URL_PREFIX,
)
from revocations.auth_timestamp_cache import AuthTimestampCache

from tools.auth_timestamp import register as register_auth_timestamp
from tools.revoke_all import register as register_revoke_all

driver = HttpStorageDriver(
    write_url_prefix=WRITE_URL_PREFIX,
    read_url_prefix=READ_URL_PREFIX,
    timeout=HTTP_TIMEOUT,
    verify=HTTP_VERIFY,
    token=STORAGE_TOKEN,
)
auth_timestamp_cache = AuthTimestampCache(
    READ_URL_PREFIX,
    driver,
    AUTH_TIMESTAMP_CACHE_SIZE,
    reader=HttpTextReader(timeout=HTTP_TIMEOUT, verify=HTTP_VERIFY),
    eviction_interval_seconds=EVICTION_REPORT_INTERVAL,
)


@asynccontextmanager
async def lifespan(_server: FastMCP) -> AsyncIterator[None]:
    async with auth_timestamp_cache:
        yield


mcp = FastMCP("auth-timestamp-mcp", lifespan=lifespan)


def register_tools() -> None:
    register_auth_timestamp(mcp, cache=auth_timestamp_cache)
    register_revoke_all(mcp, cache=auth_timestamp_cache)


register_tools()


def main() -> None:
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
