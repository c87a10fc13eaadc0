"""Core protocol and interface definitions.

Defines the two narrow capabilities the auth timestamp cache needs from
remote storage: reading text from a URL and writing a byte stream to a
named location. HTTP clients and test fakes both satisfy them.
"""

from __future__ import annotations

from typing import Protocol

from core.models import PerformWriteArgs, TextResponse


class TextReader(Protocol):
    """Contract for fetching an object as text without following redirects."""
    async def read_text(self, url: str) -> TextResponse:
        ...


class StorageDriver(Protocol):
    """Contract for any storage backend able to persist an object."""
    async def perform_write(self, args: PerformWriteArgs) -> str:
        ...
