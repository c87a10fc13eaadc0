"""Immutable dataclasses exchanged with the remote storage collaborators.

Includes the write request handed to a StorageDriver (PerformWriteArgs)
and the raw reply of a TextReader (TextResponse).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO


@dataclass(frozen=True)
class PerformWriteArgs:
    """Request model for writing one object through a storage driver.

    Field groups:
    - Location: storage_top_level, path
    - Payload: stream, content_length, content_type
    """

    storage_top_level: str
    path: str

    stream: BinaryIO
    content_length: int
    content_type: str


@dataclass(frozen=True)
class TextResponse:
    """Raw reply from a text read: status line plus decoded body."""

    status_code: int
    reason_phrase: str
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300
