import asyncio
from typing import Dict, List, Optional, Union

import pytest

from core.models import PerformWriteArgs, TextResponse


class DummyMCP:
    """Minimal FastMCP stand-in to capture tool registration."""

    def __init__(self) -> None:
        self.tools = {}

    def tool(self, *, name: str):
        def _decorator(fn):
            self.tools[name] = fn
            return fn
        return _decorator


class FakeReader:
    """TextReader returning canned replies; `gate` holds reads until set."""

    def __init__(self, replies: Optional[Dict[str, Union[TextResponse, Exception]]] = None) -> None:
        self.replies = dict(replies or {})
        self.calls: List[str] = []
        self.gate: Optional[asyncio.Event] = None
        self.started = asyncio.Event()

    async def read_text(self, url: str) -> TextResponse:
        self.calls.append(url)
        self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        reply = self.replies.get(url, TextResponse(404, "Not Found", ""))
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeDriver:
    """StorageDriver recording every write as (top level, path, body, length, type)."""

    def __init__(self) -> None:
        self.writes = []
        self.gates: List[asyncio.Event] = []
        self.error: Optional[Exception] = None

    async def perform_write(self, args: PerformWriteArgs) -> str:
        body = args.stream.read()
        if self.gates:
            gate = self.gates.pop(0)
            await gate.wait()
        if self.error is not None:
            raise self.error
        self.writes.append(
            (args.storage_top_level, args.path, body, args.content_length, args.content_type)
        )
        return f"https://read.example/{args.storage_top_level}/{args.path}"


@pytest.fixture
def dummy_mcp():
    return DummyMCP()


@pytest.fixture
def fake_reader():
    return FakeReader()


@pytest.fixture
def fake_driver():
    return FakeDriver()
