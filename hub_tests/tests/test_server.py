import importlib.util
import sys
import types
import uuid
from pathlib import Path

import pytest


def _find_server_py() -> Path:
    root = Path(__file__).resolve().parents[2]
    path = root / "src" / "server" / "server.py"
    if not path.exists():
        raise FileNotFoundError(f"Could not find server.py at {path}")
    return path


def _install_fake_modules(monkeypatch, captures: dict):
    # ---- Fake mcp.server.fastmcp.FastMCP ----
    mcp_mod = types.ModuleType("mcp")
    mcp_server_mod = types.ModuleType("mcp.server")
    fastmcp_mod = types.ModuleType("mcp.server.fastmcp")

    class DummyFastMCP:
        def __init__(self, name: str, lifespan=None):
            captures["fastmcp_name"] = name
            captures["lifespan"] = lifespan
            captures["mcp_instance"] = self
            self.run_calls = []

        def run(self, *, transport: str):
            self.run_calls.append({"transport": transport})
            captures["run_calls"] = list(self.run_calls)

    fastmcp_mod.FastMCP = DummyFastMCP
    mcp_mod.__path__ = []
    mcp_server_mod.__path__ = []

    monkeypatch.setitem(sys.modules, "mcp", mcp_mod)
    monkeypatch.setitem(sys.modules, "mcp.server", mcp_server_mod)
    monkeypatch.setitem(sys.modules, "mcp.server.fastmcp", fastmcp_mod)

    # ---- Fake config ----
    config_mod = types.ModuleType("config")
    config_mod.READ_URL_PREFIX = "https://store.example/read/"
    config_mod.WRITE_URL_PREFIX = "https://store.example/write/"
    config_mod.STORAGE_TOKEN = "tok"
    config_mod.HTTP_VERIFY = True
    config_mod.HTTP_TIMEOUT = 12.3
    config_mod.AUTH_TIMESTAMP_CACHE_SIZE = 7
    config_mod.EVICTION_REPORT_INTERVAL = 60.0
    config_mod.LOG_LEVEL = "DEBUG"
    monkeypatch.setitem(sys.modules, "config", config_mod)

    # ---- Fake tool modules ----
    tools_pkg = types.ModuleType("tools")
    tools_pkg.__path__ = []
    auth_mod = types.ModuleType("tools.auth_timestamp")
    revoke_mod = types.ModuleType("tools.revoke_all")

    def register_auth_timestamp(mcp, *, cache):
        captures.setdefault("register_auth_timestamp_calls", []).append({"mcp": mcp, "cache": cache})

    def register_revoke_all(mcp, *, cache):
        captures.setdefault("register_revoke_all_calls", []).append({"mcp": mcp, "cache": cache})

    auth_mod.register = register_auth_timestamp
    revoke_mod.register = register_revoke_all

    monkeypatch.setitem(sys.modules, "tools", tools_pkg)
    monkeypatch.setitem(sys.modules, "tools.auth_timestamp", auth_mod)
    monkeypatch.setitem(sys.modules, "tools.revoke_all", revoke_mod)


def _load_server_module(monkeypatch, captures: dict):
    _install_fake_modules(monkeypatch, captures)

    server_path = _find_server_py()
    mod_name = f"server_under_test_{uuid.uuid4().hex}"
    spec = importlib.util.spec_from_file_location(mod_name, server_path)
    assert spec and spec.loader

    module = importlib.util.module_from_spec(spec)
    monkeypatch.setitem(sys.modules, mod_name, module)
    spec.loader.exec_module(module)
    return module


def test_server_wires_cache_and_tools(monkeypatch):
    captures = {}
    module = _load_server_module(monkeypatch, captures)

    assert captures["fastmcp_name"] == "auth-timestamp-mcp"
    mcp = captures["mcp_instance"]

    cache = module.auth_timestamp_cache
    assert cache.cache.maxsize == 7
    assert cache.monitor.interval_seconds == 60.0
    assert cache.auth_timestamp_url("B") == "https://store.example/read/B-auth/authTimestamp"

    # Both tool groups share the one cache instance
    auth_calls = captures["register_auth_timestamp_calls"]
    revoke_calls = captures["register_revoke_all_calls"]
    assert len(auth_calls) == 1 and len(revoke_calls) == 1
    assert auth_calls[0]["cache"] is cache
    assert revoke_calls[0]["cache"] is cache
    assert auth_calls[0]["mcp"] is mcp

    module.main()
    assert captures["run_calls"] == [{"transport": "stdio"}]


@pytest.mark.asyncio
async def test_server_lifespan_runs_eviction_monitor(monkeypatch):
    captures = {}
    module = _load_server_module(monkeypatch, captures)
    monitor = module.auth_timestamp_cache.monitor

    async with captures["lifespan"](captures["mcp_instance"]):
        assert monitor.running
    assert not monitor.running
