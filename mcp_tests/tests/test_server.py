import sys
import types
import uuid
import importlib.util
from pathlib import Path

import pytest

from core.errors import ConfigurationError


def _find_server_py() -> Path:
    root = Path(__file__).resolve().parents[2]
    candidates = [
        root / "server.py",
        root / "server" / "server.py",
        root / "src" / "server" / "server.py",
    ]
    for p in candidates:
        if p.exists():
            return p
    raise FileNotFoundError(f"Could not find server.py. Tried: {candidates}")


def _install_fake_modules(monkeypatch, captures: dict):
    # ---- Fake mcp.server.fastmcp.FastMCP ----
    mcp_mod = types.ModuleType("mcp")
    mcp_server_mod = types.ModuleType("mcp.server")
    fastmcp_mod = types.ModuleType("mcp.server.fastmcp")

    class DummyFastMCP:
        def __init__(self, name: str):
            captures["fastmcp_name"] = name
            captures["mcp_instance"] = self
            self.run_calls = []

        def run(self, *, transport: str):
            self.run_calls.append({"transport": transport})
            captures["run_calls"] = list(self.run_calls)
            captures["scheduler_started_before_run"] = captures.get("scheduler_started", False)

    fastmcp_mod.FastMCP = DummyFastMCP

    mcp_mod.__path__ = []
    mcp_server_mod.__path__ = []

    monkeypatch.setitem(sys.modules, "mcp", mcp_mod)
    monkeypatch.setitem(sys.modules, "mcp.server", mcp_server_mod)
    monkeypatch.setitem(sys.modules, "mcp.server.fastmcp", fastmcp_mod)

    # ---- Fake logging setup + scheduler ----
    log_mod = types.ModuleType("core.log_config")
    log_mod.configure_logging = lambda level: captures.setdefault("log_levels", []).append(level)
    monkeypatch.setitem(sys.modules, "core.log_config", log_mod)

    sched_mod = types.ModuleType("core.scheduler")

    class FakeScheduler:
        def __init__(self, targets, *, interval_seconds: float):
            captures["scheduler_targets"] = list(targets)
            captures["scheduler_interval"] = interval_seconds

        def start(self):
            captures["scheduler_started"] = True

        def stop(self, timeout=None):
            captures["scheduler_stopped"] = True

    sched_mod.CleanupScheduler = FakeScheduler
    monkeypatch.setitem(sys.modules, "core.scheduler", sched_mod)

    # ---- Fake tools ----
    tools_pkg = types.ModuleType("tools")
    tools_pkg.__path__ = []
    monkeypatch.setitem(sys.modules, "tools", tools_pkg)

    for tool_name in ("analogical_reasoning", "list_history", "list_domains", "trigger_cleanup"):
        mod = types.ModuleType(f"tools.{tool_name}")

        def register(mcp, *, manager, _name=tool_name):
            captures.setdefault("register_calls", []).append(
                {"tool": _name, "mcp": mcp, "manager": manager}
            )

        mod.register = register
        monkeypatch.setitem(sys.modules, f"tools.{tool_name}", mod)


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


def test_server_builds_stores_and_registers_tools(monkeypatch):
    monkeypatch.setenv("AR_MAX_HISTORY", "3")
    monkeypatch.setenv("AR_MAX_DOMAINS", "2")
    monkeypatch.setenv("AR_CLEANUP_INTERVAL_MINUTES", "1")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    captures = {}
    module = _load_server_module(monkeypatch, captures)

    assert captures["fastmcp_name"] == "bounded-session-mcp"
    assert captures["log_levels"] == ["debug"]
    mcp = captures["mcp_instance"]

    calls = captures["register_calls"]
    assert [c["tool"] for c in calls] == [
        "analogical_reasoning",
        "list_history",
        "list_domains",
        "trigger_cleanup",
    ]
    # Every tool shares the same manager instance
    assert all(c["manager"] is module.manager for c in calls)
    assert all(c["mcp"] is mcp for c in calls)

    assert module.manager.history_store.max_entries_per_namespace == 3
    assert module.manager.domain_store.max_namespaces == 2
    assert captures["scheduler_targets"] == [module.manager]
    assert captures["scheduler_interval"] == 60.0

    # main() starts the cleanup timer, runs stdio, then stops the timer
    module.main()
    assert captures["run_calls"] == [{"transport": "stdio"}]
    assert captures["scheduler_started_before_run"] is True
    assert captures["scheduler_stopped"] is True


def test_server_fails_fast_on_bad_bounds(monkeypatch):
    monkeypatch.setenv("AR_TTL_MINUTES", "-1")

    with pytest.raises(ConfigurationError, match="AR_TTL_MINUTES must be positive"):
        _load_server_module(monkeypatch, {})
