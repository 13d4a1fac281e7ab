"""MCP tool that runs a cleanup pass on demand.

The periodic scheduler already sweeps on a timer; this tool lets clients
and test harnesses force a pass and see what it removed.
"""

from __future__ import annotations

from typing import Any, Dict

from mcp.server.fastmcp import FastMCP

from sessions.analogies import AnalogySessionManager


def register(mcp: FastMCP, *, manager: AnalogySessionManager) -> None:
    @mcp.tool(name="trigger_cleanup")
    async def trigger_cleanup() -> Dict[str, Any]:
        """Drop expired history entries and domain elements now.

        Returns:
          {"evicted_namespaces": int, "evicted_entries": int, "stats": {...}}
        """
        result = manager.cleanup()
        return {
            "evicted_namespaces": result.evicted_namespaces,
            "evicted_entries": result.evicted_entries,
            "stats": manager.stats(),
        }
