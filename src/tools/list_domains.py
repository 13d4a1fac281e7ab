"""MCP tool that lists the domain registry."""

from __future__ import annotations

from typing import Any, Dict, List

from mcp.server.fastmcp import FastMCP

from sessions.analogies import AnalogySessionManager


def register(mcp: FastMCP, *, manager: AnalogySessionManager) -> None:
    @mcp.tool(name="list_domains")
    async def list_domains() -> List[Dict[str, Any]]:
        """Return every registered domain with its elements and last-seen time."""
        return manager.domains()
