"""MCP tool that lists the stored iterations of an analogy."""

from __future__ import annotations

from typing import Any, Dict, List

from mcp.server.fastmcp import FastMCP

from core.errors import ValidationError
from sessions.analogies import AnalogySessionManager


def register(mcp: FastMCP, *, manager: AnalogySessionManager) -> None:
    @mcp.tool(name="list_history")
    async def list_history(analogy_id: str = "") -> List[Dict[str, Any]]:
        """Return the retained iterations for an analogy, oldest first.

        An unknown or fully expired analogy returns an empty list.
        """
        if not analogy_id or not analogy_id.strip():
            raise ValidationError("Missing analogy_id")

        return [
            {
                "iteration": r.iteration,
                "purpose": r.purpose,
                "confidence": r.confidence,
                "source_domain": r.source_domain.name,
                "target_domain": r.target_domain.name,
                "mappings": [
                    {
                        "source_element": m.source_element,
                        "target_element": m.target_element,
                        "mapping_strength": m.mapping_strength,
                        "justification": m.justification,
                        "limitations": list(m.limitations),
                    }
                    for m in r.mappings
                ],
                "strengths": list(r.strengths),
                "limitations": list(r.limitations),
                "inferences": [
                    {
                        "statement": i.statement,
                        "confidence": i.confidence,
                        "based_on_mappings": list(i.based_on_mappings),
                    }
                    for i in r.inferences
                ],
                "next_operation_needed": r.next_operation_needed,
                "suggested_operations": list(r.suggested_operations),
            }
            for r in manager.history(analogy_id)
        ]
