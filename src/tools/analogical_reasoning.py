"""MCP tool that records one iteration of an analogy.

Registers the 'analogical_reasoning' tool which validates the payload,
stores it in the bounded history and domain registry, and returns a short
summary of the stored state.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from mcp.server.fastmcp import FastMCP

from core.models import parse_analogy
from sessions.analogies import AnalogySessionManager


def register(mcp: FastMCP, *, manager: AnalogySessionManager) -> None:
    @mcp.tool(name="analogical_reasoning")
    async def analogical_reasoning(
        analogy_id: str,
        purpose: str,
        confidence: float,
        iteration: int,
        source_domain: Dict[str, Any],
        target_domain: Dict[str, Any],
        mappings: Optional[List[Dict[str, Any]]] = None,
        strengths: Optional[List[str]] = None,
        limitations: Optional[List[str]] = None,
        inferences: Optional[List[Dict[str, Any]]] = None,
        next_operation_needed: bool = False,
        suggested_operations: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        """Record an analogy between a source and a target domain.

        Parameters:
          - analogy_id: identifier grouping the iterations of one analogy.
          - purpose: explanation | prediction | problem-solving | creative-generation.
          - confidence: number between 0 and 1.
          - iteration: non-negative iteration number (overwrites an equal one).
          - source_domain / target_domain: {"name": str, "elements": [{"id", "name", "type", "description"}]}.
          - mappings: [{"sourceElement", "targetElement", "mappingStrength" (0-1), "justification", "limitations"?}].
          - strengths / limitations: optional lists of strings.
          - inferences: [{"statement", "confidence" (0-1), "basedOnMappings": [str]}].
          - next_operation_needed: whether the caller intends another iteration.
          - suggested_operations: add-mapping | revise-mapping | draw-inference | evaluate-limitation |
            try-new-source; unknown values are dropped.

        Returns:
          {"analogy_id", "iteration", "history_length", "domains", "next_operation_needed",
           "suggested_operations"}.
          Older iterations and domains are evicted silently once the configured bounds are hit.

        Raises:
          ValidationError for malformed payloads.
        """
        record = parse_analogy(
            {
                "analogyId": analogy_id,
                "purpose": purpose,
                "confidence": confidence,
                "iteration": iteration,
                "sourceDomain": source_domain,
                "targetDomain": target_domain,
                "mappings": mappings,
                "strengths": strengths,
                "limitations": limitations,
                "inferences": inferences,
                "nextOperationNeeded": next_operation_needed,
                "suggestedOperations": suggested_operations,
            }
        )
        manager.record(record)

        return {
            "analogy_id": record.analogy_id,
            "iteration": record.iteration,
            "history_length": len(manager.history(record.analogy_id)),
            "domains": [record.source_domain.name, record.target_domain.name],
            "next_operation_needed": record.next_operation_needed,
            "suggested_operations": list(record.suggested_operations),
        }
