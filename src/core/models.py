"""Immutable dataclasses for the analogical reasoning payloads.

The stores keep these as entry values, so they are frozen: readers get the
same object the writer stored and cannot mutate shared state through it.
``parse_analogy`` turns a raw tool payload into an AnalogyRecord with only
the structural checks the stores rely on.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Mapping, Optional, Tuple, get_args

from core.errors import ValidationError


Purpose = Literal["explanation", "prediction", "problem-solving", "creative-generation"]
ElementType = Literal["entity", "attribute", "relation", "process"]
SuggestedOperation = Literal[
    "add-mapping", "revise-mapping", "draw-inference", "evaluate-limitation", "try-new-source"
]

PURPOSES: Tuple[str, ...] = get_args(Purpose)
ELEMENT_TYPES: Tuple[str, ...] = get_args(ElementType)
SUGGESTED_OPERATIONS: Tuple[str, ...] = get_args(SuggestedOperation)


@dataclass(frozen=True)
class DomainElement:
    id: str
    name: str
    type: ElementType
    description: str = ""


@dataclass(frozen=True)
class Domain:
    name: str
    elements: Tuple[DomainElement, ...] = ()


@dataclass(frozen=True)
class AnalogicalMapping:
    # source_element / target_element are element ids
    source_element: str
    target_element: str
    mapping_strength: float
    justification: str
    limitations: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Inference:
    statement: str
    confidence: float
    based_on_mappings: Tuple[str, ...] = ()


@dataclass(frozen=True)
class AnalogyRecord:
    """One iteration of an analogy.

    Field groups:
    - Identity: analogy_id, iteration
    - Domains: source_domain, target_domain, mappings
    - Assessment: purpose, confidence, strengths, limitations, inferences
    - Flow: next_operation_needed, suggested_operations
    """

    analogy_id: str
    iteration: int
    purpose: Purpose
    confidence: float

    source_domain: Domain
    target_domain: Domain
    mappings: Tuple[AnalogicalMapping, ...] = ()

    strengths: Tuple[str, ...] = ()
    limitations: Tuple[str, ...] = ()
    inferences: Tuple[Inference, ...] = ()

    next_operation_needed: bool = False
    suggested_operations: Tuple[SuggestedOperation, ...] = ()


def _require_str(payload: Mapping[str, Any], key: str, *, where: str = "") -> str:
    value = payload.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Invalid {where}{key}: must be a non-empty string")
    return value


def _parse_element(raw: Any, *, index: int, domain_name: str) -> DomainElement:
    if not isinstance(raw, Mapping):
        raise ValidationError(f"Invalid element #{index} in domain {domain_name!r}")

    where = f"element #{index} "
    name = _require_str(raw, "name", where=where)
    el_type = raw.get("type")
    if el_type not in ELEMENT_TYPES:
        raise ValidationError(f"Invalid {where}type: must be one of {' | '.join(ELEMENT_TYPES)}")

    # Missing ids are derived from name so re-sightings land on the same key.
    el_id = raw.get("id") or f"{domain_name}:{name}"
    description = raw.get("description") or ""
    return DomainElement(id=str(el_id), name=name, type=el_type, description=str(description))


def _parse_domain(raw: Any, *, label: str) -> Domain:
    if not isinstance(raw, Mapping):
        raise ValidationError(f"Invalid {label}: must be an object")

    name = _require_str(raw, "name", where=f"{label} ")
    elements = raw.get("elements") or []
    if not isinstance(elements, (list, tuple)):
        raise ValidationError(f"Invalid {label} elements: must be a list")

    return Domain(
        name=name,
        elements=tuple(_parse_element(e, index=i, domain_name=name) for i, e in enumerate(elements)),
    )


def _str_tuple(raw: Optional[Any], *, label: str) -> Tuple[str, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, (list, tuple)) or not all(isinstance(s, str) for s in raw):
        raise ValidationError(f"Invalid {label}: must be a list of strings")
    return tuple(raw)


def _unit_interval(value: Any) -> bool:
    return not isinstance(value, bool) and isinstance(value, (int, float)) and 0 <= value <= 1


def _parse_mappings(raw: Optional[Any]) -> Tuple[AnalogicalMapping, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, (list, tuple)):
        raise ValidationError("Invalid mappings: must be a list")

    out = []
    for i, m in enumerate(raw):
        if not isinstance(m, Mapping):
            raise ValidationError(f"Invalid mapping #{i}: must be an object")
        where = f"mapping #{i} "
        source = _require_str(m, "sourceElement", where=where)
        target = _require_str(m, "targetElement", where=where)
        if not _unit_interval(m.get("mappingStrength")):
            raise ValidationError(f"Invalid {where}mappingStrength: must be a number between 0 and 1")
        justification = _require_str(m, "justification", where=where)
        out.append(
            AnalogicalMapping(
                source_element=source,
                target_element=target,
                mapping_strength=float(m["mappingStrength"]),
                justification=justification,
                limitations=_str_tuple(m.get("limitations"), label=f"{where}limitations"),
            )
        )
    return tuple(out)


def _parse_inferences(raw: Optional[Any]) -> Tuple[Inference, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, (list, tuple)):
        raise ValidationError("Invalid inferences: must be a list")

    out = []
    for i, inf in enumerate(raw):
        if not isinstance(inf, Mapping):
            raise ValidationError(f"Invalid inference #{i}: must be an object")
        where = f"inference #{i} "
        statement = _require_str(inf, "statement", where=where)
        if not _unit_interval(inf.get("confidence")):
            raise ValidationError(f"Invalid {where}confidence: must be a number between 0 and 1")
        based_on = inf.get("basedOnMappings")
        if not isinstance(based_on, (list, tuple)):
            raise ValidationError(f"Invalid {where}basedOnMappings: must be a list of mapping ids")
        out.append(
            Inference(
                statement=statement,
                confidence=float(inf["confidence"]),
                # Non-string ids are dropped rather than rejected.
                based_on_mappings=tuple(x for x in based_on if isinstance(x, str)),
            )
        )
    return tuple(out)


def _parse_suggested_operations(raw: Optional[Any]) -> Tuple[SuggestedOperation, ...]:
    if not isinstance(raw, (list, tuple)):
        return ()
    # Unknown operations are filtered out, not rejected.
    return tuple(op for op in raw if op in SUGGESTED_OPERATIONS)


def parse_analogy(payload: Mapping[str, Any]) -> AnalogyRecord:
    if not isinstance(payload, Mapping):
        raise ValidationError("Invalid payload: must be an object")

    analogy_id = _require_str(payload, "analogyId")

    purpose = payload.get("purpose")
    if purpose not in PURPOSES:
        raise ValidationError(f"Invalid purpose: must be one of {' | '.join(PURPOSES)}")

    confidence = payload.get("confidence")
    if not _unit_interval(confidence):
        raise ValidationError("Invalid confidence: must be a number between 0 and 1")

    iteration = payload.get("iteration")
    if isinstance(iteration, bool) or not isinstance(iteration, int) or iteration < 0:
        raise ValidationError("Invalid iteration: must be a non-negative integer")

    return AnalogyRecord(
        analogy_id=analogy_id,
        iteration=iteration,
        purpose=purpose,
        confidence=float(confidence),
        source_domain=_parse_domain(payload.get("sourceDomain"), label="sourceDomain"),
        target_domain=_parse_domain(payload.get("targetDomain"), label="targetDomain"),
        mappings=_parse_mappings(payload.get("mappings")),
        strengths=_str_tuple(payload.get("strengths"), label="strengths"),
        limitations=_str_tuple(payload.get("limitations"), label="limitations"),
        inferences=_parse_inferences(payload.get("inferences")),
        next_operation_needed=bool(payload.get("nextOperationNeeded", False)),
        suggested_operations=_parse_suggested_operations(payload.get("suggestedOperations")),
    )
