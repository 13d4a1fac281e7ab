import pytest

import core.store as store_mod


class DummyMCP:
    """Minimal FastMCP stand-in to capture tool registration."""

    def __init__(self) -> None:
        self.tools = {}

    def tool(self, *, name: str):
        def _decorator(fn):
            self.tools[name] = fn
            return fn
        return _decorator


class FakeClock:
    def __init__(self, now: float = 1_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def dummy_mcp():
    return DummyMCP()


@pytest.fixture
def clock(monkeypatch):
    c = FakeClock()
    monkeypatch.setattr(store_mod.time, "time", c)
    return c


def _analogy_payload(analogy_id="a-1", iteration=1, source="source", target="target", **overrides):
    payload = {
        "analogyId": analogy_id,
        "purpose": "explanation",
        "confidence": 0.8,
        "iteration": iteration,
        "sourceDomain": {
            "name": source,
            "elements": [{"id": "s1", "name": "Source Element", "type": "entity", "description": "src"}],
        },
        "targetDomain": {
            "name": target,
            "elements": [{"id": "t1", "name": "Target Element", "type": "entity", "description": "tgt"}],
        },
        "mappings": [
            {"sourceElement": "s1", "targetElement": "t1", "mappingStrength": 0.8, "justification": "Test mapping"}
        ],
        "strengths": ["Test strength"],
        "limitations": [],
        "nextOperationNeeded": False,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_payload():
    return _analogy_payload
