"""In-memory state for analogical reasoning sessions.

Two bounded stores back the server:
- history: namespace = analogy id, key = iteration, value = AnalogyRecord
- domains: namespace = domain name, single ``DOMAIN_SLOT`` key, value = the
  latest sighting of that Domain (elements are replaced, not merged)

Both stores evict silently under their bounds, so ``record`` never fails
for capacity reasons. Data is lost on process exit.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from config import Settings
from core.models import AnalogyRecord, Domain
from core.store import CleanupResult, Store

logger = logging.getLogger(__name__)

DOMAIN_SLOT = "domain"


class AnalogySessionManager:
    def __init__(self, *, history: Store[AnalogyRecord], domains: Store[Domain]) -> None:
        self.name = "analogies"
        self._history = history
        self._domains = domains

    @property
    def history_store(self) -> Store[AnalogyRecord]:
        return self._history

    @property
    def domain_store(self) -> Store[Domain]:
        return self._domains

    def record(self, record: AnalogyRecord, *, now: Optional[float] = None) -> None:
        self._history.put(record.analogy_id, record.iteration, record, now=now)
        # Re-putting the slot refreshes last_seen_at, which drives registry eviction.
        self._domains.put(record.source_domain.name, DOMAIN_SLOT, record.source_domain, now=now)
        self._domains.put(record.target_domain.name, DOMAIN_SLOT, record.target_domain, now=now)
        logger.debug("recorded analogy %r iteration %d", record.analogy_id, record.iteration)

    def history(self, analogy_id: str) -> List[AnalogyRecord]:
        return [entry.value for _key, entry in self._history.snapshot(analogy_id)]

    def domains(self) -> List[Dict[str, Any]]:
        out: List[Dict[str, Any]] = []
        for info in self._domains.namespaces():
            domain, found = self._domains.lookup(info.key, DOMAIN_SLOT)
            if not found:
                continue
            out.append(
                {
                    "name": domain.name,
                    "last_seen_at": info.last_seen_at,
                    "elements": [{"id": e.id, "name": e.name, "type": e.type} for e in domain.elements],
                }
            )
        return out

    def cleanup(self, now: Optional[float] = None) -> CleanupResult:
        return self._history.cleanup(now) + self._domains.cleanup(now)

    def stats(self) -> Dict[str, Any]:
        return {"history": self._history.stats(), "domains": self._domains.stats()}


def build_manager(settings: Settings) -> AnalogySessionManager:
    history: Store[AnalogyRecord] = Store(
        max_namespaces=settings.max_analogies,
        max_entries_per_namespace=settings.max_history,
        ttl_seconds=settings.ttl_seconds,
        name="history",
    )
    domains: Store[Domain] = Store(
        max_namespaces=settings.max_domains,
        max_entries_per_namespace=1,
        ttl_seconds=settings.ttl_seconds,
        name="domains",
    )
    return AnalogySessionManager(history=history, domains=domains)
