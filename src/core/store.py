"""Bounded multi-namespace in-memory store with dual eviction.

Entries live in namespaces keyed by an application identifier (a session,
an analogy id, a domain name). Two bounds keep memory flat for the life of
the process:

- capacity: each write trims its namespace to ``max_entries_per_namespace``
  (oldest ``created_at`` first) and each namespace creation trims the store
  to ``max_namespaces`` (oldest ``last_seen_at`` first);
- TTL: ``cleanup()`` drops every entry older than ``ttl_seconds`` and any
  namespace that the sweep left empty.

Eviction order follows writes, never reads: ``get`` stamps
``last_accessed_at`` but does not protect an entry from eviction.

Locking: one lock guards the namespace map, one lock per namespace guards
its entries, and a coordinator lock serializes cleanup passes. Lock order is
always map -> namespace. Writers never wait on the coordinator.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Hashable, List, Optional, Tuple, TypeVar

from core.coordinator import CleanupCoordinator
from core.errors import ConfigurationError, ValidationError
from core.eviction import capacity_victims, expired_keys, oldest_namespace

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Entry(Generic[T]):
    # Stores value + wall-clock creation/access times (time.time())
    value: T
    created_at: float
    last_accessed_at: float


@dataclass(frozen=True)
class NamespaceInfo:
    key: Hashable
    last_seen_at: float
    size: int


@dataclass(frozen=True)
class CleanupResult:
    evicted_namespaces: int = 0
    evicted_entries: int = 0

    def __add__(self, other: "CleanupResult") -> "CleanupResult":
        return CleanupResult(
            evicted_namespaces=self.evicted_namespaces + other.evicted_namespaces,
            evicted_entries=self.evicted_entries + other.evicted_entries,
        )


@dataclass(eq=False)
class Namespace(Generic[T]):
    key: Hashable
    max_entries: int
    last_seen_at: float
    entries: "OrderedDict[Hashable, Entry[T]]" = field(default_factory=OrderedDict)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    # Set once the namespace is detached from the store; writers that raced
    # the detach must retry against a fresh namespace.
    removed: bool = False

    def items(self) -> List[Tuple[Hashable, Entry[T]]]:
        return list(self.entries.items())

    def write(self, key: Hashable, value: T, now: float) -> List[Hashable]:
        # Overwrite re-stamps and moves the key to the back of the FIFO queue.
        self.entries.pop(key, None)
        self.entries[key] = Entry(value=value, created_at=now, last_accessed_at=now)
        self.last_seen_at = now

        victims = capacity_victims(self.items(), self.max_entries)
        for victim in victims:
            del self.entries[victim]
        return victims

    def expire(self, ttl_seconds: float, now: float) -> int:
        victims = expired_keys(self.items(), ttl_seconds, now)
        for victim in victims:
            del self.entries[victim]
        return len(victims)


def _require_positive(name: str, value: float) -> None:
    if value is None or value <= 0:
        raise ConfigurationError(f"{name} must be positive, got: {value}")


def _check_key(kind: str, key: Hashable) -> None:
    if key is None or (isinstance(key, str) and not key.strip()):
        raise ValidationError(f"Missing {kind}")
    try:
        hash(key)
    except TypeError as exc:
        raise ValidationError(f"Invalid {kind}: must be hashable") from exc


class Store(Generic[T]):
    """Process-local store bounded by namespace count, entry count and age."""

    def __init__(
        self,
        *,
        max_namespaces: int,
        max_entries_per_namespace: int,
        ttl_seconds: float,
        name: str = "store",
    ) -> None:
        _require_positive("max_namespaces", max_namespaces)
        _require_positive("max_entries_per_namespace", max_entries_per_namespace)
        _require_positive("ttl_seconds", ttl_seconds)

        self.name = name
        self._max_namespaces = int(max_namespaces)
        self._max_entries = int(max_entries_per_namespace)
        self._ttl = float(ttl_seconds)

        # Insertion-ordered: the key order doubles as the namespace order.
        self._namespaces: "OrderedDict[Hashable, Namespace[T]]" = OrderedDict()
        self._lock = threading.Lock()
        self._coordinator = CleanupCoordinator(name=name)

    @property
    def max_namespaces(self) -> int:
        return self._max_namespaces

    @property
    def max_entries_per_namespace(self) -> int:
        return self._max_entries

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    @property
    def coordinator(self) -> CleanupCoordinator:
        return self._coordinator

    def _now(self, now: Optional[float]) -> float:
        return time.time() if now is None else float(now)

    # ---- writes ----

    def put(self, namespace: Hashable, key: Hashable, value: T, *, now: Optional[float] = None) -> None:
        """Insert or overwrite ``key`` in ``namespace``.

        Never rejects a write: capacity bounds are enforced by evicting the
        oldest entry (and, on namespace creation, the oldest namespace).
        """
        _check_key("namespace", namespace)
        _check_key("key", key)

        while True:
            ns = self._namespace_for_write(namespace, now)
            with ns.lock:
                if ns.removed:
                    continue
                victims = ns.write(key, value, self._now(now))

            if victims:
                logger.debug("%s: evicted %d entries from %r (capacity)", self.name, len(victims), namespace)
            return

    def _namespace_for_write(self, namespace: Hashable, now: Optional[float]) -> Namespace[T]:
        with self._lock:
            ns = self._namespaces.get(namespace)
            if ns is not None:
                return ns

            ns = Namespace(key=namespace, max_entries=self._max_entries, last_seen_at=self._now(now))
            self._namespaces[namespace] = ns

            while len(self._namespaces) > self._max_namespaces:
                victim = oldest_namespace(list(self._namespaces.values()), exclude=namespace)
                if victim is None:
                    break
                self._detach(self._namespaces[victim])
                logger.debug("%s: evicted namespace %r (capacity)", self.name, victim)
            return ns

    def _detach(self, ns: Namespace[T]) -> None:
        # Caller holds self._lock.
        with ns.lock:
            ns.removed = True
        self._namespaces.pop(ns.key, None)

    def remove(self, namespace: Hashable, key: Hashable) -> bool:
        """Drop a single entry; an emptied namespace is dropped with it."""
        with self._lock:
            ns = self._namespaces.get(namespace)
            if ns is None:
                return False
            with ns.lock:
                if key not in ns.entries:
                    return False
                del ns.entries[key]
                if not ns.entries:
                    ns.removed = True
                    del self._namespaces[namespace]
            return True

    def clear(self) -> None:
        with self._lock:
            for ns in list(self._namespaces.values()):
                self._detach(ns)

    # ---- reads ----

    def _find(self, namespace: Hashable) -> Optional[Namespace[T]]:
        with self._lock:
            return self._namespaces.get(namespace)

    def lookup(self, namespace: Hashable, key: Hashable, *, now: Optional[float] = None) -> Tuple[Optional[T], bool]:
        ns = self._find(namespace)
        if ns is None:
            return None, False

        with ns.lock:
            entry = ns.entries.get(key)
            if ns.removed or entry is None:
                return None, False
            # Access time only; eviction order is untouched.
            entry.last_accessed_at = self._now(now)
            return entry.value, True

    def get(self, namespace: Hashable, key: Hashable, *, now: Optional[float] = None) -> Optional[T]:
        value, _found = self.lookup(namespace, key, now=now)
        return value

    def snapshot(self, namespace: Hashable) -> List[Tuple[Hashable, Entry[T]]]:
        """Copies of the namespace's entries in eviction order (oldest first)."""
        ns = self._find(namespace)
        if ns is None:
            return []

        with ns.lock:
            if ns.removed:
                return []
            return [(key, dataclasses.replace(entry)) for key, entry in ns.entries.items()]

    def contains(self, namespace: Hashable) -> bool:
        return self._find(namespace) is not None

    def namespace_keys(self) -> List[Hashable]:
        with self._lock:
            return list(self._namespaces.keys())

    def namespaces(self) -> List[NamespaceInfo]:
        with self._lock:
            current = list(self._namespaces.values())

        out: List[NamespaceInfo] = []
        for ns in current:
            with ns.lock:
                if ns.removed:
                    continue
                out.append(NamespaceInfo(key=ns.key, last_seen_at=ns.last_seen_at, size=len(ns.entries)))
        return out

    def __len__(self) -> int:
        with self._lock:
            return len(self._namespaces)

    def entry_count(self) -> int:
        return sum(info.size for info in self.namespaces())

    def stats(self) -> Dict[str, Any]:
        infos = self.namespaces()
        return {
            "name": self.name,
            "namespaces": len(infos),
            "entries": sum(info.size for info in infos),
            "max_namespaces": self._max_namespaces,
            "max_entries_per_namespace": self._max_entries,
            "ttl_seconds": self._ttl,
            "cleanup_passes": self._coordinator.passes,
        }

    # ---- cleanup ----

    def cleanup(self, now: Optional[float] = None) -> CleanupResult:
        """Run one TTL sweep over every namespace.

        Overlapping calls are serialized by the coordinator; each takes its
        own clock reading once it holds the pass.
        """
        return self._coordinator.run(lambda: self._sweep(self._now(now)))

    def _sweep(self, now: float) -> CleanupResult:
        with self._lock:
            targets = list(self._namespaces.values())

        evicted_entries = 0
        evicted_namespaces = 0
        for ns in targets:
            # Only this namespace is locked; writes elsewhere proceed.
            with ns.lock:
                if ns.removed:
                    continue
                dropped = ns.expire(self._ttl, now)
                emptied = dropped > 0 and not ns.entries

            evicted_entries += dropped
            if emptied and self._drop_if_empty(ns):
                evicted_namespaces += 1

        result = CleanupResult(evicted_namespaces=evicted_namespaces, evicted_entries=evicted_entries)
        if evicted_entries or evicted_namespaces:
            logger.info(
                "%s: cleanup evicted %d entries and %d namespaces",
                self.name,
                evicted_entries,
                evicted_namespaces,
            )
        return result

    def _drop_if_empty(self, ns: Namespace[T]) -> bool:
        with self._lock:
            with ns.lock:
                # A writer may have refilled it between the sweep and here.
                if ns.removed or ns.entries or self._namespaces.get(ns.key) is not ns:
                    return False
                ns.removed = True
                del self._namespaces[ns.key]
                return True
