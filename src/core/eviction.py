"""Eviction rules for the bounded store.

Both rules are pure: they receive a snapshot of ``(key, entry)`` pairs in
insertion order and return the keys to drop. The store decides when to
apply them (capacity on every write, TTL on cleanup passes).
"""

from __future__ import annotations

from typing import Hashable, List, Optional, Protocol, Sequence, Tuple


class Stamped(Protocol):
    created_at: float


class Seen(Protocol):
    key: Hashable
    last_seen_at: float


def capacity_victims(
    entries: Sequence[Tuple[Hashable, Stamped]],
    max_entries: int,
) -> List[Hashable]:
    """Return the keys to evict so that at most ``max_entries`` remain.

    Oldest ``created_at`` goes first; equal timestamps fall back to
    insertion position.
    """
    overflow = len(entries) - max_entries
    if overflow <= 0:
        return []

    ranked = sorted(
        range(len(entries)),
        key=lambda i: (entries[i][1].created_at, i),
    )
    return [entries[i][0] for i in ranked[:overflow]]


def expired_keys(
    entries: Sequence[Tuple[Hashable, Stamped]],
    ttl_seconds: float,
    now: float,
) -> List[Hashable]:
    # Strictly older than the TTL; an entry exactly ttl old survives.
    return [key for key, entry in entries if now - entry.created_at > ttl_seconds]


def oldest_namespace(
    candidates: Sequence[Seen],
    *,
    exclude: Optional[Hashable] = None,
) -> Optional[Hashable]:
    """Pick the namespace with the smallest ``last_seen_at``.

    ``candidates`` must be in creation order so ties resolve to the
    earliest namespace. ``exclude`` protects a namespace that was just
    created from being evicted by its own creation.
    """
    best: Optional[Seen] = None
    for ns in candidates:
        if exclude is not None and ns.key == exclude:
            continue
        if best is None or ns.last_seen_at < best.last_seen_at:
            best = ns
    return None if best is None else best.key
