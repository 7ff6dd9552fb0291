"""Memoization for insight components.

Results are keyed by a SHA-256 of the canonical JSON of a component's
inputs, so an identical snapshot of candidates/interactions (and the same
``now``) reuses the previous result instead of recomputing it.

The cache only saves work; a cold cache produces identical output.  Hits
return deep copies so callers can never mutate a stored result.
"""

from __future__ import annotations

import copy
import hashlib
import json
import logging
import threading
from collections import OrderedDict
from typing import Any, Callable, TypeVar

from pydantic_core import to_jsonable_python

logger = logging.getLogger("heartline.insights.cache")

T = TypeVar("T")


def content_hash(*inputs: Any) -> str:
    """Compute a content hash over component inputs.

    Args:
        inputs: Pydantic models, lists of models, dates and primitives.

    Returns:
        SHA-256 hex digest of the canonicalized JSON.
    """
    # Sort keys for deterministic serialization
    canonical = json.dumps(inputs, sort_keys=True, default=to_jsonable_python)
    return hashlib.sha256(canonical.encode()).hexdigest()


class InsightsCache:
    """Bounded, thread-safe LRU cache of component results.

    Usage::

        cache = InsightsCache(max_entries=128)
        buckets = cache.get_or_compute(
            "categories", (candidates,), lambda: categorizer.categorize(candidates)
        )
    """

    def __init__(self, max_entries: int = 256) -> None:
        self._max_entries = max_entries
        self._entries: OrderedDict[str, Any] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get_or_compute(self, component: str, inputs: tuple, compute: Callable[[], T]) -> T:
        """Return the cached result for ``inputs`` or compute and store it.

        Args:
            component: Component name, namespacing the key.
            inputs:    Everything the result depends on.
            compute:   Zero-argument callable producing the result.

        Returns:
            The (possibly cached) result.
        """
        key = f"{component}:{content_hash(*inputs)}"
        with self._lock:
            if key in self._entries:
                self._entries.move_to_end(key)
                self.hits += 1
                return copy.deepcopy(self._entries[key])

        result = compute()

        with self._lock:
            self.misses += 1
            self._entries[key] = copy.deepcopy(result)
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicted cached insight %s", evicted)
        return result

    def clear(self) -> None:
        """Reset the cache."""
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)
