# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Process-lifetime memoization of parsed annotation maps."""

import logging
import threading
from collections.abc import Callable
from types import MappingProxyType

from docnotes.model import AnnotationMap, DeclarationIdentity

logger = logging.getLogger(__name__)


class AnnotationCache:
    """Store one immutable annotation map per declaration identity.

    Entries are never invalidated or replaced. The check, compute and store
    sequence runs under a lock so each identity is computed at most once.
    """

    def __init__(self) -> None:
        self._entries: dict[DeclarationIdentity, AnnotationMap] = {}
        self._lock = threading.Lock()

    def get_or_compute(
        self,
        identity: DeclarationIdentity,
        compute: Callable[[], dict[str, str]],
    ) -> AnnotationMap:
        """Return the cached map for an identity, computing it on first access.

        Args:
            identity: Declaration identity used as cache key.
            compute: Produces the annotation map when the identity is absent.

        Returns:
            Read-only view of the cached annotation map.
        """
        with self._lock:
            cached = self._entries.get(identity)
            if cached is not None:
                logger.debug(f"Annotation cache hit (identity={identity})")
                return cached
            entry = MappingProxyType(dict(compute()))
            self._entries[identity] = entry
            logger.debug(
                f"Annotation cache stored (identity={identity} annotations={len(entry)})"
            )
            return entry

    def get(self, identity: DeclarationIdentity) -> AnnotationMap | None:
        """Return the cached map for an identity, or ``None`` when not computed."""
        with self._lock:
            return self._entries.get(identity)

    def clear(self) -> None:
        """Drop every cached entry."""
        with self._lock:
            self._entries.clear()

    def __contains__(self, identity: object) -> bool:
        with self._lock:
            return identity in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
