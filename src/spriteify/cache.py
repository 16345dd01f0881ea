# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""In-memory compilation cache keyed by source path."""

import logging
import threading
from dataclasses import dataclass

from spriteify.model import CompiledSymbol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """Represent one cached compilation.

    Attributes:
        source_path: Absolute source file path.
        source_hash: Formatting-insensitive digest of the file content at compile time.
        symbol: Compiled symbol produced from that content.
    """

    source_path: str
    source_hash: str
    symbol: CompiledSymbol


class CompilationCache:
    """Store compiled symbols per source path for one orchestrator lifetime."""

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, source_path: object) -> bool:
        return source_path in self._entries

    def lookup(self, source_path: str) -> CacheEntry | None:
        """Return the cached entry for ``source_path``, if any."""
        return self._entries.get(source_path)

    def should_recompile(self, source_path: str, fresh_hash: str) -> bool:
        """Return whether ``source_path`` needs a fresh compilation.

        Args:
            source_path: Absolute source file path.
            fresh_hash: Digest of the current file content.

        Returns:
            ``False`` exactly when an entry exists with the same source hash.
        """
        entry = self._entries.get(source_path)
        return entry is None or entry.source_hash != fresh_hash

    def store(self, source_path: str, source_hash: str, symbol: CompiledSymbol) -> CacheEntry:
        """Create or replace the entry for ``source_path``."""
        entry = CacheEntry(source_path=source_path, source_hash=source_hash, symbol=symbol)
        with self._lock:
            self._entries[source_path] = entry
        return entry

    def invalidate(self, source_path: str) -> bool:
        """Drop the entry for ``source_path``; return whether one existed."""
        with self._lock:
            removed = self._entries.pop(source_path, None) is not None
        if removed:
            logger.debug(f"Cache entry invalidated (source_path={source_path})")
        return removed

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def entries(self) -> list[CacheEntry]:
        """Return all entries ordered by source path."""
        with self._lock:
            snapshot = list(self._entries.values())
        return sorted(snapshot, key=lambda entry: entry.source_path)

    def duplicates_by_hash(self) -> list[list[CacheEntry]]:
        """Group entries that share a symbol content hash.

        Returns:
            Groups of two or more entries, ordered by hash; members ordered by path.
        """
        by_hash: dict[str, list[CacheEntry]] = {}
        for entry in self.entries():
            by_hash.setdefault(entry.symbol.content_hash, []).append(entry)
        return [by_hash[content_hash] for content_hash in sorted(by_hash) if len(by_hash[content_hash]) > 1]
