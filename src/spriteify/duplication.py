# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Duplicate icon detection models and matching service."""

import logging
from dataclasses import dataclass
from typing import Literal

import Levenshtein

from spriteify.cache import CompilationCache
from spriteify.model import CompiledSymbol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DuplicationMember:
    """Represent one member row in a duplication group."""

    group_id: int
    identifier: str
    file_path: str
    content_hash: str
    best_ratio: float
    avg_ratio: float
    hash_overlap: bool


@dataclass(frozen=True)
class DuplicationGroup:
    """Represent one duplication group."""

    group_id: int
    members: list[DuplicationMember]
    pair_count: int
    hash_overlap_pairs: int
    match_type: Literal["exact", "fuzzy"]


@dataclass(frozen=True)
class DuplicationResult:
    """Represent duplication findings for one symbol set."""

    exact_groups: list[DuplicationGroup]
    fuzzy_groups: list[DuplicationGroup]


@dataclass(frozen=True)
class _PairEdge:
    """Represent one pair match edge in the fuzzy graph."""

    left: int
    right: int
    ratio: float
    hash_match: bool


class DuplicationChecker:
    """Find duplicate and near-duplicate icons."""

    def __init__(self, threshold: float) -> None:
        """Initialize checker with fuzzy threshold.

        Args:
            threshold: Inclusive markup similarity threshold in [0.0, 1.0].

        Raises:
            ValueError: If threshold is outside [0.0, 1.0].
        """
        if threshold < 0.0 or threshold > 1.0:
            raise ValueError("threshold must be between 0.0 and 1.0.")
        self._threshold = threshold

    def check(self, cache: CompilationCache) -> DuplicationResult:
        """Compute exact and fuzzy duplication groups over cached symbols.

        Args:
            cache: Compilation cache holding the symbols to compare.

        Returns:
            Exact groups by content hash and fuzzy groups by normalized markup.
        """
        symbols = sorted(
            (entry.symbol for entry in cache.entries()),
            key=lambda symbol: symbol.file_path,
        )
        exact = [[entry.symbol for entry in group] for group in cache.duplicates_by_hash()]
        return DuplicationResult(
            exact_groups=self._build_exact_groups(exact),
            fuzzy_groups=self._build_fuzzy_groups(symbols),
        )

    def _build_exact_groups(
        self, hash_groups: list[list[CompiledSymbol]]
    ) -> list[DuplicationGroup]:
        """Convert content-hash groups into exact duplication groups."""
        groups: list[DuplicationGroup] = []
        for group_id, members in enumerate(hash_groups, start=1):
            pair_count = len(members) * (len(members) - 1) // 2
            groups.append(
                DuplicationGroup(
                    group_id=group_id,
                    members=[
                        DuplicationMember(
                            group_id=group_id,
                            identifier=symbol.identifier,
                            file_path=symbol.file_path,
                            content_hash=symbol.content_hash,
                            best_ratio=1.0,
                            avg_ratio=1.0,
                            hash_overlap=True,
                        )
                        for symbol in members
                    ],
                    pair_count=pair_count,
                    hash_overlap_pairs=pair_count,
                    match_type="exact",
                )
            )
        return groups

    def _build_fuzzy_groups(self, symbols: list[CompiledSymbol]) -> list[DuplicationGroup]:
        """Build fuzzy duplication groups by normalized markup similarity."""
        edges: list[_PairEdge] = []
        neighbors: dict[int, set[int]] = {index: set() for index in range(len(symbols))}

        for left_index, left in enumerate(symbols):
            for right_index in range(left_index + 1, len(symbols)):
                right = symbols[right_index]
                ratio = float(
                    Levenshtein.ratio(left.normalized_markup, right.normalized_markup)
                )
                if ratio < self._threshold:
                    continue
                edges.append(
                    _PairEdge(
                        left=left_index,
                        right=right_index,
                        ratio=ratio,
                        hash_match=left.content_hash == right.content_hash,
                    )
                )
                neighbors[left_index].add(right_index)
                neighbors[right_index].add(left_index)

        components: list[list[int]] = []
        visited: set[int] = set()
        for root in range(len(symbols)):
            if root in visited or not neighbors[root]:
                continue
            stack = [root]
            component: list[int] = []
            visited.add(root)
            while stack:
                current = stack.pop()
                component.append(current)
                for linked in neighbors[current]:
                    if linked in visited:
                        continue
                    visited.add(linked)
                    stack.append(linked)
            components.append(sorted(component))

        groups: list[DuplicationGroup] = []
        for group_id, component in enumerate(components, start=1):
            component_set = set(component)
            component_edges = [
                edge
                for edge in edges
                if edge.left in component_set and edge.right in component_set
            ]
            members: list[DuplicationMember] = []
            for index in component:
                symbol = symbols[index]
                ratios = [
                    edge.ratio
                    for edge in component_edges
                    if index in (edge.left, edge.right)
                ]
                members.append(
                    DuplicationMember(
                        group_id=group_id,
                        identifier=symbol.identifier,
                        file_path=symbol.file_path,
                        content_hash=symbol.content_hash,
                        best_ratio=max(ratios),
                        avg_ratio=sum(ratios) / len(ratios),
                        hash_overlap=any(
                            edge.hash_match
                            for edge in component_edges
                            if index in (edge.left, edge.right)
                        ),
                    )
                )
            groups.append(
                DuplicationGroup(
                    group_id=group_id,
                    members=members,
                    pair_count=len(component_edges),
                    hash_overlap_pairs=sum(1 for edge in component_edges if edge.hash_match),
                    match_type="fuzzy",
                )
            )
        logger.debug(
            f"Fuzzy duplication check completed (symbols={len(symbols)} groups={len(groups)})"
        )
        return groups
