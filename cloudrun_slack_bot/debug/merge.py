"""Merge error groups that co-occur on the same request traces.

The classification agent labels each error message independently, so one
failing request that logs from two call sites (e.g. a database timeout and the
resulting network error) often ends up as two groups. Groups whose trace id
sets overlap by a strict majority from either side are merged, transitively.
"""

import logging
from collections.abc import Sequence

from .models import ErrorGroup, ErrorLog

logger = logging.getLogger(__name__)

PATTERN_SEPARATOR = " / "


class UnionFind:
    """Disjoint-set forest over the indices ``0..n-1``."""

    def __init__(self, n: int) -> None:
        self.parent = list(range(n))
        self.rank = [0] * n

    def find(self, i: int) -> int:
        """Return the root of ``i``, compressing the path on the way."""
        root = i
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[i] != root:
            self.parent[i], i = root, self.parent[i]
        return root

    def union(self, i: int, j: int) -> None:
        """Merge the components containing ``i`` and ``j``."""
        root_i, root_j = self.find(i), self.find(j)
        if root_i == root_j:
            return
        if self.rank[root_i] < self.rank[root_j]:
            root_i, root_j = root_j, root_i
        self.parent[root_j] = root_i
        if self.rank[root_i] == self.rank[root_j]:
            self.rank[root_i] += 1


def _exceeds_half(shared: int, size: int) -> bool:
    # Integer form of shared / size > 0.5
    return 2 * shared > size


def has_trace_overlap(traces_a: set[str], traces_b: set[str]) -> bool:
    """Check whether two trace id sets overlap by a strict majority.

    The overlap is measured from both sides; either side exceeding one half
    is enough, so a small group fully contained in a large one merges. Empty
    sets never overlap.
    """
    if not traces_a or not traces_b:
        return False
    shared = len(traces_a & traces_b)
    return _exceeds_half(shared, len(traces_a)) or _exceeds_half(
        shared, len(traces_b)
    )


def _consolidate(groups: list[ErrorGroup]) -> ErrorGroup:
    """Fold the groups of one component into a single new group."""
    patterns: list[str] = []
    records: list[ErrorLog] = []
    count = 0
    for group in groups:
        if group.pattern not in patterns:
            patterns.append(group.pattern)
        records.extend(group.errors())
        count += group.count

    # min() keeps the first of equal timestamps, i.e. input order breaks ties
    earliest = min(range(len(records)), key=lambda k: records[k].timestamp)
    return ErrorGroup(
        pattern=PATTERN_SEPARATOR.join(patterns),
        representative=records[earliest],
        similar_errors=records[:earliest] + records[earliest + 1 :],
        count=count,
    )


def merge_groups_by_trace(groups: Sequence[ErrorGroup]) -> list[ErrorGroup]:
    """Merge groups that share request traces into single incident groups.

    Args:
        groups: Initial groups from the classification agent, in input order

    Returns:
        One group per connected component of the overlap graph, ordered by
        the first input index of each component. Components of a single
        group are returned unchanged.
    """
    if len(groups) <= 1:
        return list(groups)

    trace_sets = [group.trace_ids() for group in groups]
    uf = UnionFind(len(groups))
    for i in range(len(groups)):
        for j in range(i + 1, len(groups)):
            if has_trace_overlap(trace_sets[i], trace_sets[j]):
                uf.union(i, j)

    components: dict[int, list[int]] = {}
    for i in range(len(groups)):
        components.setdefault(uf.find(i), []).append(i)

    merged: list[ErrorGroup] = []
    for members in components.values():
        if len(members) == 1:
            merged.append(groups[members[0]])
            continue
        group = _consolidate([groups[i] for i in members])
        logger.debug(
            "Merged %d groups by shared traces into '%s' (%d errors)",
            len(members),
            group.pattern,
            group.count,
        )
        merged.append(group)

    if len(merged) < len(groups):
        logger.info(
            "Merged error groups by trace: %d -> %d", len(groups), len(merged)
        )
    return merged
