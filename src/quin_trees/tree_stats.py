"""Statistics for incremental and multi quin trees."""

from __future__ import annotations

import collections
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from quin_trees.logging_config import get_logger

if TYPE_CHECKING:
    from quin_trees.incremental_tree import IncrementalQuinTree
    from quin_trees.multi_tree import MultiIncrementalQuinTree

logger = get_logger(__name__)


@dataclass
class Stats:
    """Aggregated statistics for a quin tree or multi-tree."""

    depth: int
    arity: int
    capacity: int
    leaf_count: int
    node_count: int
    nodes_per_level: dict[int, int]
    shard_count: int
    fill_ratio: float
    is_full: bool


def tree_stats_(
    t: Union[IncrementalQuinTree, MultiIncrementalQuinTree],
) -> Stats:
    """
    Returns aggregated statistics in **O(materialised nodes)** time.

    For a multi-tree, ``capacity`` and the node counts are summed over all
    shards and ``is_full`` refers to the last shard.
    """
    shards = getattr(t, "shards", None) or [t]

    per_level: collections.Counter = collections.Counter()
    for shard in shards:
        for level, _ in shard.nodes:
            per_level[level] += 1

    capacity = sum(shard.capacity for shard in shards)
    leaf_count = sum(len(shard.leaves) for shard in shards)

    return Stats(
        depth=t.depth,
        arity=t.arity,
        capacity=capacity,
        leaf_count=leaf_count,
        node_count=sum(per_level.values()),
        nodes_per_level=dict(sorted(per_level.items())),
        shard_count=len(shards),
        fill_ratio=leaf_count / capacity,
        is_full=shards[-1].is_full(),
    )
