"""Pretty-printing utilities for quin tree structures."""

from __future__ import annotations

from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from quin_trees.incremental_tree import IncrementalQuinTree
    from quin_trees.multi_tree import MultiIncrementalQuinTree


def short_value(value: int) -> str:
    """Elide the middle of long field elements for display."""
    s = str(value)
    return s if len(s) <= 10 else f"{s[:3]}...{s[-3:]}"


def _render_tree(tree: IncrementalQuinTree, indent: str = "") -> list[str]:
    lines = []
    for level in range(tree.depth, 0, -1):
        entries = sorted(i for (lvl, i) in tree.nodes if lvl == level)
        if not entries:
            zero = tree.zeros.empty_root if level == tree.depth else tree.zeros[level]
            lines.append(f"{indent}L{level}: <zero {short_value(zero)}>")
            continue
        text = " | ".join(f"{i}:{short_value(tree.nodes[(level, i)])}" for i in entries)
        lines.append(f"{indent}L{level}: {text}")
    leaves = " | ".join(f"{i}:{short_value(v)}" for i, v in enumerate(tree.leaves))
    lines.append(f"{indent}L0: {leaves or '<empty>'}")
    return lines


def print_structure(tree: Union[IncrementalQuinTree, MultiIncrementalQuinTree]) -> str:
    """
    Render the materialised nodes of a tree, root level first.

    Levels with nothing materialised show their zero-cache value. A
    multi-tree prints one block per shard.
    """
    from quin_trees.incremental_tree import IncrementalQuinTree
    from quin_trees.multi_tree import MultiIncrementalQuinTree

    if isinstance(tree, MultiIncrementalQuinTree):
        lines = [f"{type(tree).__name__}: {len(tree.shards)} shard(s), {len(tree.leaves)} leaves"]
        for k, shard in enumerate(tree.shards):
            lines.append(f"  shard {k} root={short_value(tree.roots[k])}")
            lines.extend(_render_tree(shard, indent="    "))
        return "\n".join(lines)

    if not isinstance(tree, IncrementalQuinTree):
        raise TypeError(f"print_structure() expects a quin tree, got {type(tree).__name__}")

    header = f"{type(tree).__name__}: root={short_value(tree.root)}"
    return "\n".join([header] + _render_tree(tree))
