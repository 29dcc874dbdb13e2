# SPDX-License-Identifier: MIT
"""Remove junk nodes from a scene graph.

Junk is decided bottom-up: a grouping node whose children were all
pruned becomes junk itself and is removed from its own parent.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from vrml_fixer.scene.fields import SFNode
from vrml_fixer.scene.nodes import Group, IndexedLineSet, Node, Shape, Transform
from vrml_fixer.scene.scene_graph import iter_child_nodes, walk

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PruneRules:
    """What counts as junk.

    Attributes:
        excluded_ids: Node ids (see ``VrmlWriter.assign_node_ids``) of shapes to drop
        prune_line_sets: Drop shapes whose geometry is an IndexedLineSet
        keep_group_id: When set, drop every Group that is neither inside this one nor above it
    """

    excluded_ids: frozenset[int] = field(default_factory=frozenset)
    prune_line_sets: bool = True
    keep_group_id: int | None = None


class JunkPruner:
    """Applies ``PruneRules`` to a graph whose nodes have been numbered."""

    def __init__(self, rules: PruneRules, node_ids: dict[Node, int]):
        self.rules = rules
        self.node_ids = node_ids
        self.removed = 0
        self._verdicts: dict[Node, bool] = {}
        self._kept_group: Node | None = None
        self._kept_path: set[Node] = set()
        self._kept_subtree: set[Node] = set()

    def prune(self, root: Node) -> int:
        """Prune everything below root.

        The other rules still apply inside the kept group; only the kept
        group itself is never removed.

        Returns:
            Number of entries removed from node lists

        Raises:
            ValueError: if ``keep_group_id`` doesn't name a reachable Group
        """
        if self.rules.keep_group_id is not None:
            self._kept_group = self._find_kept_group(root, self.rules.keep_group_id)
            self._kept_path = self._find_kept_path(root, self._kept_group)
            self._kept_subtree = set(walk(self._kept_group))
        self.is_junk(root)
        return self.removed

    def is_junk(self, node: Node | None) -> bool:
        """Decide whether a node is junk, pruning its subtree on the way.

        Each distinct node is judged once; later references reuse the verdict.
        """
        if node is None:
            return False
        if node in self._verdicts:
            return self._verdicts[node]
        self._verdicts[node] = False
        verdict = self._judge(node)
        self._verdicts[node] = verdict
        return verdict

    def _judge(self, node: Node) -> bool:
        if isinstance(node, Shape):
            if self.rules.prune_line_sets and isinstance(node.geometry, IndexedLineSet):
                return True
            return self.node_ids.get(node) in self.rules.excluded_ids

        if (
            self._kept_group is not None
            and isinstance(node, Group)
            and node not in self._kept_path
            and node not in self._kept_subtree
        ):
            return True

        for _, item in node.node_fields():
            if isinstance(item, SFNode):
                self.is_junk(item.value)
                continue
            kept = [child for child in item if not self.is_junk(child)]
            if len(kept) != len(item):
                self.removed += len(item) - len(kept)
                item.value = kept

        if node is self._kept_group:
            return False
        return isinstance(node, (Group, Transform)) and len(node.children) == 0

    def _find_kept_group(self, root: Node, keep_id: int) -> Group:
        target = next(
            (n for n in walk(root) if self.node_ids.get(n) == keep_id),
            None,
        )
        if not isinstance(target, Group):
            raise ValueError(f"Node #{keep_id} is not a reachable Group")
        return target

    def _find_kept_path(self, root: Node, target: Group) -> set[Node]:
        contains: dict[Node, bool] = {}

        def leads_to_target(node: Node) -> bool:
            if node is target:
                return True
            if node in contains:
                return contains[node]
            contains[node] = False
            found = any([leads_to_target(child) for child in iter_child_nodes(node)])
            contains[node] = found
            return found

        leads_to_target(root)
        return {node for node, found in contains.items() if found}


def prune_junk(root: Node, node_ids: dict[Node, int], rules: PruneRules | None = None) -> int:
    """Remove junk nodes below root.

    Returns:
        Number of entries removed from node lists
    """
    pruner = JunkPruner(rules or PruneRules(), node_ids)
    removed = pruner.prune(root)
    if removed:
        logger.info("Pruned %d junk nodes", removed)
    return removed
