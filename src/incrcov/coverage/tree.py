"""Fold a flat ``path -> summary`` mapping into a two-level summary tree.

Shape of the tree:

- a synthetic root named after the common path prefix of all files,
- one directory node per distinct immediate parent directory, always attached
  directly to the root ("package" style: no hierarchy across packages),
- file leaves under their directory node, or under the root itself when they
  live directly in the prefix directory.

When every file sits directly under the root the root is promoted one level
up so the previous root becomes a single package node. Directory metrics are
the merge of their children; ``package_metrics`` merges only direct file
children.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from functools import reduce
from typing import Any, Literal

from incrcov.coverage.models import CoverageSummary
from incrcov.coverage.summary import merge_summaries

SEP = os.sep or "/"
ROOT_PLACEHOLDER = SEP + "__root__" + SEP

NodeKind = Literal["file", "dir"]


def _common_array_prefix(first: list[str], second: list[str]) -> list[str]:
    ret: list[str] = []
    for a, b in zip(first, second, strict=False):
        if a != b:
            break
        ret.append(a)
    return ret


def find_common_prefix(paths: Sequence[str]) -> list[str]:
    """Token-wise common prefix of ``paths`` split on the path separator.

    A single path yields its directory tokens.
    """
    if not paths:
        return []
    separated = [p.split(SEP) for p in paths]
    last = separated.pop()
    if not separated:
        return last[:-1]
    return reduce(_common_array_prefix, separated, last)


class TreeNode:
    """A file or directory node of the summary tree."""

    __slots__ = (
        "name",
        "full_name",
        "relative_name",
        "kind",
        "metrics",
        "package_metrics",
        "parent",
        "children",
    )

    def __init__(self, full_name: str, kind: NodeKind, metrics: CoverageSummary | None = None):
        self.name = full_name
        self.full_name = full_name
        self.relative_name = ""
        self.kind: NodeKind = kind
        self.metrics = metrics
        self.package_metrics: CoverageSummary | None = None
        self.parent: TreeNode | None = None
        self.children: list[TreeNode] = []

    def add_child(self, child: TreeNode) -> None:
        self.children.append(child)
        child.parent = self

    def display_short_name(self) -> str:
        return self.relative_name

    def full_path(self) -> str:
        return self.full_name

    def ancestors(self) -> list[TreeNode]:
        """Ancestors from the immediate parent up to the root."""
        chain = []
        node = self.parent
        while node is not None:
            chain.append(node)
            node = node.parent
        return chain

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "relativeName": self.relative_name,
            "fullName": self.full_name,
            "kind": self.kind,
            "metrics": self.metrics.to_dict() if self.metrics is not None else None,
            "parent": self.parent.name if self.parent is not None else None,
            "children": [child.to_dict() for child in self.children],
        }

    def __repr__(self) -> str:
        return f"TreeNode({self.kind}, {self.name!r}, children={len(self.children)})"


class TreeSummary:
    """The built tree plus a name index.

    ``prefix`` is the final prefix token list (after any root promotion), so
    it can be handed to another summarizer to build an aligned tree.
    """

    def __init__(
        self, summary_map: dict[str, CoverageSummary], prefix: Sequence[str], *, promote: bool = True
    ):
        tokens = list(prefix)
        self.root = self._convert_to_tree(summary_map, tokens, promote)
        self.prefix = tokens
        self.map: dict[str, TreeNode] = {}
        self._index_and_sort(self.root)

    def get_node(self, name: str) -> TreeNode | None:
        return self.map.get(name)

    def _convert_to_tree(
        self, summary_map: dict[str, CoverageSummary], prefix: list[str], promote: bool
    ) -> TreeNode:
        root_path = SEP.join(prefix) + SEP
        root = TreeNode(root_path, "dir")
        seen: dict[str, TreeNode] = {root_path: root}
        all_under_root = bool(summary_map)

        for key, metrics in summary_map.items():
            node = TreeNode(key, "file", metrics)
            seen[key] = node
            parent_path = (os.path.dirname(key) or ".") + SEP
            if parent_path in (SEP + SEP, "." + SEP):
                parent_path = ROOT_PLACEHOLDER
            parent = seen.get(parent_path)
            if parent is None:
                parent = TreeNode(parent_path, "dir")
                root.add_child(parent)
                seen[parent_path] = parent
            parent.add_child(node)
            if parent is not root:
                all_under_root = False

        if promote and all_under_root and prefix:
            prefix.pop()  # start one level above
            old_root = root
            old_children = old_root.children
            old_root.children = []
            root = TreeNode(SEP.join(prefix) + SEP, "dir")
            root.add_child(old_root)
            for child in old_children:
                if child.kind == "dir":
                    root.add_child(child)
                else:
                    old_root.add_child(child)

        self._fixup_names(root, SEP.join(prefix) + SEP, None)
        self._calculate_metrics(root)
        return root

    def _fixup_names(self, node: TreeNode, prefix: str, parent: TreeNode | None) -> None:
        if node.name.startswith(prefix):
            node.name = node.name[len(prefix) :]
        if node.name.startswith(SEP):
            node.name = node.name[1:]
        if parent is None:
            node.relative_name = node.name[len(prefix) :]
        elif parent.name != ROOT_PLACEHOLDER[1:]:
            node.relative_name = node.name[len(parent.name) :]
        else:
            node.relative_name = node.name
        for child in node.children:
            self._fixup_names(child, prefix, node)

    def _calculate_metrics(self, node: TreeNode) -> None:
        if node.kind != "dir":
            return
        for child in node.children:
            self._calculate_metrics(child)
        node.metrics = merge_summaries(
            *(child.metrics for child in node.children if child.metrics is not None)
        )
        file_children = [child for child in node.children if child.kind != "dir"]
        if file_children:
            node.package_metrics = merge_summaries(
                *(child.metrics for child in file_children if child.metrics is not None)
            )
        else:
            node.package_metrics = None

    def _index_and_sort(self, node: TreeNode) -> None:
        self.map[node.name] = node
        node.children.sort(key=lambda child: child.relative_name)
        for child in node.children:
            self._index_and_sort(child)

    def to_dict(self) -> dict[str, Any]:
        return {"prefix": list(self.prefix), "root": self.root.to_dict()}


class TreeSummarizer:
    """Accumulates per-file summaries and builds a ``TreeSummary``.

    Use one summarizer per report run; re-using it merges unrelated data.
    """

    def __init__(self) -> None:
        self.summary_map: dict[str, CoverageSummary] = {}

    def add_summary(self, path: str, metrics: CoverageSummary) -> None:
        """Store metrics for ``path``; the last write for a path wins."""
        self.summary_map[path] = metrics

    def build_tree(self, prefix: Sequence[str] | None = None) -> TreeSummary:
        """Build the tree.

        An explicit ``prefix`` (another tree's ``TreeSummary.prefix``) replaces the
        computed common prefix and disables root promotion, so node names line
        up with that tree.
        """
        if prefix is not None:
            return TreeSummary(self.summary_map, prefix, promote=False)
        return TreeSummary(self.summary_map, find_common_prefix(list(self.summary_map)))
