"""Dependency graph builder: BFS expansion from a root package, dedup by identity, reverse edges."""

from __future__ import annotations

import logging
from collections import deque
from typing import Iterator

from depviz.analysis.graph_models import PackageId, PackageNode
from depviz.sources.base import DependencySource

logger = logging.getLogger(__name__)


class DependencyGraphBuilder:
    """Build a package dependency graph by querying a dependency source."""

    def __init__(self, source: DependencySource):
        self.source = source
        self.resolved: dict[PackageId, PackageNode] = {}

    def build(
        self,
        root_name: str,
        root_version: str,
        max_depth: int | None = None,
    ) -> PackageNode:
        """Expand the graph breadth-first from ``root_name``/``root_version``.

        Nodes reached at ``max_depth`` are created and linked but never
        queried, so they stay leaves. ``None`` means unbounded.

        Returns the root node. Lookup failures degrade to "no dependencies"
        for that node; only malformed input raises ``ValueError``.
        """
        if not root_name or not root_version:
            raise ValueError("Root package name and version are required")
        if max_depth is not None and max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {max_depth}")

        root = PackageNode(PackageId(root_name, root_version))
        resolved: dict[PackageId, PackageNode] = {root.package_id: root}
        self.resolved = resolved

        queue: deque[tuple[PackageNode, int]] = deque([(root, 0)])

        while queue:
            current, depth = queue.popleft()
            logger.info("Analysing %s (depth %d)", current.package_id, depth)

            if max_depth is not None and depth >= max_depth:
                logger.debug("Depth limit %d reached at %s", max_depth, current.package_id)
                continue

            for dep_id in self._lookup(current.package_id):
                dep = resolved.get(dep_id)
                if dep is None:
                    dep = PackageNode(dep_id)
                    resolved[dep_id] = dep
                    queue.append((dep, depth + 1))
                current.add_dependency(dep)

            current.fully_resolved = True

        logger.info("Graph built: %d package(s) from %s", len(resolved), root.package_id)
        return root

    def _lookup(self, package: PackageId) -> list[PackageId]:
        try:
            deps = list(self.source.direct_dependencies(package))
        except Exception as e:
            logger.warning("Dependency lookup failed for %s: %s", package, e)
            return []
        if not deps:
            logger.debug("No dependencies found for %s", package)
        return deps


def build_dependency_graph(
    root_name: str,
    root_version: str,
    source: DependencySource,
    max_depth: int | None = None,
) -> PackageNode:
    """Build a graph with a fresh builder and return its root."""
    return DependencyGraphBuilder(source).build(root_name, root_version, max_depth)


# ── Read-only traversal of a finished graph ───────────────────

def iter_nodes(root: PackageNode) -> Iterator[PackageNode]:
    """BFS over forward edges, yielding each reachable node once."""
    visited = {root}
    queue = deque([root])
    while queue:
        node = queue.popleft()
        yield node
        for dep in node.dependencies:
            if dep not in visited:
                visited.add(dep)
                queue.append(dep)


def iter_edges(root: PackageNode) -> Iterator[tuple[PackageNode, PackageNode]]:
    """Yield each distinct forward edge once, in BFS order."""
    for node in iter_nodes(root):
        seen: set[PackageNode] = set()
        for dep in node.dependencies:
            if dep in seen:
                continue
            seen.add(dep)
            yield node, dep


def find_package(root: PackageNode, fragment: str) -> PackageNode | None:
    """First node in BFS order whose identity contains ``fragment`` (case-insensitive)."""
    needle = fragment.lower()
    for node in iter_nodes(root):
        if needle in str(node.package_id).lower():
            return node
    return None


def find_reverse_dependencies(root: PackageNode, fragment: str) -> set[PackageNode] | None:
    """Reverse-dependency set of the first node matching ``fragment``, or None."""
    node = find_package(root, fragment)
    if node is None:
        return None
    return set(node.reverse_dependencies)
