"""ASCII tree rendering of a dependency graph."""

from __future__ import annotations

from depviz.analysis.graph_models import PackageNode

REPEAT_MARKER = " (*)"


def render_ascii_tree(root: PackageNode) -> str:
    """Depth-first tree from ``root``.

    A package already printed elsewhere in the tree is printed again with
    ``REPEAT_MARKER`` and its dependencies are not expanded a second time.
    Cycles therefore terminate.
    """
    lines = [str(root.package_id)]
    printed = {root}

    # (node, prefix, is_last) in reverse so children pop in forward order
    stack: list[tuple[PackageNode, str, bool]] = [
        (dep, "", i == len(root.dependencies) - 1)
        for i, dep in reversed(list(enumerate(root.dependencies)))
    ]

    while stack:
        node, prefix, is_last = stack.pop()
        connector = "└── " if is_last else "├── "

        if node in printed:
            lines.append(f"{prefix}{connector}{node.package_id}{REPEAT_MARKER}")
            continue
        printed.add(node)
        lines.append(f"{prefix}{connector}{node.package_id}")

        child_prefix = prefix + ("    " if is_last else "│   ")
        last = len(node.dependencies) - 1
        for i, dep in reversed(list(enumerate(node.dependencies))):
            stack.append((dep, child_prefix, i == last))

    return "\n".join(lines)
