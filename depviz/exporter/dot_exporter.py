"""Graphviz DOT exporter."""

from __future__ import annotations

from pathlib import Path

from depviz.analysis.dependency_graph import iter_edges, iter_nodes
from depviz.analysis.graph_models import PackageNode
from depviz.exporter.base import BaseExporter

_HEADER = [
    "digraph DependencyGraph {",
    "    rankdir=TB;",
    '    node [shape=box, style="filled,rounded", color="#333333", '
    'fillcolor="#EBEBEB", fontname="Helvetica"];',
    '    edge [color="#888888"];',
    "",
]


def dot_node_id(node: PackageNode) -> str:
    """Quoted-id body; the exact identity, so distinct packages never merge."""
    return _escape(f"{node.name}@{node.version}")


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


class DotExporter(BaseExporter):

    def render(self, root: PackageNode) -> str:
        lines = list(_HEADER)

        for node in iter_nodes(root):
            label = f"{_escape(node.name)}\\n({_escape(node.version)})"
            lines.append(f'    "{dot_node_id(node)}" [label="{label}"];')

        lines.append("")
        for parent, child in iter_edges(root):
            lines.append(f'    "{dot_node_id(parent)}" -> "{dot_node_id(child)}";')

        lines.append("}")
        return "\n".join(lines) + "\n"

    def output_path(self, image_name: str) -> Path:
        # graph.png -> graph.png.dot
        return Path(image_name + ".dot")
