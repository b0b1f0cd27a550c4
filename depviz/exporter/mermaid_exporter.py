"""Mermaid flowchart exporter (open the result at https://mermaid.live/)."""

from __future__ import annotations

import hashlib
from pathlib import Path

from depviz.analysis.dependency_graph import iter_edges, iter_nodes
from depviz.analysis.graph_models import PackageNode
from depviz.exporter.base import BaseExporter


def mermaid_node_id(node: PackageNode) -> str:
    """Stable, Mermaid-safe id; dots and dashes break unquoted ids."""
    digest = hashlib.md5(f"{node.name}@{node.version}".encode("utf-8")).hexdigest()
    return "N" + digest[:10]


class MermaidExporter(BaseExporter):

    def render(self, root: PackageNode) -> str:
        lines = [
            "graph TD",
            "    classDef default fill:#f9f9f9,stroke:#333,stroke-width:1px;",
        ]
        for node in iter_nodes(root):
            label = f"{node.name}\\n({node.version})".replace('"', "#quot;")
            lines.append(f'    {mermaid_node_id(node)}["{label}"]')

        for parent, child in iter_edges(root):
            lines.append(f"    {mermaid_node_id(parent)} --> {mermaid_node_id(child)}")

        return "\n".join(lines) + "\n"

    def output_path(self, image_name: str) -> Path:
        return Path(image_name).with_suffix(".mermaid")
