"""Write graph descriptions (DOT, Mermaid) and the rendered image."""

from __future__ import annotations

import logging
from pathlib import Path

from depviz.analysis.graph_models import PackageNode
from depviz.exporter.base import BaseExporter
from depviz.exporter.dot_exporter import DotExporter
from depviz.exporter.graphviz_runner import GraphvizRunner, image_filename
from depviz.exporter.mermaid_exporter import MermaidExporter
from depviz.models import ExportResult

logger = logging.getLogger(__name__)


def export_graph(
    root: PackageNode,
    output_name: str,
    runner: GraphvizRunner | None = None,
) -> ExportResult:
    """Write DOT and Mermaid descriptions, then rasterize the DOT file.

    A failing step is logged and recorded in ``ExportResult.errors``; the
    remaining steps still run.
    """
    image_name = image_filename(output_name)
    result = ExportResult()

    try:
        result.dot_path = DotExporter().export(root, image_name)
        result.files_created.append(result.dot_path)
    except OSError as e:
        logger.error("Could not write DOT file: %s", e)
        result.errors.append(f"DOT: {e}")

    try:
        result.mermaid_path = MermaidExporter().export(root, output_name)
        result.files_created.append(result.mermaid_path)
    except OSError as e:
        logger.error("Could not write Mermaid file: %s", e)
        result.errors.append(f"Mermaid: {e}")

    if result.dot_path is not None:
        runner = runner or GraphvizRunner()
        image_path = Path(image_name)
        if runner.render_image(result.dot_path, image_path):
            result.image_path = image_path
            result.files_created.append(image_path)
        else:
            result.errors.append(f"Image: Graphviz could not render {image_path}")

    return result


__all__ = [
    "BaseExporter",
    "DotExporter",
    "GraphvizRunner",
    "MermaidExporter",
    "export_graph",
    "image_filename",
]
