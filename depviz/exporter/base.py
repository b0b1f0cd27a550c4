"""Abstract base exporter for text graph descriptions."""

from __future__ import annotations

import abc
import logging
from pathlib import Path

from depviz.analysis.graph_models import PackageNode

logger = logging.getLogger(__name__)


class BaseExporter(abc.ABC):
    """Base class for graph-description exporters."""

    @abc.abstractmethod
    def render(self, root: PackageNode) -> str:
        """Render the graph reachable from ``root`` as text."""

    @abc.abstractmethod
    def output_path(self, image_name: str) -> Path:
        """Where this exporter writes, given the requested image name."""

    def export(self, root: PackageNode, image_name: str) -> Path:
        """Render and write the graph. Raises OSError if the file can't be written."""
        path = self.output_path(image_name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render(root), encoding="utf-8")
        logger.info("Wrote %s", path)
        return path
