"""Rasterize a DOT file with the Graphviz ``dot`` command."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)

IMAGE_FORMATS = ("png", "svg")


def image_filename(name: str) -> str:
    """Keep .png/.svg names, otherwise default to PNG."""
    if name.lower().endswith(tuple(f".{fmt}" for fmt in IMAGE_FORMATS)):
        return name
    return name + ".png"


class GraphvizRunner:
    """Run ``dot -T<fmt> input -o output`` and report success."""

    def __init__(self, command: str = "dot", timeout: float = 60.0):
        self.command = command
        self.timeout = timeout

    def render_image(self, dot_path: Path, image_path: Path) -> bool:
        fmt = "svg" if image_path.suffix.lower() == ".svg" else "png"
        cmd = [self.command, f"-T{fmt}", str(dot_path), "-o", str(image_path)]
        try:
            result = subprocess.run(
                cmd, capture_output=True, text=True, timeout=self.timeout,
            )
        except FileNotFoundError:
            logger.error(
                "Graphviz command %r not found; install Graphviz and make sure it is on PATH",
                self.command,
            )
            return False
        except subprocess.TimeoutExpired:
            logger.error("Graphviz timed out after %.0fs on %s", self.timeout, dot_path)
            return False

        if result.returncode != 0:
            logger.error(
                "Graphviz failed (exit %d): %s", result.returncode, result.stderr.strip(),
            )
            return False

        logger.info("Image written to %s", image_path)
        return True
