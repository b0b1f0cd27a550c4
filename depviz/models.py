"""Data models for the depviz pipeline."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass, field
from pathlib import Path

from depviz.analysis.graph_models import PackageNode

DEFAULT_REGISTRY = "https://api.nuget.org/v3/index.json"


class WorkingMode(enum.Enum):
    TEST = "TEST"
    REAL = "REAL"

    @classmethod
    def parse(cls, value: str | WorkingMode) -> WorkingMode:
        if isinstance(value, cls):
            return value
        try:
            return cls(value.strip().upper())
        except ValueError:
            choices = ", ".join(m.value for m in cls)
            raise ValueError(f"Unknown working mode {value!r} (expected one of: {choices})")


@dataclass
class VisualizerConfig:
    """Configuration for one graph build."""
    package_name: str = ""
    package_version: str = ""
    source: str = ""  # registry service index URL, or fixture path in TEST mode
    mode: WorkingMode = WorkingMode.REAL
    max_depth: int | None = None
    output_image: str | None = None
    print_tree: bool = False
    reverse_target: str | None = None

    def __post_init__(self):
        self.mode = WorkingMode.parse(self.mode)
        if not self.source:
            self.source = os.getenv("DEPVIZ_SOURCE", "")
        if not self.source and self.mode is WorkingMode.REAL:
            self.source = DEFAULT_REGISTRY
        self.validate()

    def validate(self) -> None:
        if not self.package_name or not self.package_name.strip():
            raise ValueError("Package name is required")
        if not self.package_version or not self.package_version.strip():
            raise ValueError("Package version is required")
        if self.max_depth is not None and self.max_depth < 0:
            raise ValueError(f"Max depth must be non-negative, got {self.max_depth}")
        if self.mode is WorkingMode.TEST and not self.source:
            raise ValueError("TEST mode requires a path to a fixture repository file")

    def summary_lines(self) -> list[str]:
        depth = "unlimited" if self.max_depth is None else str(self.max_depth)
        return [
            f"Package:      {self.package_name}",
            f"Version:      {self.package_version}",
            f"Source:       {self.source}",
            f"Mode:         {self.mode.value}",
            f"Max depth:    {depth}",
            f"Output image: {self.output_image or '-'}",
            f"Print tree:   {'yes' if self.print_tree else 'no'}",
            f"Reverse for:  {self.reverse_target or '-'}",
        ]


@dataclass
class ExportResult:
    """Files produced by the exporters."""
    dot_path: Path | None = None
    mermaid_path: Path | None = None
    image_path: Path | None = None
    files_created: list[Path] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


@dataclass
class BuildResult:
    """Result of a full pipeline run."""
    root: PackageNode
    node_count: int = 0
    edge_count: int = 0
    tree: str | None = None
    reverse_match: PackageNode | None = None
    reverse_dependencies: set[PackageNode] | None = None
    export: ExportResult | None = None
