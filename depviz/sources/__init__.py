"""Dependency source registry."""

from __future__ import annotations

from depviz.models import VisualizerConfig, WorkingMode
from depviz.sources.base import DependencySource
from depviz.sources.fixture import FixtureDependencySource
from depviz.sources.nuget import NuGetDependencySource


def create_source(config: VisualizerConfig) -> DependencySource:
    """Pick the dependency source for the configured working mode."""
    if config.mode is WorkingMode.TEST:
        return FixtureDependencySource(config.source)
    return NuGetDependencySource(config.source)


__all__ = [
    "DependencySource",
    "FixtureDependencySource",
    "NuGetDependencySource",
    "create_source",
]
