"""Pipeline orchestrator: source -> build graph -> reverse lookup -> tree -> export."""

from __future__ import annotations

import logging
from typing import Callable

from depviz.analysis.ascii_tree import render_ascii_tree
from depviz.analysis.dependency_graph import (
    DependencyGraphBuilder,
    find_package,
    iter_edges,
)
from depviz.exporter import GraphvizRunner, export_graph
from depviz.models import BuildResult, VisualizerConfig
from depviz.sources import DependencySource, create_source

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int, int], None]


def run_build(
    config: VisualizerConfig,
    source: DependencySource | None = None,
    progress: ProgressCallback | None = None,
    runner: GraphvizRunner | None = None,
) -> BuildResult:
    """Run a full build for ``config``.

    ``source`` overrides the one chosen from the working mode; a source
    created here is closed before returning.
    """
    owns_source = source is None
    if source is None:
        source = create_source(config)

    try:
        if progress:
            progress("Building graph", 0, 1)
        builder = DependencyGraphBuilder(source)
        root = builder.build(
            config.package_name, config.package_version, config.max_depth,
        )
        if progress:
            progress("Building graph", 1, 1)
    finally:
        if owns_source:
            source.close()

    result = BuildResult(
        root=root,
        node_count=len(builder.resolved),
        edge_count=sum(1 for _ in iter_edges(root)),
    )

    if config.reverse_target:
        match = find_package(root, config.reverse_target)
        result.reverse_match = match
        if match is None:
            logger.info("No package matching %r in the graph", config.reverse_target)
        else:
            result.reverse_dependencies = set(match.reverse_dependencies)

    if config.print_tree:
        result.tree = render_ascii_tree(root)

    if config.output_image:
        if progress:
            progress("Exporting", 0, 1)
        result.export = export_graph(root, config.output_image, runner=runner)
        if progress:
            progress("Exporting", 1, 1)

    return result
