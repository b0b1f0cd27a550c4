"""Click CLI with the build subcommand."""

from __future__ import annotations

import logging

import click

from depviz import __version__
from depviz.models import VisualizerConfig, WorkingMode
from depviz.pipeline import run_build

_MODE_CHOICES = [mode.value for mode in WorkingMode]


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Log every lookup")
def cli(verbose: bool):
    """depviz: Resolve and visualize a package's transitive dependencies."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option("--package", "-p", "package_name", required=True, help="Root package name")
@click.option("--package-version", "-V", required=True, help="Root package version")
@click.option("--source", "-s", default="", help="Registry service index URL, or fixture file in TEST mode")
@click.option(
    "--mode", "-m",
    type=click.Choice(_MODE_CHOICES, case_sensitive=False),
    default=WorkingMode.REAL.value,
    show_default=True,
    help="REAL queries the registry, TEST reads a fixture file",
)
@click.option("--max-depth", "-d", type=click.IntRange(min=0), default=None, help="Stop expanding at this depth")
@click.option("--output", "-o", "output_image", help="Image file (.png/.svg); DOT and Mermaid files are written next to it")
@click.option("--tree", "print_tree", is_flag=True, help="Print the dependency tree")
@click.option("--reverse", "-r", "reverse_target", help="Show who depends on the first package matching this text")
def build(
    package_name: str,
    package_version: str,
    source: str,
    mode: str,
    max_depth: int | None,
    output_image: str | None,
    print_tree: bool,
    reverse_target: str | None,
):
    """Build the dependency graph of a package."""
    try:
        config = VisualizerConfig(
            package_name=package_name,
            package_version=package_version,
            source=source,
            mode=WorkingMode.parse(mode),
            max_depth=max_depth,
            output_image=output_image,
            print_tree=print_tree,
            reverse_target=reverse_target,
        )
    except ValueError as e:
        raise click.UsageError(str(e))

    click.echo(click.style("Configuration", bold=True))
    for line in config.summary_lines():
        click.echo(f"  {line}")
    click.echo()

    def progress(stage: str, current: int, total: int):
        if current == 0:
            click.echo(f"  {stage}...")

    result = run_build(config, progress=progress)

    click.echo(
        f"\nResolved {result.node_count} package(s), {result.edge_count} edge(s) "
        f"from {result.root.package_id}"
    )

    if result.tree is not None:
        click.echo()
        click.echo(result.tree)

    if config.reverse_target:
        click.echo()
        if result.reverse_match is None:
            click.echo(f"No package matching {config.reverse_target!r} found.")
        else:
            dependents = sorted(str(n.package_id) for n in result.reverse_dependencies or ())
            click.echo(click.style(f"Reverse dependencies of {result.reverse_match.package_id}:", fg="cyan"))
            if not dependents:
                click.echo("  (none)")
            for name in dependents:
                click.echo(f"  {name}")

    if result.export is not None:
        click.echo()
        for f in result.export.files_created:
            click.echo(f"  {click.style('created', fg='green')} {f}")
        for err in result.export.errors:
            click.echo(f"  {click.style('warning', fg='yellow')} {err}", err=True)


if __name__ == "__main__":
    cli()
