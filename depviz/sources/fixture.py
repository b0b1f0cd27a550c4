"""Fixture-file dependency source for offline runs and tests.

Each line declares the direct dependencies of one package::

    # comment
    App -> Lib:2.0, Logging        # trailing comments are ignored
    Lib -> Util:1.0

Package names on the left are matched case-insensitively, the first
matching line wins, and a dependency without a version gets
``DEFAULT_FIXTURE_VERSION``.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from depviz.analysis.graph_models import PackageId
from depviz.sources.base import DependencySource

logger = logging.getLogger(__name__)

DEFAULT_FIXTURE_VERSION = "1.0.0"
_LINE_RE = re.compile(r"^(?P<name>.+?)\s+->(?P<deps>(?:\s.*)?)$")


def parse_fixture_line(line: str) -> tuple[str, list[PackageId]] | None:
    """Parse one fixture line into (package name, dependencies).

    Returns None for blank, comment, and lines without an arrow.
    """
    line = line.strip()
    if not line or line.startswith("#"):
        return None
    if "#" in line:
        line = line[:line.index("#")].strip()

    m = _LINE_RE.match(line)
    if not m:
        return None
    name, rhs = m.group("name"), m.group("deps")

    deps: list[PackageId] = []
    for entry in rhs.split(","):
        entry = entry.strip()
        if not entry:
            continue
        dep_name, sep, dep_version = entry.partition(":")
        dep_version = dep_version.strip() if sep else ""
        deps.append(PackageId(dep_name.strip(), dep_version or DEFAULT_FIXTURE_VERSION))
    return name.strip(), deps


class FixtureDependencySource(DependencySource):
    """Read declared dependencies from a local text file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def direct_dependencies(self, package: PackageId) -> list[PackageId]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Cannot read fixture repository %s: %s", self.path, e)
            return []

        wanted = package.name.upper()
        for line in text.splitlines():
            parsed = parse_fixture_line(line)
            if parsed is None:
                continue
            name, deps = parsed
            if name.upper() == wanted:
                logger.debug("Fixture %s: %s -> %d dep(s)", self.path.name, name, len(deps))
                return deps

        logger.debug("No fixture entry for %s in %s", package.name, self.path)
        return []
