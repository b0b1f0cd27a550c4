"""Abstract base for dependency sources."""

from __future__ import annotations

import abc

from depviz.analysis.graph_models import PackageId


class DependencySource(abc.ABC):
    """Answers "what does this package directly depend on?".

    Implementations must be deterministic within a build and must not raise
    for transport or parse failures: log the problem and return an empty list.
    """

    @abc.abstractmethod
    def direct_dependencies(self, package: PackageId) -> list[PackageId]:
        """Return direct dependencies in declaration order."""

    def close(self) -> None:
        """Release any held resources."""

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
