"""Data models for the package dependency graph."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PackageId:
    """Identity of a package: exact, case-sensitive (name, version) pair."""
    name: str
    version: str

    def __str__(self) -> str:
        return f"{self.name} ({self.version})"


@dataclass(eq=False)
class PackageNode:
    """A vertex of the graph. Hashes by object identity, one node per PackageId."""
    package_id: PackageId
    dependencies: list[PackageNode] = field(default_factory=list)
    reverse_dependencies: set[PackageNode] = field(default_factory=set)
    fully_resolved: bool = False  # advisory only

    @property
    def name(self) -> str:
        return self.package_id.name

    @property
    def version(self) -> str:
        return self.package_id.version

    def add_dependency(self, dependency: PackageNode) -> None:
        """Record ``self -> dependency`` on both ends."""
        self.dependencies.append(dependency)
        dependency.reverse_dependencies.add(self)

    def __repr__(self) -> str:
        return f"PackageNode({self.package_id.name!r}, {self.package_id.version!r})"

    def __str__(self) -> str:
        return str(self.package_id)
