"""NuGet v3 dependency source: service index -> .nupkg download -> .nuspec dependencies."""

from __future__ import annotations

import io
import logging
import xml.etree.ElementTree as ET
import zipfile

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from depviz.analysis.graph_models import PackageId
from depviz.models import DEFAULT_REGISTRY
from depviz.sources.base import DependencySource

logger = logging.getLogger(__name__)

PACKAGE_BASE_ADDRESS_TYPE = "PackageBaseAddress/3.0.0"
MIN_VERSION_FALLBACK = "0.0.0"


class RegistryError(Exception):
    """The registry answered, but not in a way we can use."""


# --- Service index models ---

class ServiceResource(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="@id")
    type: str = Field(alias="@type")
    comment: str = ""


class ServiceIndex(BaseModel):
    version: str = ""
    resources: list[ServiceResource] = Field(default_factory=list)

    def find_resource(self, resource_type: str) -> ServiceResource | None:
        for resource in self.resources:
            if resource.type == resource_type:
                return resource
        return None


def extract_min_version(version_range: str | None) -> str:
    """Reduce a NuGet version range to its lower bound.

    "[4.3.0, )" -> "4.3.0", "(, 2.0]" -> "0.0.0", "[1.0]" -> "1.0",
    "4.3.0" -> "4.3.0".
    """
    if not version_range or not version_range.strip():
        return MIN_VERSION_FALLBACK
    version_range = version_range.strip()
    if version_range[0] not in "[(":
        return version_range

    lower = version_range[1:].split(",", 1)[0].strip()
    lower = lower.rstrip("])").strip()
    return lower or MIN_VERSION_FALLBACK


def _local_name(tag: str) -> str:
    # "{http://schemas.microsoft.com/...}dependency" -> "dependency"
    return tag.rsplit("}", 1)[-1]


def parse_nuspec_dependencies(nuspec: bytes | str) -> list[PackageId]:
    """Collect dependencies from every target-framework group of a .nuspec.

    Falls back to ungrouped ``<dependency>`` children of ``<dependencies>``.
    Entries without an id or a version attribute are skipped. Repeated
    (id, version) pairs across groups are kept once.
    """
    root = ET.fromstring(nuspec)

    dependencies_elem = next(
        (el for el in root.iter() if _local_name(el.tag) == "dependencies"), None,
    )
    if dependencies_elem is None:
        return []

    groups = [el for el in dependencies_elem if _local_name(el.tag) == "group"]
    containers = groups or [dependencies_elem]

    result: list[PackageId] = []
    seen: set[PackageId] = set()
    for container in containers:
        for dep in container:
            if _local_name(dep.tag) != "dependency":
                continue
            dep_id = (dep.get("id") or "").strip()
            version_range = (dep.get("version") or "").strip()
            if not dep_id or not version_range:
                continue
            pkg = PackageId(dep_id, extract_min_version(version_range))
            if pkg not in seen:
                seen.add(pkg)
                result.append(pkg)
    return result


class NuGetDependencySource(DependencySource):
    """Fetch direct dependencies from a NuGet v3 feed."""

    def __init__(
        self,
        service_index_url: str = DEFAULT_REGISTRY,
        client: httpx.Client | None = None,
        timeout: float = 30.0,
    ):
        self.service_index_url = service_index_url
        self._owns_client = client is None
        self.client = client or httpx.Client(
            timeout=timeout,
            follow_redirects=True,
            headers={"User-Agent": "depviz/0.1"},
        )
        self._package_base_url: str | None = None

    def direct_dependencies(self, package: PackageId) -> list[PackageId]:
        try:
            return self.fetch_dependencies(package)
        except (httpx.HTTPError, httpx.InvalidURL, RegistryError, ValidationError,
                zipfile.BadZipFile, ET.ParseError) as e:
            logger.warning("Could not resolve dependencies of %s: %s", package, e)
            return []

    def fetch_dependencies(self, package: PackageId) -> list[PackageId]:
        """Like ``direct_dependencies`` but lets registry errors propagate."""
        url = self.package_url(package)
        logger.info("Downloading %s", url)

        response = self.client.get(url)
        if response.status_code != 200:
            logger.warning(
                "Package %s not available (HTTP %d)", package, response.status_code,
            )
            return []

        nuspec = self._read_nuspec(response.content, package.name)
        if nuspec is None:
            logger.warning("No .nuspec found in %s", url)
            return []
        return parse_nuspec_dependencies(nuspec)

    def package_url(self, package: PackageId) -> str:
        base = self.package_base_url()
        pkg_id = package.name.lower()
        version = package.version.lower()
        return f"{base}{pkg_id}/{version}/{pkg_id}.{version}.nupkg"

    def package_base_url(self) -> str:
        """Discover (once) the PackageBaseAddress endpoint of the feed."""
        if self._package_base_url is not None:
            return self._package_base_url

        logger.info("Discovering %s at %s", PACKAGE_BASE_ADDRESS_TYPE, self.service_index_url)
        response = self.client.get(
            self.service_index_url, headers={"Accept": "application/json"},
        )
        if response.status_code != 200:
            raise RegistryError(
                f"Service index unavailable (HTTP {response.status_code}): "
                f"{self.service_index_url}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise RegistryError(f"Service index is not valid JSON: {e}") from e
        index = ServiceIndex.model_validate(payload)
        resource = index.find_resource(PACKAGE_BASE_ADDRESS_TYPE)
        if resource is None:
            raise RegistryError(
                f"{PACKAGE_BASE_ADDRESS_TYPE} not found in {self.service_index_url}"
            )

        base = resource.id if resource.id.endswith("/") else resource.id + "/"
        logger.debug("Package base URL: %s", base)
        self._package_base_url = base
        return base

    @staticmethod
    def _read_nuspec(archive: bytes, package_name: str) -> bytes | None:
        wanted = f"{package_name.lower()}.nuspec"
        with zipfile.ZipFile(io.BytesIO(archive)) as zf:
            names = [n for n in zf.namelist() if n.lower().endswith(".nuspec")]
            if not names:
                return None
            match = next((n for n in names if wanted in n.lower()), names[0])
            try:
                return zf.read(match)
            except (NotImplementedError, EOFError) as e:
                raise RegistryError(f"Cannot extract {match}: {e}") from e

    def close(self) -> None:
        if self._owns_client:
            self.client.close()
