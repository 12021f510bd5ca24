"""Fixtures for installer tests."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any
from unittest.mock import MagicMock

import pytest

from console_download.install.models import DownloadConfig
from console_download.utils.errors import NotFoundError, ResourceExistsError

TEST_ANNOTATION = "camel.apache.org/version"
TEST_URL_TEMPLATE = (
    "https://github.com/apache/camel-k/releases/download/"
    "v{version}/camel-k-client-{version}-{os}-64bit.tar.gz"
)


def make_download_config(version: str = "2.1.0", **overrides: Any) -> DownloadConfig:
    """Create a DownloadConfig with test defaults."""
    values: dict[str, Any] = {
        "name": "kamel-cli",
        "display_name": "kamel - Apache Camel K Command Line Interface",
        "description": "The kamel CLI",
        "url_template": TEST_URL_TEMPLATE,
        "link_text_template": "Download the kamel binary for {os_label}",
        "version": version,
        "version_annotation": TEST_ANNOTATION,
    }
    values.update(overrides)
    return DownloadConfig(**values)


def make_console_download_cr(
    name: str = "kamel-cli",
    version: str | None = "1.9.0",
    annotations: dict[str, str] | None = None,
) -> SimpleNamespace:
    """Create an object shaped like a ConsoleCLIDownload ResourceInstance."""
    if annotations is None:
        annotations = {TEST_ANNOTATION: version} if version is not None else {}
    return SimpleNamespace(
        metadata=SimpleNamespace(name=name, annotations=annotations),
        spec=SimpleNamespace(
            displayName="kamel",
            description="old description",
            links=[SimpleNamespace(text="Download", href="https://example.com/old")],
        ),
    )


def _cr_from_body(body: dict[str, Any]) -> SimpleNamespace:
    metadata = body["metadata"]
    spec = body["spec"]
    return SimpleNamespace(
        metadata=SimpleNamespace(
            name=metadata["name"], annotations=dict(metadata.get("annotations") or {})
        ),
        spec=SimpleNamespace(
            displayName=spec["displayName"],
            description=spec["description"],
            links=[SimpleNamespace(**link) for link in spec["links"]],
        ),
    )


class FakeCluster:
    """In-memory cluster serving cluster-scoped resources by name."""

    def __init__(
        self,
        kinds: dict[str, list[str]] | None = None,
        allowed: bool = True,
    ) -> None:
        self.kinds = kinds if kinds is not None else {
            "console.openshift.io/v1": ["ConsoleCLIDownload", "ConsoleLink"],
        }
        self.allowed = allowed
        self.objects: dict[str, dict[str, Any]] = {}
        self.calls: list[tuple[str, str]] = []

    def get_api_resource_kinds(self, group_version: str) -> list[str]:
        if group_version not in self.kinds:
            raise NotFoundError("APIGroupVersion", group_version)
        return self.kinds[group_version]

    def review_self_access(self, verb: str, group: str, resource: str, name: str) -> bool:
        return self.allowed

    def get(self, crd: Any, name: str) -> SimpleNamespace:
        self.calls.append(("get", name))
        if name not in self.objects:
            raise NotFoundError(crd.kind, name)
        return _cr_from_body(self.objects[name])

    def create(self, crd: Any, body: dict[str, Any]) -> SimpleNamespace:
        name = body["metadata"]["name"]
        self.calls.append(("create", name))
        if name in self.objects:
            raise ResourceExistsError(crd.kind, name)
        self.objects[name] = body
        return _cr_from_body(body)

    def delete(self, crd: Any, name: str) -> None:
        self.calls.append(("delete", name))
        if name not in self.objects:
            raise NotFoundError(crd.kind, name)
        del self.objects[name]

    @property
    def mutations(self) -> list[tuple[str, str]]:
        return [call for call in self.calls if call[0] in ("create", "delete")]

    def stored_version(self, name: str = "kamel-cli") -> str:
        return self.objects[name]["metadata"]["annotations"][TEST_ANNOTATION]


@pytest.fixture
def make_config() -> Any:
    """Factory for DownloadConfig objects."""
    return make_download_config


@pytest.fixture
def make_cr() -> Any:
    """Factory for ConsoleCLIDownload-shaped objects."""
    return make_console_download_cr


@pytest.fixture
def download_config() -> DownloadConfig:
    """DownloadConfig for version 2.1.0."""
    return make_download_config()


@pytest.fixture
def mock_k8s() -> MagicMock:
    """Create a mock K8sClient serving the console API and allowing creation."""
    k8s = MagicMock()
    k8s.get_api_resource_kinds.return_value = ["ConsoleCLIDownload", "ConsoleLink"]
    k8s.review_self_access.return_value = True
    k8s.get.side_effect = NotFoundError("ConsoleCLIDownload", "kamel-cli")
    return k8s


@pytest.fixture
def cluster() -> FakeCluster:
    """Create an empty in-memory cluster."""
    return FakeCluster()
