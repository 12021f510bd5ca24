"""Tests for the console download installer step."""

from typing import Any
from unittest.mock import MagicMock

import pytest

from console_download.install.installer import (
    CONSOLE_CLI_DOWNLOAD_CAPABILITY,
    InstallResult,
    install_console_download_link,
)
from console_download.install.reconciler import ReconcileOutcome
from console_download.utils.errors import (
    ForbiddenError,
    KubernetesError,
    NotFoundError,
    ResourceExistsError,
)


class TestInstallConsoleDownloadLink:
    """Test the probe, access check and reconcile chain."""

    def test_capability(self) -> None:
        """Test the probed API group/version and kind."""
        assert CONSOLE_CLI_DOWNLOAD_CAPABILITY.group_version == "console.openshift.io/v1"
        assert CONSOLE_CLI_DOWNLOAD_CAPABILITY.kind == "ConsoleCLIDownload"

    def test_creates_on_fresh_cluster(self, cluster: Any, make_config: Any) -> None:
        """Test creating the link for version 2.1.0."""
        result = install_console_download_link(cluster, make_config("2.1.0"))

        assert result.outcome == ReconcileOutcome.CREATED
        assert result.changed
        body = cluster.objects["kamel-cli"]
        assert body["metadata"]["annotations"]["camel.apache.org/version"] == "2.1.0"
        assert len(body["spec"]["links"]) == 3
        assert all("2.1.0" in link["href"] for link in body["spec"]["links"])

    def test_upgrades_existing(self, cluster: Any, make_config: Any) -> None:
        """Test replacing version 1.9.0 with 2.0.0."""
        install_console_download_link(cluster, make_config("1.9.0"))
        cluster.calls.clear()

        result = install_console_download_link(cluster, make_config("2.0.0"))

        assert result.outcome == ReconcileOutcome.REPLACED
        assert cluster.mutations == [("delete", "kamel-cli"), ("create", "kamel-cli")]
        assert cluster.stored_version() == "2.0.0"

    def test_keeps_newer(self, cluster: Any, make_config: Any) -> None:
        """Test that version 3.0.0 is kept when installing 2.0.0."""
        install_console_download_link(cluster, make_config("3.0.0"))
        before = dict(cluster.objects)
        cluster.calls.clear()

        result = install_console_download_link(cluster, make_config("2.0.0"))

        assert result.outcome == ReconcileOutcome.KEPT
        assert not result.changed
        assert cluster.mutations == []
        assert cluster.objects == before

    def test_group_version_missing(self, cluster: Any, make_config: Any) -> None:
        """Test that plain Kubernetes clusters are skipped without calls."""
        cluster.kinds = {}

        result = install_console_download_link(cluster, make_config())

        assert result.outcome == ReconcileOutcome.SKIPPED_UNSUPPORTED
        assert cluster.calls == []

    def test_kind_missing(self, cluster: Any, make_config: Any) -> None:
        """Test that a console API without the kind is skipped."""
        cluster.kinds = {"console.openshift.io/v1": ["ConsoleLink"]}

        result = install_console_download_link(cluster, make_config())

        assert result.outcome == ReconcileOutcome.SKIPPED_UNSUPPORTED
        assert cluster.calls == []

    def test_access_denied(self, cluster: Any, make_config: Any) -> None:
        """Test that a denied access review is skipped without calls."""
        cluster.allowed = False

        result = install_console_download_link(cluster, make_config())

        assert result.outcome == ReconcileOutcome.SKIPPED_FORBIDDEN
        assert cluster.calls == []

    def test_access_review_target(self, mock_k8s: MagicMock, download_config: Any) -> None:
        """Test the resource the access review asks about."""
        install_console_download_link(mock_k8s, download_config)

        mock_k8s.review_self_access.assert_called_once_with(
            verb="create",
            group="console.openshift.io",
            resource="consoleclidownloads",
            name="kamel-cli",
        )

    def test_access_review_forbidden(self, mock_k8s: MagicMock, download_config: Any) -> None:
        """Test that a forbidden access review is skipped."""
        mock_k8s.review_self_access.side_effect = ForbiddenError(
            "create", "SelfSubjectAccessReview"
        )

        result = install_console_download_link(mock_k8s, download_config)

        assert result.outcome == ReconcileOutcome.SKIPPED_FORBIDDEN
        mock_k8s.get.assert_not_called()
        mock_k8s.create.assert_not_called()

    def test_discovery_error_propagates(self, mock_k8s: MagicMock, download_config: Any) -> None:
        """Test that discovery failures abort the chain."""
        mock_k8s.get_api_resource_kinds.side_effect = KubernetesError("unavailable", status=503)

        with pytest.raises(KubernetesError):
            install_console_download_link(mock_k8s, download_config)
        mock_k8s.review_self_access.assert_not_called()

    def test_concurrent_create_propagates(self, cluster: Any, make_config: Any) -> None:
        """Test that losing a creation race surfaces the conflict."""
        original_get = cluster.get

        def get_then_race(crd: Any, name: str) -> Any:
            try:
                return original_get(crd, name)
            finally:
                cluster.objects[name] = {"metadata": {"name": name}}

        cluster.get = get_then_race

        with pytest.raises(ResourceExistsError):
            install_console_download_link(cluster, make_config())

    def test_not_found_fetch_is_absent(self, mock_k8s: MagicMock, download_config: Any) -> None:
        """Test that a not-found fetch leads to creation."""
        mock_k8s.get.side_effect = NotFoundError("ConsoleCLIDownload", "kamel-cli")

        result = install_console_download_link(mock_k8s, download_config)

        assert result.outcome == ReconcileOutcome.CREATED
        mock_k8s.create.assert_called_once()


class TestInstallResult:
    """Tests for InstallResult."""

    @pytest.mark.parametrize(
        "outcome,text",
        [
            (ReconcileOutcome.CREATED, "Created kamel-cli"),
            (ReconcileOutcome.REPLACED, "Replaced kamel-cli"),
            (ReconcileOutcome.KEPT, "Kept kamel-cli"),
            (ReconcileOutcome.SKIPPED_UNSUPPORTED, "does not serve"),
            (ReconcileOutcome.SKIPPED_FORBIDDEN, "not allowed"),
        ],
    )
    def test_message(self, outcome: ReconcileOutcome, text: str) -> None:
        """Test that every outcome has a message."""
        result = InstallResult(outcome=outcome, name="kamel-cli", version="2.1.0")
        assert text in result.message
