"""Install the CLI download link into the OpenShift console."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from console_download.install.access import can_create
from console_download.install.capability import (
    CapabilityDescriptor,
    is_api_resource_installed,
)
from console_download.install.crds import ConsoleCRDs
from console_download.install.reconciler import ConsoleDownloadReconciler, ReconcileOutcome

if TYPE_CHECKING:
    from console_download.clients.base import K8sClient
    from console_download.install.deadline import Deadline
    from console_download.install.models import DownloadConfig

logger = logging.getLogger(__name__)

CONSOLE_CLI_DOWNLOAD_CAPABILITY = CapabilityDescriptor.for_crd(ConsoleCRDs.CONSOLE_CLI_DOWNLOAD)


@dataclass
class InstallResult:
    """Outcome of one installer run."""

    outcome: ReconcileOutcome
    name: str
    version: str

    @property
    def changed(self) -> bool:
        return self.outcome in (ReconcileOutcome.CREATED, ReconcileOutcome.REPLACED)

    @property
    def message(self) -> str:
        messages = {
            ReconcileOutcome.CREATED: f"Created {self.name} for version {self.version}",
            ReconcileOutcome.REPLACED: f"Replaced {self.name} with version {self.version}",
            ReconcileOutcome.KEPT: f"Kept {self.name}, a newer version is installed",
            ReconcileOutcome.SKIPPED_UNSUPPORTED: (
                "Skipped, the cluster does not serve ConsoleCLIDownload"
            ),
            ReconcileOutcome.SKIPPED_FORBIDDEN: f"Skipped, not allowed to manage {self.name}",
        }
        return messages[self.outcome]


def install_console_download_link(
    k8s: K8sClient,
    config: DownloadConfig,
    deadline: Deadline | None = None,
    capability: CapabilityDescriptor = CONSOLE_CLI_DOWNLOAD_CAPABILITY,
) -> InstallResult:
    """Install or upgrade the ConsoleCLIDownload for the configured version.

    Silently skips clusters without the console API (plain Kubernetes,
    OpenShift before 4.2) and identities that may not create the resource.
    Every other failure propagates to the caller, who owns retries.
    """

    def result(outcome: ReconcileOutcome) -> InstallResult:
        return InstallResult(outcome=outcome, name=config.name, version=config.version)

    if not is_api_resource_installed(k8s, capability, deadline):
        logger.info(f"{capability} not available, skipping console download link")
        return result(ReconcileOutcome.SKIPPED_UNSUPPORTED)

    crd = ConsoleCRDs.CONSOLE_CLI_DOWNLOAD
    if not can_create(k8s, crd.group, crd.plural, config.name, deadline):
        logger.info(f"Not allowed to create {crd.kind} '{config.name}', skipping")
        return result(ReconcileOutcome.SKIPPED_FORBIDDEN)

    reconciler = ConsoleDownloadReconciler(k8s, config)
    return result(reconciler.reconcile(deadline))
