"""Keep the ConsoleCLIDownload in sync with the current version."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from console_download.install.crds import ConsoleCRDs
from console_download.install.deadline import Deadline, check_deadline
from console_download.install.models import ConsoleCLIDownload, DownloadConfig
from console_download.install.versions import is_older, parse_version
from console_download.utils.errors import ForbiddenError, NotFoundError

if TYPE_CHECKING:
    from console_download.clients.base import K8sClient

logger = logging.getLogger(__name__)


class ReconcileOutcome(str, Enum):
    """What the installer did."""

    CREATED = "created"
    REPLACED = "replaced"
    KEPT = "kept"
    SKIPPED_UNSUPPORTED = "skipped_unsupported"
    SKIPPED_FORBIDDEN = "skipped_forbidden"


class ConsoleDownloadReconciler:
    """Create or replace the singleton ConsoleCLIDownload.

    The existing resource is never patched: an older or equal version is
    deleted and the desired resource is created from scratch, while a newer
    version is left alone so that an older installer never downgrades it.
    """

    def __init__(self, k8s: K8sClient, config: DownloadConfig) -> None:
        self._k8s = k8s
        self._config = config

    def build_desired(self) -> ConsoleCLIDownload:
        """Build the resource for the current version."""
        return ConsoleCLIDownload.from_config(self._config)

    def get_existing(self, deadline: Deadline | None = None) -> ConsoleCLIDownload | None:
        """Fetch the current resource, or None when there is none."""
        check_deadline(deadline, f"get {self._config.name}")
        try:
            cr = self._k8s.get(ConsoleCRDs.CONSOLE_CLI_DOWNLOAD, self._config.name)
        except NotFoundError:
            return None
        return ConsoleCLIDownload.from_cr(cr)

    def reconcile(self, deadline: Deadline | None = None) -> ReconcileOutcome:
        """Bring the cluster to the desired state.

        Raises:
            InvalidVersionError: The current version or the version recorded
                on the existing resource cannot be parsed.
            KubernetesError: Any API failure other than the handled
                not-found and forbidden cases.
        """
        config = self._config
        current = parse_version(config.version, source="current version")
        # Built up front so a template error cannot leave the link deleted
        desired = self.build_desired()

        existing = self.get_existing(deadline)
        replaced = False
        if existing is not None:
            stored_value = existing.version(config.version_annotation)
            stored = parse_version(
                stored_value,
                source=f"annotation {config.version_annotation} of {config.name}",
            )
            if is_older(current, stored):
                logger.info(
                    f"Keeping {config.name} at version {stored_value}, "
                    f"newer than {config.version}"
                )
                return ReconcileOutcome.KEPT

            logger.info(f"Replacing {config.name} version {stored_value} with {config.version}")
            check_deadline(deadline, f"delete {config.name}")
            try:
                self._k8s.delete(ConsoleCRDs.CONSOLE_CLI_DOWNLOAD, config.name)
            except ForbiddenError:
                logger.info(f"Not allowed to delete {config.name}, skipping")
                return ReconcileOutcome.SKIPPED_FORBIDDEN
            except NotFoundError:
                logger.debug(f"{config.name} was already deleted")
            replaced = True

        check_deadline(deadline, f"create {config.name}")
        self._k8s.create(ConsoleCRDs.CONSOLE_CLI_DOWNLOAD, body=desired.to_cr())
        logger.info(f"Created {config.name} for version {config.version}")
        return ReconcileOutcome.REPLACED if replaced else ReconcileOutcome.CREATED
