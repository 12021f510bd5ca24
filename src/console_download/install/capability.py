"""Detect whether an API resource kind is served by the cluster."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from console_download.install.deadline import Deadline, check_deadline
from console_download.utils.errors import NotFoundError

if TYPE_CHECKING:
    from console_download.clients.base import CRDDefinition, K8sClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CapabilityDescriptor:
    """API group/version and kind probed through discovery."""

    group_version: str
    kind: str

    @classmethod
    def for_crd(cls, crd: CRDDefinition) -> CapabilityDescriptor:
        return cls(group_version=crd.api_version, kind=crd.kind)

    def __str__(self) -> str:
        return f"{self.kind} ({self.group_version})"


def is_api_resource_installed(
    k8s: K8sClient,
    descriptor: CapabilityDescriptor,
    deadline: Deadline | None = None,
) -> bool:
    """Check if the cluster serves ``descriptor.kind`` in its group/version.

    A missing group/version means the platform does not support the
    resource and returns False. Other discovery failures propagate.
    """
    check_deadline(deadline, "API discovery")
    try:
        kinds = k8s.get_api_resource_kinds(descriptor.group_version)
    except NotFoundError:
        logger.debug(f"API group/version {descriptor.group_version} is not served")
        return False

    if descriptor.kind in kinds:
        return True

    logger.debug(f"{descriptor.group_version} does not serve kind {descriptor.kind}")
    return False
