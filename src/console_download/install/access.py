"""Self-directed authorization checks."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from console_download.install.deadline import Deadline, check_deadline
from console_download.utils.errors import ForbiddenError

if TYPE_CHECKING:
    from console_download.clients.base import K8sClient

logger = logging.getLogger(__name__)


def can_create(
    k8s: K8sClient,
    group: str,
    resource: str,
    name: str,
    deadline: Deadline | None = None,
) -> bool:
    """Ask the API server whether the current identity may create ``name``.

    Uses a SelfSubjectAccessReview. Not being allowed to submit the review
    at all counts as not allowed.
    """
    check_deadline(deadline, "access review")
    try:
        allowed = k8s.review_self_access(
            verb="create", group=group, resource=resource, name=name
        )
    except ForbiddenError:
        logger.debug(f"Not allowed to review access to {group}/{resource}")
        return False

    logger.debug(f"create {group}/{resource} '{name}' allowed: {allowed}")
    return allowed
