"""Exceptions raised by the console download installer."""


class InstallerError(Exception):
    """Base exception for installer errors."""

    pass


class AuthenticationError(InstallerError):
    """Failed to authenticate against the Kubernetes API."""

    pass


class KubernetesError(InstallerError):
    """A Kubernetes API call failed for a reason we do not handle.

    Carries the HTTP status of the failed call when one is available.
    """

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class NotFoundError(KubernetesError):
    """Resource not found."""

    def __init__(self, kind: str, name: str, namespace: str | None = None) -> None:
        self.kind = kind
        self.name = name
        self.namespace = namespace
        if namespace:
            message = f"{kind} '{name}' not found in namespace '{namespace}'"
        else:
            message = f"{kind} '{name}' not found"
        super().__init__(message, status=404)


class ForbiddenError(KubernetesError):
    """The current identity is not allowed to perform the call."""

    def __init__(self, verb: str, kind: str, name: str | None = None) -> None:
        self.verb = verb
        self.kind = kind
        self.name = name
        target = f"{kind} '{name}'" if name else kind
        super().__init__(f"Forbidden to {verb} {target}", status=403)


class ResourceExistsError(KubernetesError):
    """Resource already exists."""

    def __init__(self, kind: str, name: str, namespace: str | None = None) -> None:
        self.kind = kind
        self.name = name
        self.namespace = namespace
        if namespace:
            message = f"{kind} '{name}' already exists in namespace '{namespace}'"
        else:
            message = f"{kind} '{name}' already exists"
        super().__init__(message, status=409)


class InvalidVersionError(InstallerError):
    """A version string is not a valid semantic version.

    Raised both for the current version and for the version recorded on an
    existing resource, which is then left untouched.
    """

    def __init__(self, value: str | None, source: str) -> None:
        self.value = value
        self.source = source
        if value is None:
            message = f"Missing version in {source}"
        else:
            message = f"Invalid semantic version '{value}' in {source}"
        super().__init__(message)


class DeadlineExceededError(InstallerError):
    """The caller's deadline expired before the next blocking call."""

    def __init__(self, step: str) -> None:
        self.step = step
        super().__init__(f"Deadline exceeded before {step}")
