"""CRD definitions for the console download installer."""

from console_download.clients.base import CRDDefinition


class ConsoleCRDs:
    """OpenShift console CRD definitions."""

    # Available from OpenShift 4.2; absent on plain Kubernetes
    CONSOLE_CLI_DOWNLOAD = CRDDefinition(
        group="console.openshift.io",
        version="v1",
        plural="consoleclidownloads",
        kind="ConsoleCLIDownload",
    )
