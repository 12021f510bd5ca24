"""ConsoleCLIDownload installer step: capability probe, access check, reconciler."""
