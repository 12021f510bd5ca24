"""Configuration management for the console download installer."""

import os
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from console_download import __version__
from console_download.install.models import (
    DEFAULT_PLATFORMS,
    LINK_TEXT_TEMPLATE_FIELDS,
    URL_TEMPLATE_FIELDS,
    DownloadConfig,
    check_template,
)
from console_download.install.versions import parse_version
from console_download.utils.errors import InvalidVersionError

DEFAULT_DESCRIPTION = (
    "Apache Camel K is a lightweight integration platform, born on Kubernetes, "
    "with serverless superpowers.\n\n"
    "The `kamel` binary can be used to both configure the cluster and run integrations. "
    "Once you've downloaded the `kamel` binary, log into the cluster using the `oc` "
    "client tool and start using the `kamel` CLI.\n\n"
    "You can run `kamel help` to list the available commands or go to the "
    "[Camel K Website](https://camel.apache.org/projects/camel-k/) for more information."
)

DEFAULT_URL_TEMPLATE = (
    "https://github.com/apache/camel-k/releases/download/"
    "v{version}/camel-k-client-{version}-{os}-64bit.tar.gz"
)


class AuthMode(str, Enum):
    """Authentication mode for Kubernetes API."""

    AUTO = "auto"
    KUBECONFIG = "kubeconfig"
    TOKEN = "token"


class LogLevel(str, Enum):
    """Logging level."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class InstallerConfig(BaseSettings):
    """Configuration for the console download installer.

    Configuration is loaded from environment variables with CONSOLE_DOWNLOAD_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="CONSOLE_DOWNLOAD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Authentication settings
    auth_mode: AuthMode = Field(
        default=AuthMode.AUTO,
        description="Authentication mode: auto, kubeconfig, or token",
    )
    kubeconfig_path: Path | None = Field(
        default=None,
        description="Path to kubeconfig file (defaults to ~/.kube/config)",
    )
    kubeconfig_context: str | None = Field(
        default=None,
        description="Kubeconfig context to use",
    )
    api_server: str | None = Field(
        default=None,
        description="Kubernetes API server URL (for token auth)",
    )
    api_token: str | None = Field(
        default=None,
        description="Kubernetes API token (for token auth)",
    )
    request_timeout: int = Field(
        default=30,
        ge=1,
        le=300,
        description="Timeout in seconds for each Kubernetes API request",
    )

    # Logging
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level",
    )

    # Download link settings
    download_name: str = Field(
        default="kamel-cli",
        description="Name of the ConsoleCLIDownload resource",
    )
    display_name: str = Field(
        default="kamel - Apache Camel K Command Line Interface",
        description="Name as seen in the console download page",
    )
    description: str = Field(
        default=DEFAULT_DESCRIPTION,
        description="Description as seen in the console download page (markdown)",
    )
    url_template: str = Field(
        default=DEFAULT_URL_TEMPLATE,
        description="Download URL template with {version} and {os} placeholders",
    )
    link_text_template: str = Field(
        default="Download the kamel binary for {os_label}",
        description="Link text template with an {os_label} placeholder",
    )
    version: str = Field(
        default=__version__,
        description="Version of the CLI advertised by the download link",
    )
    version_annotation: str = Field(
        default="camel.apache.org/version",
        description="Annotation recording the installed version",
    )

    @field_validator("kubeconfig_path", mode="before")
    @classmethod
    def resolve_kubeconfig_path(cls, v: str | Path | None) -> Path | None:
        """Resolve kubeconfig path, defaulting to standard location."""
        if v is None:
            return None
        return Path(v).expanduser().resolve()

    @field_validator("url_template")
    @classmethod
    def check_url_template(cls, v: str) -> str:
        """Require both placeholders so every platform gets its own link."""
        return check_template(v, "url_template", URL_TEMPLATE_FIELDS)

    @field_validator("link_text_template")
    @classmethod
    def check_link_text_template(cls, v: str) -> str:
        return check_template(v, "link_text_template", LINK_TEXT_TEMPLATE_FIELDS)

    @field_validator("version")
    @classmethod
    def check_version(cls, v: str) -> str:
        """Reject versions the reconciler would not be able to compare."""
        try:
            parse_version(v, source="configuration")
        except InvalidVersionError as e:
            raise ValueError(str(e)) from e
        return v

    @property
    def effective_kubeconfig_path(self) -> Path:
        """Get the effective kubeconfig path, with default."""
        if self.kubeconfig_path:
            return self.kubeconfig_path
        env_path = os.environ.get("KUBECONFIG")
        if env_path:
            return Path(env_path).expanduser().resolve()
        return Path.home() / ".kube" / "config"

    def validate_auth_config(self) -> list[str]:
        """Validate authentication configuration and return any warnings."""
        warnings = []

        if self.auth_mode == AuthMode.TOKEN:
            if not self.api_server:
                raise ValueError("api_server is required when auth_mode is 'token'")
            if not self.api_token:
                raise ValueError("api_token is required when auth_mode is 'token'")

        if self.auth_mode == AuthMode.KUBECONFIG and not self.effective_kubeconfig_path.exists():
            raise ValueError(f"Kubeconfig file not found: {self.effective_kubeconfig_path}")

        if self.auth_mode == AuthMode.AUTO:
            if Path("/var/run/secrets/kubernetes.io/serviceaccount/token").exists():
                warnings.append("Running in-cluster, will use service account")
            elif not self.effective_kubeconfig_path.exists():
                warnings.append(
                    f"No kubeconfig found at {self.effective_kubeconfig_path}, "
                    "will attempt in-cluster auth"
                )

        return warnings

    def to_download_config(self) -> DownloadConfig:
        """Build the explicit download configuration handed to the reconciler."""
        return DownloadConfig(
            name=self.download_name,
            display_name=self.display_name,
            description=self.description,
            url_template=self.url_template,
            link_text_template=self.link_text_template,
            version=self.version,
            version_annotation=self.version_annotation,
            platforms=DEFAULT_PLATFORMS,
        )


# Global configuration instance
_config: InstallerConfig | None = None


def get_config() -> InstallerConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = InstallerConfig()
    return _config


def configure(**kwargs: Any) -> InstallerConfig:
    """Configure the global settings.

    This should be called before get_config() if you want to override defaults.
    """
    global _config
    _config = InstallerConfig(**kwargs)
    return _config
