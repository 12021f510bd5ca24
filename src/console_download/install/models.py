"""Pydantic models for the ConsoleCLIDownload resource."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

CONSOLE_API_VERSION = "console.openshift.io/v1"
CONSOLE_CLI_DOWNLOAD_KIND = "ConsoleCLIDownload"

URL_TEMPLATE_FIELDS = {"version": "0.0.0", "os": "linux"}
LINK_TEXT_TEMPLATE_FIELDS = {"os_label": "Linux"}


def check_template(template: str, name: str, fields: dict[str, str]) -> str:
    """Format a template with sample values so bad placeholders fail early.

    Every key of ``fields`` must appear, and no other placeholder may.
    """
    for key in fields:
        if "{" + key + "}" not in template:
            raise ValueError(f"{name} must contain {{{key}}}")
    try:
        template.format(**fields)
    except (KeyError, IndexError, ValueError) as e:
        raise ValueError(f"{name} is not a valid template: {e!r}") from e
    return template


class Platform(BaseModel):
    """Operating system a download link is published for."""

    model_config = ConfigDict(frozen=True)

    os: str = Field(..., description="OS name used in the download URL")
    label: str = Field(..., description="OS name shown in the link text")


DEFAULT_PLATFORMS: tuple[Platform, ...] = (
    Platform(os="linux", label="Linux"),
    Platform(os="mac", label="Mac"),
    Platform(os="windows", label="Windows"),
)


class DownloadConfig(BaseModel):
    """Everything needed to build the desired ConsoleCLIDownload.

    Passed explicitly to the reconciler so callers can substitute names,
    templates and the advertised version.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Name of the ConsoleCLIDownload resource")
    display_name: str = Field(..., description="Name shown in the console")
    description: str = Field(..., description="Markdown description shown in the console")
    url_template: str = Field(..., description="URL template with {version} and {os}")
    link_text_template: str = Field(
        "Download the binary for {os_label}", description="Link text with {os_label}"
    )
    version: str = Field(..., description="Current version to advertise")
    version_annotation: str = Field(..., description="Annotation holding the version")
    platforms: tuple[Platform, ...] = Field(DEFAULT_PLATFORMS)

    @field_validator("url_template")
    @classmethod
    def check_url_template(cls, v: str) -> str:
        return check_template(v, "url_template", URL_TEMPLATE_FIELDS)

    @field_validator("link_text_template")
    @classmethod
    def check_link_text_template(cls, v: str) -> str:
        return check_template(v, "link_text_template", LINK_TEXT_TEMPLATE_FIELDS)

    def download_url(self, os_name: str) -> str:
        """Render the download URL for one operating system."""
        return self.url_template.format(version=self.version, os=os_name)


class DownloadLink(BaseModel):
    """A single link of a ConsoleCLIDownload."""

    text: str
    href: str


class ConsoleCLIDownload(BaseModel):
    """The cluster-scoped ConsoleCLIDownload resource."""

    name: str
    annotations: dict[str, str] = Field(default_factory=dict)
    display_name: str
    description: str = ""
    links: list[DownloadLink] = Field(default_factory=list)

    @classmethod
    def from_config(cls, config: DownloadConfig) -> ConsoleCLIDownload:
        """Build the desired resource for the configured version."""
        return cls(
            name=config.name,
            annotations={config.version_annotation: config.version},
            display_name=config.display_name,
            description=config.description,
            links=[
                DownloadLink(
                    text=config.link_text_template.format(os_label=platform.label),
                    href=config.download_url(platform.os),
                )
                for platform in config.platforms
            ],
        )

    @classmethod
    def from_cr(cls, cr: Any) -> ConsoleCLIDownload:
        """Create from a ConsoleCLIDownload custom resource."""
        metadata = cr.metadata
        spec = getattr(cr, "spec", None)
        links = []
        for link in getattr(spec, "links", None) or []:
            links.append(DownloadLink(text=link.text, href=link.href))
        return cls(
            name=metadata.name,
            annotations=dict(metadata.annotations or {}),
            display_name=getattr(spec, "displayName", None) or "",
            description=getattr(spec, "description", None) or "",
            links=links,
        )

    def version(self, annotation: str) -> str | None:
        """Get the recorded version, if any."""
        return self.annotations.get(annotation)

    def to_cr(self) -> dict[str, Any]:
        """Build the custom resource body sent to the API server."""
        return {
            "apiVersion": CONSOLE_API_VERSION,
            "kind": CONSOLE_CLI_DOWNLOAD_KIND,
            "metadata": {
                "name": self.name,
                "annotations": dict(self.annotations),
            },
            "spec": {
                "displayName": self.display_name,
                "description": self.description,
                "links": [{"text": link.text, "href": link.href} for link in self.links],
            },
        }
