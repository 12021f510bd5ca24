"""Entry point for the console download installer."""

import argparse
import json
import logging
import sys
from typing import Any

from pydantic import ValidationError

from console_download import __version__
from console_download.config import AuthMode, InstallerConfig, LogLevel
from console_download.install.deadline import Deadline
from console_download.install.models import ConsoleCLIDownload
from console_download.utils.errors import AuthenticationError, InstallerError


def setup_logging(level: LogLevel) -> None:
    """Configure logging for the installer."""
    logging.basicConfig(
        level=level.value,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="console-download",
        description="Install the kamel CLI download link into the OpenShift console",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "command",
        nargs="?",
        choices=["install", "render"],
        default="install",
        help="install the link (default) or print it as JSON without contacting the cluster",
    )

    # Auth options
    parser.add_argument(
        "--auth-mode",
        choices=["auto", "kubeconfig", "token"],
        default=None,
        help="Authentication mode (default: auto)",
    )
    parser.add_argument(
        "--kubeconfig",
        default=None,
        help="Path to kubeconfig file",
    )
    parser.add_argument(
        "--context",
        default=None,
        help="Kubeconfig context to use",
    )

    # Download link options
    parser.add_argument(
        "--cli-version",
        default=None,
        help="Version advertised by the download link",
    )
    parser.add_argument(
        "--url-template",
        default=None,
        help="Download URL template with {version} and {os} placeholders",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Give up after this many seconds",
    )

    # Logging
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: INFO)",
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> InstallerConfig:
    """Build config from args, falling back to environment/defaults."""
    config_kwargs: dict[str, Any] = {}

    if args.auth_mode:
        config_kwargs["auth_mode"] = AuthMode(args.auth_mode)

    if args.kubeconfig:
        config_kwargs["kubeconfig_path"] = args.kubeconfig

    if args.context:
        config_kwargs["kubeconfig_context"] = args.context

    if args.cli_version:
        config_kwargs["version"] = args.cli_version

    if args.url_template:
        config_kwargs["url_template"] = args.url_template

    if args.log_level:
        config_kwargs["log_level"] = LogLevel(args.log_level)

    return InstallerConfig(**config_kwargs)


def render(config: InstallerConfig) -> str:
    """Render the desired ConsoleCLIDownload as JSON."""
    desired = ConsoleCLIDownload.from_config(config.to_download_config())
    return json.dumps(desired.to_cr(), indent=2)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    try:
        config = build_config(args)
    except ValidationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    if args.command == "render":
        print(render(config))
        return 0

    setup_logging(config.log_level)

    logger = logging.getLogger(__name__)
    logger.info(f"Starting console download installer v{__version__}")

    try:
        warnings = config.validate_auth_config()
        for warning in warnings:
            logger.warning(warning)
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    from console_download.clients.base import get_k8s_client
    from console_download.install.installer import install_console_download_link

    deadline = Deadline.after(args.timeout) if args.timeout is not None else None

    try:
        with get_k8s_client(config) as k8s:
            result = install_console_download_link(
                k8s, config.to_download_config(), deadline=deadline
            )
    except AuthenticationError as e:
        logger.error(
            f"{e}. Your credentials may be expired. "
            "Try re-authenticating with: oc login / kubectl config set-credentials"
        )
        return 1
    except InstallerError as e:
        logger.error(f"Console download installation failed: {e}")
        return 1

    logger.info(result.message)
    print(result.outcome.value)
    return 0


if __name__ == "__main__":
    sys.exit(main())
