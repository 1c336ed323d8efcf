"""Command line entry points for the Interlinx bootstrap installer.

interlinx-bootstrap installs the controller and downloads the agent;
interlinx-install installs the controller only.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from .config.settings import SettingsManager
from .exceptions import ConfigurationError, InstallerError
from .install.orchestrator import BootstrapResult, run_bootstrap
from .utils.logging import setup_logging


def build_parser(dual: bool = True) -> argparse.ArgumentParser:
    """
    Build the argument parser for one variant.

    Args:
        dual: True for controller + agent, False for controller only
    """
    if dual:
        prog = "interlinx-bootstrap"
        description = "Download the Interlinx Controller and Agent from private GitHub repositories."
    else:
        prog = "interlinx-install"
        description = "Download and extract the Interlinx Controller from a private GitHub repository."

    parser = argparse.ArgumentParser(prog=prog, description=description)
    parser.add_argument(
        "--token",
        help="GitHub Personal Access Token (prompted for if not given)",
    )
    if dual:
        parser.add_argument(
            "--controller-version",
            metavar="VER",
            help="Controller version to install, e.g. v1.4.0 (default: latest)",
        )
        parser.add_argument(
            "--agent-version",
            metavar="VER",
            help="Agent version to download, e.g. v1.0.0 (default: latest)",
        )
        parser.add_argument(
            "--version",
            metavar="VER",
            help="Deprecated alias for --controller-version",
        )
    else:
        parser.add_argument(
            "--version",
            metavar="VER",
            help="Controller version to install, e.g. v1.4.0 (default: latest)",
        )
    parser.add_argument("--config", type=Path, help="JSON settings file")
    parser.add_argument("--install-dir", help="Directory the controller is extracted to (default: /opt)")
    parser.add_argument("--log-file", type=Path, help="Also write a debug log to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    return parser


def check_privileges(install_root: Path) -> None:
    """
    Make sure the install root can be written.

    Raises:
        ConfigurationError: If not root and the directory is not writable
    """
    geteuid = getattr(os, "geteuid", None)
    if geteuid is not None and geteuid() == 0:
        return

    existing = install_root
    while not existing.exists() and existing.parent != existing:
        existing = existing.parent
    if not os.access(existing, os.W_OK):
        raise ConfigurationError(
            f"This installer must be run as root or with sudo (cannot write to {install_root})"
        )


def show_summary(result: BootstrapResult, logger: logging.Logger) -> None:
    """Log where the artifacts ended up."""
    if result.agent is not None:
        logger.info("Interlinx Controller & Agent downloaded successfully!")
    else:
        logger.info("Interlinx Controller downloaded successfully!")
    logger.info(f"Controller Location: {result.controller.path}")
    if result.agent is not None:
        logger.info(f"Agent Location: {result.agent.path}")
    logger.info(f"For detailed documentation, see: {result.controller.path / 'README.md'}")


def run(argv: Optional[List[str]] = None, dual: bool = True) -> int:
    """
    Run one installer variant.

    Args:
        argv: Command line arguments (default: sys.argv[1:])
        dual: True for controller + agent, False for controller only

    Returns:
        Exit code (0 for success)
    """
    args = build_parser(dual).parse_args(argv)
    logger = setup_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        log_file=args.log_file,
    )

    controller_version = args.version
    agent_version = None
    if dual:
        if args.version:
            logger.warning(
                "Warning: The --version flag is deprecated. Use --controller-version instead."
            )
        controller_version = args.controller_version or args.version
        agent_version = args.agent_version

    try:
        settings = SettingsManager(args.config).load(install_dir=args.install_dir)
        check_privileges(settings.install_root)
        result = run_bootstrap(
            settings,
            token=args.token,
            controller_version=controller_version,
            agent_version=agent_version,
            include_agent=dual,
        )
    except InstallerError as e:
        logger.debug("Bootstrap failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        return 130

    show_summary(result, logger)
    logger.info("Bootstrap installation complete!")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Controller and agent entry point.

    Returns:
        Exit code (0 for success)
    """
    return run(argv, dual=True)


def main_single(argv: Optional[List[str]] = None) -> int:
    """
    Controller-only entry point.

    Returns:
        Exit code (0 for success)
    """
    return run(argv, dual=False)


if __name__ == "__main__":
    sys.exit(main())
