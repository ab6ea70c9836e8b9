"""Check a headless installation against the release feed and apply pending updates."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from app.config import get_updater_config, load_updater_config
from app.version import get_app_version
from services.update.builder import build_update_service, default_run_options
from services.update.errors import InputValidationError
from services.update.models import BuildTag, PackageIdentity, ReleaseChannel
from services.update.selftest import run_self_test
from shared.logging_config import LogVerbosity, ensure_app_logging, set_file_log_verbosity


_LOGGER = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="factorio-updater",
        description=__doc__,
        epilog="Credentials are read from the FACTORIO_USERNAME and FACTORIO_TOKEN environment variables.",
    )
    parser.add_argument(
        "-r",
        "--rootdir",
        help="Installation root directory containing bin/x64/factorio (must end with a path separator).",
    )
    parser.add_argument(
        "-s",
        "--stable",
        choices=[channel.value for channel in ReleaseChannel],
        help="Release channel to follow (default from configuration).",
    )
    parser.add_argument(
        "-p",
        "--package",
        choices=[package.value for package in PackageIdentity],
        help="Update package identity (default from configuration).",
    )
    parser.add_argument(
        "-b",
        "--build",
        choices=[build.value for build in BuildTag],
        help="Build variant expected on the installation (default from configuration).",
    )
    parser.add_argument(
        "-n",
        "--no-install",
        action="store_true",
        help="Only report whether a newer version exists.",
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="Do not print progress to stderr.")
    parser.add_argument(
        "-t",
        "--test",
        action="store_true",
        help="Run an offline self-test against simulated feeds and executable.",
    )
    parser.add_argument(
        "--log-level",
        choices=[level.value for level in LogVerbosity],
        help="Minimum severity written to the log file.",
    )
    parser.add_argument("--config", type=Path, help="Path to an alternative updater.json.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {get_app_version()}")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    ensure_app_logging(quiet=args.quiet)
    if args.log_level:
        set_file_log_verbosity(args.log_level)

    config = load_updater_config(args.config) if args.config else get_updater_config()
    options = default_run_options(
        config,
        channel=ReleaseChannel(args.stable) if args.stable else None,
        package=PackageIdentity(args.package) if args.package else None,
        build=BuildTag(args.build) if args.build else None,
        no_install=args.no_install,
    )

    if args.test:
        return run_self_test(options)

    try:
        service = build_update_service(args.rootdir or "", options=options, config=config)
    except InputValidationError as exc:
        _LOGGER.error("%s", exc)
        return 1

    result = service.run()
    _LOGGER.debug("Update run finished with outcome %s", result.outcome.value)
    return result.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
