"""Command-line interface for featurekeeper."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import NoReturn, TextIO

import structlog

from featurekeeper import __version__ as FK_VERSION
from featurekeeper.admin.base import FeatureAdmin
from featurekeeper.admin.connect import connect
from featurekeeper.config import (
    BOOTSTRAP_SERVER_ENV,
    env_str,
    explain_path,
    load_command_config,
)
from featurekeeper.core.batch import run_batch
from featurekeeper.core.dependencies import write_feature_dependencies
from featurekeeper.core.operations import RequestedOperation
from featurekeeper.core.policy import downgrade_type
from featurekeeper.core.reports import write_describe, write_version_mapping
from featurekeeper.core.requests import build_disables, build_downgrades, build_upgrades
from featurekeeper.errors import TerseError, UsageError
from featurekeeper.log import configure_logging
from featurekeeper.safety.explain import ExplainLog

logger = structlog.get_logger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    # subparsers inherit this class, so every usage error surfaces as UsageError
    def error(self, message: str) -> NoReturn:
        raise UsageError(f"{self.format_usage()}{self.prog}: error: {message}")


def _resolve_endpoint(args: argparse.Namespace) -> str:
    endpoint = args.bootstrap_server or args.bootstrap_controller or env_str(BOOTSTRAP_SERVER_ENV)
    if not endpoint:
        raise TerseError("You must specify either --bootstrap-controller or --bootstrap-server.")
    return endpoint


def _admin_for(args: argparse.Namespace) -> FeatureAdmin:
    admin = getattr(args, "admin", None)
    if admin is not None:
        return admin
    config = load_command_config(args.command_config)
    return connect(_resolve_endpoint(args), config)


def _explain_for(args: argparse.Namespace) -> ExplainLog | None:
    if args.explain_log:
        return ExplainLog(Path(args.explain_log))
    path = explain_path()
    return ExplainLog(path) if path is not None else None


def _run_operations(
    args: argparse.Namespace,
    operations: list[RequestedOperation],
    out: TextIO,
) -> int:
    admin = _admin_for(args)
    run_batch(operations, admin, out, explain=_explain_for(args))
    return 0


def cmd_describe(args: argparse.Namespace, out: TextIO) -> int:
    admin = _admin_for(args)
    write_describe(admin.describe_features(), out)
    return 0


def cmd_upgrade(args: argparse.Namespace, out: TextIO) -> int:
    operations = build_upgrades(args.feature, args.metadata, dry_run=bool(args.dry_run))
    return _run_operations(args, operations, out)


def cmd_downgrade(args: argparse.Namespace, out: TextIO) -> int:
    operations = build_downgrades(
        args.feature,
        args.metadata,
        safety=downgrade_type(args),
        dry_run=bool(args.dry_run),
    )
    return _run_operations(args, operations, out)


def cmd_disable(args: argparse.Namespace, out: TextIO) -> int:
    operations = build_disables(
        args.feature,
        safety=downgrade_type(args),
        dry_run=bool(args.dry_run),
    )
    return _run_operations(args, operations, out)


def cmd_version_mapping(args: argparse.Namespace, out: TextIO) -> int:
    write_version_mapping(args.release_version, out)
    return 0


def cmd_feature_dependencies(args: argparse.Namespace, out: TextIO) -> int:
    write_feature_dependencies(args.feature, out)
    return 0


def _add_dry_run(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate this operation, but do not perform it",
    )


def _add_unsafe(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--unsafe",
        action="store_true",
        default=False,
        help="Perform this downgrade even if it may irreversibly destroy metadata state",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="fk",
        description="Describe, upgrade, downgrade and disable cluster feature levels.",
    )
    parser.add_argument("--version", action="version", version=f"featurekeeper {FK_VERSION}")
    endpoint = parser.add_mutually_exclusive_group()
    endpoint.add_argument(
        "--bootstrap-server",
        help=f"Control-plane endpoint to connect to (default: {BOOTSTRAP_SERVER_ENV})",
    )
    endpoint.add_argument(
        "--bootstrap-controller",
        help="Controller endpoint to connect to",
    )
    parser.add_argument(
        "--command-config",
        help="JSON file with admin client settings (controller_id, unsafe_downgrade_supported)",
    )
    parser.add_argument(
        "--explain-log",
        help="Append a JSONL audit record per feature operation to this path",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    describe = sub.add_parser("describe", help="Describe one or more feature flags")
    describe.set_defaults(func=cmd_describe)

    upgrade = sub.add_parser("upgrade", help="Upgrade one or more feature flags")
    upgrade.add_argument("--metadata", help="The level to which we should upgrade the metadata, e.g. 3.3-IV3")
    upgrade.add_argument(
        "--feature",
        action="append",
        help="A feature upgrade we should perform, in feature=level format",
    )
    _add_dry_run(upgrade)
    upgrade.set_defaults(func=cmd_upgrade)

    downgrade = sub.add_parser("downgrade", help="Downgrade one or more feature flags")
    downgrade.add_argument("--metadata", help="The level to which we should downgrade the metadata, e.g. 3.3-IV0")
    downgrade.add_argument(
        "--feature",
        action="append",
        help="A feature downgrade we should perform, in feature=level format",
    )
    _add_unsafe(downgrade)
    _add_dry_run(downgrade)
    downgrade.set_defaults(func=cmd_downgrade)

    disable = sub.add_parser("disable", help="Disable one or more feature flags, same as downgrading to level 0")
    disable.add_argument(
        "--feature",
        action="append",
        help="A feature flag to disable",
    )
    _add_unsafe(disable)
    _add_dry_run(disable)
    disable.set_defaults(func=cmd_disable)

    version_mapping = sub.add_parser(
        "version-mapping",
        help="Look up the feature levels corresponding to a release version",
    )
    version_mapping.add_argument(
        "--release-version",
        help="The release version to map (default: the latest production release)",
    )
    version_mapping.set_defaults(func=cmd_version_mapping)

    feature_dependencies = sub.add_parser(
        "feature-dependencies",
        help="Look up the dependencies of the given feature levels",
    )
    feature_dependencies.add_argument(
        "--feature",
        action="append",
        required=True,
        help="A feature level to inspect, in feature=level format",
    )
    feature_dependencies.set_defaults(func=cmd_feature_dependencies)

    return parser


def main(
    argv: list[str] | None = None,
    *,
    out: TextIO | None = None,
    err: TextIO | None = None,
    admin: FeatureAdmin | None = None,
) -> int:
    out = out if out is not None else sys.stdout
    err = err if err is not None else sys.stderr
    configure_logging()
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except UsageError as exc:
        print(str(exc), file=err)
        return 1
    args.admin = admin
    try:
        return args.func(args, out)
    except TerseError as exc:
        logger.debug("command_failed", command=args.command, error=str(exc))
        print(str(exc), file=err)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
