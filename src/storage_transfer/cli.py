#!/usr/bin/env python3
"""CLI entrypoint
storage-transfer COMMAND [ARGS...]; positional dispatch, results on stdout, logs and errors on stderr.
"""
from __future__ import annotations

import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Optional, Tuple

import click
import structlog

from storage_transfer.api import ApiFactory
from storage_transfer.client import TransferClient
from storage_transfer.config import Settings, load_settings
from storage_transfer.credentials import CredentialResolver
from storage_transfer.exceptions import TransferError
from storage_transfer.models import NoOperations, check_job_args

COMMANDS = ("create", "status")

USAGE = """\
Usage: storage-transfer [--project ID] [--config FILE] [--verbose] COMMAND [ARGS...]

Commands:

\tcreate SRC_BUCKET_NAME DEST_BUCKET_NAME DATE TIME [DESCRIPTION]
\tstatus [JOB_ID]

Examples:

\tstorage-transfer create my-bucket my-other-bucket 2016/08/12 16:30 "Move my files"
\tstorage-transfer status 1234567890
"""


def configure_logging(verbose: bool) -> None:
    level = logging.INFO if verbose else logging.WARNING
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
    )


def build_client(
    settings: Settings,
    resolver: Optional[CredentialResolver] = None,
    api_factory: Optional[ApiFactory] = None,
) -> TransferClient:
    resolver = resolver or CredentialResolver(scopes=settings.scopes)
    if not settings.project_id:
        # fall back to the project the default credentials belong to
        settings = replace(settings, project_id=resolver.resolve().project_id)
    return TransferClient(project_id=settings.require_project(), resolver=resolver, api_factory=api_factory)


def _arg(args: Tuple[str, ...], i: int) -> Optional[str]:
    return args[i] if i < len(args) else None


def _echo_json(obj: Any) -> None:
    click.echo(json.dumps(obj, indent=2))


def run(command: Optional[str], args: Tuple[str, ...], config_file: Optional[Path] = None, project: Optional[str] = None) -> int:
    if command not in COMMANDS:
        click.echo(USAGE, nl=False)
        return 0

    create_args = tuple(_arg(args, i) for i in range(5))
    if command == "create":
        # bad arguments fail before settings or credentials are touched
        check_job_args(*create_args[:4])

    client = build_client(load_settings(config_file=config_file, project_override=project))
    if command == "create":
        job = client.create_transfer_job(*create_args)
        _echo_json(job)
    else:
        result = client.get_job_status(_arg(args, 0))
        if isinstance(result, NoOperations):
            click.echo(str(result))
        else:
            _echo_json({"operations": result})
    return 0


@click.command(context_settings={"ignore_unknown_options": True})
@click.option("--project", "project", type=str, default=None, help="Cloud project id (defaults to GCLOUD_PROJECT)")
@click.option("--config", "config_file", type=click.Path(exists=True, dir_okay=False, path_type=Path), default=None, help="Optional config.toml")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log requests and responses to stderr")
@click.argument("command", required=False)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def main(project: Optional[str], config_file: Optional[Path], verbose: bool, command: Optional[str], args: Tuple[str, ...]) -> None:
    """Create Storage Transfer jobs and query their operations."""
    configure_logging(verbose)
    try:
        code = run(command, args, config_file=config_file, project=project)
    except TransferError as e:
        click.echo(f"error: {e}", err=True)
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()
