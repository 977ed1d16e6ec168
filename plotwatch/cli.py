"""Plotwatch CLI using Click."""

from __future__ import annotations

import logging
import os
import sys
from importlib.metadata import version

import click

from .cli_types import MonitorArgs, ShowHostArgs
from .commands import cmd_monitor, cmd_show_host
from .constants import HOSTS_ENV_VAR, POLL_INTERVAL_S, REQUEST_TIMEOUT_S
from .exceptions import CommandFailureError, PlotwatchError, UserError

# Module logger
logger = logging.getLogger("plotwatch")


def setup_logging(debug: bool = False, log_file: str | None = None) -> None:
    """Configure logging for the CLI.

    Logs go to stderr unless ``log_file`` is given; use a log file with the
    interactive monitor so messages do not land on the curses screen.
    """
    level = logging.DEBUG if debug else logging.WARNING
    logger.setLevel(level)
    if log_file:
        if any(
            isinstance(h, logging.FileHandler) and h.baseFilename == os.path.abspath(log_file)
            for h in logger.handlers
        ):
            return
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
    else:
        if any(
            isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stderr
            for h in logger.handlers
        ):
            return
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(handler)


def timeout_option(func):
    """Decorator adding the per-request timeout option."""
    return click.option(
        "--timeout",
        type=click.FloatRange(min=0, min_open=True),
        default=REQUEST_TIMEOUT_S,
        show_default=True,
        help="Per-host request deadline in seconds (connect + transfer + decode).",
    )(func)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=version("plotwatch"), prog_name="plotwatch")
@click.option(
    "--debug",
    "-d",
    is_flag=True,
    help="Enable debug logging.",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    help="Write logs to this file instead of stderr.",
)
@click.pass_context
def cli(ctx: click.Context, debug: bool, log_file: str | None):
    """Plotwatch: live status of plotting jobs across a fleet of hosts."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    setup_logging(debug=debug, log_file=log_file)


@cli.command("monitor")
@click.argument("hosts", envvar=HOSTS_ENV_VAR, metavar="HOSTS")
@click.option(
    "--interval",
    type=click.FloatRange(min=0, min_open=True),
    default=POLL_INTERVAL_S,
    show_default=True,
    help="Seconds between polling sweeps.",
)
@timeout_option
@click.option(
    "--once",
    is_flag=True,
    help="Poll every host once, print the tables and exit.",
)
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Poll once and emit machine-readable JSON to stdout.",
)
@click.option(
    "--alternate-mouse",
    is_flag=True,
    help="Only capture mouse clicks (for terminals such as PuTTY).",
)
def monitor(
    hosts: str,
    interval: float,
    timeout: float,
    once: bool,
    json_output: bool,
    alternate_mouse: bool,
):
    """Monitor plotting hosts (polls each host's status endpoint).

    HOSTS is a comma-separated list of host[:port] addresses; port 8484 is
    used when omitted. Defaults to $PLOTWATCH_HOSTS.
    """
    args = MonitorArgs(
        hosts=hosts,
        interval=interval,
        timeout=timeout,
        once=once,
        json=json_output,
        alternate_mouse=alternate_mouse,
    )
    cmd_monitor(args)


@cli.command("show-host")
@click.argument("host")
@timeout_option
def show_host(host: str, timeout: float):
    """Fetch one host's snapshot and print it as JSON."""
    args = ShowHostArgs(host=host, timeout=timeout)
    cmd_show_host(args)


def main():
    """Main entry point for the CLI."""
    try:
        cli()
    except CommandFailureError as e:
        # Command already printed its error message, just exit
        sys.exit(e.rc)
    except UserError as e:
        click.echo(f"ERROR: {e}", err=True)
        sys.exit(e.rc)
    except PlotwatchError as e:
        click.echo(f"ERROR: {e}", err=True)
        sys.exit(2)
    except KeyboardInterrupt:
        click.echo("ERROR: Interrupted", err=True)
        sys.exit(130)
