"""Fetch and print a single host snapshot."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import click

from ..exceptions import CommandFailureError, FetchError
from ..fetch import SnapshotFetcher
from ..snapshot import snapshot_to_wire
from ..utils import normalize_host

if TYPE_CHECKING:
    from ..cli_types import ShowHostArgs


def cmd_show_host(args: ShowHostArgs) -> None:
    """Print the decoded snapshot of one host as JSON."""
    host = normalize_host(args.host)
    fetcher = SnapshotFetcher(timeout=args.timeout)
    try:
        snapshot = fetcher.fetch(host)
    except FetchError as e:
        click.echo(f"ERROR: {host}: {e}", err=True)
        raise CommandFailureError(rc=1) from e
    finally:
        fetcher.close()
    print(json.dumps({host: snapshot_to_wire(snapshot)}, indent=2, sort_keys=True))
