"""Monitor command entry point."""

from __future__ import annotations

import curses
import json
import sys
from curses import wrapper as curses_wrapper
from dataclasses import asdict
from typing import TYPE_CHECKING

from ...constants import CURSES_TICK_MS
from ...exceptions import PlotwatchError
from ...fetch import SnapshotFetcher
from ...snapshot import snapshot_to_wire
from ...utils import parse_host_list
from .dashboard import TABLE_ORDER, Dashboard
from .data import aggregate_directories
from .display import MonitorDisplay
from .formatting import render_table_lines
from .poller import PollOutcome, PollScheduler, RenderDispatcher

if TYPE_CHECKING:
    from ...cli_types import MonitorArgs


def make_scheduler(
    hosts: list[str],
    *,
    dashboard: Dashboard,
    dispatcher: RenderDispatcher,
    fetcher: SnapshotFetcher,
    interval: float,
) -> PollScheduler:
    """Wire a scheduler whose results reach the dashboard only via the dispatcher."""

    def on_result(host: str, outcome: PollOutcome) -> None:
        dispatcher.submit(lambda: dashboard.apply_result(host, outcome))

    return PollScheduler(hosts, fetch=fetcher.fetch, on_result=on_result, interval=interval)


def render_dashboard_text(dashboard: Dashboard) -> list[str]:
    """Plain-text rendering of every table, for --once and non-tty output."""
    out: list[str] = []
    for name in TABLE_ORDER:
        table = dashboard.tables[name]
        header, lines = render_table_lines(table)
        if out:
            out.append("")
        out.append(f"== {table.title} ==")
        out.append(header)
        out.extend(lines)
    return out


def dashboard_json(dashboard: Dashboard) -> dict:
    store = dashboard.store
    aggregate = aggregate_directories(store)
    return {
        "hosts": {host: snapshot_to_wire(snapshot) for host, snapshot in store.items()},
        "source_dirs": [asdict(stats) for stats in aggregate.source.values()],
        "dest_dirs": [asdict(stats) for stats in aggregate.dest.values()],
    }


def run_once(
    hosts: list[str], *, fetcher: SnapshotFetcher, dashboard: Dashboard | None = None
) -> Dashboard:
    """Poll every host a single time and return the resulting dashboard state."""
    dashboard = dashboard or Dashboard()
    dispatcher = RenderDispatcher()
    scheduler = make_scheduler(
        hosts, dashboard=dashboard, dispatcher=dispatcher, fetcher=fetcher, interval=0
    )
    scheduler.sweep()
    dispatcher.run_pending()
    return dashboard


def cmd_monitor(args: MonitorArgs) -> None:
    """Poll plotting hosts and show their jobs and directories."""
    hosts = parse_host_list(args.hosts)
    fetcher = SnapshotFetcher(timeout=args.timeout)

    try:
        if args.once or args.json or not sys.stdout.isatty():
            dashboard = run_once(hosts, fetcher=fetcher)
            if args.json:
                print(json.dumps(dashboard_json(dashboard), indent=2, sort_keys=True))
            else:
                for line in render_dashboard_text(dashboard):
                    print(line)
            return

        dashboard = Dashboard()
        dispatcher = RenderDispatcher()
        scheduler = make_scheduler(
            hosts,
            dashboard=dashboard,
            dispatcher=dispatcher,
            fetcher=fetcher,
            interval=args.interval,
        )

        def curses_main(stdscr) -> None:
            stdscr.nodelay(True)
            stdscr.timeout(CURSES_TICK_MS)
            display = MonitorDisplay(
                stdscr,
                dashboard=dashboard,
                host_count=len(hosts),
                alternate_mouse=args.alternate_mouse,
            )
            scheduler.start()
            display.draw_screen()
            while True:
                key = stdscr.getch()

                if display.handle_key(key, draw=False):
                    return

                redraw = key != -1
                if key != -1:
                    # Drop queued input (e.g. held arrow keys) to avoid lag
                    peek = stdscr.getch()
                    if peek != -1:
                        curses.flushinp()

                if dispatcher.run_pending():
                    redraw = True
                if redraw:
                    display.draw_screen()

        try:
            curses_wrapper(curses_main)
        except curses.error as e:
            raise PlotwatchError(f"unable to set up screen: {e}") from e
        finally:
            scheduler.stop()
    finally:
        fetcher.close()
