"""CLI command: netmon show [PORT] — one snapshot as a table or JSON."""

from __future__ import annotations

import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from netmon.collector import collect_once
from netmon.config import NetmonConfig
from netmon.context import CancelToken
from netmon.errors import NetmonError
from netmon.output import build_report, render_json
from netmon.process import process_exists
from netmon.resolve import HostResolver
from netmon.services import lookup
from netmon.snapshot.filters import filter_by_pid, filter_by_port
from netmon.snapshot.models import extract_port

console = Console()


@click.command()
@click.argument("port", required=False)
@click.option("--pid", type=int, default=None, help="Only show this process ID.")
@click.option("--json", "as_json", is_flag=True, help="Output JSON (for scripts and agents).")
@click.pass_context
def show(ctx: click.Context, port: str | None, pid: int | None, as_json: bool) -> None:
    """Show network connections grouped by application."""
    config: NetmonConfig = ctx.obj["config"]

    if port is not None and not port.isdigit():
        raise click.BadParameter(f"invalid port: {port}", param_hint="PORT")
    if pid is not None and port is not None:
        raise click.UsageError("cannot specify both --pid and a port filter")
    if pid is not None and not process_exists(pid):
        raise click.ClickException(f"process {pid} not found")

    try:
        snapshot, io_stats = collect_once(CancelToken(timeout=config.collect_timeout))
    except NetmonError as exc:
        raise click.ClickException(f"error collecting data: {exc}") from exc

    if port is not None:
        snapshot = filter_by_port(snapshot, port)
    if pid is not None:
        snapshot = filter_by_pid(snapshot, pid)

    if as_json or not sys.stdout.isatty():
        click.echo(render_json(snapshot, io_stats))
        return

    resolver = HostResolver() if config.dns_enabled else None
    _print_tables(build_report(snapshot, io_stats), config.service_names, resolver)


def _print_tables(
    report: dict, service_names: bool, resolver: HostResolver | None = None
) -> None:
    apps = report["applications"]
    if not apps:
        console.print("[dim]No connections found.[/dim]")
        return

    summary = Table(header_style="bold", box=None, padding=(0, 2))
    summary.add_column("Application", style="cyan", no_wrap=True)
    summary.add_column("PIDs")
    summary.add_column("Conns", justify="right")
    summary.add_column("Estab", justify="right")
    summary.add_column("Listen", justify="right")
    summary.add_column("Sent", justify="right")
    summary.add_column("Recv", justify="right")

    for app in apps:
        summary.add_row(
            escape(app["name"]),
            ", ".join(str(p) for p in app["pids"]),
            str(app["connection_count"]),
            str(app["established_count"]),
            str(app["listen_count"]),
            format_bytes(app["bytes_sent"]),
            format_bytes(app["bytes_recv"]),
        )
    console.print(summary)

    detail = Table(header_style="bold", box=None, padding=(0, 2))
    detail.add_column("Application", style="dim", no_wrap=True)
    detail.add_column("PID", justify="right")
    detail.add_column("Proto")
    detail.add_column("Local")
    detail.add_column("Remote")
    if resolver is not None:
        detail.add_column("Host", style="blue", no_wrap=True)
    detail.add_column("State")
    if service_names:
        detail.add_column("Service", style="green")

    for app in apps:
        for conn in app["connections"]:
            row = [
                escape(app["name"]),
                str(conn["pid"]),
                conn["protocol"],
                conn["local_addr"],
                conn["remote_addr"],
            ]
            if resolver is not None:
                row.append(escape(resolver.resolve_addr(conn["remote_addr"])))
            row.append(conn["state"])
            if service_names:
                row.append(_service_for(conn))
            detail.add_row(*row)

    console.print()
    console.print(detail)

    if report["skipped_count"]:
        console.print(
            f"\n[dim]{report['skipped_count']} connection(s) hidden "
            "(owner not visible, try sudo)[/dim]"
        )


def _service_for(conn: dict) -> str:
    proto = conn["protocol"].lower()
    return lookup(extract_port(conn["remote_addr"]), proto) or lookup(
        extract_port(conn["local_addr"]), proto
    )


def format_bytes(n: int) -> str:
    """Human-readable byte count, e.g. ``1.5 KB``."""
    value = float(n)
    for unit in ("B", "KB", "MB", "GB"):
        if value < 1024:
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} TB"
