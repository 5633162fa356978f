"""CLI command: netmon kill --port PORT — signal processes bound to ports."""

from __future__ import annotations

import click
from rich.console import Console

from netmon.actions.kill import KillRequest, resolve_and_kill
from netmon.config import NetmonConfig
from netmon.context import CancelToken
from netmon.errors import NetmonError

console = Console()


def _parse_ports(values: tuple[str, ...]) -> tuple[int, ...]:
    ports: list[int] = []
    for value in values:
        for part in value.split(","):
            part = part.strip()
            if not part:
                continue
            if not part.isdigit() or not 0 < int(part) < 65536:
                raise click.BadParameter(f"invalid port: {part}", param_hint="--port")
            ports.append(int(part))
    return tuple(ports)


@click.command()
@click.option(
    "--port",
    "-p",
    "ports",
    multiple=True,
    required=True,
    help="Port(s) to kill processes on; repeat or comma-separate.",
)
@click.option(
    "--signal",
    "-s",
    "signal_name",
    default=None,
    help="SIGTERM, SIGKILL, SIGHUP, SIGINT, SIGQUIT or a number.",
)
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation prompt.")
@click.pass_context
def kill(ctx: click.Context, ports: tuple[str, ...], signal_name: str | None, yes: bool) -> None:
    """Kill processes listening on the specified ports.

    \b
    Examples:
      netmon kill --port 8080
      netmon kill --port 8080,3000 -p 5432
      netmon kill --port 8080 --signal SIGKILL --yes
    """
    config: NetmonConfig = ctx.obj["config"]
    request = KillRequest(
        ports=_parse_ports(ports),
        signal_name=signal_name or config.default_signal,
        assume_yes=yes,
    )

    try:
        resolve_and_kill(
            request,
            console=console,
            token=CancelToken(timeout=config.collect_timeout),
        )
    except NetmonError as exc:
        raise click.ClickException(str(exc)) from exc
