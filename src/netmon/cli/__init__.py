"""CLI entry point — Click group with global options."""

from __future__ import annotations

import logging

import click

from netmon import __version__
from netmon.config import NetmonConfig


@click.group()
@click.version_option(version=__version__, prog_name="netmon")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """netmon — see which processes own which sockets."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = NetmonConfig.load()
    except (ValueError, OSError) as exc:
        raise click.ClickException(f"failed to load settings: {exc}") from exc


def _register_commands() -> None:
    from netmon.cli.kill import kill  # noqa: F811
    from netmon.cli.show import show  # noqa: F811

    main.add_command(show)
    main.add_command(kill)


_register_commands()
