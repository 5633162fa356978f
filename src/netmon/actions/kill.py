"""Kill action — signal the processes bound to a set of local ports."""

from __future__ import annotations

import logging
import os
import signal
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from rich.console import Console
from rich.markup import escape

from netmon.collector import new_collector
from netmon.collector.base import Collector
from netmon.context import CancelToken
from netmon.errors import KillError
from netmon.process import resolve_signal
from netmon.snapshot.models import Snapshot, extract_port

logger = logging.getLogger(__name__)

_AFFIRMATIVE = ("y", "yes")


@dataclass(frozen=True)
class KillRequest:
    """Which ports to clear, with which signal, and whether to skip the prompt."""

    ports: tuple[int, ...]
    signal_name: str = "SIGTERM"
    assume_yes: bool = False


@dataclass(frozen=True)
class KillTarget:
    """A process found bound to one of the requested ports."""

    pid: int
    port: int
    name: str


@dataclass
class KillReport:
    """Outcome of one resolve-and-kill run."""

    targets: list[KillTarget] = field(default_factory=list)
    sig: signal.Signals | None = None
    killed: int = 0
    failed: int = 0
    aborted: bool = False

    @property
    def ok(self) -> bool:
        return self.failed == 0


def resolve_targets(snapshot: Snapshot, ports: Iterable[int]) -> list[KillTarget]:
    """Find every (pid, port) pair whose local address is on a requested port.

    A pid bound to two requested ports yields two targets. Order follows the
    snapshot.
    """
    wanted = set(ports)
    seen: set[tuple[int, int]] = set()
    targets: list[KillTarget] = []

    for app in snapshot.applications:
        for conn in app.connections:
            port = extract_port(conn.local_addr)
            if port <= 0 or port not in wanted:
                continue
            key = (conn.pid, port)
            if key in seen:
                continue
            seen.add(key)
            targets.append(KillTarget(pid=conn.pid, port=port, name=app.name))

    return targets


def resolve_and_kill(
    request: KillRequest,
    collector: Collector | None = None,
    console: Console | None = None,
    confirm: Callable[[], bool] | None = None,
    token: CancelToken | None = None,
) -> KillReport:
    """Signal every process bound to ``request.ports``.

    The signal name is validated before anything is enumerated. Each process
    is signalled once even when it holds several requested ports. Raises
    KillError after all sends were attempted if any of them failed.
    """
    sig = resolve_signal(request.signal_name)
    console = console or Console()
    collector = collector or new_collector()

    snapshot = collector.collect(token)
    targets = resolve_targets(snapshot, request.ports)
    report = KillReport(targets=targets, sig=sig)

    if not targets:
        console.print("No processes found on specified port(s)")
        return report

    console.print("Processes to kill:")
    for t in targets:
        console.print(f"  PID {t.pid} ({escape(t.name)}) on port {t.port}")
    console.print(f"Signal: {sig.name}")

    if not request.assume_yes:
        ask = confirm or (lambda: _prompt(console))
        if not ask():
            console.print("Aborted")
            report.aborted = True
            return report

    for pid, name, ports in _group_by_pid(targets):
        port_list = ", ".join(str(p) for p in ports)
        logger.warning("Sending %s to PID %d (%s) on port(s) %s", sig.name, pid, name, port_list)
        try:
            os.kill(pid, sig)
        except OSError as exc:
            logger.error("Failed to signal PID %d: %s", pid, exc)
            console.print(f"[red]Failed to kill PID {pid} ({escape(name)}): {escape(str(exc))}[/red]")
            report.failed += 1
        else:
            console.print(f"Killed PID {pid} ({escape(name)})")
            report.killed += 1

    console.print(f"\nKilled: {report.killed}, Failed: {report.failed}")
    if not report.ok:
        raise KillError(report)
    return report


def _group_by_pid(targets: list[KillTarget]) -> list[tuple[int, str, list[int]]]:
    grouped: dict[int, tuple[str, list[int]]] = {}
    for t in targets:
        grouped.setdefault(t.pid, (t.name, []))[1].append(t.port)
    return [(pid, name, ports) for pid, (name, ports) in grouped.items()]


def _prompt(console: Console) -> bool:
    try:
        answer = console.input(f"\nProceed? {escape('[y/N]')} ")
    except EOFError:
        return False
    return answer.strip().lower() in _AFFIRMATIVE
