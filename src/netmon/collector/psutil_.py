"""Socket enumeration backed by psutil, grouped into per-application records."""

from __future__ import annotations

import logging
import socket
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

import psutil

from netmon.collector.identity import ProcessIdentityResolver
from netmon.context import CancelToken
from netmon.errors import CollectionError
from netmon.snapshot.models import (
    Application,
    Connection,
    Protocol,
    Snapshot,
    STATE_NONE,
    format_addr,
    sort_applications,
)

logger = logging.getLogger(__name__)

_PROTO_MAP = {
    socket.SOCK_STREAM: Protocol.TCP,
    socket.SOCK_DGRAM: Protocol.UDP,
}


@dataclass
class _AppBuilder:
    name: str
    exe: str
    pids: list[int] = field(default_factory=list)
    connections: list[Connection] = field(default_factory=list)

    def add(self, conn: Connection) -> None:
        if conn.pid not in self.pids:
            self.pids.append(conn.pid)
        self.connections.append(conn)

    def build(self) -> Application:
        return Application(
            name=self.name,
            exe=self.exe,
            pids=tuple(sorted(self.pids)),
            connections=tuple(self.connections),
        )


class PsutilCollector:
    """Lists every TCP/UDP socket on the host and attributes it to a process.

    Each ``collect()`` call builds a fresh ProcessIdentityResolver, so names
    cached during one pass never leak into the next one. Instances hold no
    other state and may be shared between threads.
    """

    def collect(self, token: CancelToken | None = None) -> Snapshot:
        token = token or CancelToken()
        token.raise_if_cancelled()

        resolver = ProcessIdentityResolver()
        apps: dict[str, _AppBuilder] = {}
        skipped = 0

        for pid, conn in self._enumerate():
            token.raise_if_cancelled()

            # Kernel-owned or unattributable without privileges
            if not pid:
                continue

            info = resolver.resolve(pid)
            if info is None:
                skipped += 1
                continue

            builder = apps.get(info.name)
            if builder is None:
                builder = apps[info.name] = _AppBuilder(name=info.name, exe=info.exe)
            builder.add(_convert(pid, conn))

        if skipped:
            logger.debug("Skipped %d connection(s) with unresolvable owners", skipped)

        return Snapshot(
            applications=sort_applications(b.build() for b in apps.values()),
            skipped_count=skipped,
        )

    def _enumerate(self) -> Iterator[tuple[int, Any]]:
        """Yield (pid, sconn) for every inet socket on the host."""
        try:
            conns = psutil.net_connections(kind="inet")
        except psutil.AccessDenied:
            logger.debug("System-wide socket query denied, walking processes instead")
            yield from self._enumerate_per_process()
            return
        except (psutil.Error, OSError) as exc:
            raise CollectionError(f"failed to get connections: {exc}") from exc

        for conn in conns:
            yield conn.pid or 0, conn

    @staticmethod
    def _enumerate_per_process() -> Iterator[tuple[int, Any]]:
        try:
            procs = list(psutil.process_iter())
        except (psutil.Error, OSError) as exc:
            raise CollectionError(f"failed to list processes: {exc}") from exc

        for proc in procs:
            try:
                conns = proc.net_connections(kind="inet")
            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                continue
            for conn in conns:
                yield proc.pid, conn


def _convert(pid: int, conn: Any) -> Connection:
    return Connection(
        pid=pid,
        protocol=_PROTO_MAP.get(conn.type, Protocol.UNKNOWN),
        local_addr=_format_local(conn.laddr),
        remote_addr=_format_remote(conn.raddr),
        state=_state(conn.status),
    )


def _format_local(laddr: Any) -> str:
    if not laddr:
        return format_addr("", 0)
    return format_addr(laddr.ip, laddr.port)


def _format_remote(raddr: Any) -> str:
    """Render the peer endpoint; no peer, an empty ip, or port 0 all mean ``*``."""
    if not raddr or not raddr.ip or not raddr.port:
        return "*"
    return format_addr(raddr.ip, raddr.port)


def _state(status: str | None) -> str:
    if not status or status == psutil.CONN_NONE:
        return STATE_NONE
    return status
