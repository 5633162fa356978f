"""Snapshot data models — immutable records produced by one collection pass."""

from __future__ import annotations

import enum
import time
from collections.abc import Iterable
from dataclasses import dataclass, field


class Protocol(enum.Enum):
    """Transport protocol of a socket."""

    TCP = "TCP"
    UDP = "UDP"
    UNKNOWN = "UNK"


# Connection-state labels. The OS reports many more (SYN_SENT, FIN_WAIT1, ...);
# these are the ones the aggregation logic cares about.
STATE_ESTABLISHED = "ESTABLISHED"
STATE_LISTEN = "LISTEN"
STATE_TIME_WAIT = "TIME_WAIT"
STATE_CLOSE_WAIT = "CLOSE_WAIT"
STATE_NONE = "-"


def format_addr(ip: str, port: int) -> str:
    """Render an endpoint as ``ip:port``, using ``*`` for an empty ip."""
    return f"{ip or '*'}:{port}"


def extract_port(addr: str) -> int:
    """Return the port after the last ``:`` in *addr*, or 0 when there is none."""
    _, sep, tail = addr.rpartition(":")
    if not sep:
        return 0
    try:
        return int(tail)
    except ValueError:
        return 0


@dataclass(frozen=True)
class Connection:
    """A single socket owned by a process."""

    pid: int
    protocol: Protocol
    local_addr: str
    remote_addr: str
    state: str = STATE_NONE


@dataclass(frozen=True)
class Application:
    """All sockets of the processes sharing one resolved name.

    ``pids`` is ascending and unique. The state counts are derived from
    ``connections`` on every access.
    """

    name: str
    exe: str = ""
    pids: tuple[int, ...] = ()
    connections: tuple[Connection, ...] = ()

    @property
    def connection_count(self) -> int:
        return len(self.connections)

    @property
    def established_count(self) -> int:
        return sum(1 for c in self.connections if c.state == STATE_ESTABLISHED)

    @property
    def listen_count(self) -> int:
        return sum(1 for c in self.connections if c.state == STATE_LISTEN)


@dataclass(frozen=True)
class Snapshot:
    """Result of one aggregation pass. Never mutated after construction."""

    applications: tuple[Application, ...] = ()
    skipped_count: int = 0
    timestamp: float = field(default_factory=time.time)

    @property
    def total_connections(self) -> int:
        return sum(app.connection_count for app in self.applications)


@dataclass(frozen=True)
class NetIOStats:
    """Cumulative byte counters attributed to one process."""

    bytes_recv: int = 0
    bytes_sent: int = 0
    updated_at: float = field(default_factory=time.time)


def sort_applications(apps: Iterable[Application]) -> tuple[Application, ...]:
    """Order by descending connection count, then by name."""
    return tuple(sorted(apps, key=lambda app: (-app.connection_count, app.name)))
