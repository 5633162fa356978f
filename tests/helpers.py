"""Connection builders shared by the unit tests."""

from __future__ import annotations

from netmon.snapshot.models import Connection, Protocol, STATE_NONE


def tcp(pid: int, local: str, remote: str = "*", state: str = "ESTABLISHED") -> Connection:
    return Connection(pid=pid, protocol=Protocol.TCP, local_addr=local, remote_addr=remote, state=state)


def udp(pid: int, local: str) -> Connection:
    return Connection(pid=pid, protocol=Protocol.UDP, local_addr=local, remote_addr="*", state=STATE_NONE)
