"""Scenario tests against real sockets on the local host."""

from __future__ import annotations

import io
import os
import socket
import subprocess
import sys
import textwrap
from collections.abc import Iterator

import pytest
from rich.console import Console

from netmon.actions.kill import KillRequest, resolve_and_kill
from netmon.collector import new_collector
from netmon.errors import UnknownSignalError
from netmon.snapshot.filters import filter_by_pid

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals only")

_LISTENER_SCRIPT = textwrap.dedent(
    """
    import socket, sys, time
    s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    s.bind(("127.0.0.1", 0))
    s.listen()
    print(s.getsockname()[1], flush=True)
    time.sleep(60)
    """
)


@pytest.fixture
def tcp_listeners() -> Iterator[list[int]]:
    socks = []
    for _ in range(2):
        s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        s.bind(("127.0.0.1", 0))
        s.listen()
        socks.append(s)
    yield [s.getsockname()[1] for s in socks]
    for s in socks:
        s.close()


@pytest.fixture
def udp_listener() -> Iterator[int]:
    s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    s.bind(("127.0.0.1", 0))
    yield s.getsockname()[1]
    s.close()


@pytest.fixture
def child_listener() -> Iterator[tuple[subprocess.Popen[str], int]]:
    proc = subprocess.Popen(
        [sys.executable, "-c", _LISTENER_SCRIPT],
        stdout=subprocess.PIPE,
        text=True,
    )
    assert proc.stdout is not None
    port = int(proc.stdout.readline())
    yield proc, port
    if proc.poll() is None:
        proc.kill()
        proc.wait(timeout=5)


def test_own_tcp_listeners_visible_by_pid(tcp_listeners: list[int]):
    my_pid = os.getpid()
    snapshot = filter_by_pid(new_collector().collect(), my_pid)

    assert len(snapshot.applications) == 1
    app = snapshot.applications[0]
    assert app.pids == (my_pid,)

    for port in tcp_listeners:
        matches = [c for c in app.connections if c.local_addr == f"127.0.0.1:{port}"]
        assert matches, f"listener on {port} not reported"
        assert matches[0].protocol.value == "TCP"
        assert matches[0].state == "LISTEN"


def test_udp_listener_has_no_state(udp_listener: int):
    snapshot = filter_by_pid(new_collector().collect(), os.getpid())

    conns = [
        c
        for app in snapshot.applications
        for c in app.connections
        if c.local_addr.endswith(f":{udp_listener}")
    ]
    assert conns
    assert conns[0].protocol.value == "UDP"
    assert conns[0].state == "-"


def test_kill_by_port_terminates_listener(child_listener: tuple[subprocess.Popen[str], int]):
    proc, port = child_listener
    buf = io.StringIO()

    report = resolve_and_kill(
        KillRequest(ports=(port,), signal_name="SIGTERM", assume_yes=True),
        console=Console(file=buf),
    )

    assert report.killed == 1
    assert proc.wait(timeout=10) != 0

    after = new_collector().collect()
    assert all(proc.pid not in app.pids for app in after.applications)


def test_unknown_signal_sends_nothing(child_listener: tuple[subprocess.Popen[str], int]):
    proc, port = child_listener

    with pytest.raises(UnknownSignalError, match="SIGWHATEVER"):
        resolve_and_kill(
            KillRequest(ports=(port,), signal_name="SIGWHATEVER", assume_yes=True),
            console=Console(file=io.StringIO()),
        )

    assert proc.poll() is None
