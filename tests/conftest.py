"""Shared test fixtures."""

from __future__ import annotations

import pytest

from helpers import tcp, udp
from netmon.snapshot.models import Application, Snapshot


@pytest.fixture
def sample_snapshot() -> Snapshot:
    """Two applications; 'node' runs two pids, 'sshd' one."""
    node = Application(
        name="node",
        exe="/usr/bin/node",
        pids=(100, 200),
        connections=(
            tcp(100, "127.0.0.1:3000", state="LISTEN"),
            tcp(100, "127.0.0.1:51000", "127.0.0.1:5432"),
            tcp(200, "*:8080", state="LISTEN"),
            tcp(200, "10.0.0.5:8080", "10.0.0.9:40000"),
            udp(200, "*:5353"),
        ),
    )
    sshd = Application(
        name="sshd",
        exe="/usr/sbin/sshd",
        pids=(300,),
        connections=(
            tcp(300, "0.0.0.0:22", state="LISTEN"),
            tcp(300, "10.0.0.5:22", "10.0.0.7:61000"),
        ),
    )
    return Snapshot(applications=(node, sshd), skipped_count=4, timestamp=1700000000.0)
