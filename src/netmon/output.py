"""JSON report for scripts and agents."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

from netmon.snapshot.models import Application, NetIOStats, Snapshot


def build_report(
    snapshot: Snapshot, io_stats: dict[int, NetIOStats] | None = None
) -> dict[str, Any]:
    """Build the report mapping for *snapshot*.

    Byte totals are summed over an application's pids and are 0 when no
    stats exist for any of them.
    """
    io_stats = io_stats or {}
    return {
        "timestamp": datetime.fromtimestamp(snapshot.timestamp, tz=timezone.utc).isoformat(),
        "applications": [_app_entry(app, io_stats) for app in snapshot.applications],
        "skipped_count": snapshot.skipped_count,
    }


def render_json(
    snapshot: Snapshot, io_stats: dict[int, NetIOStats] | None = None
) -> str:
    return json.dumps(build_report(snapshot, io_stats), indent=2)


def _app_entry(app: Application, io_stats: dict[int, NetIOStats]) -> dict[str, Any]:
    sent = 0
    recv = 0
    for pid in app.pids:
        stats = io_stats.get(pid)
        if stats is not None:
            sent += stats.bytes_sent
            recv += stats.bytes_recv

    return {
        "name": app.name,
        "exe": app.exe,
        "pids": list(app.pids),
        "connection_count": app.connection_count,
        "established_count": app.established_count,
        "listen_count": app.listen_count,
        "bytes_sent": sent,
        "bytes_recv": recv,
        "connections": [
            {
                "pid": conn.pid,
                "protocol": conn.protocol.value,
                "local_addr": conn.local_addr,
                "remote_addr": conn.remote_addr,
                "state": conn.state,
            }
            for conn in app.connections
        ],
    }
