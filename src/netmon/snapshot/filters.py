"""Pure transforms that narrow a Snapshot to one port or one process."""

from __future__ import annotations

from dataclasses import replace

from netmon.snapshot.models import Application, Snapshot


def filter_by_port(snapshot: Snapshot, port: int | str) -> Snapshot:
    """Keep connections whose local or remote address ends with ``:<port>``.

    Applications left without connections are dropped. Each surviving
    application's pid list is cut down to the pids that still own a
    connection, in their original order.
    """
    suffix = f":{port}"
    apps: list[Application] = []

    for app in snapshot.applications:
        matching = tuple(
            conn
            for conn in app.connections
            if conn.local_addr.endswith(suffix) or conn.remote_addr.endswith(suffix)
        )
        if not matching:
            continue

        owners = {conn.pid for conn in matching}
        apps.append(
            replace(
                app,
                pids=tuple(pid for pid in app.pids if pid in owners),
                connections=matching,
            )
        )

    return replace(snapshot, applications=tuple(apps))


def filter_by_pid(snapshot: Snapshot, pid: int) -> Snapshot:
    """Keep only the application running *pid*, narrowed to that pid's sockets."""
    apps: list[Application] = []

    for app in snapshot.applications:
        if pid not in app.pids:
            continue
        apps.append(
            replace(
                app,
                pids=(pid,),
                connections=tuple(c for c in app.connections if c.pid == pid),
            )
        )

    return replace(snapshot, applications=tuple(apps))
