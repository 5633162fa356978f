"""Linux I/O enrichment from /proc/<pid>/net/dev.

The kernel exposes interface counters per network namespace, not per
process: every process in a namespace sees the same numbers. The counters
are therefore attributed to a single representative per namespace, the
lowest pid observed in it.
"""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass, field
from pathlib import Path

import psutil

from netmon.context import CancelToken
from netmon.snapshot.models import NetIOStats

logger = logging.getLogger(__name__)


@dataclass
class ProcNetIOCollector:
    """Attributes namespace-wide interface counters to one pid per namespace."""

    proc_root: Path = field(default_factory=lambda: Path("/proc"))

    def collect(self, token: CancelToken | None = None) -> dict[int, NetIOStats]:
        stats: dict[int, NetIOStats] = {}
        now = time.time()

        try:
            pids = sorted(psutil.pids())
        except (psutil.Error, OSError) as exc:
            logger.debug("Cannot list processes for I/O stats: %s", exc)
            return stats

        seen_namespaces: set[str] = set()

        for pid in pids:
            if token is not None and token.cancelled:
                break

            ns_id = self.network_namespace(pid)
            if not ns_id or ns_id in seen_namespaces:
                continue
            seen_namespaces.add(ns_id)

            recv, sent = self.read_net_dev(pid)
            if recv or sent:
                stats[pid] = NetIOStats(bytes_recv=recv, bytes_sent=sent, updated_at=now)

        return stats

    def network_namespace(self, pid: int) -> str:
        """Return the namespace handle of *pid*, e.g. ``net:[4026531840]``."""
        try:
            return os.readlink(self.proc_root / str(pid) / "ns" / "net")
        except OSError:
            return ""

    def read_net_dev(self, pid: int) -> tuple[int, int]:
        """Sum receive/transmit bytes over all non-loopback interfaces."""
        path = self.proc_root / str(pid) / "net" / "dev"
        try:
            content = path.read_text()
        except (PermissionError, OSError):
            return 0, 0
        return parse_net_dev(content)


def parse_net_dev(content: str) -> tuple[int, int]:
    """Parse the text of a ``net/dev`` file into (bytes_recv, bytes_sent)."""
    total_recv = 0
    total_sent = 0

    for line in content.splitlines()[2:]:  # two header lines
        iface, sep, counters = line.partition(":")
        if not sep or iface.strip() == "lo":
            continue

        fields = counters.split()
        if len(fields) < 10:
            continue

        try:
            total_recv += int(fields[0])
            total_sent += int(fields[8])
        except ValueError:
            continue

    return total_recv, total_sent
