"""macOS I/O enrichment via ``nettop``, which has real per-process accounting."""

from __future__ import annotations

import logging
import re
import subprocess
import time

from netmon.context import CancelToken
from netmon.snapshot.models import NetIOStats

logger = logging.getLogger(__name__)

# Upper bound for one nettop sample when the caller sets no deadline.
_NETTOP_TIMEOUT = 10

_NETTOP_CMD = ["nettop", "-P", "-l", "1", "-x", "-J", "bytes_in,bytes_out"]

# "<process name>.<pid>   <bytes_in>   <bytes_out>"; names may contain spaces and dots
_RECORD_RE = re.compile(
    r"^\s*(?P<name>.*)\.(?P<pid>\d+)\s+(?P<bytes_in>\d+)\s+(?P<bytes_out>\d+)\s*$"
)


class NettopNetIOCollector:
    """Samples nettop once and returns per-pid byte totals."""

    def collect(self, token: CancelToken | None = None) -> dict[int, NetIOStats]:
        timeout: float | None = _NETTOP_TIMEOUT
        if token is not None:
            if token.cancelled:
                return {}
            remaining = token.remaining()
            if remaining is not None:
                timeout = min(_NETTOP_TIMEOUT, remaining)

        try:
            result = subprocess.run(
                _NETTOP_CMD,
                capture_output=True,
                text=True,
                timeout=timeout,
                check=True,
            )
        except (
            subprocess.CalledProcessError,
            subprocess.TimeoutExpired,
            FileNotFoundError,
            OSError,
        ) as exc:
            logger.debug("nettop unavailable, skipping I/O stats: %s", exc)
            return {}

        return parse_nettop_output(result.stdout)


def parse_nettop_output(output: str) -> dict[int, NetIOStats]:
    """Parse nettop records, summing every record that shares a pid.

    Lines that do not look like a record (headers, blanks) are ignored.
    """
    totals: dict[int, list[int]] = {}

    for line in output.splitlines():
        m = _RECORD_RE.match(line)
        if not m:
            continue

        pid = int(m.group("pid"))
        entry = totals.setdefault(pid, [0, 0])
        entry[0] += int(m.group("bytes_in"))
        entry[1] += int(m.group("bytes_out"))

    now = time.time()
    return {
        pid: NetIOStats(bytes_recv=recv, bytes_sent=sent, updated_at=now)
        for pid, (recv, sent) in totals.items()
    }
