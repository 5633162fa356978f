"""Collector factory — picks the right variant for the running OS."""

from __future__ import annotations

import logging
import platform

from netmon.collector.base import Collector, NetIOCollector
from netmon.context import CancelToken
from netmon.snapshot.models import NetIOStats, Snapshot

logger = logging.getLogger(__name__)


class NullNetIOCollector:
    """Used where no I/O accounting source is known."""

    def collect(self, token: CancelToken | None = None) -> dict[int, NetIOStats]:
        return {}


def new_collector() -> Collector:
    """Return the connection enumerator for this platform."""
    from netmon.collector.psutil_ import PsutilCollector

    return PsutilCollector()


def new_netio_collector(system: str | None = None) -> NetIOCollector:
    """Return the I/O enrichment collector for *system* (default: this host)."""
    system = system or platform.system()
    if system == "Linux":
        from netmon.collector.platform.linux import ProcNetIOCollector

        return ProcNetIOCollector()
    if system == "Darwin":
        from netmon.collector.platform.macos import NettopNetIOCollector

        return NettopNetIOCollector()

    logger.debug("No I/O stats source on %s", system)
    return NullNetIOCollector()


def collect_once(
    token: CancelToken | None = None,
    collector: Collector | None = None,
    netio: NetIOCollector | None = None,
) -> tuple[Snapshot, dict[int, NetIOStats]]:
    """Collect one Snapshot plus I/O stats.

    Enumeration errors propagate. Any enrichment failure degrades to an empty
    stats mapping.
    """
    collector = collector or new_collector()
    snapshot = collector.collect(token)

    netio = netio or new_netio_collector()
    try:
        io_stats = netio.collect(token)
    except Exception as exc:  # enrichment is optional
        logger.debug("I/O stats collection failed: %s", exc)
        io_stats = {}

    return snapshot, io_stats


__all__ = [
    "Collector",
    "NetIOCollector",
    "NullNetIOCollector",
    "collect_once",
    "new_collector",
    "new_netio_collector",
]
