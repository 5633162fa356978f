"""Collector protocols — every platform variant must satisfy these."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from netmon.context import CancelToken
from netmon.snapshot.models import NetIOStats, Snapshot


@runtime_checkable
class Collector(Protocol):
    """Enumerates sockets and aggregates them into a Snapshot."""

    def collect(self, token: CancelToken | None = None) -> Snapshot:
        """Run one enumeration pass.

        Raises CollectionError when the OS query fails and
        CollectionCancelled when *token* fires. Never returns a partial result.
        """
        ...


@runtime_checkable
class NetIOCollector(Protocol):
    """Best-effort per-process byte counters."""

    def collect(self, token: CancelToken | None = None) -> dict[int, NetIOStats]:
        """Return pid → stats. Returns an empty mapping when data is unavailable."""
        ...
