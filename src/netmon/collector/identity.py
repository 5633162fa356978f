"""Process identity lookups, memoized for the length of one collection pass."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field

import psutil

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessInfo:
    """Display name and executable path of a process."""

    name: str
    exe: str = ""


@dataclass
class ProcessIdentityResolver:
    """Maps pids to ProcessInfo.

    One resolver belongs to exactly one collection pass. Pids are recycled by
    the OS, so a resolver must never outlive the pass that created it.
    """

    _cache: dict[int, ProcessInfo | None] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def resolve(self, pid: int) -> ProcessInfo | None:
        """Return the identity of *pid*, or None when it cannot be resolved."""
        with self._lock:
            if pid in self._cache:
                return self._cache[pid]

        info = self._lookup(pid)

        with self._lock:
            return self._cache.setdefault(pid, info)

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    @staticmethod
    def _lookup(pid: int) -> ProcessInfo | None:
        try:
            proc = psutil.Process(pid)
            name = proc.name()
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess) as exc:
            logger.debug("Cannot resolve PID %d: %s", pid, exc)
            return None

        if not name:
            return None

        # Executable path is often denied for other users' processes
        try:
            exe = proc.exe()
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
            exe = ""

        return ProcessInfo(name=name, exe=exe or "")
