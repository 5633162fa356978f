"""Process helpers: existence checks and the signal name table."""

from __future__ import annotations

import signal

import psutil

from netmon.errors import UnknownSignalError

# Both full (SIGTERM) and short (TERM) names are accepted, case-insensitively.
SIGNAL_MAP: dict[str, signal.Signals] = {
    "SIGTERM": signal.SIGTERM,
    "SIGKILL": signal.SIGKILL,
    "SIGHUP": signal.SIGHUP,
    "SIGINT": signal.SIGINT,
    "SIGQUIT": signal.SIGQUIT,
    "TERM": signal.SIGTERM,
    "KILL": signal.SIGKILL,
    "HUP": signal.SIGHUP,
    "INT": signal.SIGINT,
    "QUIT": signal.SIGQUIT,
}


def resolve_signal(name: str) -> signal.Signals:
    """Map a signal name or number (``"sigterm"``, ``"KILL"``, ``"9"``) to a signal."""
    key = name.strip().upper()
    if key in SIGNAL_MAP:
        return SIGNAL_MAP[key]

    if key.isdigit():
        try:
            return signal.Signals(int(key))
        except ValueError:
            pass

    raise UnknownSignalError(name)


def process_exists(pid: int) -> bool:
    """Whether a process with *pid* is currently running."""
    if pid <= 0:
        return False
    try:
        return psutil.pid_exists(pid)
    except (psutil.Error, OSError):
        return False
