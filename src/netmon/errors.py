"""Exception hierarchy shared by collectors, filters, and the kill workflow."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from netmon.actions.kill import KillReport


class NetmonError(Exception):
    """Base class for all netmon errors."""


class CollectionError(NetmonError):
    """The OS socket query itself failed; no snapshot was produced."""


class CollectionCancelled(NetmonError):
    """Enumeration was cancelled before it finished."""


class CollectionTimeout(CollectionCancelled):
    """Enumeration ran past its deadline."""


class UnknownSignalError(NetmonError):
    """A kill was requested with a signal name that is not in the table."""

    def __init__(self, name: str) -> None:
        super().__init__(f"unknown signal: {name}")
        self.name = name


class KillError(NetmonError):
    """One or more signal sends failed. Raised after every target was tried."""

    def __init__(self, report: KillReport) -> None:
        super().__init__(f"{report.failed} process(es) could not be killed")
        self.report = report
