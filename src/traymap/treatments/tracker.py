"""Guard against applying stale treatment resolutions.

Resolutions may complete after the user has changed a region's treatment
or left the editing view. Each request gets a ticket; a completion is
applied only while its ticket is still the newest for that region, the
region still carries the same treatment id, and the session was not
cancelled.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable, Iterable

from traymap.core.models import Region, ResolvedTreatment, TreatmentInfo
from traymap.treatments.cache import TreatmentResolutionCache


@dataclass(frozen=True)
class Ticket:
    """One in-flight resolution request."""

    key: Hashable
    treatment_id: str
    serial: int
    session: int


class ResolutionTracker:
    """Tracks which resolution each region should currently display."""

    def __init__(self) -> None:
        self._serial = 0
        self._session = 0
        self._latest: dict[Hashable, Ticket] = {}
        self._current: dict[Hashable, str] = {}
        self._displayed: dict[Hashable, tuple[str, ResolvedTreatment]] = {}

    def begin(self, key: Hashable, treatment_id: str) -> Ticket:
        """Register a request for ``key``; older pending requests become stale."""
        self._serial += 1
        ticket = Ticket(key, treatment_id, self._serial, self._session)
        self._latest[key] = ticket
        self.set_current(key, treatment_id)
        return ticket

    def set_current(self, key: Hashable, treatment_id: str) -> None:
        """Record an edit to the treatment of ``key``."""
        self._current[key] = treatment_id
        shown = self._displayed.get(key)
        if shown is not None and shown[0] != treatment_id:
            del self._displayed[key]

    def complete(self, ticket: Ticket, resolved: ResolvedTreatment) -> bool:
        """Apply a finished resolution if it is still current.

        Returns:
            True if the result was applied, False if it was stale.
        """
        if ticket.session != self._session:
            return False
        if self._latest.get(ticket.key) != ticket:
            return False
        if self._current.get(ticket.key) != ticket.treatment_id:
            return False
        del self._latest[ticket.key]
        self._displayed[ticket.key] = (ticket.treatment_id, resolved)
        return True

    def cancel(self) -> None:
        """Abandon every pending request; their completions will be dropped."""
        self._session += 1
        self._latest.clear()

    def pending(self) -> list[Ticket]:
        return list(self._latest.values())

    def displayed(self, key: Hashable) -> ResolvedTreatment | None:
        shown = self._displayed.get(key)
        return shown[1] if shown is not None else None

    def resolve(
        self,
        key: Hashable,
        treatment_id: str,
        cache: TreatmentResolutionCache,
        regions: Iterable[Region] = (),
        options: Iterable[TreatmentInfo] = (),
    ) -> ResolvedTreatment | None:
        """Request, resolve and apply in one step.

        Returns:
            The applied resolution, or None if it went stale meanwhile.
        """
        ticket = self.begin(key, treatment_id)
        resolved = cache.resolve(treatment_id, regions=regions, options=options)
        return resolved if self.complete(ticket, resolved) else None
