"""Treatment Resolution Cache — treatment id to location → sample → treatment.

Lookups prefer data already in hand (the cache, nested treatments carried
by regions, a previously fetched option list) and only then fall back to
three sequential fetches through the injected lookup. Failures degrade to
empty display fields and are never raised to the caller.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Protocol

from traymap.core.models import Region, ResolvedTreatment, TreatmentInfo

logger = logging.getLogger(__name__)


class TreatmentLookup(Protocol):
    """Read-only fetch-by-id for ``treatments``, ``samples`` and ``locations``."""

    def get_one(self, resource: str, id: str) -> Mapping[str, Any]: ...


@dataclass(frozen=True)
class _Entry:
    value: ResolvedTreatment
    stored_at: float


class TreatmentResolutionCache:
    """Memoizing resolver for treatment display names.

    Entries live until ``clear()`` unless ``max_age`` (seconds, measured
    with the injected ``clock``) is given.
    """

    def __init__(
        self,
        lookup: TreatmentLookup,
        clock: Callable[[], float] = time.monotonic,
        max_age: float | None = None,
    ) -> None:
        self._lookup = lookup
        self._clock = clock
        self._max_age = max_age
        self._entries: dict[str, _Entry] = {}
        self._options: dict[str, TreatmentInfo] = {}

    def __contains__(self, treatment_id: object) -> bool:
        return isinstance(treatment_id, str) and self._cached(treatment_id) is not None

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        """Drop every cached resolution and remembered option."""
        self._entries.clear()
        self._options.clear()

    def remember_options(self, treatments: Iterable[TreatmentInfo]) -> None:
        """Keep a fetched treatment option list for later resolutions."""
        for treatment in treatments:
            self._options[treatment.id] = treatment

    def prime(self, treatment_id: str, resolved: ResolvedTreatment) -> None:
        self._entries[treatment_id] = _Entry(resolved, self._clock())

    def _cached(self, treatment_id: str) -> ResolvedTreatment | None:
        entry = self._entries.get(treatment_id)
        if entry is None:
            return None
        if self._max_age is not None and self._clock() - entry.stored_at > self._max_age:
            del self._entries[treatment_id]
            return None
        return entry.value

    def resolve(
        self,
        treatment_id: str,
        regions: Iterable[Region] = (),
        options: Iterable[TreatmentInfo] = (),
    ) -> ResolvedTreatment:
        """Resolve a treatment id for display.

        Args:
            treatment_id: The id to resolve; empty yields an empty result.
            regions: Regions of the current store, checked for a nested
                treatment with this id.
            options: A freshly loaded option list, checked after the
                remembered one.

        Returns:
            The resolution; fields that could not be looked up are empty.
        """
        if not treatment_id:
            return ResolvedTreatment.empty()

        cached = self._cached(treatment_id)
        if cached is not None:
            return cached

        known = self._from_known(treatment_id, regions, options)
        if known is not None:
            self.prime(treatment_id, known)
            return known

        resolved, complete = self._fetch(treatment_id)
        if complete:
            self.prime(treatment_id, resolved)
        return resolved

    def _from_known(
        self,
        treatment_id: str,
        regions: Iterable[Region],
        options: Iterable[TreatmentInfo],
    ) -> ResolvedTreatment | None:
        for region in regions:
            nested = region.treatment
            if nested is not None and nested.id == treatment_id and nested.sample is not None:
                return ResolvedTreatment.from_treatment(nested)

        candidates = [self._options.get(treatment_id)]
        candidates.extend(t for t in options if t.id == treatment_id)
        for treatment in candidates:
            if treatment is not None and treatment.sample is not None:
                return ResolvedTreatment.from_treatment(treatment)
        return None

    def _fetch(self, treatment_id: str) -> tuple[ResolvedTreatment, bool]:
        """Treatment, then sample, then location. Returns (result, complete)."""
        try:
            treatment = self._lookup.get_one("treatments", treatment_id)
        except Exception as exc:
            logger.warning("Could not load treatment %s: %s", treatment_id, exc)
            return ResolvedTreatment.empty(), False
        if not treatment:
            return ResolvedTreatment.empty(), False
        treatment_name = str(treatment.get("name") or "")

        sample_id = treatment.get("sample_id")
        if not sample_id:
            return ResolvedTreatment(treatment_name=treatment_name), True
        try:
            sample = self._lookup.get_one("samples", str(sample_id))
        except Exception as exc:
            logger.warning("Could not load sample %s: %s", sample_id, exc)
            return ResolvedTreatment(treatment_name=treatment_name), False
        if not sample:
            return ResolvedTreatment(treatment_name=treatment_name), False

        resolved = ResolvedTreatment(
            sample_name=str(sample.get("name") or ""),
            treatment_name=treatment_name,
            sample_type=str(sample.get("type") or ""),
        )
        location_id = sample.get("location_id")
        if not location_id:
            return resolved, True
        try:
            location = self._lookup.get_one("locations", str(location_id))
        except Exception as exc:
            logger.warning("Could not load location %s: %s", location_id, exc)
            return resolved, False

        return ResolvedTreatment(
            location_name=str((location or {}).get("name") or ""),
            sample_name=resolved.sample_name,
            treatment_name=treatment_name,
            sample_type=resolved.sample_type,
        ), bool(location)
