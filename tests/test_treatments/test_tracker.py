"""Tests for traymap.treatments.tracker."""

from traymap.core.models import ResolvedTreatment
from traymap.treatments.cache import TreatmentResolutionCache
from traymap.treatments.tracker import ResolutionTracker
from tests.test_treatments.test_cache import FULL, FakeLookup

HEAT = ResolvedTreatment(treatment_name="Heat")
COLD = ResolvedTreatment(treatment_name="Cold")


class TestResolutionTracker:
    def test_completion_applied(self):
        tracker = ResolutionTracker()
        ticket = tracker.begin(0, "t-1")
        assert tracker.complete(ticket, HEAT)
        assert tracker.displayed(0) == HEAT
        assert tracker.pending() == []

    def test_out_of_order_completion_dropped(self):
        tracker = ResolutionTracker()
        first = tracker.begin(0, "t-1")
        second = tracker.begin(0, "t-2")
        assert tracker.complete(second, COLD)
        assert not tracker.complete(first, HEAT)
        assert tracker.displayed(0) == COLD

    def test_edit_after_request_makes_it_stale(self):
        tracker = ResolutionTracker()
        ticket = tracker.begin(0, "t-1")
        tracker.set_current(0, "t-2")
        assert not tracker.complete(ticket, HEAT)
        assert tracker.displayed(0) is None

    def test_edit_clears_displayed_resolution(self):
        tracker = ResolutionTracker()
        tracker.complete(tracker.begin(0, "t-1"), HEAT)
        tracker.set_current(0, "t-2")
        assert tracker.displayed(0) is None

    def test_cancel_drops_pending(self):
        tracker = ResolutionTracker()
        ticket = tracker.begin(0, "t-1")
        tracker.cancel()
        assert tracker.pending() == []
        assert not tracker.complete(ticket, HEAT)
        assert tracker.displayed(0) is None

    def test_keys_are_independent(self):
        tracker = ResolutionTracker()
        a = tracker.begin(0, "t-1")
        b = tracker.begin(1, "t-1")
        assert tracker.complete(b, HEAT)
        assert tracker.complete(a, HEAT)

    def test_resolve_through_cache(self):
        tracker = ResolutionTracker()
        cache = TreatmentResolutionCache(FakeLookup())
        assert tracker.resolve(0, "t-1", cache) == FULL
        assert tracker.displayed(0) == FULL
