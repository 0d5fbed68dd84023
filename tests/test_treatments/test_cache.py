"""Tests for traymap.treatments.cache."""

import logging

import pytest

from traymap.core.models import LocationInfo, ResolvedTreatment, SampleInfo, TreatmentInfo
from traymap.treatments.cache import TreatmentResolutionCache
from tests.conftest import make_region


class FakeLookup:
    """In-memory lookup that records calls and can fail per resource."""

    def __init__(self, records=None, failing=()):
        self.records = records or {
            ("treatments", "t-1"): {"id": "t-1", "name": "Heat", "sample_id": "s-1"},
            ("samples", "s-1"): {"id": "s-1", "name": "Soil", "type": "bulk", "location_id": "l-1"},
            ("locations", "l-1"): {"id": "l-1", "name": "Site A"},
        }
        self.failing = set(failing)
        self.calls = []

    def get_one(self, resource, id):
        self.calls.append((resource, id))
        if resource in self.failing:
            raise ConnectionError(f"{resource} unavailable")
        return self.records.get((resource, id), {})


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


FULL = ResolvedTreatment("Site A", "Soil", "Heat", "bulk")


def _heat():
    return TreatmentInfo(
        "t-1", "Heat",
        SampleInfo("s-1", "Soil", "bulk", LocationInfo("l-1", "Site A")),
    )


class TestResolve:
    def test_fetches_hierarchy_in_order(self):
        lookup = FakeLookup()
        cache = TreatmentResolutionCache(lookup)
        assert cache.resolve("t-1") == FULL
        assert lookup.calls == [("treatments", "t-1"), ("samples", "s-1"), ("locations", "l-1")]

    def test_second_resolve_hits_cache(self):
        lookup = FakeLookup()
        cache = TreatmentResolutionCache(lookup)
        cache.resolve("t-1")
        lookup.calls.clear()
        assert cache.resolve("t-1") == FULL
        assert lookup.calls == []
        assert "t-1" in cache

    def test_empty_id(self):
        lookup = FakeLookup()
        assert TreatmentResolutionCache(lookup).resolve("").is_empty
        assert lookup.calls == []

    def test_unknown_treatment_is_empty_and_not_cached(self):
        cache = TreatmentResolutionCache(FakeLookup())
        assert cache.resolve("t-404").is_empty
        assert "t-404" not in cache

    def test_treatment_without_sample(self):
        lookup = FakeLookup(records={("treatments", "t-2"): {"id": "t-2", "name": "Blank"}})
        cache = TreatmentResolutionCache(lookup)
        assert cache.resolve("t-2") == ResolvedTreatment(treatment_name="Blank")
        assert "t-2" in cache


class TestKnownData:
    def test_nested_region_treatment_skips_fetch(self):
        lookup = FakeLookup()
        cache = TreatmentResolutionCache(lookup)
        region = make_region(treatment_id="t-1", treatment=_heat())
        assert cache.resolve("t-1", regions=[region]) == FULL
        assert lookup.calls == []

    def test_remembered_options_skip_fetch(self):
        lookup = FakeLookup()
        cache = TreatmentResolutionCache(lookup)
        cache.remember_options([_heat()])
        assert cache.resolve("t-1") == FULL
        assert lookup.calls == []

    def test_passed_options_skip_fetch(self):
        lookup = FakeLookup()
        cache = TreatmentResolutionCache(lookup)
        assert cache.resolve("t-1", options=[_heat()]) == FULL
        assert lookup.calls == []

    def test_option_without_sample_still_fetches(self):
        lookup = FakeLookup()
        cache = TreatmentResolutionCache(lookup)
        assert cache.resolve("t-1", options=[TreatmentInfo("t-1", "Heat")]) == FULL
        assert lookup.calls[0] == ("treatments", "t-1")


class TestFailures:
    def test_treatment_failure_is_empty(self, caplog):
        cache = TreatmentResolutionCache(FakeLookup(failing={"treatments"}))
        with caplog.at_level(logging.WARNING, logger="traymap.treatments.cache"):
            assert cache.resolve("t-1").is_empty
        assert "Could not load treatment t-1" in caplog.text
        assert "t-1" not in cache

    def test_sample_failure_keeps_treatment_name(self):
        cache = TreatmentResolutionCache(FakeLookup(failing={"samples"}))
        assert cache.resolve("t-1") == ResolvedTreatment(treatment_name="Heat")
        assert "t-1" not in cache

    def test_location_failure_keeps_sample_and_treatment(self):
        cache = TreatmentResolutionCache(FakeLookup(failing={"locations"}))
        resolved = cache.resolve("t-1")
        assert resolved.location_name == ""
        assert resolved.sample_name == "Soil"
        assert resolved.treatment_name == "Heat"
        assert "t-1" not in cache

    def test_failure_is_retried_next_time(self):
        lookup = FakeLookup(failing={"samples"})
        cache = TreatmentResolutionCache(lookup)
        cache.resolve("t-1")
        lookup.failing.clear()
        assert cache.resolve("t-1") == FULL


class TestExpiry:
    def test_entries_kept_without_max_age(self):
        clock = FakeClock()
        cache = TreatmentResolutionCache(FakeLookup(), clock=clock)
        cache.resolve("t-1")
        clock.now = 1e9
        assert "t-1" in cache

    def test_entries_expire_after_max_age(self):
        clock = FakeClock()
        lookup = FakeLookup()
        cache = TreatmentResolutionCache(lookup, clock=clock, max_age=60)
        cache.resolve("t-1")
        clock.now = 30
        assert "t-1" in cache
        clock.now = 61
        assert "t-1" not in cache
        lookup.calls.clear()
        cache.resolve("t-1")
        assert lookup.calls[0] == ("treatments", "t-1")

    def test_clear(self):
        cache = TreatmentResolutionCache(FakeLookup())
        cache.prime("t-1", FULL)
        cache.remember_options([_heat()])
        assert len(cache) == 1
        cache.clear()
        assert len(cache) == 0


@pytest.mark.parametrize("sample_type,expected", [("pure_water", True), ("bulk", False)])
def test_pure_water_flag_survives_resolution(sample_type, expected):
    lookup = FakeLookup()
    lookup.records[("samples", "s-1")]["type"] = sample_type
    assert TreatmentResolutionCache(lookup).resolve("t-1").is_pure_water is expected
