"""Tests for traymap.core.exceptions."""

import pytest

from traymap.core.exceptions import (
    CellOutOfBoundsError,
    InterchangeParseError,
    OverlapError,
    RegionNotFoundError,
    RegionValidationError,
    TrayMapError,
    TrayNotFoundError,
)
from traymap.core.models import Cell
from tests.conftest import make_region


class TestExceptionHierarchy:
    def test_all_inherit_from_tray_map_error(self):
        for exc_cls in (TrayNotFoundError, RegionNotFoundError, CellOutOfBoundsError,
                        OverlapError, RegionValidationError, InterchangeParseError):
            assert issubclass(exc_cls, TrayMapError)

    def test_catch_all_with_base(self):
        with pytest.raises(TrayMapError):
            raise TrayNotFoundError("P9")

    def test_tray_not_found_message(self):
        exc = TrayNotFoundError("P9")
        assert "P9" in str(exc)
        assert exc.key == "P9"

    def test_tray_not_found_by_sequence_id(self):
        exc = TrayNotFoundError(3)
        assert "3" in str(exc)
        assert exc.key == 3

    def test_tray_not_found_default_message(self):
        assert str(TrayNotFoundError()) == "Tray not found"

    def test_region_not_found_message(self):
        exc = RegionNotFoundError(7)
        assert "7" in str(exc)
        assert exc.index == 7

    def test_cell_out_of_bounds_carries_cell(self):
        exc = CellOutOfBoundsError(Cell(8, 0), rows=8, columns=12)
        assert exc.cell == Cell(8, 0)
        assert "8x12" in str(exc)

    def test_overlap_names_conflicting_region(self):
        exc = OverlapError(make_region("Control"))
        assert "Control" in str(exc)
        assert exc.conflict.name == "Control"

    def test_overlap_default_message(self):
        assert str(OverlapError()) == "Cannot create overlapping regions."

    def test_validation_error_message(self):
        exc = RegionValidationError("All regions must have a name")
        assert exc.message == "All regions must have a name"

    def test_parse_error_keeps_warnings(self):
        exc = InterchangeParseError("nothing usable", ["Line 1: bad"])
        assert exc.warnings == ["Line 1: bad"]
