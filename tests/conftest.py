"""Shared test fixtures for traymap."""

import pytest

from traymap.core.models import Region, Tray, TrayLayout


@pytest.fixture
def plate() -> Tray:
    """A 96-well tray (8 rows x 12 columns) mounted unrotated."""
    return Tray(sequence_id=1, name="P1", columns=12, rows=8)


@pytest.fixture
def layout() -> TrayLayout:
    """Two 96-well trays, the second mounted at 90°."""
    return TrayLayout((
        Tray(sequence_id=1, name="P1", columns=12, rows=8, rotation_degrees=0),
        Tray(sequence_id=2, name="P2", columns=12, rows=8, rotation_degrees=90),
    ))


def make_region(
    name: str = "R",
    tray: int | None = 1,
    rows: tuple[int, int] = (0, 0),
    cols: tuple[int, int] = (0, 0),
    **kwargs,
) -> Region:
    """Build a region from row/col ranges."""
    return Region(
        name=name, tray_sequence_id=tray,
        row_min=rows[0], row_max=rows[1], col_min=cols[0], col_max=cols[1],
        **kwargs,
    )
