"""One-time tray assignment for legacy regions saved without a tray id."""

from __future__ import annotations

import dataclasses
import logging
from typing import Sequence

from traymap.core.models import Region, Tray, TrayLayout

logger = logging.getLogger(__name__)


def fits(region: Region, tray: Tray) -> bool:
    """Whether the region's bounding box lies inside the tray's dimensions."""
    return region.row_max < tray.rows and region.col_max < tray.columns


def assign_tray(region: Region, layout: TrayLayout) -> Tray:
    """First tray in declaration order that fits the region, else the first tray."""
    for tray in layout:
        if fits(region, tray):
            return tray
    return layout.first


def migrate_regions(regions: Sequence[Region], layout: TrayLayout) -> list[Region]:
    """Give every region without a ``tray_sequence_id`` one.

    Regions that already carry a tray id are returned unchanged, so
    running this twice gives the same result as running it once.
    """
    migrated = []
    for i, region in enumerate(regions):
        if region.tray_sequence_id is not None:
            migrated.append(region)
            continue
        tray = assign_tray(region, layout)
        if not fits(region, tray):
            logger.warning(
                "Legacy region %d (%r) fits no tray; defaulting to %r",
                i, region.name, tray.name,
            )
        else:
            logger.info("Assigned legacy region %d (%r) to tray %r", i, region.name, tray.name)
        migrated.append(dataclasses.replace(region, tray_sequence_id=tray.sequence_id))
    return migrated


def needs_migration(regions: Sequence[Region]) -> bool:
    return any(r.tray_sequence_id is None for r in regions)
