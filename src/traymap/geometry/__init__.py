"""traymap geometry — well labels, rotation and display layout."""

from traymap.geometry.coordinates import (
    DEFAULT_LABEL,
    cell_to_label,
    column_letter,
    is_labelable,
    label_to_cell,
    parse_label,
    row_number,
)
from traymap.geometry.grid import (
    DisplayGrid,
    WellView,
    build_display_grid,
    format_seconds,
    index_summaries,
)
from traymap.geometry.rotation import (
    AxisLabels,
    as_cell,
    axis_labels,
    display_label,
    display_shape,
    from_display,
    inverse_rotation,
    to_display,
    tray_from_display,
    tray_to_display,
)

__all__ = [
    "DEFAULT_LABEL",
    "AxisLabels",
    "DisplayGrid",
    "WellView",
    "as_cell",
    "axis_labels",
    "build_display_grid",
    "cell_to_label",
    "column_letter",
    "is_labelable",
    "display_label",
    "display_shape",
    "format_seconds",
    "from_display",
    "index_summaries",
    "inverse_rotation",
    "label_to_cell",
    "parse_label",
    "row_number",
    "to_display",
    "tray_from_display",
    "tray_to_display",
]
