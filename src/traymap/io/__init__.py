"""traymap IO — region interchange files and experiment documents."""

from traymap.io.documents import (
    ExperimentDocument,
    load_experiment_document,
    load_tray_layout,
    save_experiment_document,
)
from traymap.io.interchange import (
    InterchangeEntry,
    ParseResult,
    export_regions,
    import_regions,
    parse_interchange,
    read_interchange_file,
    write_interchange_file,
)

__all__ = [
    "ExperimentDocument",
    "InterchangeEntry",
    "ParseResult",
    "export_regions",
    "import_regions",
    "load_experiment_document",
    "load_tray_layout",
    "parse_interchange",
    "read_interchange_file",
    "save_experiment_document",
    "write_interchange_file",
]
