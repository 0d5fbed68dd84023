"""traymap — tray geometry and region assignment for multi-well trays."""

__version__ = "0.1.0"
