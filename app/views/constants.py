"""
UI/view constants centralized for reuse across view modules.
"""

from __future__ import annotations

from PySide6.QtCore import Qt

OVERLAY_TEXT: str = "Drag & drop geo-tagged images."

# Data roles
GROUP_ID_ROLE: int = Qt.UserRole  # group id stored on each marker item

# Zoom range of the map surface
MIN_ZOOM: int = 0
MAX_ZOOM: int = 22

# Marker/pane defaults
DEFAULT_THUMB_SIZE: int = 64  # overridable by settings.json
DEFAULT_PREVIEW_SIZE: int = 1024
PANE_THUMB_SIZE: int = 96
