from __future__ import annotations

from .formatter import build_events_table, build_status_panel, print_events, print_status

__all__ = [
    "build_events_table",
    "build_status_panel",
    "print_events",
    "print_status",
]
