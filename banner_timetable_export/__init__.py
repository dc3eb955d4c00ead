"""
Export Banner course schedules (public schedule pages or CSV) to calendars.
"""
from __future__ import annotations

__version__ = "0.1.0"
