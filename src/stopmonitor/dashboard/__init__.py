"""
Dashboard state, view assembly and session wiring.
"""

from .assembler import ViewAssembler
from .session import DashboardSession
from .store import DashboardStore

__all__ = [
    "DashboardSession",
    "DashboardStore",
    "ViewAssembler",
]
