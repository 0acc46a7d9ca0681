"""
Machine scoping, reason filtering and the shared filter selection.
"""

from .coordinator import FilterCoordinator
from .scope import apply_reason_filter, scope_to_machine

__all__ = [
    "FilterCoordinator",
    "apply_reason_filter",
    "scope_to_machine",
]
