"""
Selection state shared by the filtered dashboard views.
"""

import logging
from typing import Optional, Sequence

logger = logging.getLogger(__name__)


class FilterCoordinator:
    """
    Holds the single selected reason, or none.

    The selection is changed only by a click on the reason breakdown
    (`select` / `select_index`) and by the reset control (`clear`). It
    survives data refreshes. There is no history of earlier selections.
    """

    def __init__(self, selected: Optional[str] = None):
        self._selected = selected

    @property
    def selected(self) -> Optional[str]:
        return self._selected

    @property
    def is_active(self) -> bool:
        return self._selected is not None

    def select(self, reason: str) -> None:
        """Replace the selection with `reason`."""
        if reason != self._selected:
            logger.debug(f"Reason filter set to {reason!r}")
        self._selected = reason

    def select_index(self, labels: Sequence[str], index: Optional[int]) -> bool:
        """
        Select the category shown at `index` of the breakdown.

        A click that hit no segment (None, or an index outside `labels`)
        leaves the selection untouched.

        Returns:
            True if the selection was set
        """
        if index is None or isinstance(index, bool) or not 0 <= index < len(labels):
            logger.debug(f"Ignoring breakdown click at index {index!r}")
            return False
        self.select(labels[index])
        return True

    def clear(self) -> None:
        """Drop the selection."""
        if self._selected is not None:
            logger.debug("Reason filter cleared")
        self._selected = None

    def __repr__(self) -> str:
        return f"FilterCoordinator(selected={self._selected!r})"
