"""
Reason breakdown of stop events.

The breakdown is always computed over the machine-scoped events *before* the
reason filter is applied, so every category stays visible and clickable
while one of them is selected.

Categories are ordered by first appearance in the delivered sequence and
each gets a color derived only from its position. As long as the set of
reasons does not change between polls, neither order nor colors move.
"""

import logging
from typing import Iterable, List, Tuple

import polars as pl

from ..models.events import StopEvent
from ..models.views import DistributionSlice, DistributionView

logger = logging.getLogger(__name__)

DEFAULT_HUE_STEP = 60
SATURATION = "70%"
LIGHTNESS = "50%"


def count_by_reason(events: Iterable[StopEvent]) -> List[Tuple[str, int]]:
    """
    Count events per reason, in order of first appearance.

    Returns:
        List of (reason, count) pairs
    """
    reasons = [e.reason for e in events]
    if not reasons:
        return []
    frame = pl.DataFrame({"reason": reasons}, schema={"reason": pl.Utf8})
    counts = frame.group_by("reason", maintain_order=True).agg(pl.len().alias("count"))
    return [(reason, int(count)) for reason, count in counts.iter_rows()]


def category_color(index: int, hue_step: int = DEFAULT_HUE_STEP) -> str:
    """CSS color of the category at `index`: hue stepped by `hue_step`, wrapped at 360."""
    return f"hsl({(index * hue_step) % 360}, {SATURATION}, {LIGHTNESS})"


def build_distribution(events: Iterable[StopEvent], hue_step: int = DEFAULT_HUE_STEP) -> DistributionView:
    """
    Build the reason breakdown of `events`.

    Args:
        events: Machine-scoped, reason-unfiltered events
        hue_step: Hue step between consecutive categories, in degrees
    """
    slices = tuple(
        DistributionSlice(reason=reason, count=count, color=category_color(i, hue_step))
        for i, (reason, count) in enumerate(count_by_reason(events))
    )
    return DistributionView(slices=slices)
