"""
Plotly rendering of dashboard snapshots.
"""

from .plotter import (
    build_distribution_figure,
    build_history_figure,
    build_trend_figure,
    error_banner_text,
    render_dashboard_html,
    save_plotly_figure,
    save_view_figures,
    write_dashboard_html,
)

__all__ = [
    "build_distribution_figure",
    "build_history_figure",
    "build_trend_figure",
    "error_banner_text",
    "render_dashboard_html",
    "save_plotly_figure",
    "save_view_figures",
    "write_dashboard_html",
]
