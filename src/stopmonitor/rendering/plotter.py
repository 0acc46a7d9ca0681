"""
Renders dashboard snapshots with Plotly.

This module is the presentation adapter of the dashboard. It turns one
DashboardViews snapshot into:

1. A pie chart of the reason breakdown, colored with the per-category colors
   computed by the aggregator and kept in breakdown order.
2. A bar chart of the most recent stop durations.
3. A table of the most recent stops, newest first.

The figures can be combined into a single HTML page (with the summary cards
and the error banner) or saved individually as interactive HTML files and,
if Kaleido is installed, as static PNG images.
"""

import html
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

import plotly.graph_objects as go

from ..models.config import LabelConfig
from ..models.views import DashboardViews, DistributionView, HistoryView, SummaryView, TrendView

logger = logging.getLogger(__name__)

# --- Module Constants ---

DISTRIBUTION_TITLE = "Distribuição de Motivos"
TREND_TITLE = "Tempo - Últimas Paradas (min)"
HISTORY_TITLE = "Últimas Paradas"
PAGE_TITLE = "Monitor de Paradas"
HISTORY_HEADERS = ("Máquina", "Motivo", "Início", "Fim", "Duração (min)")
TREND_BAR_COLOR = "rgba(88,166,255,0.9)"


def build_distribution_figure(view: DistributionView) -> go.Figure:
    """Pie chart of stops per reason, in breakdown order."""
    fig = go.Figure(
        go.Pie(
            labels=list(view.labels),
            values=list(view.counts),
            marker={"colors": list(view.colors)},
            sort=False,
            direction="clockwise",
            name="Motivos",
        )
    )
    fig.update_layout(title_text=DISTRIBUTION_TITLE)
    return fig


def build_trend_figure(view: TrendView) -> go.Figure:
    """
    Bar chart of the recent durations, oldest on the left.

    Bars are placed by position and labelled with their start time, so two
    stops with the same label remain two bars.
    """
    positions = list(range(len(view)))
    fig = go.Figure(
        go.Bar(
            x=positions,
            y=list(view.durations),
            marker={"color": TREND_BAR_COLOR},
            name="Duração (min)",
        )
    )
    fig.update_layout(
        title_text=TREND_TITLE,
        xaxis={"tickmode": "array", "tickvals": positions, "ticktext": list(view.labels)},
        yaxis_title="min",
    )
    return fig


def build_history_figure(view: HistoryView) -> go.Figure:
    """Table of the recent stops, one row per stop."""
    rows = view.rows
    fig = go.Figure(
        go.Table(
            header={"values": list(HISTORY_HEADERS), "align": "left"},
            cells={
                "values": [
                    [r.machine for r in rows],
                    [r.reason for r in rows],
                    [r.start for r in rows],
                    [r.end for r in rows],
                    [r.duration_minutes for r in rows],
                ],
                "align": "left",
            },
        )
    )
    fig.update_layout(title_text=HISTORY_TITLE)
    return fig


def _summary_html(summary: SummaryView, missing_value: str) -> str:
    cards = [
        ("Paradas", f"{summary.total_stops}"),
        ("Tempo total (min)", f"{summary.total_minutes:.0f}"),
        ("Média (min)", f"{summary.average_minutes:.1f}"),
        ("Em aberto", f"{summary.ongoing_stops}"),
        ("Motivo principal", summary.top_reason or missing_value),
    ]
    items = "".join(
        f'<div class="card"><h3>{html.escape(title)}</h3><p>{html.escape(value)}</p></div>'
        for title, value in cards
    )
    return f'<section class="cards">{items}</section>'


def error_banner_text(views: DashboardViews, labels: LabelConfig) -> Optional[str]:
    """Text of the error banner, or None when the last fetch succeeded."""
    if views.error is None:
        return None
    return f"{labels.error_banner_prefix}: {views.error.message}"


def render_dashboard_html(views: DashboardViews, labels: Optional[LabelConfig] = None,
                          include_plotlyjs: str = "cdn") -> str:
    """
    Render a snapshot as one self-contained HTML page.

    Args:
        views: Snapshot to render
        labels: Display labels (defaults to the built-in ones)
        include_plotlyjs: How the first figure embeds plotly.js ("cdn", True, ...)
    """
    labels = labels or LabelConfig()
    parts = [f"<!DOCTYPE html><html><head><meta charset=\"utf-8\"><title>{PAGE_TITLE}</title></head><body>"]

    banner = error_banner_text(views, labels)
    if banner:
        parts.append(f'<div class="error" style="color: salmon; text-align: center">{html.escape(banner)}</div>')
    if views.selected_reason is not None:
        parts.append(f'<p class="filter">Filtro: {html.escape(views.selected_reason)}</p>')

    parts.append(_summary_html(views.summary, labels.missing_value))

    figures = [
        build_distribution_figure(views.distribution),
        build_trend_figure(views.trend),
        build_history_figure(views.history),
    ]
    for i, fig in enumerate(figures):
        parts.append(fig.to_html(full_html=False, include_plotlyjs=include_plotlyjs if i == 0 else False))

    parts.append("</body></html>")
    return "\n".join(parts)


def write_dashboard_html(views: DashboardViews, output_path: Path,
                         labels: Optional[LabelConfig] = None) -> Path:
    """
    Write the rendered page, replacing any previous file atomically.

    Returns:
        The path written
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    page = render_dashboard_html(views, labels)

    fd, tmp_name = tempfile.mkstemp(dir=output_path.parent, prefix=f".{output_path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(page)
        os.replace(tmp_name, output_path)
    except OSError:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
    logger.debug(f"Dashboard page written to: {output_path} (revision {views.revision})")
    return output_path


def save_plotly_figure(fig: go.Figure, base_filename: str, output_dir: Path) -> None:
    """
    Saves a Plotly figure to HTML and, if possible, PNG.

    Args:
        fig: The Plotly figure object to save.
        base_filename: The base name for the output files (without extension).
        output_dir: The directory to save the files in.
    """
    plot_filename_html = output_dir / f"{base_filename}.html"
    try:
        fig.write_html(plot_filename_html)
        logger.info(f"Interactive plot saved to: {plot_filename_html}")
        try:
            plot_filename_png = output_dir / f"{base_filename}.png"
            fig.write_image(plot_filename_png, width=1200, height=600)
            logger.info(f"Static plot saved to: {plot_filename_png}")
        except Exception as e_kaleido:
            logger.warning(
                f"Failed to save static plot to PNG (Kaleido might be missing or misconfigured): {e_kaleido}. "
                f"To enable PNG export, install Kaleido: `pip install stopmonitor[export]`"
            )
    except Exception as e:
        logger.error(
            f"Failed to save plot {plot_filename_html} using Plotly: {e}",
            exc_info=True,
        )


def save_view_figures(views: DashboardViews, output_dir: Path) -> None:
    """Save the three figures of a snapshot as separate files."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    save_plotly_figure(build_distribution_figure(views.distribution), "stops_distribution", output_dir)
    save_plotly_figure(build_trend_figure(views.trend), "stops_trend", output_dir)
    save_plotly_figure(build_history_figure(views.history), "stops_history", output_dir)
