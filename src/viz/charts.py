"""Plotly chart generators for score trends and school comparisons."""

import plotly.graph_objects as go

from src.reports.comparison import Comparison
from src.reports.trend import TrendSeries


# Color palette for consistent styling
COLORS = {
    "line": "rgb(56, 189, 248)",
    "marker": "rgb(14, 165, 233)",
    "empty": "gray",
}

NO_DATA_MESSAGE = "لا توجد بيانات للعرض حسب الاختيارات المحددة."


def create_trend_chart(trend: TrendSeries, score_label: str = "العلامة") -> go.Figure:
    """
    Create a line chart of one school's score per year.

    Args:
        trend: Series built by ``build_trend``
        score_label: Legend and y-axis title
    """
    if trend.is_empty:
        return _empty_chart(NO_DATA_MESSAGE, title=trend.title)

    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=trend.years,
            y=trend.scores,
            name=score_label,
            mode="lines+markers",
            line=dict(color=COLORS["line"]),
            marker=dict(color=COLORS["marker"], size=10),
            hovertemplate="%{x}<br>%{y:.1f}<extra></extra>",
        )
    )
    _apply_layout(fig, trend.title, trend.y_axis_range, score_label)
    return fig


def create_comparison_chart(comparison: Comparison, score_label: str = "العلامة") -> go.Figure:
    """
    Create a line chart with one series per compared school.

    Series keep their selection-order colors; schools without matching rows
    still get a legend entry.
    """
    if comparison.is_empty:
        return _empty_chart(NO_DATA_MESSAGE, title=comparison.title)

    fig = go.Figure()
    for series in comparison.series:
        fig.add_trace(
            go.Scatter(
                x=series.years,
                y=series.scores,
                name=series.label,
                mode="lines+markers",
                line=dict(color=series.color),
                marker=dict(color=series.color, size=10),
                hovertemplate="%{x}<br>%{y:.1f}<extra>%{fullData.name}</extra>",
            )
        )
    _apply_layout(fig, comparison.title, comparison.y_axis_range, score_label)
    fig.update_layout(hovermode="x unified")
    return fig


def _apply_layout(fig: go.Figure, title: str, y_range: tuple, score_label: str) -> None:
    fig.update_layout(
        title=title,
        xaxis_title="السنة",
        yaxis_title=score_label,
        legend_title="",
    )
    fig.update_xaxes(dtick=1, tickformat="d")
    fig.update_yaxes(range=list(y_range))


def _empty_chart(message: str, title: str = "") -> go.Figure:
    """Create an empty chart with a message."""
    fig = go.Figure()
    fig.add_annotation(
        text=message,
        xref="paper",
        yref="paper",
        x=0.5,
        y=0.5,
        showarrow=False,
        font=dict(size=16, color=COLORS["empty"]),
    )
    fig.update_layout(
        title=title,
        xaxis=dict(visible=False),
        yaxis=dict(visible=False),
        height=300,
    )
    return fig
