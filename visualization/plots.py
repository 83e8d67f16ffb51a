# careshift_project_root/visualization/plots.py
# PLOTTING FACTORY

import html
import logging
from typing import Any, Optional, Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import plotly.io as pio

from config import settings
from data_processing.aggregation import WeekBucket

logger = logging.getLogger(__name__)

# --- Theme Setup ---
def set_plotly_theme():
    """Sets the custom CareShift theme as the default for all Plotly charts."""
    base_layout = {
        'font': {'family': "sans-serif", 'size': 12, 'color': settings.COLOR_TEXT_PRIMARY},
        'title': {'x': 0.5, 'xanchor': 'center', 'font': {'size': 16, 'color': settings.COLOR_TEXT_HEADINGS}},
        'paper_bgcolor': settings.COLOR_BACKGROUND_CONTENT,
        'plot_bgcolor': settings.COLOR_BACKGROUND_CONTENT,
        'margin': dict(l=40, r=20, t=60, b=40),
        'xaxis': {'showgrid': False, 'zeroline': False},
        'yaxis': {'gridcolor': '#e9ecef', 'zeroline': False},
    }
    careshift_template = go.layout.Template(layout=base_layout)
    careshift_template.layout.colorway = settings.PLOTLY_COLORWAY
    pio.templates['careshift'] = careshift_template
    pio.templates.default = 'careshift'
    logger.debug("Custom 'careshift' Plotly theme applied.")

# --- Factory Functions for Charts ---
def create_empty_figure(title: str, message: str = "No data available.") -> go.Figure:
    fig = go.Figure()
    fig.update_layout(
        title_text=f"<b>{html.escape(title)}</b>",
        xaxis={"visible": False}, yaxis={"visible": False},
        annotations=[{"text": html.escape(message), "xref": "paper", "yref": "paper", "showarrow": False, "font": {"size": 14, "color": settings.COLOR_TEXT_MUTED}}]
    )
    return fig

def plot_bar_chart(
    df: pd.DataFrame, x_col: str, y_col: str, title: str,
    x_title: Optional[str] = None, y_title: Optional[str] = None, **px_kwargs: Any
) -> go.Figure:
    """Creates a themed bar chart with correct axis labeling and non-negative count axis."""
    if not isinstance(df, pd.DataFrame) or df.empty:
        return create_empty_figure(title)

    try:
        axis_labels = {
            x_col: x_title or x_col.replace('_', ' ').title(),
            y_col: y_title or y_col.replace('_', ' ').title()
        }
        is_int = pd.api.types.is_integer_dtype(df[y_col]) or (df[y_col].dropna() % 1 == 0).all()

        fig = px.bar(
            df, x=x_col, y=y_col, title=f"<b>{html.escape(title)}</b>",
            labels=axis_labels,
            **px_kwargs
        )
        fig.update_traces(texttemplate='%{y:,.0f}' if is_int else '%{y:,.2f}', textposition='outside')
        if is_int:
            # Keep a visible axis when every week is zero.
            fig.update_yaxes(tickformat='d', rangemode='nonnegative', range=[0, max(1, df[y_col].max()) * 1.2])
        return fig
    except Exception as e:
        logger.error(f"Failed to create bar chart '{title}': {e}", exc_info=True)
        return create_empty_figure(title, "Error generating chart.")

def plot_weekly_counts(buckets: Sequence[WeekBucket], title: str, data_type_label: str) -> go.Figure:
    """One bar per week bucket, labelled with the bucket's week label."""
    if not buckets:
        return create_empty_figure(title)
    df = pd.DataFrame(
        [{'week_label': b.week_label, 'count': b.count, 'start_date': b.start_date, 'end_date': b.end_date} for b in buckets]
    )
    fig = plot_bar_chart(
        df, x_col='week_label', y_col='count', title=title,
        x_title="Week", y_title=data_type_label,
        hover_data={'start_date': True, 'end_date': True},
    )
    # Week labels are categorical; keep the chronological order of the series.
    fig.update_xaxes(type='category', categoryorder='array', categoryarray=df['week_label'].tolist())
    return fig
