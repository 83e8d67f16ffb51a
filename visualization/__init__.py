# careshift_project_root/visualization/__init__.py
# PACKAGE API

"""
Initializes the visualization package, defining its public API.
"""

# --- Core Plotting Functions from plots.py ---
from .plots import (
    set_plotly_theme,
    create_empty_figure,
    plot_bar_chart,
    plot_weekly_counts,
)

# --- Custom UI Element Renderers from ui_elements.py ---
from .ui_elements import (
    NO_HANDOVER_NOTES_TEXT,
    NO_INCIDENTS_TEXT,
    NO_RESIDENTS_TEXT,
    load_and_inject_css,
    format_incident_line,
    render_shift_digest,
)

__all__ = [
    # from plots.py
    "set_plotly_theme",
    "create_empty_figure",
    "plot_bar_chart",
    "plot_weekly_counts",

    # from ui_elements.py
    "NO_HANDOVER_NOTES_TEXT",
    "NO_INCIDENTS_TEXT",
    "NO_RESIDENTS_TEXT",
    "load_and_inject_css",
    "format_incident_line",
    "render_shift_digest",
]
