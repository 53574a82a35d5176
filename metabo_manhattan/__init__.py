"""
Manhattan plots for metabolite GWAS result tables.

Architecture:
- pipeline/ingest.py: Load and validate the wide marker x trait table
- pipeline/layout.py: Linkage-group extents and tick positions
- pipeline/reshape.py: Wide <-> long reshaping, trait accessor schema
- pipeline/ranking.py: Top-K distinct traits by best score
- plotting/scene.py: Declarative plot scenes (single trait and faceted)
- plotting/render.py: Plotly rendering, export and HTML report
- plotting/batch.py: Render many traits in order
"""

from .exceptions import InvalidSelectionSize, MalformedInput, ManhattanError, UnknownTraitName
from .pipeline.ingest import load_wide_table, validate_wide_table
from .pipeline.layout import build_layout, tick_positions
from .pipeline.ranking import select_top_traits
from .pipeline.reshape import TraitSchema, to_long, to_wide
from .plot_types import RenderMode
from .plotting.batch import render_all
from .plotting.scene import build_faceted_scene, build_scene

__all__ = [
    "InvalidSelectionSize",
    "MalformedInput",
    "ManhattanError",
    "UnknownTraitName",
    "load_wide_table",
    "validate_wide_table",
    "build_layout",
    "tick_positions",
    "select_top_traits",
    "TraitSchema",
    "to_long",
    "to_wide",
    "RenderMode",
    "render_all",
    "build_faceted_scene",
    "build_scene",
]
