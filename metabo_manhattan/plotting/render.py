#!/usr/bin/env python3
"""
Render plot scenes with Plotly and export them.

This is the only module that knows about Plotly. It turns a ``PlotScene`` or
``FacetedScene`` into a figure, writes single figures to HTML or static
images (kaleido), and bundles several figures into one HTML report.
"""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

import plotly.graph_objects as go
from plotly.subplots import make_subplots
from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..constants import FACET_PANEL_HEIGHT, FIGURE_HEIGHT, FIGURE_WIDTH
from ..plot_types import FacetedScene, LabelMark, PlotScene, PointMark, RenderedArtifact

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"
REPORT_TEMPLATE = "manhattan_report.html.j2"

# Label offsets in pixels; labels close together in x are pushed to different levels
_LABEL_LEVELS = (-30, -55, -80, -105)
_LABEL_MIN_GAP = 0.04  # fraction of the x range
_LABEL_SHIFT = 40  # horizontal step once every level near a label is taken


def repel_offsets(labels: Sequence[LabelMark], x_range: Tuple[float, float]) -> List[Tuple[int, int]]:
    """
    Pick an (ax, ay) pixel offset per label so that neighbours do not overlap.

    Labels are visited left to right; each takes the first vertical level not
    used by a label within ``_LABEL_MIN_GAP`` of it. When all levels nearby
    are taken the label goes to the least crowded level and is shifted
    sideways, alternating left and right. The arrow keeps pointing at the
    anchor.
    """
    span = max(x_range[1] - x_range[0], 1.0)
    gap = span * _LABEL_MIN_GAP

    offsets: Dict[int, Tuple[int, int]] = {}
    placed: List[Tuple[float, int]] = []  # (x, level)
    for i in sorted(range(len(labels)), key=lambda k: (labels[k].x, -labels[k].y)):
        x = labels[i].x
        near = [level for px, level in placed if abs(px - x) < gap]
        free = [lv for lv in range(len(_LABEL_LEVELS)) if lv not in near]
        if free:
            level, shift = free[0], 0
        else:
            level = min(range(len(_LABEL_LEVELS)), key=near.count)
            shift = near.count(level)
        placed.append((x, level))
        ax = 0 if level % 2 == 0 else 20
        if shift:
            ax += _LABEL_SHIFT * ((shift + 1) // 2) * (-1 if shift % 2 else 1)
        offsets[i] = (ax, _LABEL_LEVELS[level])
    return [offsets[i] for i in range(len(labels))]


def _cell(row: Optional[int], col: Optional[int]) -> dict:
    return {"row": row, "col": col} if row is not None else {}


def _scatter(points: Sequence[PointMark], name: str, color: str, size: int) -> go.Scatter:
    return go.Scatter(
        x=[p.x for p in points],
        y=[p.y for p in points],
        mode="markers",
        name=name,
        marker=dict(color=color, size=size),
        showlegend=False,
        hovertemplate=f"{name}<br>Index=%{{x}}<br>-log10(p)=%{{y:.2f}}<extra></extra>",
    )


def _add_scene(fig: go.Figure, scene: PlotScene, row: Optional[int] = None, col: Optional[int] = None) -> None:
    """Draw one scene into ``fig`` (or into one subplot cell)."""
    cell = _cell(row, col)

    by_chrom: Dict[str, List[PointMark]] = {}
    for point in scene.points:
        by_chrom.setdefault(point.chromosome, []).append(point)

    for chrom in scene.ticks.labels:
        if chrom in by_chrom:
            fig.add_trace(_scatter(by_chrom[chrom], f"LG {chrom}", scene.color_for(chrom), 5), **cell)

    if scene.highlights:
        color = scene.highlights[0].color
        fig.add_trace(_scatter(scene.highlights, f"{scene.trait} > {scene.reference_line.y:g}", color, 7), **cell)

    line = scene.reference_line
    fig.add_hline(y=line.y, line=dict(color=line.color, dash=line.dash, width=1), exclude_empty_subplots=False, **cell)

    for label, (ax, ay) in zip(scene.labels, repel_offsets(scene.labels, scene.x_range)):
        box = dict(bgcolor="rgba(255,255,255,0.9)", bordercolor="#555", borderwidth=1, borderpad=2) if label.boxed else {}
        fig.add_annotation(
            x=label.x,
            y=label.y,
            text=label.text,
            showarrow=True,
            arrowhead=0,
            arrowwidth=1,
            arrowcolor="#555",
            ax=ax,
            ay=ay,
            font=dict(size=10),
            **box,
            **cell,
        )

    fig.update_xaxes(
        tickmode="array",
        tickvals=list(scene.ticks.positions),
        ticktext=list(scene.ticks.labels),
        range=list(scene.x_range),
        showgrid=False,
        zeroline=False,
        **cell,
    )
    fig.update_yaxes(rangemode="tozero", zeroline=False, **cell)


def scene_to_figure(scene: PlotScene) -> go.Figure:
    """Render a single-trait scene."""
    fig = go.Figure()
    _add_scene(fig, scene)
    fig.update_layout(
        template="simple_white",
        title=scene.title,
        xaxis_title=scene.x_title,
        yaxis_title=scene.y_title,
        width=FIGURE_WIDTH,
        height=FIGURE_HEIGHT,
        margin=dict(l=70, r=20, t=60 if scene.title else 30, b=60),
        showlegend=False,
    )
    return fig


def faceted_scene_to_figure(scene: FacetedScene) -> go.Figure:
    """Render a grid of panels, filled row by row, with shared axes."""
    rows, cols = scene.facet_rows, scene.facet_cols
    fig = make_subplots(
        rows=rows,
        cols=cols,
        shared_xaxes=True,
        shared_yaxes=True,
        subplot_titles=scene.traits,
        vertical_spacing=0.12 if rows > 1 else 0.0,
        horizontal_spacing=0.04,
    )
    for i, panel in enumerate(scene.panels):
        _add_scene(fig, panel, row=i // cols + 1, col=i % cols + 1)

    first = scene.panels[0]
    fig.update_xaxes(title_text=first.x_title, row=rows, col=1)
    fig.update_yaxes(title_text=first.y_title, row=1, col=1)
    fig.update_layout(
        template="simple_white",
        title=scene.title,
        width=FIGURE_WIDTH,
        height=FACET_PANEL_HEIGHT * rows,
        margin=dict(l=70, r=20, t=50, b=60),
        showlegend=False,
    )
    return fig


def render_scene(scene: Union[PlotScene, FacetedScene]) -> go.Figure:
    if isinstance(scene, FacetedScene):
        return faceted_scene_to_figure(scene)
    return scene_to_figure(scene)


def export_figure(fig: go.Figure, path: Path) -> Path:
    """
    Write a figure; the format follows the file suffix.

    ``.html`` is written directly; ``.png``/``.pdf``/``.svg`` go through
    kaleido. Export errors are not caught.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if path.suffix.lower() == ".html":
        fig.write_html(str(path), include_plotlyjs="cdn", full_html=True)
    else:
        width = fig.layout.width or FIGURE_WIDTH
        height = fig.layout.height or FIGURE_HEIGHT
        fig.write_image(str(path), width=width, height=height, scale=2)

    logger.info("Wrote figure %s", path)
    return path


def write_report(artifacts: Sequence[RenderedArtifact], path: Path, title: str = "Metabolite GWAS Manhattan plots") -> Path:
    """Bundle rendered figures into one HTML document, in the given order."""
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    template = env.get_template(REPORT_TEMPLATE)

    sections = [
        {
            "name": artifact.name,
            "traits": list(artifact.traits),
            "figure_html": artifact.figure.to_html(
                full_html=False,
                include_plotlyjs="cdn" if i == 0 else False,
                div_id=f"figure-{i + 1}",
            ),
        }
        for i, artifact in enumerate(artifacts)
    ]
    html = template.render(title=title, generated=date.today().isoformat(), sections=sections)

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(html, encoding="utf-8")
    logger.info("Wrote report with %s figures to %s", len(sections), path)
    return path
