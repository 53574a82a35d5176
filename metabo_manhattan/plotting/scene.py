"""
Build declarative Manhattan plot scenes.

A scene lists every mark the renderer needs: base points colored by
alternating linkage group, the over-threshold overlay, optional labels,
the threshold line and the axis ticks. Nothing here imports plotly.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

import pandas as pd

from ..constants import (
    CHROMOSOME_COL,
    DEFAULT_FACET_ROWS,
    DEFAULT_HIGHLIGHT_COLOR,
    DEFAULT_PALETTE,
    DEFAULT_THRESHOLD,
    INDEX_COL,
    SCORE_COL,
    THRESHOLD_LINE_COLOR,
    TRAIT_COL,
    X_AXIS_TITLE,
    Y_AXIS_TITLE,
)
from ..exceptions import UnknownTraitName
from ..pipeline.layout import chromosome_ranks, x_extent
from ..pipeline.reshape import TraitSchema
from ..plot_types import (
    AxisTicks,
    ChromosomeExtent,
    FacetedScene,
    LabelMark,
    PlotScene,
    PointMark,
    ReferenceLine,
    TraitSelection,
)

logger = logging.getLogger(__name__)


def chromosome_colors(layout: Sequence[ChromosomeExtent], palette: Sequence[str] = DEFAULT_PALETTE) -> Dict[str, str]:
    """Alternate palette colors by each chromosome's rank in sorted order."""
    ranks = chromosome_ranks(extent.chromosome for extent in layout)
    return {chrom: palette[rank % len(palette)] for chrom, rank in ranks.items()}


def _axis_ticks(layout: Sequence[ChromosomeExtent]) -> AxisTicks:
    return AxisTicks(
        positions=tuple(extent.tick_position for extent in layout),
        labels=tuple(extent.chromosome for extent in layout),
    )


def _scene_from_scores(
    trait: str,
    scores: pd.DataFrame,
    layout: Sequence[ChromosomeExtent],
    threshold: float,
    highlight_labels: bool,
    boxed_labels: bool,
    palette: Sequence[str],
    highlight_color: str,
    title: Optional[str],
) -> PlotScene:
    """Assemble a scene from (index, chromosome, score) rows of one trait."""
    colors = chromosome_colors(layout, palette)

    points: List[PointMark] = []
    highlights: List[PointMark] = []
    for index, chrom, score in zip(scores[INDEX_COL], scores[CHROMOSOME_COL].astype(str), scores[SCORE_COL]):
        if chrom not in colors:
            raise KeyError(f"Linkage group {chrom!r} of marker {index} is missing from the layout")
        points.append(PointMark(x=int(index), y=float(score), chromosome=chrom, color=colors[chrom]))
        if score > threshold:
            highlights.append(PointMark(x=int(index), y=float(score), chromosome=chrom, color=highlight_color))

    labels: Tuple[LabelMark, ...] = ()
    if highlight_labels:
        labels = tuple(LabelMark(x=p.x, y=p.y, text=str(p.x), boxed=boxed_labels) for p in highlights)

    logger.debug(f"Scene for {trait}: {len(points)} points, {len(highlights)} above {threshold}")

    return PlotScene(
        trait=trait,
        title=title,
        points=tuple(points),
        highlights=tuple(highlights),
        labels=labels,
        reference_line=ReferenceLine(y=float(threshold), color=THRESHOLD_LINE_COLOR),
        ticks=_axis_ticks(layout),
        x_range=x_extent(list(layout)),
        color_map=tuple(colors.items()),
        y_title=Y_AXIS_TITLE,
        x_title=X_AXIS_TITLE,
    )


def build_scene(
    markers: pd.DataFrame,
    layout: Sequence[ChromosomeExtent],
    trait_name: str,
    threshold: float = DEFAULT_THRESHOLD,
    highlight_labels: bool = False,
    boxed_labels: bool = False,
    palette: Sequence[str] = DEFAULT_PALETTE,
    highlight_color: str = DEFAULT_HIGHLIGHT_COLOR,
    title: Optional[str] = None,
    schema: Optional[TraitSchema] = None,
) -> PlotScene:
    """
    Build the Manhattan scene for one trait column.

    Args:
        markers: Canonical wide table
        layout: Extents from ``build_layout``
        trait_name: Trait column to plot
        threshold: Significance cutoff in -log10(p) units
        highlight_labels: Label every point above the threshold with its index
        boxed_labels: Draw labels inside a background box
        schema: Reuse an existing accessor schema for ``markers``

    Returns:
        Immutable PlotScene; markers with no score for the trait are left out

    Raises:
        UnknownTraitName: If ``trait_name`` is not a trait column
    """
    schema = schema or TraitSchema(markers)
    scores = schema.scores(trait_name)
    return _scene_from_scores(
        trait_name, scores, layout, threshold, highlight_labels, boxed_labels,
        palette, highlight_color, title,
    )


def build_faceted_scene(
    observations: pd.DataFrame,
    layout: Sequence[ChromosomeExtent],
    traits: Sequence[str],
    threshold: float = DEFAULT_THRESHOLD,
    facet_rows: int = DEFAULT_FACET_ROWS,
    highlight_labels: bool = False,
    boxed_labels: bool = False,
    palette: Sequence[str] = DEFAULT_PALETTE,
    highlight_color: str = DEFAULT_HIGHLIGHT_COLOR,
    known_traits: Optional[Sequence[str]] = None,
) -> FacetedScene:
    """
    Build one panel per trait from merged long-form observations.

    Panels follow the order of ``traits`` and are titled with the trait
    name; the grid itself has no title. Traits listed in ``known_traits``
    but without any recorded score get an empty panel.

    Raises:
        UnknownTraitName: If a trait is neither observed nor in ``known_traits``
    """
    names = list(traits.traits if isinstance(traits, TraitSelection) else traits)
    subset = observations[observations[TRAIT_COL].isin(names)]
    by_trait = {name: group for name, group in subset.groupby(TRAIT_COL, sort=False)}

    known = list(known_traits) if known_traits is not None else list(dict.fromkeys(observations[TRAIT_COL]))
    empty = observations.iloc[0:0]
    panels = []
    for name in names:
        if name not in by_trait and name not in known:
            raise UnknownTraitName(name, known)
        panels.append(_scene_from_scores(
            name, by_trait.get(name, empty), layout, threshold, highlight_labels, boxed_labels,
            palette, highlight_color, title=name,
        ))

    rows = max(1, min(int(facet_rows), len(panels)))
    logger.info(f"Faceted scene with {len(panels)} panels in {rows} rows")
    return FacetedScene(panels=tuple(panels), facet_rows=rows, title=None)
