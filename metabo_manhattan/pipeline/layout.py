"""
Chromosome-aware x-axis layout.

Markers are plotted at their ``index``; each linkage group occupies the span
between its smallest and largest index. The tick for a group sits at
``center + min_index`` where ``center`` is half the span, so labels line up
with the middle of each alternating color band.
"""

import logging
import re
from typing import Dict, Iterable, List

import pandas as pd

from ..constants import CHROMOSOME_COL, INDEX_COL
from ..plot_types import ChromosomeExtent

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"(\d+)")


def _natural_key(label: str):
    """Sort key comparing digit runs numerically: "LG2" < "LG10"."""
    parts = _DIGITS.split(str(label))
    return [(0, int(p), "") if p.isdigit() else (1, 0, p.lower()) for p in parts if p != ""]


def chromosome_order(labels: Iterable[str]) -> List[str]:
    """Distinct chromosome labels in natural sort order."""
    return sorted({str(label) for label in labels}, key=_natural_key)


def chromosome_ranks(labels: Iterable[str]) -> Dict[str, int]:
    """Position of each chromosome in sorted order (drives the alternating palette)."""
    return {label: rank for rank, label in enumerate(chromosome_order(labels))}


def build_layout(markers: pd.DataFrame) -> List[ChromosomeExtent]:
    """
    Compute one extent per linkage group from marker indices.

    Markers are not re-sorted. If a group's indices are not contiguous its
    extent overlaps its neighbours; that is a data problem, not an error.

    Args:
        markers: Wide or long table with ``index`` and ``chromosome`` columns

    Returns:
        Extents in natural chromosome order
    """
    if markers.empty:
        return []

    labels = markers[CHROMOSOME_COL].astype(str)
    grouped = markers[INDEX_COL].groupby(labels, sort=False).agg(["min", "max"])
    order = chromosome_order(grouped.index)

    layout = []
    for chrom in order:
        lo = int(grouped.loc[chrom, "min"])
        hi = int(grouped.loc[chrom, "max"])
        layout.append(ChromosomeExtent(chromosome=chrom, min_index=lo, max_index=hi, center=(hi - lo) / 2))

    for prev, cur in zip(layout, layout[1:]):
        if cur.min_index <= prev.max_index:
            logger.debug(f"Extents of {prev.chromosome} and {cur.chromosome} overlap")

    return layout


def tick_positions(layout: List[ChromosomeExtent]) -> Dict[str, float]:
    """Tick x-position per chromosome."""
    return {extent.chromosome: extent.tick_position for extent in layout}


def x_extent(layout: List[ChromosomeExtent]) -> tuple:
    """Axis range flush with the first and last marker."""
    if not layout:
        return (0.0, 1.0)
    return (
        float(min(e.min_index for e in layout)),
        float(max(e.max_index for e in layout)),
    )
