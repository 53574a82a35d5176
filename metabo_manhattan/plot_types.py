"""Type definitions for chromosome layout, trait selection and plot scenes.

Scenes are plain frozen values: the plotting backend only ever sees these
shapes, never the input tables.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional, Tuple


class RenderMode(str, Enum):
    """How a batch of traits is turned into artifacts."""
    SEPARATE = "separate"
    FACETED = "faceted"


@dataclass(frozen=True)
class ChromosomeExtent:
    """Index span covered by one chromosome (linkage group)."""
    chromosome: str
    min_index: int
    max_index: int
    center: float

    @property
    def tick_position(self) -> float:
        return self.center + self.min_index

    @property
    def n_positions(self) -> int:
        return self.max_index - self.min_index + 1


@dataclass(frozen=True)
class TraitSelection:
    """Distinct traits ordered by their best single score."""
    traits: Tuple[str, ...]
    best_scores: Tuple[float, ...]
    rows_scanned: int = 0

    def __len__(self) -> int:
        return len(self.traits)

    def __iter__(self) -> Iterator[str]:
        return iter(self.traits)

    def __contains__(self, trait: object) -> bool:
        return trait in self.traits


@dataclass(frozen=True)
class PointMark:
    x: int
    y: float
    chromosome: str
    color: str


@dataclass(frozen=True)
class LabelMark:
    """Text anchored at a point; the renderer may move the text but keeps a connector."""
    x: int
    y: float
    text: str
    boxed: bool = False


@dataclass(frozen=True)
class ReferenceLine:
    y: float
    color: str
    dash: str = "dash"


@dataclass(frozen=True)
class AxisTicks:
    positions: Tuple[float, ...]
    labels: Tuple[str, ...]


@dataclass(frozen=True)
class PlotScene:
    """Declarative description of one Manhattan plot."""
    trait: str
    title: Optional[str]
    points: Tuple[PointMark, ...]
    highlights: Tuple[PointMark, ...]
    labels: Tuple[LabelMark, ...]
    reference_line: ReferenceLine
    ticks: AxisTicks
    x_range: Tuple[float, float]
    color_map: Tuple[Tuple[str, str], ...]
    y_title: str = "-log10(p)"
    x_title: str = "Linkage group"

    def color_for(self, chromosome: str) -> str:
        return dict(self.color_map)[chromosome]


@dataclass(frozen=True)
class FacetedScene:
    """Grid of per-trait panels sharing one axis layout."""
    panels: Tuple[PlotScene, ...]
    facet_rows: int
    title: Optional[str] = None

    @property
    def facet_cols(self) -> int:
        return -(-len(self.panels) // self.facet_rows)

    @property
    def traits(self) -> Tuple[str, ...]:
        return tuple(panel.trait for panel in self.panels)


@dataclass(frozen=True)
class RenderedArtifact:
    """A rendered figure, plus where it was written when exported."""
    name: str
    traits: Tuple[str, ...]
    figure: object = field(repr=False, compare=False)
    path: Optional[Path] = None
