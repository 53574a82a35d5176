"""
Batch rendering of many traits.

``separate`` mode yields one artifact per trait, titled with the trait name.
``faceted`` mode merges the selected traits' observations and yields a single
grid artifact. Artifacts always follow the order of the trait list. Every
trait name is checked before the first scene is built, so an unknown trait
aborts the batch with nothing written.
"""

import json
import logging
import re
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import pandas as pd

from ..constants import (
    DEFAULT_EXPORT_FORMAT,
    DEFAULT_FACET_ROWS,
    DEFAULT_HIGHLIGHT_COLOR,
    DEFAULT_PALETTE,
    DEFAULT_THRESHOLD,
    EXPORT_FORMATS,
    TRAIT_COL,
)
from ..exceptions import InvalidSelectionSize
from ..pipeline.reshape import TraitSchema, to_long
from ..plot_types import ChromosomeExtent, RenderedArtifact, RenderMode, TraitSelection
from .render import export_figure, render_scene, write_report
from .scene import build_faceted_scene, build_scene

logger = logging.getLogger(__name__)

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")


def artifact_filename(name: str, fmt: str, position: int) -> str:
    """File name for an artifact; the position prefix keeps names unique and ordered."""
    stem = _UNSAFE.sub("_", name).strip("_") or "trait"
    return f"{position:03d}_{stem}.{fmt}"


def render_all(
    markers: pd.DataFrame,
    layout: Sequence[ChromosomeExtent],
    traits: Union[TraitSelection, Sequence[str]],
    mode: Union[RenderMode, str] = RenderMode.SEPARATE,
    threshold: float = DEFAULT_THRESHOLD,
    highlight_labels: bool = False,
    boxed_labels: bool = False,
    facet_rows: int = DEFAULT_FACET_ROWS,
    palette: Sequence[str] = DEFAULT_PALETTE,
    highlight_color: str = DEFAULT_HIGHLIGHT_COLOR,
    output_dir: Optional[Path] = None,
    export_format: str = DEFAULT_EXPORT_FORMAT,
    report_path: Optional[Path] = None,
) -> List[RenderedArtifact]:
    """
    Render every requested trait.

    Args:
        markers: Canonical wide table
        layout: Extents from ``build_layout``
        traits: Selection or explicit trait names, in output order
        mode: ``separate`` or ``faceted``
        output_dir: Export each artifact here when given
        export_format: One of html, png, pdf, svg
        report_path: Bundle all artifacts into one HTML document when given

    Returns:
        Artifacts in the order of ``traits``

    Raises:
        UnknownTraitName: If any trait is not a column (before anything is built)
        InvalidSelectionSize: If ``traits`` is empty
    """
    mode = RenderMode(mode)
    names = list(traits)
    schema = TraitSchema(markers)

    if not names:
        raise InvalidSelectionSize(0, len(schema.traits))
    if export_format not in EXPORT_FORMATS:
        raise ValueError(f"Unknown export format {export_format!r}; expected one of {list(EXPORT_FORMATS)}")

    schema.validate(names)
    logger.info(f"Rendering {len(names)} traits in {mode.value} mode")

    style = dict(
        threshold=threshold,
        highlight_labels=highlight_labels,
        boxed_labels=boxed_labels,
        palette=palette,
        highlight_color=highlight_color,
    )

    if mode is RenderMode.SEPARATE:
        scenes = [
            (name, (name,), build_scene(markers, layout, name, title=name, schema=schema, **style))
            for name in names
        ]
    else:
        long = to_long(markers)
        merged = long[long[TRAIT_COL].isin(names)]
        faceted = build_faceted_scene(
            merged, layout, names, facet_rows=facet_rows, known_traits=schema.traits, **style
        )
        scenes = [(f"faceted_{len(names)}_traits", tuple(names), faceted)]

    artifacts = []
    for position, (name, scene_traits, scene) in enumerate(scenes, start=1):
        figure = render_scene(scene)
        path = None
        if output_dir is not None:
            path = export_figure(figure, Path(output_dir) / artifact_filename(name, export_format, position))
        artifacts.append(RenderedArtifact(name=name, traits=scene_traits, figure=figure, path=path))

    if report_path is not None:
        write_report(artifacts, Path(report_path))

    return artifacts


def write_manifest(
    artifacts: Sequence[RenderedArtifact],
    path: Path,
    metadata: Optional[Dict[str, object]] = None,
) -> Dict[str, object]:
    """Record what a batch produced as JSON; returns the manifest dict."""
    manifest: Dict[str, object] = {
        "metadata": {"date": date.today().isoformat(), **(metadata or {})},
        "artifacts": [
            {
                "name": artifact.name,
                "traits": list(artifact.traits),
                "path": str(artifact.path) if artifact.path else None,
            }
            for artifact in artifacts
        ],
    }

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(manifest, handle, indent=2)

    logger.info("Wrote manifest to %s", path)
    return manifest
