"""
Wide <-> long reshaping and the trait accessor schema.

Long form has one row per (marker, trait) pair with a recorded score. Rows are
emitted row-major: all traits of the first marker in column order, then the
next marker. Ranking relies on that order for tie-breaking.
"""

import logging
from typing import Dict, Iterable, List

import numpy as np
import pandas as pd

from ..constants import (
    CHROMOSOME_COL,
    DISTANCE_COL,
    INDEX_COL,
    LONG_COLUMNS,
    METADATA_COLUMNS,
    SCORE_COL,
    TRAIT_COL,
)
from ..exceptions import UnknownTraitName
from .ingest import trait_columns

logger = logging.getLogger(__name__)


def to_long(wide: pd.DataFrame) -> pd.DataFrame:
    """
    Flatten a wide table into (marker, trait, score) rows.

    Absent cells are dropped rather than turned into zeros.

    Args:
        wide: Canonical wide table

    Returns:
        DataFrame with columns index, chromosome, genetic_distance, trait, score
    """
    traits = trait_columns(wide)
    n_rows, n_traits = len(wide), len(traits)

    scores = wide[traits].to_numpy(dtype=float).reshape(-1)
    row_pos = np.repeat(np.arange(n_rows), n_traits)
    trait_pos = np.tile(np.arange(n_traits), n_rows)

    present = ~np.isnan(scores)
    meta = wide[METADATA_COLUMNS].iloc[row_pos[present]].reset_index(drop=True)

    long = meta.assign(**{
        TRAIT_COL: np.asarray(traits, dtype=object)[trait_pos[present]],
        SCORE_COL: scores[present],
    })
    logger.debug(f"Reshaped {n_rows}x{n_traits} wide table into {len(long)} observations")
    return long[LONG_COLUMNS]


def to_wide(long: pd.DataFrame) -> pd.DataFrame:
    """
    Rebuild a wide table from long observations.

    Rows are ordered by index; trait columns follow first appearance in
    ``long``. Pairs with no observation come back as NaN.
    """
    trait_order = list(dict.fromkeys(long[TRAIT_COL]))
    meta = (
        long[METADATA_COLUMNS]
        .drop_duplicates(subset=[INDEX_COL])
        .set_index(INDEX_COL)
    )
    scores = long.pivot(index=INDEX_COL, columns=TRAIT_COL, values=SCORE_COL)
    scores = scores.reindex(columns=trait_order)
    scores.columns.name = None

    wide = meta.join(scores).sort_index().reset_index()
    return wide[METADATA_COLUMNS + trait_order]


class TraitSchema:
    """
    Maps trait names to score accessors for a validated wide table.

    Looking up an unknown name raises ``UnknownTraitName`` instead of
    returning an empty series.
    """

    def __init__(self, wide: pd.DataFrame):
        self._wide = wide
        self._traits: List[str] = trait_columns(wide)
        self._accessors: Dict[str, str] = {name: name for name in self._traits}

    @property
    def traits(self) -> List[str]:
        return list(self._traits)

    def __contains__(self, name: object) -> bool:
        return name in self._accessors

    def require(self, name: str) -> str:
        """Return the column backing ``name`` or raise ``UnknownTraitName``."""
        try:
            return self._accessors[name]
        except KeyError:
            raise UnknownTraitName(name, self._traits) from None

    def validate(self, names: Iterable[str]) -> List[str]:
        """Check a batch of names up front; fails on the first unknown one."""
        return [self.require(name) for name in names]

    def scores(self, name: str) -> pd.DataFrame:
        """Markers with a recorded score for ``name``, in table order."""
        column = self.require(name)
        frame = self._wide[[INDEX_COL, CHROMOSOME_COL, DISTANCE_COL, column]]
        frame = frame.rename(columns={column: SCORE_COL})
        return frame[frame[SCORE_COL].notna()].reset_index(drop=True)
