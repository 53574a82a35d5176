#!/usr/bin/env python3
"""
Trait ranking: pick the top-K distinct traits by best single score.

A trait can own several of the highest-scoring observations (neighbouring
markers in the same peak), so taking K raw rows can surface fewer than K
traits. The scan keeps going until K distinct names are collected.
"""

import logging
from numbers import Integral
from typing import List

import pandas as pd

from ..constants import SCORE_COL, TRAIT_COL
from ..exceptions import InvalidSelectionSize
from ..plot_types import TraitSelection

logger = logging.getLogger(__name__)


def _prefix_unique_counts(values: List[str]) -> List[int]:
    """Return cumulative count of unique values as we walk the list."""
    counts: List[int] = []
    seen: set[str] = set()
    for item in values:
        seen.add(str(item))
        counts.append(len(seen))
    return counts


def rank_observations(observations: pd.DataFrame) -> pd.DataFrame:
    """Recorded observations sorted by score descending; ties keep input order."""
    recorded = observations[observations[SCORE_COL].notna()]
    return recorded.sort_values(SCORE_COL, ascending=False, kind="mergesort")


def select_top_traits(observations: pd.DataFrame, n: int) -> TraitSelection:
    """
    Select the ``n`` distinct traits with the highest single scores.

    Args:
        observations: Long-form table (see ``reshape.to_long``)
        n: Number of distinct traits wanted

    Returns:
        TraitSelection ordered by best score, highest first

    Raises:
        InvalidSelectionSize: If ``n`` is not in 1..number of scored traits
    """
    ranked = rank_observations(observations)
    available = int(ranked[TRAIT_COL].nunique())

    if isinstance(n, bool) or not isinstance(n, Integral) or n < 1 or n > available:
        raise InvalidSelectionSize(n, available)

    ranked_traits = ranked[TRAIT_COL].tolist()
    counts = _prefix_unique_counts(ranked_traits)
    rows_scanned = counts.index(n) + 1

    best = ranked.iloc[:rows_scanned].drop_duplicates(subset=[TRAIT_COL], keep="first")

    if rows_scanned > n:
        logger.info(
            f"Scanned {rows_scanned} observations to collect {n} distinct traits "
            f"({rows_scanned - n} repeated trait rows skipped)"
        )

    selection = TraitSelection(
        traits=tuple(best[TRAIT_COL].tolist()),
        best_scores=tuple(float(s) for s in best[SCORE_COL]),
        rows_scanned=rows_scanned,
    )
    logger.info(f"Selected top {n} traits: {list(selection.traits)}")
    return selection
