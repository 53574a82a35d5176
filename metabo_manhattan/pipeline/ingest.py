#!/usr/bin/env python3
"""
Ingestion: load the wide GWAS result table and convert it to canonical form.

Input layout:
  - Header row
  - ``Index`` (integer marker ordinal), ``Linkage_Group`` (chromosome label),
    ``Genetic_Distance`` (position within the linkage group)
  - Every further column is a trait holding one -log10(p) score per marker;
    an empty cell means no association was recorded

Output: DataFrame with ``index``, ``chromosome``, ``genetic_distance`` followed
by one float column per trait (NaN = absent), in input row order.

Usage:
  from metabo_manhattan.pipeline.ingest import load_wide_table
  wide = load_wide_table(Path("data_raw/metabolite_gwas.csv"))
"""

import logging
from pathlib import Path
from typing import List

import numpy as np
import pandas as pd

from ..config import validate_file_exists
from ..constants import (
    ABSENT_TOKENS,
    CHROMOSOME_COL,
    DISTANCE_COL,
    INDEX_COL,
    INPUT_COLUMN_MAP,
    INPUT_METADATA_COLUMNS,
    METADATA_COLUMNS,
)
from ..exceptions import MalformedInput

logger = logging.getLogger(__name__)

# Number of offending rows quoted in error messages
_MAX_REPORTED_ROWS = 5


def trait_columns(wide: pd.DataFrame) -> List[str]:
    """Trait columns of a canonical wide table, in input order."""
    return [c for c in wide.columns if c not in METADATA_COLUMNS]


def _describe_rows(rows: List) -> str:
    shown = ", ".join(str(r) for r in rows[:_MAX_REPORTED_ROWS])
    if len(rows) > _MAX_REPORTED_ROWS:
        shown += f", ... ({len(rows)} total)"
    return shown


def _coerce_scores(df: pd.DataFrame, column: str) -> pd.Series:
    """Convert one trait column to float, rejecting values that are neither numeric nor absent."""
    raw = df[column]
    if pd.api.types.is_numeric_dtype(raw):
        values = raw.astype(float)
    else:
        stripped = raw.where(raw.notna(), "").astype(str).str.strip()
        absent = stripped.isin(ABSENT_TOKENS)
        values = pd.to_numeric(stripped.where(~absent), errors="coerce").astype(float)
        bad = ~absent & values.isna()
        if bad.any():
            rows = df.loc[bad, INDEX_COL].tolist()
            samples = stripped[bad].head(3).tolist()
            raise MalformedInput(
                f"Non-numeric score in trait column '{column}' at Index {_describe_rows(rows)} "
                f"(values: {samples})",
                column=column,
                rows=rows,
            )

    negative = values < 0
    if negative.any():
        rows = df.loc[negative, INDEX_COL].tolist()
        raise MalformedInput(
            f"Negative score in trait column '{column}' at Index {_describe_rows(rows)}",
            column=column,
            rows=rows,
        )
    return values


def _coerce_index(df: pd.DataFrame) -> pd.Series:
    numeric = pd.to_numeric(df[INDEX_COL], errors="coerce")
    not_integer = numeric.isna() | ~np.isfinite(numeric) | (numeric != numeric.round())
    if not_integer.any():
        positions = [int(p) for p in df.index[not_integer]]
        raise MalformedInput(
            f"Column '{INDEX_COL}' must hold integers; bad values at rows {_describe_rows(positions)}",
            column=INDEX_COL,
            rows=positions,
        )
    index = numeric.astype("int64")

    duplicated = index.duplicated(keep=False)
    if duplicated.any():
        dupes = sorted(set(index[duplicated].tolist()))
        raise MalformedInput(
            f"Column '{INDEX_COL}' must be unique; repeated values {_describe_rows(dupes)}",
            column=INDEX_COL,
            rows=dupes,
        )
    return index


def _coerce_chromosome(df: pd.DataFrame) -> pd.Series:
    raw = df[CHROMOSOME_COL]
    labels = raw.where(raw.notna(), "").astype(str).str.strip()
    blank = labels == ""
    if blank.any():
        rows = df.loc[blank, INDEX_COL].tolist()
        raise MalformedInput(
            f"Column '{CHROMOSOME_COL}' is empty at Index {_describe_rows(rows)}",
            column=CHROMOSOME_COL,
            rows=rows,
        )
    return labels


def _coerce_distance(df: pd.DataFrame) -> pd.Series:
    raw = df[DISTANCE_COL]
    text = raw.where(raw.notna(), "").astype(str).str.strip()
    values = pd.to_numeric(text, errors="coerce").astype(float)
    bad = values.isna() | ~np.isfinite(values)
    if bad.any():
        rows = df.loc[bad, INDEX_COL].tolist()
        raise MalformedInput(
            f"Column '{DISTANCE_COL}' must hold real numbers; bad values at Index {_describe_rows(rows)} "
            f"(values: {text[bad].head(3).tolist()})",
            column=DISTANCE_COL,
            rows=rows,
        )
    return values


def check_contiguity(wide: pd.DataFrame) -> List[str]:
    """
    Return chromosomes whose rows are split into more than one run.

    The layout does not sort markers, so split chromosomes produce
    interleaved ticks. This is logged, never raised.
    """
    chrom = wide.sort_values(INDEX_COL, kind="mergesort")[CHROMOSOME_COL]
    runs = chrom[chrom != chrom.shift()]
    split = sorted(runs[runs.duplicated()].unique().tolist())
    if split:
        logger.warning(
            f"Linkage groups {split} are not contiguous in Index order; "
            "axis ticks for them will overlap"
        )
    return split


def validate_wide_table(df: pd.DataFrame, source: str = "<table>") -> pd.DataFrame:
    """
    Validate a raw wide table and return its canonical form.

    Accepts either the input headers (``Index``, ``Linkage_Group``,
    ``Genetic_Distance``) or the canonical ones.

    Raises:
        MalformedInput: Missing metadata columns, no trait columns,
            non-integer or duplicate Index, a blank linkage group, a
            non-numeric genetic distance, or an unusable score cell
    """
    df = df.rename(columns=INPUT_COLUMN_MAP)
    df.columns = [str(c) for c in df.columns]

    missing = [c for c in METADATA_COLUMNS if c not in df.columns]
    if missing:
        expected = [k for k, v in INPUT_COLUMN_MAP.items() if v in missing]
        raise MalformedInput(
            f"{source} is missing required columns {expected}; "
            f"found {list(df.columns)[:8]}",
            column=expected[0],
        )

    if df.empty:
        raise MalformedInput(f"{source} has no marker rows")

    traits = trait_columns(df)
    if not traits:
        raise MalformedInput(f"{source} has no trait columns after {INPUT_METADATA_COLUMNS}")

    out = pd.DataFrame(index=df.index)
    out[INDEX_COL] = _coerce_index(df)
    df = df.assign(**{INDEX_COL: out[INDEX_COL]})
    out[CHROMOSOME_COL] = _coerce_chromosome(df)
    out[DISTANCE_COL] = _coerce_distance(df)

    scores = {column: _coerce_scores(df, column) for column in traits}
    out = pd.concat([out, pd.DataFrame(scores, index=df.index)], axis=1)
    out = out.reset_index(drop=True)

    check_contiguity(out)
    return out


def load_wide_table(path: Path) -> pd.DataFrame:
    """
    Read a delimited GWAS result table and validate it.

    Args:
        path: ``.csv`` (comma) or ``.tsv``/``.txt`` (tab) file with a header row

    Returns:
        Canonical wide DataFrame
    """
    path = Path(path)
    validate_file_exists(path, "GWAS result table")

    sep = "," if path.suffix.lower() == ".csv" else "\t"
    # All cells as text; scores are parsed per column in validate_wide_table
    df_raw = pd.read_csv(path, sep=sep, dtype=str, keep_default_na=False)
    logger.info(f"Loaded {len(df_raw)} rows x {len(df_raw.columns)} columns from {path.name}")

    wide = validate_wide_table(df_raw, source=path.name)
    n_traits = len(trait_columns(wide))
    logger.info(
        f"Validated {len(wide)} markers on {wide[CHROMOSOME_COL].nunique()} linkage groups, "
        f"{n_traits} traits"
    )
    return wide
