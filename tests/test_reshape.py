import numpy as np
import pandas as pd
import pytest

from metabo_manhattan.exceptions import UnknownTraitName
from metabo_manhattan.pipeline.reshape import TraitSchema, to_long, to_wide


def test_to_long_is_row_major_and_drops_absent(two_chrom_wide):
    long = to_long(two_chrom_wide)

    assert list(long.columns) == ["index", "chromosome", "genetic_distance", "trait", "score"]
    first_rows = long.head(5)
    # marker 1 has no M303 score
    assert first_rows["index"].tolist() == [1, 1, 2, 2, 2]
    assert first_rows["trait"].tolist() == ["M101", "M202", "M101", "M202", "M303"]
    assert len(long) == int(two_chrom_wide[["M101", "M202", "M303"]].notna().sum().sum())
    assert long["score"].notna().all()


def test_to_long_keeps_zero_scores():
    wide = pd.DataFrame({
        "index": [1, 2],
        "chromosome": ["1", "1"],
        "genetic_distance": [0.0, 1.0],
        "A": [0.0, np.nan],
    })

    long = to_long(wide)
    assert long["score"].tolist() == [0.0]


def test_round_trip_recovers_wide_table(two_chrom_wide):
    rebuilt = to_wide(to_long(two_chrom_wide))

    pd.testing.assert_frame_equal(
        rebuilt.reset_index(drop=True),
        two_chrom_wide[rebuilt.columns].reset_index(drop=True),
        check_dtype=False,
    )


def test_to_wide_orders_rows_by_index():
    long = pd.DataFrame({
        "index": [3, 1],
        "chromosome": ["2", "1"],
        "genetic_distance": [0.0, 0.0],
        "trait": ["B", "A"],
        "score": [1.0, 2.0],
    })

    wide = to_wide(long)

    assert wide["index"].tolist() == [1, 3]
    assert list(wide.columns) == ["index", "chromosome", "genetic_distance", "B", "A"]
    assert np.isnan(wide.loc[0, "B"])


def test_schema_scores_excludes_absent(two_chrom_wide):
    schema = TraitSchema(two_chrom_wide)

    scores = schema.scores("M101")

    assert list(scores.columns) == ["index", "chromosome", "genetic_distance", "score"]
    assert 5 not in scores["index"].tolist()
    assert len(scores) == 8


def test_schema_unknown_trait(two_chrom_wide):
    schema = TraitSchema(two_chrom_wide)

    assert "M101" in schema
    assert "nope" not in schema
    with pytest.raises(UnknownTraitName) as exc:
        schema.validate(["M101", "nope"])
    assert exc.value.trait == "nope"
    assert exc.value.known == ["M101", "M202", "M303"]
