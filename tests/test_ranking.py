import numpy as np
import pandas as pd
import pytest

from metabo_manhattan.exceptions import InvalidSelectionSize
from metabo_manhattan.pipeline.ranking import select_top_traits
from metabo_manhattan.pipeline.reshape import to_long


def _wide(rows, traits):
    data = {
        "index": [r[0] for r in rows],
        "chromosome": ["1"] * len(rows),
        "genetic_distance": [0.0] * len(rows),
    }
    for j, trait in enumerate(traits):
        data[trait] = [r[1 + j] for r in rows]
    return pd.DataFrame(data)


def test_top_one_trait():
    long = to_long(_wide([(1, 3.0, 9.0), (2, 8.0, 8.5)], ["A", "B"]))

    selection = select_top_traits(long, 1)

    assert selection.traits == ("B",)
    assert selection.best_scores == (9.0,)
    assert selection.rows_scanned == 1


def test_two_distinct_traits_without_extension():
    long = to_long(_wide([(1, 3.0, 9.0), (2, 8.0, 1.0)], ["A", "B"]))

    selection = select_top_traits(long, 2)

    assert selection.traits == ("B", "A")
    assert selection.rows_scanned == 2


def test_repeated_trait_extends_the_scan():
    # Top two raw rows are both trait B (9.0, 8.5); A only appears third
    long = to_long(_wide([(1, 3.0, 9.0), (2, 8.0, 8.5)], ["A", "B"]))

    selection = select_top_traits(long, 2)

    assert selection.traits == ("B", "A")
    assert selection.best_scores == (9.0, 8.0)
    assert selection.rows_scanned == 3


def test_long_same_trait_cluster():
    rows = [(i, 1.0, 10.0 - i * 0.1) for i in range(1, 8)] + [(8, 5.0, 0.1)]
    long = to_long(_wide(rows, ["A", "B"]))

    selection = select_top_traits(long, 2)

    assert selection.traits == ("B", "A")
    assert selection.rows_scanned == 8


def test_ties_broken_by_input_order():
    long = to_long(_wide([(1, 7.0, 7.0, 7.0)], ["C", "A", "B"]))

    assert select_top_traits(long, 2).traits == ("C", "A")


def test_absent_scores_are_ignored():
    long = to_long(_wide([(1, np.nan, 2.0), (2, np.nan, 1.0)], ["A", "B"]))

    assert select_top_traits(long, 1).traits == ("B",)
    with pytest.raises(InvalidSelectionSize):
        select_top_traits(long, 2)


def test_scores_are_non_increasing(two_chrom_wide):
    selection = select_top_traits(to_long(two_chrom_wide), 3)

    assert len(selection) == 3
    assert list(selection.best_scores) == sorted(selection.best_scores, reverse=True)
    assert selection.traits == ("M202", "M101", "M303")


@pytest.mark.parametrize("n", [0, -1, 4, 2.5, True])
def test_invalid_selection_size(two_chrom_wide, n):
    with pytest.raises(InvalidSelectionSize) as exc:
        select_top_traits(to_long(two_chrom_wide), n)
    assert exc.value.available == 3
