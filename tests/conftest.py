"""Shared fixtures: small wide tables in canonical form."""

import numpy as np
import pandas as pd
import pytest

from metabo_manhattan.pipeline.ingest import validate_wide_table
from metabo_manhattan.pipeline.layout import build_layout


@pytest.fixture
def two_chrom_wide():
    """Indices 1..5 on linkage group 1 and 6..9 on group 2, three traits."""
    return validate_wide_table(pd.DataFrame({
        "Index": list(range(1, 10)),
        "Linkage_Group": ["1"] * 5 + ["2"] * 4,
        "Genetic_Distance": [0.0, 1.5, 3.2, 7.1, 9.0, 0.0, 2.2, 4.8, 6.0],
        "M101": [1.2, 6.5, 7.3, 2.0, np.nan, 0.4, 0.9, 1.1, 0.2],
        "M202": [0.3, 0.2, 0.1, 0.5, 0.7, 8.4, 9.1, 3.0, 0.6],
        "M303": [np.nan, 0.8, 1.0, 1.3, 0.2, 0.9, 0.4, 4.9, 2.5],
    }))


@pytest.fixture
def two_chrom_layout(two_chrom_wide):
    return build_layout(two_chrom_wide)


@pytest.fixture
def gwas_csv(tmp_path):
    path = tmp_path / "gwas.csv"
    path.write_text(
        "Index,Linkage_Group,Genetic_Distance,M101,M202,M303\n"
        "1,1,0.0,1.2,0.3,\n"
        "2,1,1.5,6.5,0.2,0.8\n"
        "3,1,3.2,7.3,0.1,1.0\n"
        "4,2,0.0,2.0,8.4,1.3\n"
        "5,2,2.2,NA,9.1,0.2\n"
        "6,3,0.5,0.4,3.0,5.5\n"
    )
    return path
