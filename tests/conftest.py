"""
Pytest configuration and shared fixtures.

The toy expression matrix below is small enough that every module score,
TopCluster and simplicity score can be worked out by hand:

    module  genes     S1   S2   S3   S4
    A       g1, g2    4.0  0.0  1.0  2.0
    B       g3, g4    1.0  5.0  1.0  2.0
    C       g5, g6    0.0  1.0  2.0  0.0

S4 ties between A and B, so its TopCluster follows the module order.
"""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest
import yaml

from modclassify.core.biomatrix import BioMatrix


@pytest.fixture
def expression_df():
    """Genes × samples DataFrame (6 genes, 4 samples)."""
    return pd.DataFrame(
        {
            "S1": [3.0, 5.0, 1.0, 1.0, 0.0, 0.0],
            "S2": [0.0, 0.0, 4.0, 6.0, 1.0, 1.0],
            "S3": [1.0, 1.0, 1.0, 1.0, 2.0, 2.0],
            "S4": [2.0, 2.0, 2.0, 2.0, 0.0, 0.0],
        },
        index=pd.Index(["g1", "g2", "g3", "g4", "g5", "g6"]),
    )


@pytest.fixture
def expression_matrix(expression_df):
    return BioMatrix.from_dataframe(expression_df)


@pytest.fixture
def gene_modules():
    """Three modules of two genes each."""
    return {
        "A": ["g1", "g2"],
        "B": ["g3", "g4"],
        "C": ["g5", "g6"],
    }


@pytest.fixture
def expression_with_unmeasured_sample(expression_df):
    """Toy matrix plus a sample S5 whose every value is unmeasured."""
    df = expression_df.copy()
    df["S5"] = np.nan
    return df


@pytest.fixture
def input_files(tmp_path, expression_df, gene_modules):
    """Expression CSV and module YAML written to a temp directory."""
    expr_path = tmp_path / "expression.csv"
    expression_df.to_csv(expr_path)

    modules_path = tmp_path / "modules.yaml"
    with open(modules_path, "w") as f:
        yaml.safe_dump(gene_modules, f, sort_keys=False)

    return {"expression": expr_path, "modules": modules_path}
