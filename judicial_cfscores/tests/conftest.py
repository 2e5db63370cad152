"""Shared fixtures for the judicial CF score tests."""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest


@pytest.fixture
def sample_raw():
    """Raw judge records covering the cleaning edge cases."""
    return pd.DataFrame({
        "state": ["CA", "ca", "TX", "tx (crim)", "NY", "DC", "WY", "OK (CRIM)", "Guam"],
        "party": [100, 100, 200, 200, 328, 999, 200, 200, 100],
        "cfscore": [-0.5, -0.3, 0.6, np.nan, 0.05, -0.9, "abc", 0.35, 0.2],
        "year_enter": [1990, 1995, 2000, 2005, 2010, 2001, 1999, np.nan, 2003],
        "appointed": [1, 0, 0, 0, 0, 1, 1, 1, 0],
        "legislative_election": [0, 0, 1, 0, 0, 0, 1, 1, 0],
        "non_partisan_election": [0, 1, 0, 1, 0, 0, 0, 0, 0],
    })


@pytest.fixture
def scenario_raw():
    """The four-record state-average scenario."""
    return pd.DataFrame({
        "state": ["CA", "ca", "TX", "tx (crim)"],
        "party": [100, 100, 200, 200],
        "cfscore": [-0.5, -0.3, 0.6, np.nan],
        "year_enter": [2000, 2001, 2002, 2003],
        "appointed": [1, 1, 0, 0],
        "legislative_election": [0, 0, 1, 1],
        "non_partisan_election": [0, 0, 0, 0],
    })


@pytest.fixture
def synthetic_raw():
    """A larger random dataset suitable for rendering every chart."""
    rng = np.random.default_rng(0)
    n = 120
    party = rng.choice([100, 200, 328], n, p=[0.45, 0.45, 0.10])
    shift = np.select([party == 100, party == 200], [-0.6, 0.6], 0.0)
    flag = rng.integers(0, 4, n)
    return pd.DataFrame({
        "state": rng.choice(["CA", "TX", "NY", "OH", "tx (crim)", "dc", "FL"], n),
        "party": party,
        "cfscore": shift + rng.normal(0, 0.3, n),
        "year_enter": rng.integers(1970, 2015, n),
        "appointed": (flag == 0).astype(int),
        "legislative_election": (flag == 1).astype(int),
        "non_partisan_election": (flag == 2).astype(int),
    })


@pytest.fixture
def synthetic_csv(synthetic_raw, tmp_path):
    """Write the synthetic dataset to a CSV file and return its path."""
    path = tmp_path / "judges_cfscores.csv"
    synthetic_raw.to_csv(path, index=False)
    return path
