from __future__ import annotations
import matplotlib
matplotlib.use("Agg")
import pandas as pd
import pytest

from occurrence_eda.config import DEFAULTS


@pytest.fixture
def raw_export() -> pd.DataFrame:
    """A small BOLD-style export with extra columns and a few broken rows."""
    return pd.DataFrame({
        "processid": ["ABC001-04", "ABC002-07", "ABC003-10", "XYZ001-05", "XYZ002-05",
                      "QRS001-08", "BAD-0x", "NOLAT-09"],
        "sampleid": ["s1", "s2", "s3", "s4", "s5", "s6", "s7", "s8"],
        "species_name": ["Danaus plexippus", "Danaus plexippus", "Vanessa cardui",
                         "Vanessa cardui", "Danaus plexippus", "Pieris rapae",
                         "Pieris rapae", "Pieris rapae"],
        "lat": ["10.0", "12.0", "9.0", "-33.9", "-34.1", "51.5", "40.0", ""],
        "lon": ["-75.5", "-74.0", "-76.5", "18.4", "18.6", "0.1", "-3.7", "2.3"],
        "country": ["Colombia", "Colombia", "Colombia", "South Africa", "South Africa",
                    "United Kingdom", "Spain", "France"],
        "institution_storing": ["A", "B", "C", "D", "E", "F", "G", "H"],
    })


@pytest.fixture
def cfg() -> dict:
    from copy import deepcopy
    c = deepcopy(DEFAULTS)
    c["animation"] = {"duration": 1, "fps": 2, "formats": ["gif"]}
    return c


@pytest.fixture
def export_file(tmp_path, raw_export):
    path = tmp_path / "occurrences.tsv"
    raw_export.to_csv(path, sep="\t", index=False)
    return path
