from __future__ import annotations
import numpy as np
import pandas as pd

GEO_KEYS = ["year", "longitude", "latitude", "country"]


def _count(df: pd.DataFrame, keys: list[str]) -> pd.DataFrame:
    if df.empty:
        return pd.DataFrame(columns=keys + ["count"])
    out = df.groupby(keys, as_index=False, observed=True).size().rename(columns={"size": "count"})
    return out.sort_values(keys, kind="mergesort").reset_index(drop=True)


def geo_counts(df: pd.DataFrame) -> pd.DataFrame:
    """Occurrences per (year, longitude, latitude, country)."""
    return _count(df, GEO_KEYS)


def species_counts(df: pd.DataFrame) -> pd.DataFrame:
    out = _count(df, ["species_name"])
    return out.sort_values(["count", "species_name"], ascending=[False, True],
                           kind="mergesort").reset_index(drop=True)


def country_counts(df: pd.DataFrame) -> pd.DataFrame:
    out = _count(df, ["country"])
    return out.sort_values(["count", "country"], ascending=[False, True],
                           kind="mergesort").reset_index(drop=True)


def hemisphere_species_counts(df: pd.DataFrame) -> pd.DataFrame:
    """Occurrences per (species_name, hemisphere); expects add_hemisphere output."""
    return _count(df, ["species_name", "hemisphere"])


def top_n(table: pd.DataFrame, key: str, n: int) -> pd.DataFrame:
    """Rows of `table` whose `key` is among the n keys with the most occurrences."""
    totals = table.groupby(key, observed=True)["count"].sum()
    keep = totals.sort_values(ascending=False, kind="mergesort").head(n).index
    return table[table[key].isin(keep)].reset_index(drop=True)


def mean_changes(deltas: pd.DataFrame) -> pd.DataFrame:
    """Mean lat/lon change per (country, year).

    Missing values are skipped; a group with none defined stays NaN.
    """
    cols = ["country", "year", "lat_change", "lon_change"]
    if deltas.empty:
        return pd.DataFrame(columns=cols)
    out = (deltas.groupby(["country", "year"], as_index=False, observed=True)[["lat_change", "lon_change"]]
                 .mean())
    return out[cols].sort_values(["country", "year"], kind="mergesort").reset_index(drop=True)


def _pearson(x: pd.Series, y: pd.Series) -> float:
    # NaN for < 2 pairs or a constant series (corr() may round those to ~0)
    if len(x) < 2 or x.nunique() < 2 or y.nunique() < 2:
        return np.nan
    return float(x.corr(y, method="pearson"))


def country_correlations(deltas: pd.DataFrame) -> pd.DataFrame:
    """Pearson r between lat_change and lon_change for each country."""
    rows = []
    for country, grp in deltas.groupby("country", sort=True, observed=True):
        pairs = grp[["lat_change", "lon_change"]].dropna()
        r = _pearson(pairs["lat_change"], pairs["lon_change"])
        rows.append({"country": country, "n_pairs": len(pairs), "pearson_r": r})
    return pd.DataFrame(rows, columns=["country", "n_pairs", "pearson_r"])


def coordinate_summary(df: pd.DataFrame) -> pd.DataFrame:
    """describe() of latitude, longitude and year, one row per variable."""
    cols = [c for c in ["latitude", "longitude", "year"] if c in df.columns]
    summary = df[cols].astype("float64").describe().T
    summary["median"] = df[cols].astype("float64").median()
    return summary.rename_axis("variable").reset_index()
