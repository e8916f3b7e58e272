from __future__ import annotations
import pandas as pd


def extract_year(process_id: pd.Series, century: int = 2000) -> pd.Series:
    """Year from the two-digit suffix of each process id.

    Ids shorter than two characters or with a non-digit suffix give <NA>.
    """
    s = process_id.astype("string").str.strip()
    long_enough = (s.str.len() >= 2).fillna(False).astype(bool)
    suffix = s.str[-2:].where(long_enough)
    valid = suffix.str.fullmatch(r"\d{2}").fillna(False).astype(bool)
    yy = pd.to_numeric(suffix.where(valid), errors="coerce").astype("Int64")
    return yy + century


def add_year(df: pd.DataFrame, century: int = 2000, year_range=(2000, 2099)) -> pd.DataFrame:
    """Add an int `year` column and reject rows whose year is unusable."""
    out = df.copy()
    year = extract_year(out["process_id"], century)
    lo, hi = year_range
    ok = year.notna() & year.between(lo, hi).fillna(False).astype(bool)
    bad_suffix = int(year.isna().sum())
    out_of_range = int((~ok).sum()) - bad_suffix
    if bad_suffix or out_of_range:
        print(f"[DERIVE] Rejected rows: {bad_suffix:,} with malformed year suffix, "
              f"{out_of_range:,} outside {lo}-{hi}")
    out = out[ok.to_numpy()].copy()
    out["year"] = year[ok].astype("int64").to_numpy()
    return out.reset_index(drop=True)


def add_hemisphere(df: pd.DataFrame) -> pd.DataFrame:
    out = df.copy()
    out["hemisphere"] = (out["longitude"] > 0).map({True: "Eastern", False: "Western"})
    return out


def compute_deltas(df: pd.DataFrame) -> pd.DataFrame:
    """Per-country change in latitude/longitude between successive records.

    Records are ordered by year within each country (stable, so ties keep
    input order). The first record of each country has no predecessor and
    is left out.
    """
    ordered = df.sort_values(["country", "year"], kind="mergesort").reset_index(drop=True)
    g = ordered.groupby("country", sort=False)
    ordered["lat_change"] = g["latitude"].diff()
    ordered["lon_change"] = g["longitude"].diff()
    first = g.cumcount() == 0
    out = ordered[~first].reset_index(drop=True)
    print(f"[DERIVE] Delta rows: {len(out):,} across {out['country'].nunique():,} countries")
    return out
