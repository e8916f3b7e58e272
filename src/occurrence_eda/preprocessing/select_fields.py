from __future__ import annotations
import pandas as pd

FIELDS = ["process_id", "species_name", "latitude", "longitude", "country"]
NUMERIC = ["latitude", "longitude"]


class SchemaError(KeyError):
    """A required field has no matching column in the input."""


def pick(df: pd.DataFrame, names: list[str]) -> str | None:
    """Pick the first column name that exists in df, case-insensitive."""
    lower_map = {c.strip().lower(): c for c in df.columns}
    for n in names:
        c = lower_map.get(n.lower())
        if c is not None:
            return c
    return None


def select_fields(df: pd.DataFrame, columns: dict[str, list[str]]) -> pd.DataFrame:
    """Project the occurrence fields by header name and normalise their dtypes.

    `columns` maps each canonical field to candidate header names. Output
    columns carry the canonical names, in FIELDS order.
    """
    found, missing = {}, []
    for field in FIELDS:
        names = columns.get(field) or [field]
        if isinstance(names, str):
            names = [names]
        c = pick(df, names)
        if c is None:
            missing.append(field)
        else:
            found[field] = c
    if missing:
        raise SchemaError(
            f"Missing required column(s) {missing}. Got: {list(df.columns)[:15]} ..."
        )

    out = df[[found[f] for f in FIELDS]].copy()
    out.columns = FIELDS
    for c in FIELDS:
        if c in NUMERIC:
            out[c] = pd.to_numeric(out[c], errors="coerce").astype("float64")
        else:
            s = out[c].astype("string").str.strip()
            out[c] = s.mask((s == "").fillna(False).astype(bool))
    return out


def missing_report(df: pd.DataFrame) -> pd.DataFrame:
    n = len(df)
    miss = df.isna().sum()
    return pd.DataFrame({
        "column": miss.index,
        "missing": miss.to_numpy(),
        "pct": (miss.to_numpy() / n * 100.0) if n else 0.0,
    })


def drop_missing(df: pd.DataFrame) -> pd.DataFrame:
    before = len(df)
    out = df.dropna(subset=[c for c in FIELDS if c in df.columns]).reset_index(drop=True)
    print(f"[FILTER] Dropped rows with missing fields: {before - len(out):,} (kept {len(out):,})")
    print(f"[FILTER] Missing values remain: {bool(out.isna().any().any())}")
    return out
