# tests/validate_outputs.py
from __future__ import annotations
import argparse, os, sys, json
from pathlib import Path
from typing import Optional
import duckdb
import pandas as pd

REQUIRED = {
    "geo_counts": {"year", "longitude", "latitude", "country", "count"},
    "species_counts": {"species_name", "count"},
    "hemisphere_species_counts": {"species_name", "hemisphere", "count"},
    "mean_changes": {"country", "year", "lat_change", "lon_change"},
    "country_correlations": {"country", "n_pairs", "pearson_r"},
    "deltas": {"process_id", "species_name", "latitude", "longitude", "country", "year",
               "lat_change", "lon_change"},
}

def resolve(p: str) -> Path:
    q = Path(os.path.expanduser(os.path.expandvars(p)))
    if not q.is_absolute():
        q = (Path.cwd() / q).resolve(strict=False)
    if not q.exists():
        raise FileNotFoundError(f"Not found: {p} -> {q}")
    return q

def ensure_outdir(p: Path) -> Path:
    p.mkdir(parents=True, exist_ok=True)
    return p

def main():
    ap = argparse.ArgumentParser(description="Validate occurrence EDA output tables.")
    ap.add_argument("--tables", default="reports/tables", help="Directory with the pipeline CSV tables")
    ap.add_argument("--report-dir", default="reports/qa", help="Where to write QA outputs")
    ap.add_argument("--year-from", type=int, default=2000)
    ap.add_argument("--year-to", type=int, default=2099)
    ap.add_argument("--sample-n", type=int, default=200, help="rows to save per failure case")
    ap.add_argument("--fail-on-error", action="store_true", help="exit(1) if any check fails")
    args = ap.parse_args()

    tables = resolve(args.tables)
    outdir = ensure_outdir(Path(args.report_dir))

    con = duckdb.connect()
    metrics = {}
    failures = []

    def record_fail(name: str, detail: str, df: Optional[pd.DataFrame] = None):
        print(f"FAIL: {name} -> {detail}")
        failures.append({"name": name, "detail": detail})
        if df is not None and len(df):
            df.head(args.sample_n).to_csv(outdir / f"{name}.csv", index=False)

    def src(name: str) -> str:
        return f"read_csv_auto('{(tables / f'{name}.csv').as_posix()}', header=true)"

    # ---------- Presence + columns ----------
    for name, req in REQUIRED.items():
        path = tables / f"{name}.csv"
        if not path.exists():
            record_fail(f"{name}_missing_file", f"{path} not found")
            continue
        cols = set(con.sql(f"SELECT * FROM {src(name)} LIMIT 0").df().columns)
        missing = sorted(req - cols)
        if missing:
            record_fail(f"{name}_missing_columns", f"missing {missing}")
        n = int(con.sql(f"SELECT COUNT(*) AS n FROM {src(name)}").df()["n"][0])
        metrics[f"{name}_rows"] = n
        print(f"{name}: {n:,} rows")

    if any(f["name"].endswith(("_missing_file", "_missing_columns")) for f in failures):
        print("Aborting: required tables are incomplete.")
        (outdir / "failures.json").write_text(json.dumps(failures, indent=2))
        con.close()
        sys.exit(1 if args.fail_on_error else 0)

    # ---------- No missing fields in the delta records ----------
    nulls = con.sql(f"""
        SELECT * FROM {src('deltas')}
        WHERE process_id IS NULL OR species_name IS NULL OR latitude IS NULL
           OR longitude IS NULL OR country IS NULL
    """).df()
    metrics["deltas_null_rows"] = int(len(nulls))
    if len(nulls):
        record_fail("deltas_missing_fields", f"{len(nulls)} rows with missing fields", nulls)

    # ---------- Year bounds ----------
    ystats = con.sql(f"SELECT MIN(year) AS y_min, MAX(year) AS y_max FROM {src('geo_counts')}").df().iloc[0]
    y_min = None if pd.isna(ystats.y_min) else int(ystats.y_min)
    y_max = None if pd.isna(ystats.y_max) else int(ystats.y_max)
    metrics["year_min"], metrics["year_max"] = y_min, y_max
    if y_min is not None and y_min < args.year_from:
        record_fail("year_from", f"min year {y_min} < expected {args.year_from}")
    if y_max is not None and y_max > args.year_to:
        record_fail("year_to", f"max year {y_max} > expected {args.year_to}")

    # ---------- Counts add up ----------
    totals = con.sql(f"""
        SELECT (SELECT SUM("count") FROM {src('geo_counts')}) AS geo,
               (SELECT SUM("count") FROM {src('species_counts')}) AS species,
               (SELECT SUM("count") FROM {src('hemisphere_species_counts')}) AS hemi
    """).df().iloc[0]
    metrics["total_occurrences"] = None if pd.isna(totals.geo) else int(totals.geo)
    if len({int(v) for v in totals.fillna(0)}) > 1:
        record_fail("count_totals_differ", f"geo={totals.geo} species={totals.species} hemisphere={totals.hemi}")

    # ---------- Hemisphere labels ----------
    bad_hemi = con.sql(f"""
        SELECT hemisphere, COUNT(*) AS n FROM {src('hemisphere_species_counts')}
        WHERE hemisphere NOT IN ('Eastern', 'Western') GROUP BY 1
    """).df()
    if len(bad_hemi):
        record_fail("bad_hemisphere", f"{int(bad_hemi['n'].sum())} rows with unknown hemisphere", bad_hemi)

    # ---------- Correlations in [-1, 1], undefined only with too few pairs ----------
    bad_r = con.sql(f"""
        SELECT * FROM {src('country_correlations')}
        WHERE pearson_r < -1.0000001 OR pearson_r > 1.0000001
    """).df()
    if len(bad_r):
        record_fail("correlation_out_of_range", f"{len(bad_r)} countries with |r| > 1", bad_r)
    undefined = int(con.sql(f"SELECT COUNT(*) AS n FROM {src('country_correlations')} WHERE pearson_r IS NULL").df()["n"][0])
    metrics["undefined_correlations"] = undefined

    # ---------- Save metrics ----------
    (outdir / "metrics.json").write_text(json.dumps(metrics, indent=2))
    print(f"\nMetrics written -> {outdir/'metrics.json'}")

    if failures:
        (outdir / "failures.json").write_text(json.dumps(failures, indent=2))
        print(f"Found {len(failures)} issue(s). Details & samples saved in {outdir}/")
        if args.fail_on_error:
            sys.exit(1)
    else:
        print("All checks passed ✅")

    con.close()

if __name__ == "__main__":
    main()
