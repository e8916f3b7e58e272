"""
Occurrence EDA pipeline: load -> filter -> derive -> aggregate -> render.

Every stage takes the previous stage's table as an argument and returns a
new one. Aggregates are computed by `compute_tables` without touching any
plotting backend; `render` only draws what it is given.
"""
from __future__ import annotations
from pathlib import Path
import pandas as pd

from occurrence_eda import paths
from occurrence_eda.analysis import aggregate as agg
from occurrence_eda.data.load_occurrences import read_occurrences, save_parquet, save_table
from occurrence_eda.preprocessing.derive_fields import add_hemisphere, add_year, compute_deltas
from occurrence_eda.preprocessing.select_fields import drop_missing, missing_report, select_fields


def prepare(raw: pd.DataFrame, cfg: dict) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Filter and derive. Returns (records, missing report of the selected fields)."""
    selected = select_fields(raw, cfg["columns"])
    missing = missing_report(selected)
    records = drop_missing(selected)
    records = add_year(records, century=cfg["century"], year_range=tuple(cfg["year_range"]))
    records = add_hemisphere(records)
    print(f"[DERIVE] Records with year: {len(records):,}")
    return records, missing


def compute_tables(records: pd.DataFrame) -> dict[str, pd.DataFrame]:
    deltas = compute_deltas(records)
    tables = {
        "coordinate_summary": agg.coordinate_summary(records),
        "geo_counts": agg.geo_counts(records),
        "species_counts": agg.species_counts(records),
        "country_counts": agg.country_counts(records),
        "hemisphere_species_counts": agg.hemisphere_species_counts(records),
        "deltas": deltas,
        "mean_changes": agg.mean_changes(deltas),
        "country_correlations": agg.country_correlations(deltas),
    }
    print(f"[AGG] {len(tables['species_counts']):,} species, "
          f"{len(tables['country_counts']):,} countries, "
          f"{tables['country_correlations']['pearson_r'].notna().sum():,} defined correlations")
    return tables


def write_tables(tables: dict[str, pd.DataFrame], outdir: Path) -> list[Path]:
    outdir = Path(outdir)
    return [save_table(t, outdir / f"{name}.csv") for name, t in tables.items()]


def render(records: pd.DataFrame, tables: dict[str, pd.DataFrame], figdir: Path,
           top_n: int = 20, animation: dict | None = None) -> list[Path]:
    from occurrence_eda.viz import plots
    figdir = Path(figdir)
    out = [
        plots.save_boxplot(records, figdir / "coordinates_boxplot.png"),
        plots.save_histogram(records, figdir / "occurrences_per_year.png"),
        plots.save_bar(tables["species_counts"].head(top_n), "species_name",
                       figdir / "species_counts.png", f"Top {top_n} species by occurrences", "Species"),
        plots.save_bar(tables["country_counts"].head(top_n), "country",
                       figdir / "country_counts.png", f"Top {top_n} countries by occurrences", "Country"),
        plots.save_stacked_bar(agg.top_n(tables["hemisphere_species_counts"], "species_name", top_n),
                               figdir / "species_by_hemisphere.png"),
        plots.save_faceted_lines(tables["mean_changes"], figdir / "mean_change_by_country.png"),
        plots.save_correlation_bar(tables["country_correlations"], figdir / "change_correlation.png"),
    ]
    if animation:
        from occurrence_eda.viz.animate import save_geo_animation
        out += save_geo_animation(tables["geo_counts"], figdir / "occurrences_timelapse",
                                  duration=animation["duration"], fps=animation["fps"],
                                  formats=animation["formats"])
    return out


def run(input_path, cfg: dict, figdir=paths.FIGURES, tabledir=paths.TABLES,
        processed=paths.PROCESSED, animate: bool = True) -> dict[str, pd.DataFrame]:
    print(f"[EDA] Reading: {Path(input_path).resolve()}")
    raw = read_occurrences(input_path, sep=cfg["sep"])
    records, missing = prepare(raw, cfg)
    tables = compute_tables(records)

    written = write_tables({"missing_values": missing, **tables}, tabledir)
    written.append(save_parquet(records, Path(processed) / "occurrences_derived.parquet"))
    written += render(records, tables, figdir, top_n=cfg["top_n"],
                      animation=cfg["animation"] if animate else None)

    print(f"[EDA] Wrote {len(written)} files:")
    for p in written:
        print(f"  - {p}")
    return {"records": records, "missing_values": missing, **tables}
