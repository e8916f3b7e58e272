
from pathlib import Path
import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns

sns.set_theme(style="whitegrid")


def _prepare(path):
    path = Path(path); path.parent.mkdir(parents=True, exist_ok=True)
    return path

def _no_data(ax, title):
    ax.text(0.5, 0.5, "No data", ha="center", va="center", transform=ax.transAxes)
    ax.set_title(title)

def _finish(fig, path):
    fig.tight_layout(); fig.savefig(path, dpi=150); plt.close(fig)
    print(f"[PLOT] {path}")
    return path


def save_bar(table, key, path, title, xlabel, ylabel="Occurrences"):
    """Bar chart of a count table (one bar per `key`)."""
    path = _prepare(path)
    fig, ax = plt.subplots(figsize=(10, 6))
    if table.empty:
        _no_data(ax, title)
    else:
        table.set_index(key)["count"].plot(kind="bar", ax=ax)
        ax.set_title(title); ax.set_xlabel(xlabel); ax.set_ylabel(ylabel)
        ax.tick_params(axis="x", rotation=75)
    return _finish(fig, path)


def save_boxplot(df, path, title="Distribution of coordinates"):
    path = _prepare(path)
    fig, ax = plt.subplots(figsize=(7, 6))
    coords = df[["latitude", "longitude"]] if not df.empty else pd.DataFrame()
    if coords.empty:
        _no_data(ax, title)
    else:
        long = coords.melt(var_name="coordinate", value_name="degrees")
        sns.boxplot(data=long, x="coordinate", y="degrees", ax=ax)
        ax.set_title(title); ax.set_xlabel("")
    return _finish(fig, path)


def save_histogram(df, path, title="Occurrences per year"):
    """Histogram of derived collection years, one bin per year."""
    path = _prepare(path)
    fig, ax = plt.subplots(figsize=(9, 5))
    if df.empty:
        _no_data(ax, title)
    else:
        lo, hi = int(df["year"].min()), int(df["year"].max())
        ax.hist(df["year"], bins=range(lo, hi + 2), align="left", edgecolor="white")
        ax.set_title(title); ax.set_xlabel("Year"); ax.set_ylabel("Occurrences")
    return _finish(fig, path)


def save_stacked_bar(table, path, title="Occurrences by species and hemisphere"):
    """Stacked bars of species counts split by hemisphere."""
    path = _prepare(path)
    fig, ax = plt.subplots(figsize=(10, 6))
    if table.empty:
        _no_data(ax, title)
    else:
        wide = (table.pivot_table(index="species_name", columns="hemisphere", values="count",
                                  aggfunc="sum", fill_value=0, observed=True))
        wide = wide.loc[wide.sum(axis=1).sort_values(ascending=False, kind="mergesort").index]
        wide.plot(kind="bar", stacked=True, ax=ax)
        ax.set_title(title); ax.set_xlabel("Species"); ax.set_ylabel("Occurrences")
        ax.tick_params(axis="x", rotation=75)
        ax.legend(title="Hemisphere")
    return _finish(fig, path)


def save_faceted_lines(means, path, col_wrap=4, title="Mean coordinate change by year"):
    """One panel per country with mean lat/lon change over the years."""
    path = _prepare(path)
    if means.empty:
        fig, ax = plt.subplots(figsize=(7, 4))
        _no_data(ax, title)
        return _finish(fig, path)
    long = means.melt(id_vars=["country", "year"], value_vars=["lat_change", "lon_change"],
                      var_name="change", value_name="degrees")
    g = sns.relplot(data=long, x="year", y="degrees", hue="change", col="country",
                    col_wrap=min(col_wrap, long["country"].nunique()), kind="line",
                    marker="o", height=2.6, aspect=1.3, facet_kws={"sharey": False})
    g.set_titles("{col_name}")
    g.figure.suptitle(title, y=1.02)
    return _finish(g.figure, path)


def save_correlation_bar(corr, path, title="Latitude/longitude change correlation by country"):
    path = _prepare(path)
    fig, ax = plt.subplots(figsize=(10, 6))
    defined = corr.dropna(subset=["pearson_r"]) if not corr.empty else corr
    if defined.empty:
        _no_data(ax, title)
    else:
        defined = defined.sort_values("pearson_r", kind="mergesort")
        ax.bar(defined["country"].astype(str), defined["pearson_r"])
        ax.axhline(0, color="black", linewidth=0.8)
        ax.set_ylim(-1.05, 1.05)
        ax.set_title(title); ax.set_xlabel("Country"); ax.set_ylabel("Pearson r")
        ax.tick_params(axis="x", rotation=75)
    return _finish(fig, path)
