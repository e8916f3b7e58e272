from __future__ import annotations
from pathlib import Path
import matplotlib.pyplot as plt
from matplotlib.animation import FFMpegWriter, FuncAnimation, PillowWriter
import numpy as np
import pandas as pd

WRITERS = {"gif": PillowWriter, "mp4": FFMpegWriter}


def frame_years(years: list[int], n_frames: int) -> list[int]:
    """Year shown in each frame; years are spread evenly over the playback."""
    if not years:
        return []
    n = len(years)
    return [years[min(i * n // n_frames, n - 1)] for i in range(n_frames)]


def build_geo_animation(geo: pd.DataFrame, duration: float = 20, fps: int = 10) -> tuple[plt.Figure, FuncAnimation]:
    """Scatter of occurrence locations advancing through the collection years.

    `geo` is the (year, longitude, latitude, country, count) table; point area
    follows the count.
    """
    n_frames = max(int(round(duration * fps)), 1)
    fig, ax = plt.subplots(figsize=(10, 5.5))
    ax.set_xlim(-180, 180); ax.set_ylim(-90, 90)
    ax.set_xlabel("Longitude"); ax.set_ylabel("Latitude")
    ax.axhline(0, color="grey", linewidth=0.5); ax.axvline(0, color="grey", linewidth=0.5)
    title = ax.set_title("")

    years = sorted(int(y) for y in geo["year"].unique()) if not geo.empty else []
    schedule = frame_years(years, n_frames)
    by_year = {y: g for y, g in geo.groupby("year")} if years else {}
    scat = ax.scatter([], [], s=[], alpha=0.6, edgecolors="black", linewidths=0.3)

    if not years:
        ax.text(0.5, 0.5, "No data", ha="center", va="center", transform=ax.transAxes)

    def draw(i):
        if not schedule:
            return (scat,)
        year = schedule[i]
        g = by_year[year]
        scat.set_offsets(np.column_stack([g["longitude"].to_numpy(float), g["latitude"].to_numpy(float)]))
        scat.set_sizes(15.0 * g["count"].to_numpy(float))
        title.set_text(f"Occurrences in {year}")
        return (scat, title)

    anim = FuncAnimation(fig, draw, frames=n_frames, interval=1000.0 / fps, blit=False, repeat=False)
    return fig, anim


def save_geo_animation(geo: pd.DataFrame, out_base, duration: float = 20, fps: int = 10,
                       formats=("gif", "mp4")) -> list[Path]:
    """Render the time-lapse once per format as <out_base>.<fmt>."""
    out_base = Path(out_base)
    out_base.parent.mkdir(parents=True, exist_ok=True)
    written = []
    for fmt in formats:
        if fmt not in WRITERS:
            raise ValueError(f"Unsupported animation format {fmt!r}; choose from {sorted(WRITERS)}")
        writer_cls = WRITERS[fmt]
        if not writer_cls.isAvailable():
            raise OSError(f"No {fmt} writer available ({writer_cls.__name__}); install it or drop '{fmt}'")
        fig, anim = build_geo_animation(geo, duration=duration, fps=fps)
        path = out_base.with_suffix(f".{fmt}")
        try:
            anim.save(str(path), writer=writer_cls(fps=fps))
        finally:
            plt.close(fig)
        print(f"[ANIM] {path} ({duration}s @ {fps} fps)")
        written.append(path)
    return written
