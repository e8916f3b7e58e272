from __future__ import annotations
from copy import deepcopy
from pathlib import Path
import yaml

from occurrence_eda.paths import CONFIG

DEFAULTS = {
    "sep": "\t",
    "columns": {
        "process_id": ["processid", "process_id"],
        "species_name": ["species_name"],
        "latitude": ["lat", "latitude"],
        "longitude": ["lon", "longitude"],
        "country": ["country"],
    },
    "century": 2000,
    "year_range": [2000, 2099],
    "top_n": 20,
    "animation": {"duration": 20, "fps": 10, "formats": ["gif", "mp4"]},
}


def _merge(base: dict, extra: dict) -> dict:
    out = deepcopy(base)
    for k, v in (extra or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge(out[k], v)
        else:
            out[k] = v
    return out


def load_config(path: str | Path | None = None) -> dict:
    """Read the YAML config and lay it over DEFAULTS.

    With no path, the repo's config/eda.yaml is used when present.
    """
    if path is None:
        if not CONFIG.exists():
            return deepcopy(DEFAULTS)
        path = CONFIG
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")
    raw = yaml.safe_load(path.read_text()) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config {path} must be a mapping, got {type(raw).__name__}")
    cfg = _merge(DEFAULTS, raw)

    lo, hi = cfg["year_range"]
    if lo > hi:
        raise ValueError(f"year_range lower bound {lo} > upper bound {hi}")
    if cfg["animation"]["fps"] <= 0 or cfg["animation"]["duration"] <= 0:
        raise ValueError("animation duration and fps must be positive")
    return cfg
