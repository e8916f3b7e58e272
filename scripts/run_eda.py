
import argparse
from pathlib import Path
import matplotlib
matplotlib.use("Agg")
import yaml
from occurrence_eda import paths
from occurrence_eda.config import load_config
from occurrence_eda.pipeline import run
from occurrence_eda.preprocessing.select_fields import SchemaError

def build_parser():
    ap = argparse.ArgumentParser(description="Exploratory analysis of an occurrence export (tables + figures).")
    ap.add_argument('--in', dest='inp', required=True, help='Delimiter-separated occurrence file')
    ap.add_argument('--config', default=None, help='YAML config (default: config/eda.yaml)')
    ap.add_argument('--figures', default=str(paths.FIGURES))
    ap.add_argument('--tables', default=str(paths.TABLES))
    ap.add_argument('--processed', default=str(paths.PROCESSED))
    ap.add_argument('--sep', default=None, help='Override the configured delimiter')
    ap.add_argument('--duration', type=float, default=None, help='Animation length in seconds')
    ap.add_argument('--fps', type=int, default=None, help='Animation frame rate')
    ap.add_argument('--formats', nargs='*', choices=['gif', 'mp4'], default=None)
    ap.add_argument('--no-animation', action='store_true')
    return ap

def main(argv=None):
    args = build_parser().parse_args(argv)

    try:
        cfg = load_config(args.config)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise SystemExit(f"[EDA] Bad config: {e}")
    if args.sep is not None: cfg['sep'] = args.sep
    if args.duration is not None: cfg['animation']['duration'] = args.duration
    if args.fps is not None: cfg['animation']['fps'] = args.fps
    if args.formats: cfg['animation']['formats'] = args.formats
    if cfg['animation']['duration'] <= 0 or cfg['animation']['fps'] <= 0:
        raise SystemExit("[EDA] --duration and --fps must be positive")

    try:
        run(Path(args.inp), cfg, figdir=args.figures, tabledir=args.tables,
            processed=args.processed, animate=not args.no_animation)
    except (OSError, SchemaError, ValueError) as e:
        raise SystemExit(f"[EDA] Failed: {e}")

if __name__ == "__main__":
    main()
