
from pathlib import Path
import csv
import pandas as pd

def check_field_counts(path, sep="\t", encoding="utf-8"):
    """Raise OSError unless every non-blank row has as many fields as the header."""
    if len(sep) != 1:
        raise ValueError(f"Delimiter must be a single character, got {sep!r}")
    try:
        with open(path, newline="", encoding=encoding) as fh:
            reader = csv.reader(fh, delimiter=sep)
            header = next(reader, None)
            if not header:
                raise OSError(f"Input file is empty: {path}")
            for row in reader:
                if row and len(row) != len(header):
                    raise OSError(f"Malformed input {path}: line {reader.line_num} has "
                                  f"{len(row)} fields, header has {len(header)}")
    except (UnicodeDecodeError, csv.Error) as e:
        raise OSError(f"Malformed input {path}: {e}") from e
    return len(header)

def read_occurrences(path, sep="\t"):
    """Read a delimiter-separated occurrence export into a DataFrame.

    Raises OSError when the file is missing, empty, has rows whose field
    count differs from the header, or does not split into columns with the
    given delimiter.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Input file not found: {path}")
    check_field_counts(path, sep)
    try:
        df = pd.read_csv(path, sep=sep, dtype=str, index_col=False, low_memory=False)
    except pd.errors.EmptyDataError as e:
        raise OSError(f"Input file is empty: {path}") from e
    except pd.errors.ParserError as e:
        raise OSError(f"Malformed input {path}: {e}") from e
    if df.shape[1] < 2:
        raise OSError(f"Malformed input {path}: parsed a single column, check the delimiter ({sep!r})")
    print(f"[LOAD] {path}: {len(df):,} rows, {df.shape[1]} columns")
    return df

def save_table(df, path, index=False):
    path = Path(path); path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=index)
    return path

def save_parquet(df, path):
    path = Path(path); path.parent.mkdir(parents=True, exist_ok=True)
    df.to_parquet(path, index=False)
    return path
