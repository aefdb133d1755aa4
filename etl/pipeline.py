"""
ETL pipeline: turns a raw allocation export into data/electives.json.

Input is a CSV with one row per allocated student:

    code,name,type,department,cgpa
    CSE4051,Deep Learning,PE I,CSE,9.41

Aggregation strategy:
  - Group on (code, type); the same code can be offered as an OE and a PE
  - Groups keep first-appearance order, so the output order is stable
  - name / department come from the first row of each group
  - lowestCGPA / highestCGPA are the min / max allocated CGPA (2 dp)
  - students is the number of allocated rows
  - Rows with a blank code, unknown type or unparsable CGPA are dropped

This is an offline build step; the dashboard and API only ever read the
JSON it writes.
"""

import argparse
import json
import logging
from pathlib import Path

import pandas as pd

from electives.config import DATA_FILE
from electives.dataset import CourseType

log = logging.getLogger(__name__)

RAW_COLUMNS = ("code", "name", "type", "department", "cgpa")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def load(path: Path) -> pd.DataFrame:
    """Load the raw allocation CSV with every column read as text."""
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    missing = [c for c in RAW_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"{path.name}: missing column(s) {', '.join(missing)}")
    return df


def clean(df: pd.DataFrame) -> pd.DataFrame:
    """Trim text columns, parse CGPA, drop rows that cannot be aggregated."""
    df = df.loc[:, list(RAW_COLUMNS)].copy()
    for col in ("code", "name", "type", "department"):
        df[col] = df[col].astype(str).str.strip()
    df["cgpa"] = pd.to_numeric(df["cgpa"], errors="coerce")

    valid_types = {t.value for t in CourseType}
    keep = (df["code"] != "") & df["type"].isin(valid_types) & df["cgpa"].notna()

    dropped = int((~keep).sum())
    if dropped:
        log.warning("Dropped %d of %d allocation rows (blank code, unknown type or bad CGPA)",
                    dropped, len(df))
    return df[keep]


# ---------------------------------------------------------------------------
# Core aggregation
# ---------------------------------------------------------------------------

def aggregate_allocations(df: pd.DataFrame) -> list[dict]:
    """
    Collapse per-student allocation rows into one record per elective.

    Returns flat dicts in the dataset's JSON form, ordered by the first
    appearance of each (code, type) pair.
    """
    rows = clean(df)
    if rows.empty:
        return []

    grouped = rows.groupby(["code", "type"], sort=False).agg(
        name=("name", "first"),
        department=("department", "first"),
        lowestCGPA=("cgpa", "min"),
        highestCGPA=("cgpa", "max"),
        students=("cgpa", "count"),
    ).reset_index()

    return [
        {
            "code":        r.code,
            "name":        r.name,
            "type":        r.type,
            "department":  r.department,
            "lowestCGPA":  round(float(r.lowestCGPA), 2),
            "highestCGPA": round(float(r.highestCGPA), 2),
            "students":    int(r.students),
        }
        for r in grouped.itertuples(index=False)
    ]


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def run(raw_file: Path, output_file: Path = DATA_FILE) -> list[dict]:
    """Load the raw export, aggregate, save the dataset JSON, return the records."""
    electives = aggregate_allocations(load(raw_file))

    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_text(
        json.dumps(electives, indent=2, ensure_ascii=False), encoding="utf-8"
    )
    log.info("Saved %d electives → %s", len(electives), output_file)
    return electives


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Build the elective cutoff dataset.")
    parser.add_argument("raw_file", type=Path, help="CSV of per-student allocations")
    parser.add_argument("-o", "--output", type=Path, default=DATA_FILE,
                        help=f"output JSON (default: {DATA_FILE})")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s  %(message)s")
    run(args.raw_file, args.output)


if __name__ == "__main__":
    main()
