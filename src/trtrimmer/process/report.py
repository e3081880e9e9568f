"""Per-sequence terminal repeat reports."""

import logging
from pathlib import Path
from typing import Iterable, Union

import pandas as pd

logger = logging.getLogger(__name__)

REPORT_COLS = [
    "input",
    "id",
    "length",
    "tr_type",
    "tr_length",
    "rejected",
    "output_length",
]


def build_report(rows: Iterable[dict]) -> pd.DataFrame:
    """Build the report table, one row per input sequence."""
    df = pd.DataFrame(list(rows), columns=REPORT_COLS)
    return df.astype({"length": int, "tr_length": int, "output_length": int, "rejected": bool})


def summarize_report(df: pd.DataFrame) -> pd.DataFrame:
    """Sequence counts and mean repeat length per input and repeat type."""
    if df.empty:
        return pd.DataFrame(columns=["input", "tr_type", "count", "mean_tr_length"])
    return (
        df.groupby(["input", "tr_type"])
        .agg(count=("id", "size"), mean_tr_length=("tr_length", "mean"))
        .reset_index()
        .round({"mean_tr_length": 1})
    )


def write_report(df: pd.DataFrame, filepath: Union[str, Path]) -> None:
    """
    Write a report as TSV.

    Args:
        df: Report from build_report
        filepath: Output file path
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(filepath, sep="\t", index=False)
    logger.info(f"Saved report for {len(df)} sequences to {filepath.name}")

    for row in summarize_report(df).itertuples(index=False):
        logger.info(
            f"  {row.input}: {row.count} x tr={row.tr_type} "
            f"(mean tr_length {row.mean_tr_length})"
        )
