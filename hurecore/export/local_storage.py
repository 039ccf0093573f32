"""
Local Storage - Export Layer

Functions for writing rendered exports and payroll frames to local files.
"""

import glob
import os
from pathlib import Path
from typing import Dict, Optional

import polars as pl
import logging

from hurecore.coreutils.time import today_ke
from .csv_export import export_filename

logger = logging.getLogger(__name__)


def _ensure_parent(filepath: str) -> None:
    parent = os.path.dirname(filepath)
    if parent:
        os.makedirs(parent, exist_ok=True)


def save_csv(text: str, filepath: str) -> str:
    """
    Save rendered CSV text

    Args:
        text: CSV content
        filepath: Path to save file

    Returns:
        str: Path to saved file
    """
    logger.info(f"Saving CSV export: {filepath}")
    _ensure_parent(filepath)

    with open(filepath, "w", encoding="utf-8", newline="") as f:
        f.write(text)

    logger.info(f"Saved {text.count(chr(10)) + 1} lines to {filepath}")
    return filepath


def save_parquet(df: pl.DataFrame, filepath: str) -> str:
    """Write a payroll frame to Parquet, returning the path"""
    logger.info(f"Writing {df.height} payroll rows to {filepath}")
    _ensure_parent(filepath)

    df.write_parquet(filepath)

    return filepath


def load_parquet(filepath: str) -> pl.DataFrame:
    """Read a previously saved payroll frame"""
    if not os.path.exists(filepath):
        raise FileNotFoundError(f"No saved payroll frame at {filepath}")

    entries_df = pl.read_parquet(filepath)
    logger.info(f"Read {entries_df.height} payroll rows from {filepath}")
    return entries_df


def save_payroll_export(
    entries_df: pl.DataFrame, csv_text: str, period_id: str, output_dir: str = "output"
) -> Dict[str, str]:
    """
    Save a payroll period's entries and its CSV export

    Args:
        entries_df: Payroll entries
        csv_text: Rendered CSV for the same entries
        period_id: Payroll period identifier
        output_dir: Output directory

    Returns:
        Dict: Paths to saved files
    """
    base = f"payroll_{period_id}"
    csv_path = str(Path(output_dir) / export_filename(base, today_ke()))
    parquet_path = str(Path(output_dir) / f"{base}.parquet")

    return {
        "csv": save_csv(csv_text, csv_path),
        "parquet": save_parquet(entries_df, parquet_path),
    }


def get_latest_file(pattern: str, directory: str = "output") -> Optional[str]:
    """Most recently modified export matching a glob pattern, or None"""
    search_pattern = os.path.join(directory, pattern)
    files = glob.glob(search_pattern)

    if not files:
        return None

    return max(files, key=os.path.getmtime)
