"""
Reading and writing of motif proportion tables.

The table has one row per motif category with columns ``Motif`` and
``Proportion`` (percent of analyzed reads). It is written as CSV with four
decimals, sorted from the highest proportion.
"""
from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from .constants import MOTIF_COL, PROPORTION_COL
from .motifs import N_MOTIF_KINDS

logger = logging.getLogger(__name__)


def sort_table(df: pd.DataFrame) -> pd.DataFrame:
    """
    Order rows by proportion, highest first.

    The sort is stable, so categories with equal proportions keep their
    canonical order.
    """
    return df.sort_values(PROPORTION_COL, ascending=False, kind="mergesort").reset_index(drop=True)


def write_table(
    df: pd.DataFrame,
    out_csv: str | Path,
    sort: bool = True,
) -> Path:
    """
    Write the proportion table as ``Motif,Proportion`` CSV.

    Parameters
    ----------
    df : pd.DataFrame
        Table from :meth:`~freq_motif.aggregate.AggregateState.finalize`.
    out_csv : str or Path
        Destination file. Its parent directory must exist.
    sort : bool, default True
        Sort rows by proportion (descending) before writing.

    Returns
    -------
    Path
        The written file.
    """
    _check_columns(df, "write_table")
    if len(df) != N_MOTIF_KINDS:
        raise ValueError(f"Expected {N_MOTIF_KINDS} rows, got {len(df)}")

    out_csv = Path(out_csv)
    out = sort_table(df) if sort else df
    out[[MOTIF_COL, PROPORTION_COL]].to_csv(out_csv, index=False, float_format="%.4f")
    logger.info(f"Saving results to CSV: {out_csv}")
    return out_csv


def read_table(in_csv: str | Path) -> pd.DataFrame:
    """
    Reads a proportion table written by :func:`write_table`.

    Expected columns:
      Motif, Proportion
    """
    in_csv = Path(in_csv)
    df = pd.read_csv(in_csv, dtype={MOTIF_COL: str})
    df.columns = [str(c).strip() for c in df.columns]
    _check_columns(df, str(in_csv))
    df[PROPORTION_COL] = pd.to_numeric(df[PROPORTION_COL], errors="raise").astype(float)
    return df


def plot_rows(df: pd.DataFrame) -> pd.DataFrame:
    """Rows shown in the bar plot: categories with a nonzero proportion."""
    return df[df[PROPORTION_COL] > 0].reset_index(drop=True)


def _check_columns(df: pd.DataFrame, where: str) -> None:
    missing = [c for c in (MOTIF_COL, PROPORTION_COL) if c not in df.columns]
    if missing:
        raise ValueError(f"{where} missing required columns: {missing}")
