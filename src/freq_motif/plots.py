"""
Visualization of motif proportion tables.

Functions
---------
motif_barplot
    Bar plot of per-motif proportions, colored by motif class.
main
    Command-line entry point rendering a plot from a CSV table.
"""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional

import matplotlib.patches as mpatches
import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns

from .constants import DEFAULT_YLIM, MOTIF_COL, PROPORTION_COL
from .motifs import MotifClass, motif_class_of
from .table import plot_rows, read_table, sort_table

logger = logging.getLogger(__name__)

CLASS_COLORS = {
    MotifClass.LOW_COMPLEXITY: "red",
    MotifClass.DINUCLEOTIDE: "blue",
    MotifClass.TRINUCLEOTIDE: "lightblue",
}
CLASS_LABELS = {
    MotifClass.LOW_COMPLEXITY: "LowComplexity",
    MotifClass.DINUCLEOTIDE: "DiNucleotide",
    MotifClass.TRINUCLEOTIDE: "TriNucleotide",
}


def motif_barplot(
    df: pd.DataFrame,
    ratio: float,
    *,
    ylim: Optional[float] = DEFAULT_YLIM,
    title: Optional[str] = None,
    figsize: tuple[float, float] = (12, 8),
    outpath: Optional[str | Path] = None,
    dpi: int = 100,
):
    """Create a bar plot of the proportion of reads flagged per motif.

    Only categories with a nonzero proportion are drawn, sorted from the
    highest proportion. The y axis is clipped at ``ylim`` so that rare motifs
    stay visible next to dominant ones, and bars taller than ``ylim`` are
    labeled with their value.

    Parameters
    ----------
    df : pd.DataFrame
        Proportion table with ``Motif`` and ``Proportion`` columns.
    ratio : float
        Threshold (percent) used in the analysis, shown in the title.
    ylim : float or None, default 0.05
        Upper limit of the y axis. If None, fits the tallest bar.
    title : str or None, default None
        Plot title. Defaults to a description of ``ratio``.
    figsize : tuple of float, default (12, 8)
        Figure size in inches.
    outpath : str, Path, or None, default None
        If provided, save the figure to this path.
    dpi : int, default 100
        Resolution for saved figure.

    Returns
    -------
    fig : matplotlib.figure.Figure
        The matplotlib figure object.
    ax : matplotlib.axes.Axes
        The matplotlib axes object.

    Raises
    ------
    ValueError
        If no category has a nonzero proportion.
    """
    data = sort_table(plot_rows(df))
    if data.empty:
        raise ValueError("motif_barplot received no motif with a nonzero proportion.")

    motifs = data[MOTIF_COL].astype(str).tolist()
    values = data[PROPORTION_COL].to_numpy(dtype=float)
    classes = [motif_class_of(m) for m in motifs]
    colors = [CLASS_COLORS[c] for c in classes]

    if ylim is None:
        ylim = float(values.max()) * 1.1

    if title is None:
        title = f"Proportion of reads with at least {ratio:.1f}% of given motif"

    with sns.axes_style("whitegrid"), sns.plotting_context("notebook", font_scale=1.3):
        fig, ax = plt.subplots(figsize=figsize)
        ax.bar(range(len(motifs)), values, color=colors)

        ax.set_xticks(range(len(motifs)))
        ax.set_xticklabels(motifs, rotation=45, ha="right")
        ax.set_ylim(0, ylim)
        ax.set_xlabel("Motif")
        ax.set_ylabel("Proportion")
        ax.set_title(title)

        # Bars beyond the clipped axis get their value written at the top
        for x, v in enumerate(values):
            if v > ylim:
                ax.text(x, ylim, f"{v:.4f}", ha="center", va="center", fontsize=10)

        present = [c for c in CLASS_COLORS if c in classes]
        handles = [mpatches.Patch(color=CLASS_COLORS[c], label=CLASS_LABELS[c]) for c in present]
        ax.legend(handles=handles, title="Type", loc="upper right")

        fig.tight_layout()

    if outpath is not None:
        outpath = Path(outpath)
        outpath.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(outpath, dpi=dpi, bbox_inches="tight", facecolor="white")

    return fig, ax


def main(argv: Optional[list[str]] = None) -> int:
    """Command-line interface rendering a bar plot from a proportion CSV."""
    parser = argparse.ArgumentParser(
        description="Plot the proportion of reads enriched for each motif"
    )
    parser.add_argument("input_csv", help="Proportion table written by freq-motif-fastq")
    parser.add_argument("output_png", help="Path to the output image")
    parser.add_argument("ratio", type=float, help="Ratio (percent) used for the analysis")
    parser.add_argument(
        "--ylim",
        type=float,
        default=DEFAULT_YLIM,
        help=f"Clip the y axis at this proportion and label taller bars (default: {DEFAULT_YLIM})",
    )
    parser.add_argument(
        "--fit_ylim",
        action="store_true",
        help="Fit the y axis to the tallest bar instead of clipping it",
    )

    args = parser.parse_args(argv)
    ylim = None if args.fit_ylim else args.ylim

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    df = read_table(args.input_csv)
    try:
        fig, _ = motif_barplot(df, args.ratio, ylim=ylim, outpath=args.output_png)
    except ValueError as e:
        logger.error(str(e))
        return 1
    plt.close(fig)

    logger.info(f"Saved bar plot to {args.output_png}")
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
