"""
End-to-end motif frequency analysis of one FASTQ file.

Ties the read source, sampling controller and aggregator together, and
writes the proportion table and its bar plot.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from typing import Optional, Union

import matplotlib.pyplot as plt
import pandas as pd

from .aggregate import AggregateState
from .constants import (
    DEFAULT_MAX_READS,
    DEFAULT_RATIO,
    DEFAULT_SKIP,
    MOTIF_COL,
    OUTPUT_CSV,
    OUTPUT_DIR_PREFIX,
    OUTPUT_PLOT,
    PROPORTION_COL,
)
from .fastq import FastqReader
from .plots import motif_barplot
from .sampling import SamplingController
from .table import plot_rows, write_table

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisConfig:
    """
    Parameters of one analysis run.

    Attributes
    ----------
    input_path : Path
        Plain or gzip-compressed FASTQ file.
    output_dir : Path or None
        Directory for results. If None, a unique ``freq_motif_<uuid>``
        directory is created in the working directory.
    max_reads : int
        Maximum number of reads to analyze after the skip offset.
    ratio : float
        Threshold in percent, in ``[0, 100]``.
    skip : int
        Number of initial reads to skip.
    plot : bool
        Whether to render the bar plot next to the CSV.
    """
    input_path: Path
    output_dir: Optional[Path] = None
    max_reads: int = DEFAULT_MAX_READS
    ratio: float = DEFAULT_RATIO
    skip: int = DEFAULT_SKIP
    plot: bool = True

    def __post_init__(self):
        # Normalize paths
        object.__setattr__(self, "input_path", Path(self.input_path))
        if self.output_dir is not None:
            object.__setattr__(self, "output_dir", Path(self.output_dir))

        if self.max_reads < 0:
            raise ValueError("max_reads must be non-negative")
        if self.skip < 0:
            raise ValueError("skip must be non-negative")
        if not 0.0 <= float(self.ratio) <= 100.0:
            raise ValueError(f"ratio must be a percentage in [0, 100], got {self.ratio}")

    def resolve_output_dir(self) -> Path:
        """Output directory, generating a unique one if none was given."""
        if self.output_dir is not None:
            return self.output_dir
        return Path.cwd() / f"{OUTPUT_DIR_PREFIX}{uuid.uuid4()}"


class MotifFrequencyAnalysis:
    """
    Motif and low-complexity frequency analysis of a FASTQ file.

    Parameters
    ----------
    config : AnalysisConfig
        Run parameters.

    Attributes
    ----------
    state : AggregateState
        Counters of the last :meth:`read`.
    proportions_df : pd.DataFrame
        Finalized ``Motif, Proportion`` table after calling :meth:`read`,
        in canonical category order.

    Examples
    --------
    >>> analysis = MotifFrequencyAnalysis(AnalysisConfig("reads.fastq.gz", skip=0))
    >>> analysis.read()
    >>> analysis.serialize("results")
    >>> analysis.proportions_df.shape
    (81, 2)
    """

    def __init__(self, config: AnalysisConfig):
        self.config = config
        self.state = AggregateState()
        self.proportions_df = pd.DataFrame()

    @property
    def empty(self) -> bool:
        """True if the last run analyzed no read."""
        return self.state.empty

    def read(self) -> pd.DataFrame:
        """
        Sample the input and compute the proportion table.

        Returns
        -------
        pd.DataFrame
            The finalized table, also stored in ``proportions_df``.

        Raises
        ------
        SourceOpenError
            If the input cannot be opened; nothing has been counted.
        SourceReadError
            If the input fails mid-stream.
        """
        cfg = self.config
        controller = SamplingController(
            skip=cfg.skip,
            max_reads=cfg.max_reads,
            ratio=cfg.ratio,
        )

        state = AggregateState()
        with FastqReader(cfg.input_path) as reader:
            controller.run(reader, state)

        self.state = state
        self.proportions_df = state.finalize()
        return self.proportions_df

    def serialize(
        self,
        results_path: Optional[Union[PathLike, str]] = None,
    ) -> Path:
        """
        Save the table (and plot) to disk.

        Parameters
        ----------
        results_path : PathLike or str, optional
            Directory to save results. Defaults to
            :meth:`AnalysisConfig.resolve_output_dir`.

        Returns
        -------
        Path
            The results directory.
        """
        if not self.state.finalized:
            raise RuntimeError("read() must be called before serialize()")

        if results_path is None:
            results_path = self.config.resolve_output_dir()
        results_path = Path(results_path)

        # The figure is rendered before anything touches the disk
        fig = None
        if self.config.plot:
            if plot_rows(self.proportions_df).empty:
                logger.warning("No motif with a nonzero proportion; skipping bar plot")
            else:
                fig, _ = motif_barplot(self.proportions_df, self.config.ratio)

        created = not results_path.exists()
        written = []
        try:
            results_path.mkdir(parents=True, exist_ok=True)
            csv_path = results_path / OUTPUT_CSV
            written.append(csv_path)
            write_table(self.proportions_df, csv_path)
            if fig is not None:
                plot_path = results_path / OUTPUT_PLOT
                written.append(plot_path)
                fig.savefig(plot_path, dpi=100, bbox_inches="tight", facecolor="white")
                logger.info(f"Saved bar plot to {plot_path}")
        except Exception:
            logger.error(f"Failed to write results to {results_path}; removing partial outputs")
            for path in written:
                path.unlink(missing_ok=True)
            if created and results_path.is_dir() and not any(results_path.iterdir()):
                results_path.rmdir()
            raise
        finally:
            if fig is not None:
                plt.close(fig)

        logger.info(f"Results saved to {results_path}")
        return results_path

    def print_summary(self) -> None:
        """Print a summary of the run."""
        print(f"Input: {self.config.input_path}")
        print(f"Reads skipped: {self.state.reads_skipped:,}")
        print(f"Reads malformed: {self.state.reads_malformed:,}")
        print(f"Reads analyzed: {self.state.reads_analyzed:,}")
        if len(self.proportions_df) > 0:
            top = self.proportions_df.sort_values(PROPORTION_COL, ascending=False).head(5)
            for _, row in top.iterrows():
                print(f"  {row[MOTIF_COL]:<14} {row[PROPORTION_COL]:.4f}%")


def run_analysis(
    config: AnalysisConfig,
    serialize: bool = True,
) -> MotifFrequencyAnalysis:
    """
    Run an analysis and optionally write its outputs.

    Parameters
    ----------
    config : AnalysisConfig
        Run parameters.
    serialize : bool, default True
        Write the CSV (and plot) to the output directory.

    Returns
    -------
    MotifFrequencyAnalysis
        The completed analysis.
    """
    analysis = MotifFrequencyAnalysis(config)
    analysis.read()
    if serialize:
        analysis.serialize()
    return analysis
