"""
Run-scoped accumulation of per-read motif flags.

Provides the counter state that the sampling loop folds every analyzed read
into, and its conversion to the final proportion table.
"""
from __future__ import annotations

import logging
import warnings
from typing import Optional

import numpy as np
import pandas as pd

from .constants import MOTIF_COL, PROPORTION_COL
from .motifs import MOTIF_NAMES, N_MOTIF_KINDS

logger = logging.getLogger(__name__)


class EmptyAnalysisWarning(UserWarning):
    """Issued when no read was analyzed and the proportion table is all zeros."""
    pass


class AggregateState:
    """
    Counters accumulated over one analysis run.

    Holds one integer counter per motif category (indexed like
    :data:`~freq_motif.motifs.MOTIF_KINDS`) plus the number of skipped,
    malformed and analyzed reads. A state has a single owner; partial states
    built by independent workers are combined with :meth:`merge`.

    Attributes
    ----------
    counts : np.ndarray
        int64 vector of length 81; reads that reached the threshold for
        each category.
    reads_skipped : int
        Records discarded by the skip offset.
    reads_malformed : int
        Records inside the analysis range that failed validation.
    reads_analyzed : int
        Records that were windowed, counted and added.

    Examples
    --------
    >>> state = AggregateState()
    >>> flags = np.zeros(81, dtype=bool)
    >>> flags[0] = True
    >>> state.add(flags)
    >>> state.add(flags)
    >>> table = state.finalize()
    >>> table.loc[0, "Proportion"]
    100.0
    """

    def __init__(self):
        self.counts = np.zeros(N_MOTIF_KINDS, dtype=np.int64)
        self.reads_skipped = 0
        self.reads_malformed = 0
        self.reads_analyzed = 0
        self._table: Optional[pd.DataFrame] = None

    @property
    def finalized(self) -> bool:
        """Whether :meth:`finalize` has been called."""
        return self._table is not None

    @property
    def empty(self) -> bool:
        """True when no read has been analyzed."""
        return self.reads_analyzed == 0

    def _check_open(self) -> None:
        if self.finalized:
            raise RuntimeError("AggregateState has already been finalized")

    def add(self, flags: np.ndarray) -> None:
        """
        Fold one analyzed read into the counters.

        Parameters
        ----------
        flags : np.ndarray
            81-entry boolean vector from
            :func:`~freq_motif.counter.analyze_window`.
        """
        self._check_open()
        flags = np.asarray(flags, dtype=bool)
        if flags.shape != (N_MOTIF_KINDS,):
            raise ValueError(
                f"Expected {N_MOTIF_KINDS} flags per read, got shape {flags.shape}"
            )
        self.counts += flags
        self.reads_analyzed += 1

    def record_skipped(self) -> None:
        self._check_open()
        self.reads_skipped += 1

    def record_malformed(self) -> None:
        self._check_open()
        self.reads_malformed += 1

    def merge(self, other: "AggregateState") -> None:
        """
        Add the counters of another partial state into this one.

        Counters are plain sums, so partial states can be merged in any
        order once all of them are complete.
        """
        self._check_open()
        if other.finalized:
            raise RuntimeError("Cannot merge a finalized AggregateState")
        self.counts += other.counts
        self.reads_skipped += other.reads_skipped
        self.reads_malformed += other.reads_malformed
        self.reads_analyzed += other.reads_analyzed

    def proportions(self) -> np.ndarray:
        """
        Percentage of analyzed reads flagged for each category.

        Returns zeros when no read was analyzed.
        """
        if self.reads_analyzed == 0:
            return np.zeros(N_MOTIF_KINDS, dtype=float)
        return self.counts * 100.0 / self.reads_analyzed

    def finalize(self) -> pd.DataFrame:
        """
        Convert the counters to the proportion table.

        May be called once per run; the state is read-only afterwards.

        Returns
        -------
        pd.DataFrame
            81 rows in canonical category order with columns:
            - Motif: motif bases, or ``LowComplexity``
            - Proportion: percentage of analyzed reads flagged

        Warns
        -----
        EmptyAnalysisWarning
            If no read was analyzed; the table is then all zeros.
        """
        self._check_open()

        if self.empty:
            msg = (
                f"No reads were analyzed ({self.reads_skipped} skipped, "
                f"{self.reads_malformed} malformed); reporting an all-zero table"
            )
            logger.warning(msg)
            warnings.warn(msg, EmptyAnalysisWarning)

        self._table = pd.DataFrame(
            {
                MOTIF_COL: list(MOTIF_NAMES),
                PROPORTION_COL: self.proportions(),
            }
        )
        logger.info(f"Total reads processed: {self.reads_analyzed}")
        return self._table.copy()

    @property
    def table(self) -> pd.DataFrame:
        """The finalized table; raises if :meth:`finalize` was not called."""
        if self._table is None:
            raise RuntimeError("AggregateState has not been finalized")
        return self._table.copy()

    def __repr__(self) -> str:
        return (
            f"AggregateState(analyzed={self.reads_analyzed}, "
            f"skipped={self.reads_skipped}, malformed={self.reads_malformed})"
        )
