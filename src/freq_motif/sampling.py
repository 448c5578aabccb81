"""
Sampling of the read stream.

The sampling controller is the only component that knows the global position
of a record in the input. It discards a fixed number of leading records,
analyzes at most ``max_reads`` of the following ones and stops pulling from
the source as soon as that range is consumed, so run time does not depend on
the size of the file beyond the skip offset.
"""
from __future__ import annotations

import logging
from typing import Iterable, Union

import numpy as np

from .aggregate import AggregateState
from .constants import DEFAULT_MAX_READS, DEFAULT_RATIO, DEFAULT_SKIP, PROGRESS_INTERVAL
from .counter import analyze_window
from .fastq import FastqRecord, RecordParseError
from .window import extract_window

logger = logging.getLogger(__name__)


class SamplingController:
    """
    Skip/limit loop feeding records into an :class:`AggregateState`.

    Parameters
    ----------
    skip : int, default DEFAULT_SKIP
        Number of leading records to discard. Skipped records are neither
        validated nor analyzed.
    max_reads : int, default DEFAULT_MAX_READS
        Number of records, after the skip offset, to analyze. Malformed
        records in this range use up a slot but are not analyzed.
    ratio : float or np.ndarray, default DEFAULT_RATIO
        Threshold in percent passed to
        :func:`~freq_motif.counter.analyze_window`.
    progress_interval : int, default PROGRESS_INTERVAL
        Log progress every this many analyzed reads.

    Examples
    --------
    >>> state = AggregateState()
    >>> controller = SamplingController(skip=2, max_reads=3, ratio=15)
    >>> controller.run(records, state)
    >>> state.reads_analyzed
    3
    """

    def __init__(
        self,
        skip: int = DEFAULT_SKIP,
        max_reads: int = DEFAULT_MAX_READS,
        ratio: Union[float, np.ndarray] = DEFAULT_RATIO,
        progress_interval: int = PROGRESS_INTERVAL,
    ):
        if skip < 0:
            raise ValueError("skip must be non-negative")
        if max_reads < 0:
            raise ValueError("max_reads must be non-negative")

        self.skip = skip
        self.max_reads = max_reads
        self.ratio = ratio
        self.progress_interval = progress_interval

    @property
    def stop(self) -> int:
        """Position (exclusive) at which the controller stops reading."""
        return self.skip + self.max_reads

    def run(self, records: Iterable[FastqRecord], state: AggregateState) -> int:
        """
        Consume records and fold the analyzed ones into ``state``.

        Parameters
        ----------
        records : iterable of FastqRecord
            Records in file order.
        state : AggregateState
            Accumulator owned by the caller.

        Returns
        -------
        int
            Number of records consumed from ``records``.
        """
        if self.stop == 0:
            return 0

        logger.info(f"Skipping the first {self.skip} reads...")

        idx = 0
        for record in records:
            if idx < self.skip:
                state.record_skipped()
            else:
                self._analyze(record, state)
            idx += 1

            if idx >= self.stop:
                break

        if idx < self.skip:
            logger.info(f"Input exhausted after {idx} reads, before the skip offset")

        return idx

    def _analyze(self, record: FastqRecord, state: AggregateState) -> None:
        try:
            record.validate()
        except RecordParseError as e:
            logger.debug(f"Skipping record: {e}")
            state.record_malformed()
            return

        window = extract_window(record.sequence)
        state.add(analyze_window(window, self.ratio))

        if self.progress_interval and state.reads_analyzed % self.progress_interval == 0:
            logger.info(f"Processed {state.reads_analyzed} reads...")
