"""
Per-window motif counting.

Computes, for one analysis window, the frequency (in percent) of every
dinucleotide and trinucleotide and the low-complexity score, then applies the
ratio threshold to produce the per-read flag vector consumed by
:class:`~freq_motif.aggregate.AggregateState`.

Functions
---------
encode_window
    Map bases to integer codes.
kmer_counts
    Overlapping k-mer occurrence counts.
dinucleotide_frequencies, trinucleotide_frequencies
    Per-motif frequencies as percentages of window positions.
max_run_length, low_complexity_score
    Longest homopolymer run and its share of the window.
motif_frequencies
    The full 81-entry frequency vector.
exceeds_threshold
    The ratio rule shared by all categories.
analyze_window
    Frequencies followed by thresholding.
"""
from __future__ import annotations

from typing import Union

import numpy as np

from .constants import BASES
from .motifs import (
    DINUCLEOTIDE_SLICE,
    LOW_COMPLEXITY_INDEX,
    N_MOTIF_KINDS,
    TRINUCLEOTIDE_SLICE,
)

# Byte -> base code lookup; anything outside ACGT (either case) is -1
_CODE_TABLE = np.full(256, -1, dtype=np.int8)
for _code, _base in enumerate(BASES):
    _CODE_TABLE[ord(_base)] = _code
    _CODE_TABLE[ord(_base.lower())] = _code


def _as_bytes(window: str) -> np.ndarray:
    return np.frombuffer(window.encode("ascii", errors="replace"), dtype=np.uint8)


def encode_window(window: str) -> np.ndarray:
    """
    Encode a window as base codes.

    Parameters
    ----------
    window : str
        Nucleotide sequence.

    Returns
    -------
    np.ndarray
        int8 array of the same length, ``A=0, C=1, G=2, T=3`` and ``-1`` for
        any other symbol (``N``, IUPAC codes, ...).
    """
    return _CODE_TABLE[_as_bytes(window)]


def kmer_counts(window: Union[str, np.ndarray], k: int) -> np.ndarray:
    """
    Count overlapping k-mers in a window.

    Every start position ``0 .. W-k`` is scanned, so ``"AAA"`` contains
    ``"AA"`` twice. k-mers containing a symbol outside ACGT match none of the
    enumerated motifs and are not counted.

    Parameters
    ----------
    window : str or np.ndarray
        Sequence, or codes from :func:`encode_window`.
    k : int
        Motif length.

    Returns
    -------
    np.ndarray
        int64 counts of length ``4**k`` in lexicographic ACGT order. For a
        window of only ACGT bases, the counts sum to ``max(W-k+1, 0)``.

    Examples
    --------
    >>> counts = kmer_counts("AAAATT", 2)
    >>> int(counts[0]), int(counts[3]), int(counts[15])  # AA, AT, TT
    (3, 1, 1)
    """
    if k <= 0:
        raise ValueError("K must be positive")

    codes = encode_window(window) if isinstance(window, str) else np.asarray(window)
    n_kmers = codes.size - k + 1
    if n_kmers <= 0:
        return np.zeros(4 ** k, dtype=np.int64)

    index = np.zeros(n_kmers, dtype=np.int64)
    valid = np.ones(n_kmers, dtype=bool)
    for offset in range(k):
        part = codes[offset:offset + n_kmers]
        index = index * 4 + part
        valid &= part >= 0

    return np.bincount(index[valid], minlength=4 ** k).astype(np.int64)


def dinucleotide_frequencies(window: str) -> np.ndarray:
    """
    Dinucleotide frequencies in percent of the ``W-1`` adjacent pairs.

    All zero when the window has fewer than two bases.
    """
    n_pairs = len(window) - 1
    if n_pairs < 1:
        return np.zeros(16, dtype=float)
    return kmer_counts(window, 2) * 100.0 / n_pairs


def trinucleotide_frequencies(window: str) -> np.ndarray:
    """
    Trinucleotide frequencies in percent of the ``W-2`` adjacent triples.

    All zero when the window has fewer than three bases.
    """
    n_triples = len(window) - 2
    if n_triples < 1:
        return np.zeros(64, dtype=float)
    return kmer_counts(window, 3) * 100.0 / n_triples


def max_run_length(window: str) -> int:
    """
    Length of the longest run of one repeated symbol.

    Examples
    --------
    >>> max_run_length("CAAAATT")
    4
    """
    symbols = _as_bytes(window.upper())
    if symbols.size == 0:
        return 0

    breaks = np.flatnonzero(symbols[1:] != symbols[:-1]) + 1
    edges = np.concatenate(([0], breaks, [symbols.size]))
    return int(np.diff(edges).max())


def low_complexity_score(window: str) -> float:
    """
    Longest single-base run as a percentage of the window length.

    Raises
    ------
    ValueError
        If the window is empty.
    """
    if len(window) == 0:
        raise ValueError("Window must have at least one base")
    return max_run_length(window) * 100.0 / len(window)


def motif_frequencies(window: str) -> np.ndarray:
    """
    Frequencies for all 81 categories of one window.

    Parameters
    ----------
    window : str
        Analysis window, at least one base.

    Returns
    -------
    np.ndarray
        float vector indexed like :data:`~freq_motif.motifs.MOTIF_KINDS`,
        values in percent.
    """
    if len(window) == 0:
        raise ValueError("Window must have at least one base")

    freqs = np.zeros(N_MOTIF_KINDS, dtype=float)
    freqs[DINUCLEOTIDE_SLICE] = dinucleotide_frequencies(window)
    freqs[TRINUCLEOTIDE_SLICE] = trinucleotide_frequencies(window)
    freqs[LOW_COMPLEXITY_INDEX] = low_complexity_score(window)
    return freqs


def exceeds_threshold(
    frequencies: np.ndarray,
    ratio: Union[float, np.ndarray],
) -> np.ndarray:
    """
    Flag categories whose frequency reaches the ratio threshold.

    Parameters
    ----------
    frequencies : np.ndarray
        Per-category frequencies in percent.
    ratio : float or np.ndarray
        Threshold in percent; a scalar applies to every category, an array
        of the same shape gives one threshold per category.

    Returns
    -------
    np.ndarray
        Boolean vector, ``frequency >= ratio``.
    """
    return np.asarray(frequencies, dtype=float) >= ratio


def analyze_window(window: str, ratio: Union[float, np.ndarray]) -> np.ndarray:
    """
    Per-read flag vector for one window.

    Parameters
    ----------
    window : str
        Analysis window from :func:`~freq_motif.window.extract_window`.
    ratio : float or np.ndarray
        Threshold in percent.

    Returns
    -------
    np.ndarray
        81-entry boolean vector; ``True`` where the read counts toward the
        category.
    """
    return exceeds_threshold(motif_frequencies(window), ratio)
