"""
Analysis window selection.

Maps a raw read of arbitrary length to the fixed-length region that is
scanned for motifs. Short reads contribute their 5' end; reads longer than
:data:`~freq_motif.constants.LONG_THRESHOLD` contribute the window ending at
:data:`~freq_motif.constants.LONG_WINDOW_END`, which skips the start of long
reads where adapters and basecalling artifacts concentrate.
"""
from __future__ import annotations

from typing import Tuple

from .constants import LONG_THRESHOLD, LONG_WINDOW_END, WINDOW


def window_bounds(
    length: int,
    window: int = WINDOW,
    long_threshold: int = LONG_THRESHOLD,
    long_window_end: int = LONG_WINDOW_END,
) -> Tuple[int, int]:
    """
    Half-open bounds of the analysis window for a read of given length.

    Parameters
    ----------
    length : int
        Read length in bases. Must be positive.
    window : int, default WINDOW
        Maximum window length.
    long_threshold : int, default LONG_THRESHOLD
        Reads longer than this use the long-read window.
    long_window_end : int, default LONG_WINDOW_END
        End position (exclusive) of the long-read window.

    Returns
    -------
    start, end : int
        0-based, end-exclusive bounds.

    Raises
    ------
    ValueError
        If ``length`` is not positive.

    Examples
    --------
    >>> window_bounds(90)
    (0, 90)
    >>> window_bounds(1000)
    (0, 150)
    >>> window_bounds(25_000)
    (850, 1000)
    """
    if length <= 0:
        raise ValueError("Read length must be positive")

    if length <= long_threshold:
        return 0, min(length, window)
    return long_window_end - window, long_window_end


def extract_window(seq: str) -> str:
    """
    Extract the upper-cased analysis window from a read.

    Parameters
    ----------
    seq : str
        Raw read sequence.

    Returns
    -------
    str
        Window of at most ``WINDOW`` bases. Shorter reads give shorter
        windows; callers divide by the actual window length.
    """
    start, end = window_bounds(len(seq))
    return seq[start:end].upper()
