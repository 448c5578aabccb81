"""
FASTQ reading for motif frequency analysis.

Provides a lazy, 4-line-framed reader over plain or gzip-compressed FASTQ
files. Compression is detected from the file's magic bytes rather than its
extension. Opening failures are fatal; a malformed record is yielded like any
other record and only fails when validated, so the caller decides whether to
skip it.
"""
from __future__ import annotations

import gzip
import logging
import zlib
from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from typing import Iterator, Optional, TextIO, Union

logger = logging.getLogger(__name__)

GZIP_MAGIC = b"\x1f\x8b"


class FASTQParseError(Exception):
    """Raised when FASTQ parsing encounters an error."""
    pass


class SourceOpenError(FASTQParseError):
    """Raised when the input file cannot be opened or decompressed."""
    pass


class SourceReadError(FASTQParseError):
    """Raised when the input stream fails after it was opened."""
    pass


class RecordParseError(FASTQParseError):
    """Raised when a single 4-line record is malformed."""

    def __init__(self, index: int, reason: str):
        self.index = index
        self.reason = reason
        super().__init__(f"Malformed FASTQ record #{index}: {reason}")


@dataclass(frozen=True)
class FastqRecord:
    """
    One 4-line FASTQ record.

    Attributes
    ----------
    header : str
        Header line, expected to start with ``@``.
    sequence : str
        Nucleotide sequence.
    separator : str
        Separator line, expected to start with ``+``.
    quality : str
        Quality string, same length as ``sequence``.
    index : int
        0-based position of the record in the file.
    """
    header: str
    sequence: str
    separator: str
    quality: str
    index: int

    @property
    def read_id(self) -> str:
        """Header without the leading ``@``."""
        return self.header[1:]

    def validate(self) -> "FastqRecord":
        """
        Check the record's framing.

        Returns
        -------
        FastqRecord
            ``self``, for chaining.

        Raises
        ------
        RecordParseError
            If the header or separator marker is missing, the sequence is
            empty, or sequence and quality lengths differ.
        """
        if not self.header.startswith("@"):
            raise RecordParseError(self.index, "header does not start with '@'")
        if not self.separator.startswith("+"):
            raise RecordParseError(self.index, "separator does not start with '+'")
        if len(self.sequence) == 0:
            raise RecordParseError(self.index, "empty sequence")
        if len(self.sequence) != len(self.quality):
            raise RecordParseError(
                self.index,
                f"sequence length {len(self.sequence)} != quality length {len(self.quality)}",
            )
        return self


def is_gzip(path: Union[PathLike, str]) -> bool:
    """Check whether a file starts with the gzip magic bytes."""
    with open(path, "rb") as f:
        return f.read(2) == GZIP_MAGIC


def open_fastq(path: Union[PathLike, str]) -> TextIO:
    """
    Open a FASTQ file for text reading, decompressing gzip transparently.

    Parameters
    ----------
    path : PathLike or str
        Plain or gzip-compressed FASTQ file.

    Returns
    -------
    TextIO
        Text handle positioned at the first line.

    Raises
    ------
    SourceOpenError
        If the file is missing or unreadable, or its gzip header is corrupt.
    """
    path = Path(path)
    if not path.is_file():
        raise SourceOpenError(f"FASTQ file does not exist: {path}")

    try:
        if is_gzip(path):
            handle = gzip.open(path, "rt", errors="replace")
            try:
                # Forces the gzip header to be parsed now, not on first read
                handle.buffer.peek(1)
            except (OSError, EOFError, zlib.error):
                handle.close()
                raise
            logger.debug(f"Opened gzip-compressed FASTQ: {path}")
        else:
            handle = open(path, "r", errors="replace")
            logger.debug(f"Opened plain FASTQ: {path}")
    except (OSError, EOFError, zlib.error) as e:
        raise SourceOpenError(f"Cannot open FASTQ file {path}: {e}") from e

    return handle


class FastqReader:
    """
    Lazy reader over the records of a FASTQ file.

    Records are framed strictly every 4 lines. A trailing partial record is
    yielded with the missing lines empty, so it fails validation instead of
    being silently dropped.

    Parameters
    ----------
    path : PathLike or str
        Plain or gzip-compressed FASTQ file.

    Examples
    --------
    >>> with FastqReader("reads.fastq.gz") as reader:
    ...     for record in reader:
    ...         print(record.read_id, len(record.sequence))
    """

    def __init__(self, path: Union[PathLike, str]):
        self.path = Path(path)
        self._handle: Optional[TextIO] = None

    def open(self) -> "FastqReader":
        """Open the underlying file; raises :class:`SourceOpenError`."""
        if self._handle is None:
            logger.info(f"Opening the input file: {self.path}")
            self._handle = open_fastq(self.path)
        return self

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def __enter__(self) -> "FastqReader":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __iter__(self) -> Iterator[FastqRecord]:
        self.open()
        return self._records()

    def _next_line(self) -> Optional[str]:
        try:
            line = self._handle.readline()
        except (OSError, EOFError, UnicodeDecodeError, zlib.error) as e:
            raise SourceReadError(f"Error reading {self.path}: {e}") from e
        if line == "":
            return None
        return line.rstrip("\r\n")

    def _records(self) -> Iterator[FastqRecord]:
        index = 0
        while True:
            header = self._next_line()
            if header is None:
                return

            lines = [self._next_line() for _ in range(3)]
            sequence, separator, quality = (line if line is not None else "" for line in lines)

            yield FastqRecord(
                header=header,
                sequence=sequence,
                separator=separator,
                quality=quality,
                index=index,
            )
            index += 1

            if lines[-1] is None:
                return


def iter_sequences(path: Union[PathLike, str]) -> Iterator[str]:
    """
    Yield the sequences of the valid records of a FASTQ file.

    Malformed records are skipped with a debug log message.
    """
    with FastqReader(path) as reader:
        for record in reader:
            try:
                yield record.validate().sequence
            except RecordParseError as e:
                logger.debug(str(e))
