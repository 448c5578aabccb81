"""
Closed enumeration of the motif categories counted per read.

Every category a read can be flagged for is listed once, at import time, in
:data:`MOTIF_KINDS`: the 16 dinucleotides, the 64 trinucleotides and the
single low-complexity category. Per-read flag vectors and aggregate counter
vectors are indexed by position in this tuple, so the set of reported
categories never depends on which motifs a read happens to contain.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from itertools import product
from typing import Dict, Tuple

from .constants import BASES, LOW_COMPLEXITY_LABEL


class MotifClass(Enum):
    """Class of a counted category."""
    DINUCLEOTIDE = 2
    TRINUCLEOTIDE = 3
    LOW_COMPLEXITY = 0


@dataclass(frozen=True)
class MotifKind:
    """
    A single counted category.

    Attributes
    ----------
    motif_class : MotifClass
        Dinucleotide, trinucleotide or low complexity.
    sequence : str
        Literal motif bases; empty for the low-complexity category.
    """
    motif_class: MotifClass
    sequence: str = ""

    def __post_init__(self):
        if self.motif_class is MotifClass.LOW_COMPLEXITY:
            if self.sequence:
                raise ValueError("LowComplexity category takes no sequence")
        elif len(self.sequence) != self.motif_class.value or any(b not in BASES for b in self.sequence):
            raise ValueError(
                f"Invalid {self.motif_class.name.lower()} motif: '{self.sequence}'"
            )

    @property
    def name(self) -> str:
        """Name used in output tables."""
        if self.motif_class is MotifClass.LOW_COMPLEXITY:
            return LOW_COMPLEXITY_LABEL
        return self.sequence

    def __str__(self) -> str:
        return self.name


def _enumerate_kmers(k: int) -> Tuple[str, ...]:
    return tuple("".join(p) for p in product(BASES, repeat=k))


DINUCLEOTIDES = _enumerate_kmers(2)
TRINUCLEOTIDES = _enumerate_kmers(3)

MOTIF_KINDS: Tuple[MotifKind, ...] = (
    tuple(MotifKind(MotifClass.DINUCLEOTIDE, m) for m in DINUCLEOTIDES)
    + tuple(MotifKind(MotifClass.TRINUCLEOTIDE, m) for m in TRINUCLEOTIDES)
    + (MotifKind(MotifClass.LOW_COMPLEXITY),)
)

N_MOTIF_KINDS = len(MOTIF_KINDS)
MOTIF_NAMES: Tuple[str, ...] = tuple(kind.name for kind in MOTIF_KINDS)

DINUCLEOTIDE_SLICE = slice(0, len(DINUCLEOTIDES))
TRINUCLEOTIDE_SLICE = slice(len(DINUCLEOTIDES), len(DINUCLEOTIDES) + len(TRINUCLEOTIDES))
LOW_COMPLEXITY_INDEX = N_MOTIF_KINDS - 1

_NAME_TO_INDEX: Dict[str, int] = {name: i for i, name in enumerate(MOTIF_NAMES)}


def motif_index(name: str) -> int:
    """
    Position of a category in :data:`MOTIF_KINDS`.

    Parameters
    ----------
    name : str
        Motif bases (case-insensitive) or ``"LowComplexity"``.

    Returns
    -------
    int
        Index into per-read and aggregate vectors.

    Raises
    ------
    KeyError
        If ``name`` is not one of the 81 categories.
    """
    if name == LOW_COMPLEXITY_LABEL:
        return LOW_COMPLEXITY_INDEX
    return _NAME_TO_INDEX[name.upper()]


def motif_class_of(name: str) -> MotifClass:
    """Class of a category given its table name."""
    return MOTIF_KINDS[motif_index(name)].motif_class
