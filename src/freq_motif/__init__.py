"""
freq-motif-fastq: motif and low-complexity frequency analysis of FASTQ reads.

For a sampled subset of the reads of a (optionally gzip-compressed) FASTQ
file, this package measures how often each dinucleotide, each trinucleotide
and long single-base runs dominate a fixed window of the read, and reports
the percentage of reads that reach a user-chosen threshold for each of these
81 categories.

Modules
-------
motifs
    Closed enumeration of the 81 counted categories.
window
    Selection of the analysis window of a read.
counter
    Per-window k-mer frequencies, low-complexity score and thresholding.
fastq
    Lazy plain/gzip FASTQ reader and its error types.
sampling
    Skip/max-reads loop feeding analyzed reads into the aggregate.
aggregate
    Run-scoped counters and their conversion to percentages.
table
    CSV writing and reading of the proportion table.
plots
    Bar plot of the proportion table.
pipeline
    Configuration and end-to-end analysis.
cli
    ``freq-motif-fastq`` command-line entry point.

Example
-------
>>> import freq_motif as fm
>>> config = fm.AnalysisConfig("reads.fastq.gz", max_reads=50_000, ratio=15, skip=0)
>>> analysis = fm.run_analysis(config)
>>> analysis.proportions_df.head()
"""

__version__ = "0.1.0"

# aggregate
from .aggregate import (
    AggregateState,
    EmptyAnalysisWarning,
)

# counter
from .counter import (
    analyze_window,
    dinucleotide_frequencies,
    exceeds_threshold,
    kmer_counts,
    low_complexity_score,
    max_run_length,
    motif_frequencies,
    trinucleotide_frequencies,
)

# fastq
from .fastq import (
    FASTQParseError,
    FastqReader,
    FastqRecord,
    RecordParseError,
    SourceOpenError,
    SourceReadError,
    iter_sequences,
    open_fastq,
)

# motifs
from .motifs import (
    MOTIF_KINDS,
    MOTIF_NAMES,
    MotifClass,
    MotifKind,
    motif_index,
)

# pipeline
from .pipeline import (
    AnalysisConfig,
    MotifFrequencyAnalysis,
    run_analysis,
)

# plots
from .plots import (
    motif_barplot,
)

# sampling
from .sampling import (
    SamplingController,
)

# table
from .table import (
    read_table,
    sort_table,
    write_table,
)

# window
from .window import (
    extract_window,
    window_bounds,
)

__all__ = [
    # aggregate
    "AggregateState",
    "EmptyAnalysisWarning",
    # counter
    "analyze_window",
    "dinucleotide_frequencies",
    "exceeds_threshold",
    "kmer_counts",
    "low_complexity_score",
    "max_run_length",
    "motif_frequencies",
    "trinucleotide_frequencies",
    # fastq
    "FASTQParseError",
    "FastqReader",
    "FastqRecord",
    "RecordParseError",
    "SourceOpenError",
    "SourceReadError",
    "iter_sequences",
    "open_fastq",
    # motifs
    "MOTIF_KINDS",
    "MOTIF_NAMES",
    "MotifClass",
    "MotifKind",
    "motif_index",
    # pipeline
    "AnalysisConfig",
    "MotifFrequencyAnalysis",
    "run_analysis",
    # plots
    "motif_barplot",
    # sampling
    "SamplingController",
    # table
    "read_table",
    "sort_table",
    "write_table",
    # window
    "extract_window",
    "window_bounds",
]
