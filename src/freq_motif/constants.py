"""
Constants for motif frequency analysis of FASTQ reads.

Contains the read windowing parameters, the nucleotide alphabet used to
enumerate motifs, CLI defaults and output file names.
"""

# Analysis window
# Reads up to LONG_THRESHOLD bases are analyzed from their 5' end; longer
# reads are analyzed on the window ending at LONG_WINDOW_END.
WINDOW = 150
LONG_THRESHOLD = 1000
LONG_WINDOW_END = 1000

# Nucleotide alphabet, in canonical enumeration order
BASES = "ACGT"

# Label of the low-complexity category in output tables
LOW_COMPLEXITY_LABEL = "LowComplexity"

# Default run parameters
DEFAULT_MAX_READS = 100_000
DEFAULT_RATIO = 15.0
DEFAULT_SKIP = 10_000

# Log progress every N analyzed reads
PROGRESS_INTERVAL = 10_000

# Bar plot y axis is clipped here; taller bars are labeled
DEFAULT_YLIM = 0.05

# Output files
OUTPUT_CSV = "freq-motif.csv"
OUTPUT_PLOT = "barplot_freq-motif.png"
OUTPUT_DIR_PREFIX = "freq_motif_"

# CSV layout consumed by the plotting step
MOTIF_COL = "Motif"
PROPORTION_COL = "Proportion"
