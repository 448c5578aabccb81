"""Shared fixtures: small FASTQ files written to a temporary directory."""
import gzip

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest



def fastq_text(sequences, prefix="read"):
    lines = []
    for i, seq in enumerate(sequences):
        lines.extend([f"@{prefix}{i}", seq, "+", "I" * len(seq)])
    return "\n".join(lines) + "\n"


@pytest.fixture
def write_fastq(tmp_path):
    """Factory writing sequences (or raw text) to a plain or gzip FASTQ file."""

    def _write(sequences=None, name="reads.fastq", compress=False, text=None):
        if text is None:
            text = fastq_text(sequences)
        path = tmp_path / name
        if compress:
            with gzip.open(path, "wt") as f:
                f.write(text)
        else:
            path.write_text(text)
        return path

    return _write


@pytest.fixture
def ten_reads():
    """Ten reads, each a distinct homopolymer-rich sequence."""
    bases = "ACGT"
    return [bases[i % 4] * (20 + i) + "ACGTACGTAC" for i in range(10)]


@pytest.fixture
def corrupt_gzip_fastq(tmp_path):
    """Gzip FASTQ with an intact header and damaged deflate data."""
    rng = np.random.default_rng(11)
    reads = ["".join(rng.choice(list("ACGT"), size=120)) for _ in range(200)]
    data = bytearray(gzip.compress(fastq_text(reads).encode()))
    for i in range(10, 200):
        data[i] ^= 0x55
    path = tmp_path / "corrupt.fastq.gz"
    path.write_bytes(bytes(data))
    return path
