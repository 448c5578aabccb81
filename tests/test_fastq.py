"""Tests for the FASTQ reader."""
import pytest

from freq_motif.fastq import (
    FASTQParseError,
    FastqReader,
    RecordParseError,
    SourceOpenError,
    iter_sequences,
    open_fastq,
)


@pytest.mark.parametrize("compress", [False, True])
def test_reads_plain_and_gzip(write_fastq, compress):
    path = write_fastq(["ACGT", "GGGA", "T"], name="r.fq", compress=compress)

    with FastqReader(path) as reader:
        records = list(reader)

    assert [r.sequence for r in records] == ["ACGT", "GGGA", "T"]
    assert [r.index for r in records] == [0, 1, 2]
    assert records[0].read_id == "read0"
    for r in records:
        r.validate()


def test_gzip_detected_without_extension(write_fastq):
    path = write_fastq(["ACGT"], name="reads.dat", compress=True)
    assert list(iter_sequences(path)) == ["ACGT"]


def test_missing_file(tmp_path):
    with pytest.raises(SourceOpenError):
        open_fastq(tmp_path / "missing.fastq.gz")


def test_corrupt_gzip_header(tmp_path):
    path = tmp_path / "broken.fastq.gz"
    path.write_bytes(b"\x1f\x8b\x00\x00garbage")
    with pytest.raises(SourceOpenError):
        open_fastq(path)


def test_malformed_records_fail_validation(write_fastq):
    text = (
        "@ok\nACGT\n+\nIIII\n"
        "noheader\nACGT\n+\nIIII\n"
        "@badsep\nACGT\n-\nIIII\n"
        "@badqual\nACGT\n+\nIII\n"
        "@empty\n\n+\n\n"
        "@ok2\nCCCC\n+\nIIII\n"
        "@truncated\nACGT\n"
    )
    path = write_fastq(text=text)

    with FastqReader(path) as reader:
        records = list(reader)

    assert len(records) == 7
    records[0].validate()
    records[5].validate()
    for bad in (1, 2, 3, 4, 6):
        with pytest.raises(RecordParseError) as exc:
            records[bad].validate()
        assert exc.value.index == bad


def test_iter_sequences_skips_malformed(write_fastq):
    text = "@a\nACGT\n+\nIIII\n@b\nAC\n+\nI\n@c\nTTTT\n+\nIIII\n"
    path = write_fastq(text=text)
    assert list(iter_sequences(path)) == ["ACGT", "TTTT"]


def test_crlf_line_endings(write_fastq):
    path = write_fastq(text="@a\r\nACGT\r\n+\r\nIIII\r\n")
    records = list(FastqReader(path))
    assert records[0].sequence == "ACGT"
    records[0].validate()


def test_corrupt_gzip_body(corrupt_gzip_fastq):
    with pytest.raises(FASTQParseError):
        with FastqReader(corrupt_gzip_fastq) as reader:
            list(reader)
