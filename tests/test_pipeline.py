"""End-to-end tests for the analysis pipeline and CLI."""
import warnings

import matplotlib.pyplot as plt
from matplotlib.figure import Figure
import numpy as np
import pandas as pd
import pytest

from freq_motif.aggregate import EmptyAnalysisWarning
from freq_motif.cli import main
from freq_motif.constants import OUTPUT_CSV, OUTPUT_PLOT
from freq_motif.fastq import SourceOpenError
from freq_motif.pipeline import AnalysisConfig, MotifFrequencyAnalysis, run_analysis
from freq_motif.plots import main as barplot_main
from freq_motif.plots import motif_barplot
from freq_motif.table import read_table


@pytest.fixture
def mixed_reads():
    rng = np.random.default_rng(3)
    reads = ["".join(rng.choice(list("ACGT"), size=n)) for n in (60, 150, 400, 1200, 90)]
    reads += ["A" * 200, "CA" * 80, "T" * 5 + "ACG" * 40]
    return reads


@pytest.mark.parametrize("compress", [False, True])
def test_run_writes_outputs(write_fastq, mixed_reads, tmp_path, compress):
    path = write_fastq(mixed_reads, name="in.fastq.gz" if compress else "in.fastq", compress=compress)
    out_dir = tmp_path / "results"

    analysis = run_analysis(AnalysisConfig(path, output_dir=out_dir, skip=0, ratio=15))

    assert analysis.state.reads_analyzed == len(mixed_reads)
    assert (out_dir / OUTPUT_CSV).exists()
    assert (out_dir / OUTPUT_PLOT).exists()

    df = read_table(out_dir / OUTPUT_CSV)
    assert len(df) == 81
    by_motif = df.set_index("Motif")["Proportion"]
    # "A"*200 and "CA"*80 both reach 100% / 50% for their dominant motifs
    assert by_motif["AA"] >= 100 / len(mixed_reads) - 1e-4
    assert by_motif["CA"] >= 100 / len(mixed_reads) - 1e-4
    assert by_motif["LowComplexity"] >= 100 / len(mixed_reads) - 1e-4


def test_rerun_is_identical(write_fastq, mixed_reads):
    path = write_fastq(mixed_reads)
    config = AnalysisConfig(path, skip=1, max_reads=6, ratio=10)

    first = MotifFrequencyAnalysis(config).read()
    second = MotifFrequencyAnalysis(config).read()

    pd.testing.assert_frame_equal(first, second)


def test_increasing_ratio_never_increases_proportions(write_fastq, mixed_reads):
    path = write_fastq(mixed_reads)
    previous = None
    for ratio in (0, 5, 15, 30, 60, 100):
        table = MotifFrequencyAnalysis(AnalysisConfig(path, skip=0, ratio=ratio)).read()
        values = table["Proportion"].to_numpy()
        if previous is not None:
            assert (values <= previous).all()
        previous = values


def test_ratio_100_flags_only_exact_matches(write_fastq):
    path = write_fastq(["G" * 150, "ACGT" * 40])
    table = MotifFrequencyAnalysis(AnalysisConfig(path, skip=0, ratio=100)).read()
    nonzero = table[table["Proportion"] > 0].set_index("Motif")["Proportion"]
    assert nonzero.to_dict() == {"GG": 50.0, "GGG": 50.0, "LowComplexity": 50.0}


def test_skip_past_end_gives_empty_table(write_fastq, mixed_reads, tmp_path):
    path = write_fastq(mixed_reads)
    analysis = MotifFrequencyAnalysis(AnalysisConfig(path, skip=100, plot=True))

    with pytest.warns(EmptyAnalysisWarning):
        table = analysis.read()

    assert analysis.empty
    assert (table["Proportion"] == 0).all()

    out_dir = analysis.serialize(tmp_path / "empty")
    assert len(read_table(out_dir / OUTPUT_CSV)) == 81
    assert not (out_dir / OUTPUT_PLOT).exists()


def test_missing_input_fails_before_output(tmp_path):
    out_dir = tmp_path / "never"
    config = AnalysisConfig(tmp_path / "nope.fastq", output_dir=out_dir)
    with pytest.raises(SourceOpenError):
        run_analysis(config)
    assert not out_dir.exists()


def test_serialize_requires_read(write_fastq, mixed_reads):
    analysis = MotifFrequencyAnalysis(AnalysisConfig(write_fastq(mixed_reads)))
    with pytest.raises(RuntimeError):
        analysis.serialize()


@pytest.mark.parametrize(
    "kwargs",
    [{"ratio": -1}, {"ratio": 150}, {"skip": -1}, {"max_reads": -1}],
)
def test_invalid_config(tmp_path, kwargs):
    with pytest.raises(ValueError):
        AnalysisConfig(tmp_path / "x.fastq", **kwargs)


def test_default_output_dir_is_unique(tmp_path):
    config = AnalysisConfig(tmp_path / "x.fastq")
    a, b = config.resolve_output_dir(), config.resolve_output_dir()
    assert a != b
    assert a.name.startswith("freq_motif_")


def test_cli_success(write_fastq, mixed_reads, tmp_path, capsys):
    path = write_fastq(mixed_reads, compress=True, name="in.fq.gz")
    out_dir = tmp_path / "cli"

    code = main(["-i", str(path), "-o", str(out_dir), "-S", "2", "-m", "4", "-r", "20", "--no_plot"])

    assert code == 0
    assert (out_dir / OUTPUT_CSV).exists()
    assert not (out_dir / OUTPUT_PLOT).exists()
    assert "Reads analyzed: 4" in capsys.readouterr().out


def test_cli_missing_input(tmp_path):
    out_dir = tmp_path / "cli"
    assert main(["-i", str(tmp_path / "missing.fq"), "-o", str(out_dir)]) == 1
    assert not out_dir.exists()


def test_cli_empty_analysis_exits_zero(write_fastq, mixed_reads, tmp_path):
    path = write_fastq(mixed_reads)
    out_dir = tmp_path / "cli"
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", EmptyAnalysisWarning)
        code = main(["-i", str(path), "-o", str(out_dir)])
    assert code == 0
    assert (out_dir / OUTPUT_CSV).exists()


def test_barplot(write_fastq, mixed_reads, tmp_path):
    path = write_fastq(mixed_reads)
    analysis = run_analysis(AnalysisConfig(path, output_dir=tmp_path / "r", skip=0, plot=False))

    fig, ax = motif_barplot(analysis.proportions_df, 15, ylim=5.0)
    labels = [t.get_text() for t in ax.get_xticklabels()]
    assert "LowComplexity" in labels
    assert ax.get_ylim()[1] == 5.0
    plt.close(fig)

    png = tmp_path / "plot.png"
    assert barplot_main([str(tmp_path / "r" / OUTPUT_CSV), str(png), "15"]) == 0
    assert png.exists()


def test_barplot_rejects_all_zero_table():
    table = pd.DataFrame({"Motif": ["AA", "LowComplexity"], "Proportion": [0.0, 0.0]})
    with pytest.raises(ValueError):
        motif_barplot(table, 15)


def test_cli_corrupt_gzip(corrupt_gzip_fastq, tmp_path):
    out_dir = tmp_path / "cli"
    assert main(["-i", str(corrupt_gzip_fastq), "-o", str(out_dir)]) == 1
    assert not out_dir.exists()


def test_barplot_default_clips_axis_and_labels_tall_bars():
    table = pd.DataFrame(
        {"Motif": ["AA", "CAG", "LowComplexity"], "Proportion": [12.5, 0.02, 3.0]}
    )
    fig, ax = motif_barplot(table, 15)

    assert ax.get_ylim()[1] == 0.05
    labels = sorted(t.get_text() for t in ax.texts)
    assert labels == ["12.5000", "3.0000"]
    plt.close(fig)


def test_barplot_fit_ylim():
    table = pd.DataFrame({"Motif": ["AA", "LowComplexity"], "Proportion": [10.0, 2.0]})
    fig, ax = motif_barplot(table, 15, ylim=None)
    assert ax.get_ylim()[1] == pytest.approx(11.0)
    assert len(ax.texts) == 0
    plt.close(fig)


def test_failed_plot_write_leaves_no_outputs(write_fastq, mixed_reads, tmp_path, monkeypatch):
    def fail_savefig(self, *args, **kwargs):
        raise OSError("disk full")

    analysis = MotifFrequencyAnalysis(AnalysisConfig(write_fastq(mixed_reads), skip=0))
    analysis.read()
    monkeypatch.setattr(Figure, "savefig", fail_savefig)

    out_dir = tmp_path / "partial"
    with pytest.raises(OSError):
        analysis.serialize(out_dir)
    assert not out_dir.exists()
