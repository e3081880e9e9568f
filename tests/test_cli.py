"""Tests for the trtrim command line."""

import gzip
import io
import logging
import subprocess
import sys

import pytest
from click.testing import CliRunner

from trtrimmer import __version__
from trtrimmer.cli import main
from trtrimmer.utils.logging_utils import level_from_verbosity, setup_logger

FASTA = (
    ">dtr\nACGTTTACGT\n"
    ">itr\nGATTACAGGGGCCCCATTGTAATC\n"
    ">plain\nAAAACCCCGGGGTTTG\n"
)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def fasta_file(tmp_path):
    path = tmp_path / "seqs.fasta"
    path.write_text(FASTA)
    return str(path)


class TestCLI:
    """Test CLI commands."""

    def test_cli_help(self, runner):
        """Test CLI help command."""
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "--enable-itr-identification" in result.output
        assert "--max-low-complexity-frac" in result.output

    def test_cli_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_console_script(self):
        """Test running the command as a module."""
        result = subprocess.run(
            [sys.executable, "-m", "trtrimmer.cli", "--help"], capture_output=True, text=True
        )
        assert result.returncode == 0
        assert "trtrim" in result.stdout


class TestTrimming:
    """Test trimming through the CLI."""

    def test_default_trims_dtr(self, runner, fasta_file):
        result = runner.invoke(main, ["-l", "4", fasta_file])
        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == [
            ">dtr", "ACGTTT",
            ">itr", "GATTACAGGGGCCCCATTGTAATC",
            ">plain", "AAAACCCCGGGGTTTG",
        ]

    def test_itr_with_info(self, runner, fasta_file):
        result = runner.invoke(main, ["-l", "5", "-i", "-a", fasta_file])
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[2:4] == [">itr tr=itr tr_length=7", "GATTACAGGGGCCCCAT"]
        assert lines[4] == ">plain tr=none tr_length=0"

    def test_plain_has_no_repeat(self, runner, fasta_file):
        """A sequence with neither repeat type is untouched with every search enabled."""
        result = runner.invoke(main, ["-l", "4", "-i", "-a", fasta_file])
        assert result.exit_code == 0, result.output
        assert result.output.splitlines()[4:6] == [">plain tr=none tr_length=0", "AAAACCCCGGGGTTTG"]

    def test_exclude_and_keep(self, runner, fasta_file):
        result = runner.invoke(main, ["-l", "4", "-x", "-t", fasta_file])
        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == [">dtr", "ACGTTTACGT"]

    def test_stdin(self, runner):
        result = runner.invoke(main, ["-l", "4"], input=">s\nACGTACGT\n")
        assert result.exit_code == 0, result.output
        assert result.output == ">s\nACGT\n"

    def test_gzip_stdin(self, runner):
        data = gzip.compress(b">s\nACGTACGT\n")
        result = runner.invoke(main, ["-l", "4", "-"], input=data)
        assert result.exit_code == 0, result.output
        assert result.output == ">s\nACGT\n"

    def test_output_file(self, runner, fasta_file, tmp_path):
        out = tmp_path / "trimmed.fasta"
        result = runner.invoke(main, ["-l", "4", "-x", "-o", str(out), fasta_file])
        assert result.exit_code == 0, result.output
        assert out.read_text() == ">dtr\nACGTTT\n"

    def test_low_complexity_rejected(self, runner, tmp_path):
        path = tmp_path / "polya.fasta"
        path.write_text(">polya\n" + "A" * 20 + "CGTGCATGAC" + "A" * 20 + "\n")
        result = runner.invoke(main, ["-l", "10", "-a", str(path)])
        assert result.output.startswith(">polya tr=dtr tr_length=20\n")
        result = runner.invoke(main, ["-l", "10", "-c", "-a", str(path)])
        assert result.exit_code == 0, result.output
        assert result.output.startswith(">polya tr=none tr_length=0\n")

    def test_ambiguous_rejected(self, runner, tmp_path):
        path = tmp_path / "n.fasta"
        path.write_text(">n\nNNNNNACGTCGTNNNNNA\n")
        result = runner.invoke(main, ["-l", "4", "-n", "-a", str(path)])
        assert result.output.splitlines()[0] == ">n tr=none tr_length=0"
        result = runner.invoke(main, ["-l", "4", "-n", "--max-ambiguous-frac", "0.9", "-a", str(path)])
        assert result.output.splitlines()[0] == ">n tr=dtr tr_length=6"

    def test_report(self, runner, fasta_file, tmp_path):
        report = tmp_path / "report.tsv"
        result = runner.invoke(main, ["-l", "4", "--report", str(report), fasta_file])
        assert result.exit_code == 0, result.output
        assert report.read_text().splitlines()[0].split("\t")[:3] == ["input", "id", "length"]


class TestConfigFile:
    """Test YAML configuration."""

    def test_config_values(self, runner, fasta_file, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("repeats:\n  min_length: 4\noutput:\n  exclude_non_tr_seqs: true\n")
        result = runner.invoke(main, ["--config", str(config), fasta_file])
        assert result.exit_code == 0, result.output
        assert result.output == ">dtr\nACGTTT\n"

    def test_command_line_wins(self, runner, fasta_file, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("repeats:\n  min_length: 4\n")
        result = runner.invoke(main, ["--config", str(config), "-l", "30", fasta_file])
        assert result.exit_code == 0, result.output
        assert result.output.splitlines()[:2] == [">dtr", "ACGTTTACGT"]

    def test_bad_config(self, runner, fasta_file, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("repeats:\n  window: 4\n")
        result = runner.invoke(main, ["--config", str(config), fasta_file])
        assert result.exit_code == 2
        assert "window" in result.output


class TestLogging:
    """Test log output."""

    def test_log_file(self, runner, fasta_file, tmp_path):
        """Per-input summaries go to the log file, not to stdout."""
        log_file = tmp_path / "logs" / "trtrim.log"
        result = runner.invoke(main, ["-l", "4", "--log-file", str(log_file), fasta_file])
        assert result.exit_code == 0, result.output
        assert "3 sequences, 1 DTR" in log_file.read_text()
        assert result.output.startswith(">dtr\n")

    def test_verbosity_levels(self):
        assert level_from_verbosity(0) == logging.WARNING
        assert level_from_verbosity(1) == logging.INFO
        assert level_from_verbosity(2) == logging.DEBUG
        assert level_from_verbosity(5) == logging.DEBUG

    def test_setup_logger_stream(self):
        stream = io.StringIO()
        logger = setup_logger(level=logging.INFO, name="trtrimmer.test", stream=stream)
        logger.info("hello")
        logger.debug("hidden")
        assert "INFO - hello" in stream.getvalue()
        assert "hidden" not in stream.getvalue()


class TestErrors:
    """Test argument errors."""

    def test_disable_dtr_requires_itr(self, runner, fasta_file):
        result = runner.invoke(main, ["-d", fasta_file])
        assert result.exit_code == 2
        assert "--disable-dtr-identification requires --enable-itr-identification" in result.output

    def test_fraction_requires_flag(self, runner, fasta_file):
        result = runner.invoke(main, ["--max-ambiguous-frac", "0.2", fasta_file])
        assert result.exit_code == 2
        assert "--ignore-ambiguous" in result.output

    def test_fraction_out_of_range(self, runner, fasta_file):
        result = runner.invoke(main, ["-c", "--max-low-complexity-frac", "1.5", fasta_file])
        assert result.exit_code == 2

    def test_min_length_zero(self, runner, fasta_file):
        result = runner.invoke(main, ["-l", "0", fasta_file])
        assert result.exit_code == 2

    def test_missing_input(self, runner, tmp_path):
        result = runner.invoke(main, [str(tmp_path / "missing.fasta")])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_empty_input(self, runner, tmp_path):
        path = tmp_path / "empty.fasta"
        path.write_text("")
        result = runner.invoke(main, [str(path)])
        assert result.exit_code == 1
        assert "empty" in result.output


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
