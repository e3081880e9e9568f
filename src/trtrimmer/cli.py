"""
trtrimmer CLI - trim terminal repeats from sequences.

Usage:
    trtrim [options] [INPUT]...

Records are read from FASTA/FASTQ files (or stdin) and written to stdout
as FASTA.
"""

import logging
import os
import sys

import click
from click.core import ParameterSource

from trtrimmer import __version__
from trtrimmer.utils.config import DEFAULT_MAX_FRACTION, DEFAULT_MIN_LENGTH, TrimConfig
from trtrimmer.utils.logging_utils import level_from_verbosity, setup_logger

logger = logging.getLogger(__name__)

_FRACTION = click.FloatRange(0.0, 1.0)

# option name -> flag it requires
_REQUIRES = {
    "max_low_complexity_frac": "ignore_low_complexity",
    "max_ambiguous_frac": "ignore_ambiguous",
}


def _given(ctx: click.Context, name: str) -> bool:
    """True if the option was set on the command line."""
    return ctx.get_parameter_source(name) not in (
        ParameterSource.DEFAULT,
        ParameterSource.DEFAULT_MAP,
    )


def _flag(name: str) -> str:
    return "--" + name.replace("_", "-")


def build_config(ctx: click.Context, config_file, options: dict) -> TrimConfig:
    """Merge defaults, the YAML config file and explicit command-line options."""
    try:
        config = TrimConfig.from_yaml(config_file) if config_file else TrimConfig()
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="'--config'")

    overrides = {name: value for name, value in options.items() if _given(ctx, name)}
    disable_dtr = overrides.get("disable_dtr_identification", config.repeats.disable_dtr_identification)
    enable_itr = overrides.get("enable_itr_identification", config.repeats.enable_itr_identification)
    if disable_dtr and not enable_itr:
        raise click.UsageError(
            f"{_flag('disable_dtr_identification')} requires {_flag('enable_itr_identification')}"
        )

    try:
        config = config.with_overrides(**overrides)
    except ValueError as e:
        raise click.UsageError(f"Invalid configuration: {e}")

    repeats = config.repeats
    for name, required in _REQUIRES.items():
        if name in overrides and not getattr(repeats, required):
            raise click.UsageError(f"{_flag(name)} requires {_flag(required)}")

    return config


@click.command(context_settings={"help_option_names": ["-h", "--help"], "max_content_width": 79})
@click.version_option(version=__version__, prog_name="trtrimmer")
@click.argument("inputs", nargs=-1, type=click.Path(allow_dash=True, dir_okay=False))
@click.option("-i", "--enable-itr-identification", is_flag=True,
              help="Identify inverted terminal repeats (ITRs) from sequences")
@click.option("-d", "--disable-dtr-identification", is_flag=True,
              help="Disable identification of direct terminal repeats (DTRs) "
                   "(requires --enable-itr-identification)")
@click.option("-l", "--min-length", type=click.IntRange(min=1), default=DEFAULT_MIN_LENGTH,
              show_default=True, help="Minimum length of terminal repeat")
@click.option("-c", "--ignore-low-complexity", is_flag=True,
              help="Ignore terminal repeats that contain a high proportion of "
                   "low complexity sequences")
@click.option("--max-low-complexity-frac", type=_FRACTION, default=DEFAULT_MAX_FRACTION,
              show_default=True,
              help="Maximum fraction of the terminal repeat length that is "
                   "low-complexity sequence (requires --ignore-low-complexity)")
@click.option("-n", "--ignore-ambiguous", is_flag=True,
              help="Ignore terminal repeats that contain a high proportion of "
                   "ambiguous bases (e.g. 'N')")
@click.option("--max-ambiguous-frac", type=_FRACTION, default=DEFAULT_MAX_FRACTION,
              show_default=True,
              help="Maximum fraction of the terminal repeat length that is "
                   "ambiguous bases (requires --ignore-ambiguous)")
@click.option("-x", "--exclude-non-tr-seqs", is_flag=True,
              help="Retain only the sequences for which terminal repeats were identified")
@click.option("-a", "--include-tr-info", is_flag=True,
              help="Add terminal repeat information to the sequence headers "
                   "(e.g. 'tr=dtr tr_length=55')")
@click.option("-t", "--disable-trimming", is_flag=True,
              help="Disable trimming of terminal repeats from sequences")
@click.option("-o", "--output", type=click.File("w"), default="-",
              help="Output FASTA file (default: stdout)")
@click.option("--config", "config_file", type=click.Path(exists=True, dir_okay=False),
              help="YAML config file (command-line options take precedence)")
@click.option("--report", "report_file", type=click.Path(dir_okay=False),
              help="Write a per-sequence TSV report")
@click.option("--log-file", type=click.Path(dir_okay=False),
              help="Also write the log (INFO and above) to this file")
@click.option("-v", "--verbose", count=True,
              help="Log progress to stderr (-vv for every sequence)")
@click.pass_context
def main(ctx, inputs, output, config_file, report_file, log_file, verbose, **options):
    """Trim terminal repeats from sequences in FASTA/FASTQ files.

    INPUTS may be plain or gzip-compressed. Use '-' (the default) for stdin.

    The trailing copy of each direct (DTR) or inverted (ITR) terminal repeat
    is removed; use --disable-trimming with --include-tr-info or
    --exclude-non-tr-seqs to only report repeats.
    """
    setup_logger(level=level_from_verbosity(verbose), log_file=log_file)

    config = build_config(ctx, config_file, options)
    logger.debug(f"Configuration: {config.to_dict()}")

    from trtrimmer.process.trim import run_trimming
    try:
        run_trimming(list(inputs) or ["-"], config, out=output, report_file=report_file)
    except BrokenPipeError:
        # reader went away (e.g. piped into `head`)
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        sys.exit(0)
    except (FileNotFoundError, ValueError) as e:
        raise click.ClickException(str(e))


if __name__ == "__main__":
    main()
