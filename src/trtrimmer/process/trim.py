"""
Trim terminal repeats from FASTA/FASTQ records.

Each record is classified independently; records with an accepted repeat
lose the trailing repeat copy (unless trimming is disabled) and all kept
records are written as FASTA.
"""

import logging
import sys
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence, TextIO

from trtrimmer.detect.repeats import RepeatResult, find_repeats
from trtrimmer.utils.config import TrimConfig
from trtrimmer.utils.io import SequenceRecord, format_record, iter_records

logger = logging.getLogger(__name__)


@dataclass
class TrimmedRecord:
    record: SequenceRecord
    result: RepeatResult
    output: Optional[str]  # None when the record is excluded
    output_length: int = 0


@dataclass
class TrimStats:
    total: int = 0
    dtr: int = 0
    itr: int = 0
    rejected: int = 0
    written: int = 0

    def update(self, trimmed: TrimmedRecord):
        self.total += 1
        self.dtr += trimmed.result.has_dtr
        self.itr += trimmed.result.has_itr
        self.rejected += trimmed.result.rejected
        self.written += trimmed.output is not None

    def merge(self, other: "TrimStats"):
        self.total += other.total
        self.dtr += other.dtr
        self.itr += other.itr
        self.rejected += other.rejected
        self.written += other.written


def trim_records(records: Iterable[SequenceRecord], config: TrimConfig) -> Iterator[TrimmedRecord]:
    """
    Classify and format records.

    Args:
        records: Input records
        config: Run configuration

    Yields:
        TrimmedRecord per input record, in input order
    """
    out_cfg = config.output
    for record in records:
        result = find_repeats(record.seq, config.repeats)
        logger.debug(
            f"{record.id}: tr={result.repeat_type} tr_length={result.tr_length}"
            + (" (rejected)" if result.rejected else "")
        )
        output_length = len(record)
        if result.has_repeat and not out_cfg.disable_trimming:
            output_length -= result.tr_length
        if out_cfg.exclude_non_tr_seqs and not result.has_repeat:
            output = None
            output_length = 0
        else:
            output = format_record(
                record,
                result,
                include_tr_info=out_cfg.include_tr_info,
                disable_trimming=out_cfg.disable_trimming,
            )
        yield TrimmedRecord(
            record=record,
            result=result,
            output=output,
            output_length=output_length,
        )


def run_trimming(
    inputs: Sequence[str],
    config: TrimConfig,
    out: Optional[TextIO] = None,
    report_file: Optional[str] = None,
) -> TrimStats:
    """
    Trim terminal repeats from one or more inputs.

    Args:
        inputs: Input paths (`-` for stdin), processed in order
        config: Run configuration
        out: Output stream (default: stdout)
        report_file: Optional TSV report path

    Returns:
        Counts over all inputs

    Raises:
        FileNotFoundError: If an input doesn't exist
        ValueError: If an input is empty or malformed
    """
    if out is None:
        out = sys.stdout

    stats = TrimStats()
    report_rows: List[dict] = []

    for path in inputs:
        input_stats = TrimStats()
        for trimmed in trim_records(iter_records(path), config):
            input_stats.update(trimmed)
            if trimmed.output is not None:
                out.write(trimmed.output + "\n")
            if report_file is not None:
                report_rows.append({
                    "input": path,
                    "id": trimmed.record.id,
                    "length": len(trimmed.record),
                    "tr_type": trimmed.result.repeat_type,
                    "tr_length": trimmed.result.tr_length,
                    "rejected": trimmed.result.rejected,
                    "output_length": trimmed.output_length,
                })
        out.flush()

        name = "stdin" if path == "-" else path
        logger.info(
            f"{name}: {input_stats.total} sequences, {input_stats.dtr} DTR, "
            f"{input_stats.itr} ITR, {input_stats.rejected} rejected, "
            f"{input_stats.written} written"
        )
        stats.merge(input_stats)

    if report_file is not None:
        from trtrimmer.process.report import build_report, write_report
        write_report(build_report(report_rows), report_file)

    return stats
