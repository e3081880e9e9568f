"""
Record I/O for trtrimmer.

- FASTA/FASTQ reading (plain or gzip, file or stdin)
- FASTA formatting of trimmed records
"""

import gzip
import io
import logging
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Generator, Iterator, List, TextIO

from trtrimmer.utils.config import FASTA_LINE_WIDTH
from trtrimmer.utils.validation import validate_file_exists, validate_not_empty

logger = logging.getLogger(__name__)

STDIN_PATH = "-"
GZIP_MAGIC = b"\x1f\x8b"


@dataclass
class SequenceRecord:
    id: str
    seq: str

    def __len__(self) -> int:
        return len(self.seq)


@contextmanager
def open_input(path: str) -> Generator[TextIO, None, None]:
    """
    Open a sequence source as text.

    `-` reads stdin. Gzip input is recognised by its magic bytes, so
    compressed stdin works as well as `.gz` files.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is empty
    """
    from_stdin = path == STDIN_PATH
    if from_stdin:
        handle = sys.stdin.buffer
    else:
        validate_file_exists(path, "Input file")
        validate_not_empty(path)
        handle = open(path, "rb")

    buffered = handle if isinstance(handle, io.BufferedReader) else io.BufferedReader(handle)
    stream = buffered
    if buffered.peek(2)[:2] == GZIP_MAGIC:
        logger.debug(f"Reading gzip-compressed input: {path}")
        stream = gzip.GzipFile(fileobj=buffered)

    text = io.TextIOWrapper(stream, encoding="utf-8", errors="replace")
    try:
        yield text
    finally:
        if from_stdin:
            # leave sys.stdin open for the caller
            text.detach()
        else:
            text.close()
            handle.close()


def _iter_fasta(lines: Iterator[str], first: str) -> Iterator[SequenceRecord]:
    current_id = first[1:]
    current_seq: List[str] = []
    for line in lines:
        line = line.strip()
        if not line:
            continue
        if line.startswith('>'):
            yield SequenceRecord(id=current_id, seq="".join(current_seq))
            current_id = line[1:]
            current_seq = []
        else:
            current_seq.append(line)
    yield SequenceRecord(id=current_id, seq="".join(current_seq))


def _iter_fastq(lines: Iterator[str], first: str) -> Iterator[SequenceRecord]:
    header = first
    while header is not None:
        if not header.startswith('@'):
            raise ValueError(f"Expected FASTQ header starting with '@', got: {header[:50]}")
        seq = next(lines, None)
        plus = next(lines, None)
        qual = next(lines, None)
        if seq is None or plus is None or qual is None:
            raise ValueError(f"Truncated FASTQ record: {header[1:]}")
        seq, plus, qual = seq.strip(), plus.strip(), qual.strip()
        if not plus.startswith('+'):
            raise ValueError(f"Malformed FASTQ record (missing '+' line): {header[1:]}")
        if len(qual) != len(seq):
            raise ValueError(
                f"FASTQ record {header[1:]} has {len(seq)} bases but {len(qual)} quality values"
            )
        yield SequenceRecord(id=header[1:], seq=seq)

        header = None
        for line in lines:
            line = line.strip()
            if line:
                header = line
                break


def parse_records(handle: TextIO) -> Iterator[SequenceRecord]:
    """
    Parse FASTA or FASTQ records from an open text stream.

    The format is taken from the first non-blank line. Record ids keep the
    whole header line (description included). Sequence case is preserved.

    Raises:
        ValueError: If the stream is empty or not FASTA/FASTQ
    """
    lines = iter(handle)
    first = None
    for line in lines:
        line = line.strip()
        if line:
            first = line
            break

    if first is None:
        raise ValueError("the input is empty")
    if first.startswith('>'):
        yield from _iter_fasta(lines, first)
    elif first.startswith('@'):
        yield from _iter_fastq(lines, first)
    else:
        raise ValueError(
            f"Unrecognised input format (expected '>' or '@', got '{first[0]}')"
        )


def iter_records(path: str) -> Iterator[SequenceRecord]:
    """
    Iterate over the sequence records of a FASTA/FASTQ file or stdin.

    Args:
        path: Input path, or `-` for stdin

    Yields:
        SequenceRecord for each record, in input order
    """
    with open_input(path) as handle:
        yield from parse_records(handle)


def wrap_sequence(seq: str, line_width: int = FASTA_LINE_WIDTH) -> List[str]:
    """Split a sequence into lines of at most `line_width` characters."""
    if not seq:
        return [""]
    return [seq[i:i + line_width] for i in range(0, len(seq), line_width)]


def format_header(record: SequenceRecord, result, include_tr_info: bool = False) -> str:
    if not include_tr_info:
        return f">{record.id}"
    if result.has_dtr:
        return f">{record.id} tr=dtr tr_length={result.tr_length}"
    if result.has_itr:
        return f">{record.id} tr=itr tr_length={result.tr_length}"
    return f">{record.id} tr=none tr_length=0"


def format_record(
    record: SequenceRecord,
    result,
    include_tr_info: bool = False,
    disable_trimming: bool = False,
    line_width: int = FASTA_LINE_WIDTH,
) -> str:
    """
    Format a classified record as FASTA text (no trailing newline).

    The trailing copy of an accepted terminal repeat is removed unless
    trimming is disabled.

    Args:
        record: Input record
        result: RepeatResult for the record
        include_tr_info: Add `tr=<type> tr_length=<n>` to the header
        disable_trimming: Keep the sequence untouched
        line_width: Sequence line width

    Returns:
        Header line and wrapped sequence lines joined by newlines
    """
    seq = record.seq
    if (result.has_dtr or result.has_itr) and not disable_trimming:
        seq = seq[:len(seq) - result.tr_length]
    lines = [format_header(record, result, include_tr_info)]
    lines.extend(wrap_sequence(seq, line_width))
    return "\n".join(lines)
