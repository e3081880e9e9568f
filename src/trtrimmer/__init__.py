"""
trtrimmer: terminal repeat identification and trimming.

This package provides tools for:
- Direct terminal repeat (DTR) identification
- Inverted terminal repeat (ITR) identification
- Low-complexity and ambiguous-base filtering of repeats
- Trimming repeats from FASTA/FASTQ records
"""

__version__ = "0.1.0"
__author__ = "trtrimmer Team"
