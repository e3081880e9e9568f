"""
Sequence utility functions.

Reverse complement and normalization of nucleotide strings.
"""

from typing import Dict

_COMPLEMENT: Dict[str, str] = {
    'A': 'T', 'T': 'A', 'G': 'C', 'C': 'G',
    'a': 't', 't': 'a', 'g': 'c', 'c': 'g',
    'N': 'N', 'n': 'n',
    'U': 'A', 'u': 'a',
    'R': 'Y', 'Y': 'R', 'S': 'S', 'W': 'W',
    'K': 'M', 'M': 'K', 'B': 'V', 'V': 'B',
    'D': 'H', 'H': 'D',
    'r': 'y', 'y': 'r', 's': 's', 'w': 'w',
    'k': 'm', 'm': 'k', 'b': 'v', 'v': 'b',
    'd': 'h', 'h': 'd',
}

_CANONICAL_BASES = frozenset('ACGTN')

GAP = '-'
_GAP_SYMBOLS = frozenset('-.~')

_ASCII_UPPER = str.maketrans(
    "abcdefghijklmnopqrstuvwxyz", "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
)


def complement_base(base: str) -> str:
    """Complement a single base, keeping its case. Unknown symbols become 'N'."""
    return _COMPLEMENT.get(base, 'N')


def reverse_complement(seq: str) -> str:
    """
    Reverse complement a nucleotide sequence.

    Case is preserved base by base, IUPAC ambiguity codes are complemented
    and any other symbol is replaced by 'N'.

    Args:
        seq: Nucleotide sequence

    Returns:
        Reverse complement of the same length
    """
    return "".join(complement_base(base) for base in reversed(seq))


def normalize(seq: str, complement: bool = False) -> str:
    """
    Canonicalize a nucleotide sequence.

    Bases are upper-cased, 'U' is read as 'T', gap symbols ('-', '.', '~')
    become '-' and every other symbol outside A/C/G/T/N (IUPAC codes, stray
    characters) becomes 'N'. The result has the same length as the input.

    Args:
        seq: Nucleotide sequence
        complement: Complement each base (without reversing)

    Returns:
        Normalized sequence
    """
    out = []
    for base in seq.upper():
        if base == 'U':
            base = 'T'
        elif base in _GAP_SYMBOLS:
            base = GAP
        elif base not in _CANONICAL_BASES:
            base = 'N'
        if complement and base != GAP:
            base = _COMPLEMENT[base]
        out.append(base)
    return "".join(out)


def fold_case(seq: str) -> str:
    """Upper-case ASCII letters only, so the length never changes."""
    return seq.translate(_ASCII_UPPER)
