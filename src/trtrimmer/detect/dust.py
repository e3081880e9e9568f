"""
Low-complexity masking with the symmetric DUST algorithm (SDUST).

Low-complexity stretches (homopolymers, short tandem repeats) make terminal
repeat matches meaningless, so repeats mostly made of them can be rejected.

The score of a stretch is based on triplet composition: for triplet counts
c_t, the score is sum(c_t * (c_t - 1) / 2) over the l + 1 triplets it
contains. A stretch is "perfect" when score * 10 > threshold * l and no
perfect stretch containing it has a higher score-to-length ratio. The
masked regions are the union of perfect stretches found in a sliding
window.

Reference:
    Morgulis et al. (2006) "A fast and symmetric DUST implementation to mask
    low-complexity DNA sequences"
"""

from collections import deque
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from trtrimmer.utils.config import DUST_THRESHOLD, DUST_WINDOW

WORD_LEN = 3
WORD_TOTAL = 1 << (WORD_LEN << 1)
WORD_MASK = WORD_TOTAL - 1

# A/C/G/T (any case) -> 0..3, everything else -> 4
_NT4_TABLE = np.full(256, 4, dtype=np.uint8)
for _code, _base in enumerate("ACGT"):
    _NT4_TABLE[ord(_base)] = _code
    _NT4_TABLE[ord(_base.lower())] = _code


def encode_bases(sequence: str) -> np.ndarray:
    """2-bit encode a sequence; non-ACGT symbols are encoded as 4."""
    raw = np.frombuffer(sequence.encode("ascii", "replace"), dtype=np.uint8)
    return _NT4_TABLE[raw]


@dataclass
class _PerfectInterval:
    start: int
    finish: int
    r: int
    l: int


class _DustScanner:
    """Sliding-window state for one SDUST pass over a sequence."""

    def __init__(self, window: int, threshold: int):
        self.window = window
        self.threshold = threshold
        # sorted by descending start, then ascending finish
        self.perfect: List[_PerfectInterval] = []
        self.masked: List[Tuple[int, int]] = []
        self._reset_window()

    def _reset_window(self):
        self.words = deque()
        self.cw = [0] * WORD_TOTAL
        self.cv = [0] * WORD_TOTAL
        self.rw = 0
        self.rv = 0
        self.L = 0

    def _shift_window(self, t: int):
        w = self.words
        if len(w) >= self.window - WORD_LEN + 1:
            s = w.popleft()
            self.cw[s] -= 1
            self.rw -= self.cw[s]
            if self.L > len(w):
                self.L -= 1
                self.cv[s] -= 1
                self.rv -= self.cv[s]
        w.append(t)
        self.L += 1
        self.rw += self.cw[t]
        self.cw[t] += 1
        self.rv += self.cv[t]
        self.cv[t] += 1
        if self.cv[t] * 10 > self.threshold * 2:
            # shrink the suffix until it holds an acceptable count of t
            while True:
                s = w[len(w) - self.L]
                self.cv[s] -= 1
                self.rv -= self.cv[s]
                self.L -= 1
                if s == t:
                    break

    def _save_masked_regions(self, start: int):
        P = self.perfect
        if not P or P[-1].start >= start:
            return
        p = P[-1]
        if self.masked and p.start <= self.masked[-1][1]:
            s, f = self.masked[-1]
            self.masked[-1] = (s, max(f, p.finish))
        else:
            self.masked.append((p.start, p.finish))
        while P and P[-1].start < start:
            P.pop()

    def _find_perfect(self, start: int):
        w = self.words
        P = self.perfect
        c = list(self.cv)
        r = self.rv
        max_r = max_l = 0
        size = len(w)
        for i in range(size - self.L - 1, -1, -1):
            t = w[i]
            r += c[t]
            c[t] += 1
            new_r, new_l = r, size - i - 1
            if new_r * 10 <= self.threshold * new_l:
                continue
            j = 0
            while j < len(P) and P[j].start >= i + start:
                p = P[j]
                if max_r == 0 or p.r * max_l > max_r * p.l:
                    max_r, max_l = p.r, p.l
                j += 1
            if max_r == 0 or new_r * max_l >= max_r * new_l:
                max_r, max_l = new_r, new_l
                P.insert(j, _PerfectInterval(
                    start=i + start,
                    finish=size + WORD_LEN - 1 + start,
                    r=new_r,
                    l=new_l,
                ))

    def scan(self, sequence: str) -> List[Tuple[int, int]]:
        codes = encode_bases(sequence).tolist()
        n = len(codes)
        run = 0
        word = 0
        for i in range(n + 1):
            base = codes[i] if i < n else 4
            if base < 4:
                run += 1
                word = ((word << 2) | base) & WORD_MASK
                if run >= WORD_LEN:
                    start = max(run - self.window, 0) + (i + 1 - run)
                    self._save_masked_regions(start)
                    self._shift_window(word)
                    if self.rw * 10 > self.L * self.threshold:
                        self._find_perfect(start)
            else:
                # ambiguous base or end of sequence: flush and start a new piece
                start = max(run - self.window + 1, 0) + (i + 1 - run)
                while self.perfect:
                    self._save_masked_regions(start)
                    start += 1
                run = 0
                word = 0
                self._reset_window()
        return self.masked


def dust_mask(
    sequence: str,
    window: int = DUST_WINDOW,
    threshold: int = DUST_THRESHOLD,
) -> List[Tuple[int, int]]:
    """
    Find low-complexity regions of a nucleotide sequence.

    Args:
        sequence: Nucleotide sequence (case-insensitive; non-ACGT symbols
            split the sequence into independently scanned pieces)
        window: Sliding window length in bases
        threshold: Score threshold; lower values mask more

    Returns:
        Sorted, disjoint half-open (start, end) intervals

    Raises:
        ValueError: If window or threshold are out of range
    """
    if window <= WORD_LEN:
        raise ValueError(f"window must be greater than {WORD_LEN}, got {window}")
    if threshold <= 0:
        raise ValueError(f"threshold must be positive, got {threshold}")
    if not sequence:
        return []
    return _DustScanner(window, threshold).scan(sequence)
