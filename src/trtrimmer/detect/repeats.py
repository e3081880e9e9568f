"""
Terminal repeat identification.

Direct terminal repeats (DTRs) have the same sequence at both ends of a
record; inverted terminal repeats (ITRs) have one end equal to the reverse
complement of the other. A candidate repeat can then be rejected as a likely
artifact when too much of it is low complexity or ambiguous bases.
"""

import logging
from typing import Callable, Dict, NamedTuple, Tuple

from trtrimmer.detect.dust import dust_mask
from trtrimmer.utils.config import (
    AMBIGUOUS_FILTER,
    DUST_THRESHOLD,
    DUST_WINDOW,
    LOW_COMPLEXITY_FILTER,
    RepeatConfig,
)
from trtrimmer.utils.seq_utils import fold_case, normalize, reverse_complement

logger = logging.getLogger(__name__)

AMBIGUOUS_BASE = "N"


class RepeatResult(NamedTuple):
    """Classification of one sequence.

    At most one of has_dtr/has_itr is set. When neither is, tr_length is 0
    if nothing was found, or the length of a candidate that a filter
    rejected.
    """
    has_dtr: bool
    has_itr: bool
    tr_length: int

    @property
    def has_repeat(self) -> bool:
        return self.has_dtr or self.has_itr

    @property
    def rejected(self) -> bool:
        return not self.has_repeat and self.tr_length > 0

    @property
    def repeat_type(self) -> str:
        if self.has_dtr:
            return "dtr"
        if self.has_itr:
            return "itr"
        return "none"


def find_dtr(sequence: str, min_length: int) -> Tuple[bool, int]:
    """
    Find the longest direct terminal repeat.

    Every length from half the sequence down to `min_length` is tried and
    the first (longest) one whose leading and trailing windows match,
    ignoring case, wins.

    Returns:
        (found, length); (False, 0) when there is no DTR
    """
    seq_len = len(sequence)
    if seq_len < min_length * 2:
        return False, 0
    folded = fold_case(sequence)
    for length in range(seq_len // 2, min_length - 1, -1):
        if folded[:length] == folded[seq_len - length:]:
            return True, length
    return False, 0


def find_itr(sequence: str, min_length: int) -> Tuple[bool, int]:
    """
    Find an inverted terminal repeat.

    The first `min_length` bases must exactly match the start of the reverse
    complement; the match is then extended one base at a time (ignoring
    case) up to half the sequence length.

    Returns:
        (found, length); (False, 0) when there is no ITR
    """
    seq_len = len(sequence)
    rev_comp = reverse_complement(sequence)
    if seq_len < min_length * 2:
        return False, 0
    if sequence[:min_length] != rev_comp[:min_length]:
        return False, 0

    folded, folded_rc = fold_case(sequence), fold_case(rev_comp)
    i = min_length
    while i <= seq_len // 2 and folded[:i] == folded_rc[:i]:
        i += 1
    return True, i - 1


def _check_tr_length(tr_length: int):
    if tr_length <= 0:
        raise ValueError(f"terminal repeat length must be positive, got {tr_length}")


def evaluate_tr_complexity(sequence: str, tr_length: int, max_fraction: float) -> bool:
    """
    Check that the repeat is not mostly low-complexity sequence.

    Low-complexity intervals are computed over the whole sequence and
    clipped to the repeat region [0, tr_length).

    Returns:
        False if the low-complexity fraction of the repeat exceeds
        `max_fraction`, True otherwise

    Raises:
        ValueError: If tr_length is not positive
    """
    _check_tr_length(tr_length)
    n_low_complexity = 0
    for start, end in dust_mask(sequence, DUST_WINDOW, DUST_THRESHOLD):
        # intervals are sorted; nothing further can overlap the repeat
        if start >= tr_length:
            break
        n_low_complexity += min(end, tr_length) - start
    return n_low_complexity / tr_length <= max_fraction


def evaluate_ambiguous_bases(sequence: str, tr_length: int, max_fraction: float) -> bool:
    """
    Check that the repeat is not mostly ambiguous bases.

    Returns:
        False if the fraction of 'N' in [0, tr_length) exceeds
        `max_fraction`, True otherwise

    Raises:
        ValueError: If tr_length is not positive
    """
    _check_tr_length(tr_length)
    n_ambiguous = normalize(sequence, complement=False)[:tr_length].count(AMBIGUOUS_BASE)
    return n_ambiguous / tr_length <= max_fraction


FILTERS: Dict[str, Callable[[str, int, float], bool]] = {
    LOW_COMPLEXITY_FILTER: evaluate_tr_complexity,
    AMBIGUOUS_FILTER: evaluate_ambiguous_bases,
}


def _passes_filters(sequence: str, tr_length: int, config: RepeatConfig) -> bool:
    # only the highest-precedence configured filter runs
    for name, max_fraction in config.active_filters():
        accepted = FILTERS[name](sequence, tr_length, max_fraction)
        if not accepted:
            logger.debug(
                f"Rejected terminal repeat of length {tr_length} "
                f"({name} fraction > {max_fraction})"
            )
        return accepted
    return True


def _resolve(sequence: str, found: bool, tr_length: int, config: RepeatConfig, is_dtr: bool) -> RepeatResult:
    if not found:
        return RepeatResult(False, False, 0)
    if not _passes_filters(sequence, tr_length, config):
        return RepeatResult(False, False, tr_length)
    return RepeatResult(is_dtr, not is_dtr, tr_length)


def find_repeats(sequence: str, config: RepeatConfig) -> RepeatResult:
    """
    Identify and classify the terminal repeat of a sequence.

    DTRs are looked for first unless disabled. ITRs are looked for when
    enabled and no DTR was found (or DTR identification is disabled). A
    sequence carries at most one repeat type.

    Args:
        sequence: Nucleotide sequence
        config: Identification and filtering parameters

    Returns:
        RepeatResult(has_dtr, has_itr, tr_length)
    """
    if not config.disable_dtr_identification:
        has_dtr, tr_length = find_dtr(sequence, config.min_length)
        if has_dtr or not config.enable_itr_identification:
            return _resolve(sequence, has_dtr, tr_length, config, is_dtr=True)

    if config.enable_itr_identification:
        has_itr, tr_length = find_itr(sequence, config.min_length)
        return _resolve(sequence, has_itr, tr_length, config, is_dtr=False)

    return RepeatResult(False, False, 0)
