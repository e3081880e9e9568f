"""Terminal repeat detection module."""

from trtrimmer.detect.dust import dust_mask
from trtrimmer.detect.repeats import (
    RepeatResult,
    evaluate_ambiguous_bases,
    evaluate_tr_complexity,
    find_dtr,
    find_itr,
    find_repeats,
)

__all__ = [
    "dust_mask",
    "RepeatResult",
    "find_dtr",
    "find_itr",
    "evaluate_tr_complexity",
    "evaluate_ambiguous_bases",
    "find_repeats",
]
