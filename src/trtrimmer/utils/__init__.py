"""Utility modules for trtrimmer."""

from trtrimmer.utils.validation import (
    validate_file_exists,
    validate_fraction,
    validate_not_empty,
)
from trtrimmer.utils.config import (
    DEFAULT_MAX_FRACTION,
    DEFAULT_MIN_LENGTH,
    DUST_THRESHOLD,
    DUST_WINDOW,
    OutputConfig,
    RepeatConfig,
    TrimConfig,
)
from trtrimmer.utils.seq_utils import normalize, reverse_complement
from trtrimmer.utils.io import (
    SequenceRecord,
    format_record,
    iter_records,
    parse_records,
)
from trtrimmer.utils.logging_utils import level_from_verbosity, setup_logger
