"""
Configuration for terminal repeat identification and trimming.

Two groups of parameters:
A. Repeat identification and filtering (RepeatConfig)
B. Output (OutputConfig)

Both are immutable; a TrimConfig bundles them and handles YAML loading.
"""

from dataclasses import asdict, dataclass, field, fields, replace
from typing import Any, Dict, List, Tuple

import yaml

from trtrimmer.utils.validation import validate_fraction

# Default parameters
DEFAULT_MIN_LENGTH = 21
DEFAULT_MAX_FRACTION = 0.5

# Low-complexity masking (symmetric DUST); fixed, not exposed to users
DUST_WINDOW = 32
DUST_THRESHOLD = 30

FASTA_LINE_WIDTH = 80

# Filter names, in precedence order
LOW_COMPLEXITY_FILTER = "low_complexity"
AMBIGUOUS_FILTER = "ambiguous"


@dataclass(frozen=True)
class RepeatConfig:
    """A. Terminal repeat identification and filtering"""
    min_length: int = DEFAULT_MIN_LENGTH
    disable_dtr_identification: bool = False
    enable_itr_identification: bool = False
    ignore_low_complexity: bool = False
    max_low_complexity_frac: float = DEFAULT_MAX_FRACTION
    ignore_ambiguous: bool = False
    max_ambiguous_frac: float = DEFAULT_MAX_FRACTION

    def __post_init__(self):
        if isinstance(self.min_length, bool) or not isinstance(self.min_length, int):
            raise ValueError(f"min_length must be an integer, got {self.min_length!r}")
        if self.min_length < 1:
            raise ValueError(f"min_length must be at least 1, got {self.min_length}")
        validate_fraction(self.max_low_complexity_frac, "max_low_complexity_frac")
        validate_fraction(self.max_ambiguous_frac, "max_ambiguous_frac")
        if self.disable_dtr_identification and not self.enable_itr_identification:
            raise ValueError(
                "disable_dtr_identification requires enable_itr_identification"
            )

    def active_filters(self) -> List[Tuple[str, float]]:
        """Configured filters as (name, max_fraction), highest precedence first."""
        filters = []
        if self.ignore_low_complexity:
            filters.append((LOW_COMPLEXITY_FILTER, self.max_low_complexity_frac))
        if self.ignore_ambiguous:
            filters.append((AMBIGUOUS_FILTER, self.max_ambiguous_frac))
        return filters


@dataclass(frozen=True)
class OutputConfig:
    """B. Output"""
    exclude_non_tr_seqs: bool = False
    include_tr_info: bool = False
    disable_trimming: bool = False


def _section(cls, values: Any, name: str):
    if values is None:
        return cls()
    if not isinstance(values, dict):
        raise ValueError(f"Config section '{name}' must be a mapping")
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ValueError(f"Unknown keys in config section '{name}': {unknown}")
    return cls(**values)


@dataclass(frozen=True)
class TrimConfig:
    """Complete run configuration."""
    repeats: RepeatConfig = field(default_factory=RepeatConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def to_dict(self) -> dict:
        return {
            "repeats": asdict(self.repeats),
            "output": asdict(self.output),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'TrimConfig':
        if d is None:
            return cls()
        if not isinstance(d, dict):
            raise ValueError("Config must be a YAML mapping.")
        unknown = sorted(set(d) - {"repeats", "output"})
        if unknown:
            raise ValueError(f"Unknown config sections: {unknown}")
        return cls(
            repeats=_section(RepeatConfig, d.get("repeats"), "repeats"),
            output=_section(OutputConfig, d.get("output"), "output"),
        )

    @classmethod
    def from_yaml(cls, path: str) -> 'TrimConfig':
        with open(path, "r", encoding="utf-8") as f:
            try:
                d = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from None
        return cls.from_dict(d)

    def to_yaml(self, path: str):
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False)

    def with_overrides(self, **overrides: Any) -> 'TrimConfig':
        """
        Return a copy with the given fields replaced.

        Keys may name a field of either RepeatConfig or OutputConfig.

        Raises:
            ValueError: On unknown keys or invalid resulting values
        """
        repeat_keys = {f.name for f in fields(RepeatConfig)}
        output_keys = {f.name for f in fields(OutputConfig)}
        repeat_updates = {k: v for k, v in overrides.items() if k in repeat_keys}
        output_updates = {k: v for k, v in overrides.items() if k in output_keys}
        unknown = sorted(set(overrides) - repeat_keys - output_keys)
        if unknown:
            raise ValueError(f"Unknown config keys: {unknown}")
        return TrimConfig(
            repeats=replace(self.repeats, **repeat_updates),
            output=replace(self.output, **output_updates),
        )
