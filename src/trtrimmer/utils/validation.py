"""Input validation utilities for trtrimmer."""

from pathlib import Path


def validate_fraction(value: float, name: str = "fraction") -> float:
    """
    Validate that a value is a fraction in [0, 1].

    Args:
        value: Value to check
        name: Parameter name for the error message

    Returns:
        The value as a float

    Raises:
        ValueError: If the value is not a number between 0 and 1
    """
    if isinstance(value, bool):
        raise ValueError(f"{name}: `{value}` isn't a fraction")
    try:
        fraction = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name}: `{value}` isn't a fraction") from None
    if not 0.0 <= fraction <= 1.0:
        raise ValueError(f"{name}: value should be between 0 and 1, got {value}")
    return fraction


def validate_file_exists(filepath: str, description: str = "File") -> None:
    """
    Validate that a file exists.

    Args:
        filepath: Path to check
        description: Description for error message

    Raises:
        FileNotFoundError: If file doesn't exist
    """
    if not Path(filepath).exists():
        raise FileNotFoundError(f"{description} not found: {filepath}")


def validate_not_empty(filepath: str) -> None:
    """
    Validate that an input file has content.

    Raises:
        ValueError: If the file is zero bytes long
    """
    if Path(filepath).stat().st_size == 0:
        raise ValueError(f"the input file is empty: {filepath}")
