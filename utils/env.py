"""
Safe environment variable helpers.
"""
import os
from typing import Optional


def get_env_str(
    name: str,
    default: Optional[str] = None,
    required: bool = False,
    strip: bool = True
) -> Optional[str]:
    """
    Read an environment variable, treating whitespace-only values as unset.

    Args:
        name: Environment variable name
        default: Returned when the variable is missing or empty after strip
        required: If True, raise ValueError when missing/empty
        strip: Strip surrounding whitespace (default: True)

    Raises:
        ValueError: If required=True and the value is missing or empty

    Examples:
        >>> get_env_str("SESSION_CALENDAR_API_URL", default="http://localhost:8080/api")
        >>> get_env_str("SESSION_CALENDAR_API_URL", required=True)
    """
    value = os.getenv(name)

    if value is None:
        if required:
            raise ValueError(
                f"Required environment variable '{name}' is not set. "
                f"Please add it to your .env file or environment."
            )
        return default

    if strip:
        value = value.strip()

    if not value:
        if required:
            raise ValueError(
                f"Required environment variable '{name}' is empty (or whitespace-only)."
            )
        return default

    return value


def get_env_bool(name: str, default: bool = False) -> bool:
    """
    Truthy values: "1", "true", "yes", "on" (case-insensitive).
    Anything else set is False; unset or empty returns the default.
    """
    value = os.getenv(name, "").strip().lower()

    if not value:
        return default

    return value in ("1", "true", "yes", "on")


def get_env_float(name: str, default: float) -> float:
    """
    Read a numeric environment variable.

    Raises:
        ValueError: If the variable is set but is not a number.
    """
    raw = get_env_str(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"Environment variable '{name}' must be numeric. Got: {raw!r}")
