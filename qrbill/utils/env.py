"""
Environment variable readers used by qrbill.config.

Values are stripped of surrounding whitespace; an empty value counts as unset.
"""
import os
from typing import Optional, Sequence


def get_env_str(
    name: str,
    default: Optional[str] = None,
    required: bool = False,
    strip: bool = True
) -> Optional[str]:
    """
    Read a string setting.

    Args:
        name: Environment variable name
        default: Returned when the variable is unset or blank
        required: Raise instead of returning ``default``
        strip: Strip surrounding whitespace (default: True)

    Raises:
        ValueError: If required and the variable is unset or blank

    Examples:
        >>> get_env_str("QRBILL_FONT_REGULAR", default="/fonts/LiberationSans-Regular.ttf")
    """
    raw = os.getenv(name)
    value = raw.strip() if (raw is not None and strip) else raw

    if value:
        return value
    if required:
        state = "is not set" if raw is None else "is empty"
        raise ValueError(f"Setting {name} {state}; define it in the environment or in .env")
    return default


def get_env_bool(name: str, default: bool = False) -> bool:
    """
    Read a flag. "1", "true", "yes" and "on" (any case) are true; any other
    non-blank value is false.
    """
    value = get_env_str(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "on"}


def get_env_choice(name: str, choices: Sequence[str], default: str) -> str:
    """
    Read a setting restricted to ``choices``.

    Matching ignores case and returns the spelling used in ``choices``;
    anything else yields ``default``.
    """
    value = (get_env_str(name) or "").lower()
    by_lower = {choice.lower(): choice for choice in choices}
    return by_lower.get(value, default)
