import math
import os
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from .weights import DEFAULT_WEIGHTS, ScoreWeights, field_names

ENV_PREFIX = "NOTESCORE_"

# Fields that end up as divisors
POSITIVE_FIELDS = {"hidden_note_penalty", "max_edit_distance"}


class ConfigError(ValueError):
    """Raised when a weight override cannot be parsed or is out of range."""
    pass


def load_env(path: Optional[Path] = None) -> bool:
    """Load .env from the working directory (or path) if present.
    Variables already set in the process environment win.
    """
    env_path = path or Path.cwd() / ".env"
    if not env_path.exists():
        return False
    return load_dotenv(dotenv_path=env_path, override=False)


def env_var_name(field_name: str) -> str:
    return f"{ENV_PREFIX}{field_name.upper()}"


def load_weights(
    environ: Optional[Mapping[str, str]] = None,
    base: ScoreWeights = DEFAULT_WEIGHTS,
) -> ScoreWeights:
    """
    Build a weight table from NOTESCORE_<FIELD> overrides.

    Args:
        environ: Mapping to read from (default: os.environ)
        base: Weights to start from

    Returns:
        ScoreWeights with overrides applied

    Raises:
        ConfigError: If an override is not a finite, non-negative number for its
            field, or is zero where the field is used as a divisor
    """
    if environ is None:
        environ = os.environ

    overrides = {}
    for name in field_names():
        var = env_var_name(name)
        raw = environ.get(var)
        if raw is None or raw.strip() == "":
            continue
        cast = type(getattr(base, name))
        try:
            value = cast(raw.strip())
        except ValueError as e:
            raise ConfigError(f"{var}={raw!r} is not a valid {cast.__name__}") from e
        if not math.isfinite(value):
            raise ConfigError(f"{var}={raw!r} must be a finite number")
        if name in POSITIVE_FIELDS and value <= 0:
            raise ConfigError(f"{var}={raw!r} must be greater than zero")
        if value < 0:
            raise ConfigError(f"{var}={raw!r} must not be negative")
        overrides[name] = value

    return base.with_overrides(**overrides) if overrides else base


def log_level(environ: Optional[Mapping[str, str]] = None, default: str = "INFO") -> str:
    if environ is None:
        environ = os.environ
    return environ.get(f"{ENV_PREFIX}LOG_LEVEL", default).upper()
