"""Runtime settings read from the environment.

Recognized variables:
- EG_CORE_PRIME_OPTION: group parameter set ("standard" or "rfc2409_1024")
- EG_CORE_DLOG_MAX: default bound of the discrete-log search (1000)
- EG_CORE_STRICT_PROOFS: when truthy, invalid proofs raise instead of
  returning a failed validation
- EG_CORE_LOG_LEVEL: level of the eg_core logger when configure_logging runs
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Mapping, Optional

from .errors import ConfigurationError

DEFAULT_DLOG_MAX = 1000

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """Attributes
    - prime_option: name of the group parameter set
    - dlog_max: default discrete-log bound
    - strict_proofs: raise ProofVerificationError on invalid proofs
    - log_level: logging level name
    """

    prime_option: str = "standard"
    dlog_max: int = DEFAULT_DLOG_MAX
    strict_proofs: bool = False
    log_level: str = "WARNING"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if environ is None else environ
    raw_max = env.get("EG_CORE_DLOG_MAX", str(DEFAULT_DLOG_MAX))
    try:
        dlog_max = int(raw_max)
    except ValueError:
        raise ConfigurationError(f"EG_CORE_DLOG_MAX must be an integer, got {raw_max!r}") from None
    if dlog_max <= 0:
        raise ConfigurationError("EG_CORE_DLOG_MAX must be positive")
    return Settings(
        prime_option=env.get("EG_CORE_PRIME_OPTION", "standard"),
        dlog_max=dlog_max,
        strict_proofs=env.get("EG_CORE_STRICT_PROOFS", "").strip().lower() in _TRUTHY,
        log_level=env.get("EG_CORE_LOG_LEVEL", "WARNING").upper(),
    )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def override_settings(settings: Optional[Settings]) -> None:
    """Replace the cached settings; None makes the next call re-read the environment."""
    global _settings
    _settings = settings
