"""Environment-driven settings."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from balancebook.cache.memory import DEFAULT_TTL_SECONDS
from balancebook.database.factories import DB_PATH_ENV_VAR
from balancebook.domain.errors import ValidationError

CACHE_TTL_ENV_VAR = "BALANCEBOOK_CACHE_TTL"
LOG_LEVEL_ENV_VAR = "BALANCEBOOK_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class Settings:
    """Runtime settings.

    ``db_path`` None means the factory default (~/.balancebook/balancebook.db).
    A ``cache_ttl`` of 0 disables report caching.
    """

    db_path: Optional[str] = None
    cache_ttl: int = DEFAULT_TTL_SECONDS
    log_level: str = DEFAULT_LOG_LEVEL


def _parse_ttl(raw: Optional[str]) -> int:
    if raw is None or not raw.strip():
        return DEFAULT_TTL_SECONDS
    try:
        ttl = int(raw.strip())
    except ValueError as e:
        raise ValidationError(f"Invalid {CACHE_TTL_ENV_VAR} '{raw}': expected whole seconds") from e
    if ttl < 0:
        raise ValidationError(f"Invalid {CACHE_TTL_ENV_VAR} '{raw}': must not be negative")
    return ttl


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build settings from environment variables.

    Args:
        environ: Mapping to read instead of ``os.environ``

    Raises:
        ValidationError: If BALANCEBOOK_CACHE_TTL is not a non-negative integer
    """
    env = os.environ if environ is None else environ
    return Settings(
        db_path=env.get(DB_PATH_ENV_VAR) or None,
        cache_ttl=_parse_ttl(env.get(CACHE_TTL_ENV_VAR)),
        log_level=(env.get(LOG_LEVEL_ENV_VAR) or DEFAULT_LOG_LEVEL).strip().upper(),
    )
