"""Runtime settings read from the environment."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

logger = logging.getLogger(__name__)

_DEFAULT_COMMAND_TIMEOUT = 300.0
_DEFAULT_DOWNLOAD_TIMEOUT = 600.0


@dataclass(frozen=True, slots=True)
class Settings:
    """Process-wide knobs. Build with ``Settings.from_env()``."""

    log_level: str = "WARNING"
    command_timeout: float = _DEFAULT_COMMAND_TIMEOUT
    download_timeout: float = _DEFAULT_DOWNLOAD_TIMEOUT

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        return cls(
            log_level=env.get("DEV_BOOTSTRAP_LOG_LEVEL", "WARNING").strip().upper() or "WARNING",
            command_timeout=_float_env(
                env, "DEV_BOOTSTRAP_COMMAND_TIMEOUT", _DEFAULT_COMMAND_TIMEOUT
            ),
            download_timeout=_float_env(
                env, "DEV_BOOTSTRAP_DOWNLOAD_TIMEOUT", _DEFAULT_DOWNLOAD_TIMEOUT
            ),
        )


def _float_env(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a number", name, raw)
        return default
    if value <= 0:
        logger.warning("Ignoring %s=%r: must be positive", name, raw)
        return default
    return value
