"""Runtime configuration read from the environment."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
import shlex
from typing import Mapping

from rika.ingestion.extractor import DEFAULT_HTTP_TIMEOUT_SECONDS, DEFAULT_USER_AGENT

OPTIONS_ENV_VAR = "RIKA_OPTIONS"
DEFAULT_LOG_LEVEL = "WARNING"


def _parse_positive_float(*, name: str, raw_value: str, minimum: float = 0.001) -> float:
    try:
        value = float(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw_value!r}") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


@dataclass(frozen=True, slots=True)
class RikaSettings:
    """Validated command-line runtime settings."""

    default_args: tuple[str, ...] = ()
    http_timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS
    user_agent: str = DEFAULT_USER_AGENT
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RikaSettings:
        source: Mapping[str, str] = os.environ if environ is None else environ

        options_raw = source.get(OPTIONS_ENV_VAR, "")
        try:
            default_args = tuple(shlex.split(options_raw))
        except ValueError as exc:
            raise ValueError(f"{OPTIONS_ENV_VAR} could not be parsed: {exc}") from exc

        timeout_raw = source.get("RIKA_HTTP_TIMEOUT", str(DEFAULT_HTTP_TIMEOUT_SECONDS)).strip()
        if not timeout_raw:
            raise ValueError("RIKA_HTTP_TIMEOUT cannot be empty")
        timeout = _parse_positive_float(name="RIKA_HTTP_TIMEOUT", raw_value=timeout_raw)

        user_agent = source.get("RIKA_USER_AGENT", DEFAULT_USER_AGENT).strip()
        if not user_agent:
            raise ValueError("RIKA_USER_AGENT cannot be empty")

        log_level = source.get("RIKA_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ValueError(f"RIKA_LOG_LEVEL is not a logging level: {log_level!r}")

        return cls(
            default_args=default_args,
            http_timeout_seconds=timeout,
            user_agent=user_agent,
            log_level=log_level,
        )
