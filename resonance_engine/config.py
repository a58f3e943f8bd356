"""Environment-driven settings.

Values are read once from the process environment (a local ``.env`` file is
honoured through python-dotenv) and frozen into :class:`EngineSettings`.
Components accept an explicit ``settings`` argument so tests never depend on
the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

from .errors import ConfigurationError
from .services.constants import ELEMENTS


@dataclass(frozen=True)
class EngineSettings:
    weak_power_floor: int = 30
    neutral_others_default: int = 40
    max_interpolation_days: float = 45.0
    default_element: str = "earth"
    ephemeris_ttl_hours: float = 24.0
    ephemeris_backend: str = "swieph"
    ephemeris_path: str | None = None


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw.strip())
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value


def _element_env(name: str, default: str) -> str:
    value = (os.getenv(name) or default).strip().lower()
    if value not in ELEMENTS:
        raise ConfigurationError(f"{name} must be one of {', '.join(ELEMENTS)}, got {value!r}")
    return value


def _backend_env() -> str:
    raw_backend = os.getenv("EPHEMERIS_BACKEND")
    backend = raw_backend.strip().lower() if raw_backend else "swieph"
    return "moseph" if backend == "moseph" else "swieph"


def load_settings() -> EngineSettings:
    """Build settings from the current environment without caching."""

    load_dotenv(override=False)
    return EngineSettings(
        weak_power_floor=_int_env("RESONANCE_WEAK_POWER_FLOOR", 30),
        neutral_others_default=_int_env("RESONANCE_NEUTRAL_OTHERS_DEFAULT", 40),
        max_interpolation_days=_float_env("RESONANCE_MAX_INTERPOLATION_DAYS", 45.0),
        default_element=_element_env("RESONANCE_DEFAULT_ELEMENT", "earth"),
        ephemeris_ttl_hours=_float_env("RESONANCE_EPHEMERIS_TTL_HOURS", 24.0),
        ephemeris_backend=_backend_env(),
        ephemeris_path=os.getenv("EPHEMERIS_PATH") or None,
    )


@lru_cache(maxsize=1)
def get_settings() -> EngineSettings:
    return load_settings()


__all__ = ["EngineSettings", "get_settings", "load_settings"]
