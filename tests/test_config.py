import pytest

from resonance_engine.config import EngineSettings, load_settings
from resonance_engine.errors import ConfigurationError

ENV_VARS = [
    "RESONANCE_WEAK_POWER_FLOOR",
    "RESONANCE_NEUTRAL_OTHERS_DEFAULT",
    "RESONANCE_MAX_INTERPOLATION_DAYS",
    "RESONANCE_DEFAULT_ELEMENT",
    "RESONANCE_EPHEMERIS_TTL_HOURS",
    "EPHEMERIS_BACKEND",
    "EPHEMERIS_PATH",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    assert load_settings() == EngineSettings()


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("RESONANCE_WEAK_POWER_FLOOR", "25")
    monkeypatch.setenv("RESONANCE_MAX_INTERPOLATION_DAYS", "10.5")
    monkeypatch.setenv("RESONANCE_DEFAULT_ELEMENT", " Fire ")
    monkeypatch.setenv("EPHEMERIS_BACKEND", "MOSEPH")
    monkeypatch.setenv("EPHEMERIS_PATH", "/opt/ephe")
    settings = load_settings()
    assert settings.weak_power_floor == 25
    assert settings.max_interpolation_days == 10.5
    assert settings.default_element == "fire"
    assert settings.ephemeris_backend == "moseph"
    assert settings.ephemeris_path == "/opt/ephe"


def test_unknown_backend_uses_swiss_files(monkeypatch):
    monkeypatch.setenv("EPHEMERIS_BACKEND", "jpl")
    assert load_settings().ephemeris_backend == "swieph"


@pytest.mark.parametrize(
    "name, value",
    [
        ("RESONANCE_WEAK_POWER_FLOOR", "thirty"),
        ("RESONANCE_MAX_INTERPOLATION_DAYS", "0"),
        ("RESONANCE_EPHEMERIS_TTL_HOURS", "-1"),
        ("RESONANCE_DEFAULT_ELEMENT", "aether"),
    ],
)
def test_invalid_values_raise(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigurationError):
        load_settings()
