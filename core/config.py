"""
core/config.py — BetEstimate
=============================
Environment-backed configuration. No network, no UI.

Two layers:
- PredictionConfig: the three model tunables (sharpening exponent, strong-gap
  tilt threshold, low-edge threshold). Immutable, validated on construction.
- Settings: service knobs (timezone, hour window, fixture sources) plus a
  PredictionConfig. Built by load_settings() from os.environ.

NEVER hardcode API keys. Use get_api_key().
"""

import logging
import math
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------
DEFAULT_SHARPEN_TAU: float = 1.25
DEFAULT_STRONG_DIFF_TILT: float = 220.0
DEFAULT_EDGE_MIN: float = 0.08

DEFAULT_TZ: str = "Europe/Istanbul"
DEFAULT_ESPN_SCHEDULE_URL: str = "https://www.espn.com/soccer/schedule"


# ---------------------------------------------------------------------------
# Prediction tunables
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PredictionConfig:
    """Model tunables. sharpen_tau must be finite and > 0."""
    sharpen_tau: float = DEFAULT_SHARPEN_TAU
    strong_diff_tilt: float = DEFAULT_STRONG_DIFF_TILT
    edge_min: float = DEFAULT_EDGE_MIN

    def __post_init__(self) -> None:
        if not (math.isfinite(self.sharpen_tau) and self.sharpen_tau > 0):
            raise ValueError(f"sharpen_tau must be finite and > 0, got {self.sharpen_tau}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "PredictionConfig":
        """
        Read SHARPEN_TAU_1X2, STRONG_DIFF_TILT and EDGE_MIN.

        Unparseable, non-finite or non-positive tau values fall back to the default.
        """
        env = os.environ if environ is None else environ
        tau = _env_float(env, "SHARPEN_TAU_1X2", DEFAULT_SHARPEN_TAU)
        if not (math.isfinite(tau) and tau > 0):
            logger.warning("SHARPEN_TAU_1X2=%s is not a finite value > 0, using %s", tau, DEFAULT_SHARPEN_TAU)
            tau = DEFAULT_SHARPEN_TAU
        return cls(
            sharpen_tau=tau,
            strong_diff_tilt=_env_float(env, "STRONG_DIFF_TILT", DEFAULT_STRONG_DIFF_TILT),
            edge_min=_env_float(env, "EDGE_MIN", DEFAULT_EDGE_MIN),
        )


DEFAULT_CONFIG = PredictionConfig()


# ---------------------------------------------------------------------------
# Service settings
# ---------------------------------------------------------------------------

@dataclass
class Settings:
    tz: str = DEFAULT_TZ
    start_hour: int = 0
    end_hour: int = 24
    hide_predictionless: bool = True
    enable_espn: bool = False
    espn_schedule_url: str = DEFAULT_ESPN_SCHEDULE_URL
    espn_loose: bool = False
    espn_debug: bool = False
    football_data_key: Optional[str] = None
    prediction: PredictionConfig = field(default_factory=PredictionConfig)


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Malformed %s=%r — using default %s", name, raw, default)
        return default


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Malformed %s=%r — using default %s", name, raw, default)
        return default


def _env_flag(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None:
        return default
    return raw == "1"


def get_api_key(environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """
    Load the football-data.org key. Never hardcode.

    Checks:
    1. FOOTBALL_DATA_KEY env var (primary)
    2. Streamlit secrets (for Streamlit Cloud deployments)

    Returns None if no key found — callers must handle gracefully.
    """
    env = os.environ if environ is None else environ
    key = env.get("FOOTBALL_DATA_KEY")
    if key:
        return key

    try:
        import streamlit as st
        if hasattr(st, "secrets") and "FOOTBALL_DATA_KEY" in st.secrets:
            return st.secrets["FOOTBALL_DATA_KEY"]
    except Exception:  # noqa: BLE001  missing secrets.toml raises on access
        pass

    return None


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from environment variables.

    Args:
        environ: Mapping to read instead of os.environ (tests).
    """
    env = os.environ if environ is None else environ

    start_hour = _env_int(env, "START_HOUR", 0)
    if not 0 <= start_hour <= 23:
        logger.warning("START_HOUR=%d out of range — using 0", start_hour)
        start_hour = 0

    return Settings(
        tz=env.get("TZ") or DEFAULT_TZ,
        start_hour=start_hour,
        hide_predictionless=_env_flag(env, "HIDE_PREDICTIONLESS", True),
        enable_espn=_env_flag(env, "ENABLE_ESPN", False),
        espn_schedule_url=(env.get("ESPN_SCHEDULE_URL") or DEFAULT_ESPN_SCHEDULE_URL).rstrip("/"),
        espn_loose=_env_flag(env, "ESPN_LOOSE", False),
        espn_debug=_env_flag(env, "ESPN_DEBUG", False),
        football_data_key=get_api_key(env),
        prediction=PredictionConfig.from_env(env),
    )
