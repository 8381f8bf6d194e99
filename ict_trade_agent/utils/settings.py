# -*- coding: utf-8 -*-
"""Scan settings: defaults, persisted JSON file, and .env credentials."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigurationError
from .logger import get_logger

ROOT_DIR = Path(__file__).resolve().parents[2]
load_dotenv(ROOT_DIR / ".env")

LOGGER = get_logger(__name__)

DEFAULT_SETTINGS_FILE = Path.home() / ".ict_trade_agent" / "settings.json"


class ScanSettings(BaseModel):
    """User risk settings; camelCase aliases match the persisted keys."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    risk_amount: float = Field(10.0, alias="riskAmount", gt=0)
    rr_ratio: float = Field(3.0, alias="rrRatio", gt=0)
    coin_count: int = Field(50, alias="coinCount", gt=0, le=250)
    momentum_threshold: float = Field(3.0, alias="momentumThreshold", ge=0)


def settings_path(path: Optional[Path] = None) -> Path:
    if path is not None:
        return Path(path)
    raw = os.getenv("ICT_SETTINGS_FILE")
    return Path(raw) if raw else DEFAULT_SETTINGS_FILE


def build_settings(**values) -> ScanSettings:
    """Validate settings, turning pydantic errors into ConfigurationError."""
    try:
        return ScanSettings.model_validate(values)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid settings: {exc}") from exc


def load_settings(path: Optional[Path] = None) -> ScanSettings:
    """Restore persisted settings, falling back to defaults when no file exists."""
    target = settings_path(path)
    if not target.exists():
        return ScanSettings()
    try:
        raw = json.loads(target.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Cannot read settings file {target}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Settings file {target} must hold a JSON object")
    return build_settings(**raw)


def save_settings(settings: ScanSettings, path: Optional[Path] = None) -> Path:
    """Persist the four scan options. The credential is never written."""
    target = settings_path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(settings.model_dump(by_alias=True), indent=2), encoding="utf-8")
    LOGGER.info("Saved settings to %s", target)
    return target


def load_credential(explicit: Optional[str] = None, env_var: str = "GEMINI_API_KEY") -> str:
    """Credential from the CLI flag or environment; empty string when absent."""
    value = explicit if explicit is not None else os.getenv(env_var, "")
    return value.strip()


def load_max_concurrency(env_var: str = "ICT_MAX_CONCURRENCY") -> Optional[int]:
    raw = os.getenv(env_var)
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{env_var} must be an integer, got {raw!r}") from exc
    return value if value > 0 else None


__all__ = [
    "ScanSettings",
    "build_settings",
    "load_settings",
    "save_settings",
    "settings_path",
    "load_credential",
    "load_max_concurrency",
]
