# calgrid/config.py
from __future__ import annotations

import os
from typing import Any, Dict, List, Mapping, Optional

from .model import CalendarConfig

DEFAULT_CFG: Dict[str, int] = {
    "week_starts_on": 0,  # 0=Sunday .. 6=Saturday
    "agenda_days": 30,
    "snap_min": 15,
    "default_duration_min": 60,
    "default_start_hour": 9,
    "default_end_hour": 10,
    "event_height_px": 24,
    "event_gap_px": 4,
    "week_cells_height_px": 64,
}

# env var -> cfg key
_ENV_KEYS = {
    "CALGRID_WEEK_START": "week_starts_on",
    "CALGRID_AGENDA_DAYS": "agenda_days",
    "CALGRID_SNAP_MIN": "snap_min",
    "CALGRID_DEFAULT_DURATION_MIN": "default_duration_min",
}


class ConfigError(ValueError):
    """Raised when a calendar config fails validation."""


def _env_int(name: str) -> Optional[int]:
    raw = (os.getenv(name, "") or "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None


def load_cfg(overrides: Optional[Mapping[str, Any]] = None) -> CalendarConfig:
    """Build a config dict: defaults < CALGRID_* env vars < explicit overrides."""
    cfg: CalendarConfig = dict(DEFAULT_CFG)
    for env_name, key in _ENV_KEYS.items():
        v = _env_int(env_name)
        if v is not None:
            cfg[key] = v
    if overrides:
        for k, v in overrides.items():
            if v is not None:
                cfg[k] = v
    assert_valid_cfg(cfg)
    return cfg


def cfg_int(cfg: Optional[Mapping[str, Any]], key: str) -> int:
    """Read an int knob, falling back to the default for missing/garbage values."""
    default = DEFAULT_CFG[key]
    if not cfg:
        return default
    v = cfg.get(key)
    if isinstance(v, bool) or not isinstance(v, int):
        return default
    return v


def _require(cond: bool, msg: str, errs: List[str]) -> None:
    if not cond:
        errs.append(msg)


def validate_cfg(cfg: Mapping[str, Any]) -> List[str]:
    errs: List[str] = []
    if not isinstance(cfg, Mapping):
        return ["cfg must be a mapping"]

    for key in DEFAULT_CFG:
        v = cfg.get(key)
        if v is None:
            continue
        _require(isinstance(v, int) and not isinstance(v, bool), f"cfg.{key} must be int", errs)

    def _val(key: str) -> int:
        v = cfg.get(key)
        return v if isinstance(v, int) and not isinstance(v, bool) else DEFAULT_CFG[key]

    _require(0 <= _val("week_starts_on") <= 6, "cfg.week_starts_on must be in 0..6 (0=Sunday)", errs)
    _require(_val("agenda_days") >= 1, "cfg.agenda_days must be >= 1", errs)
    _require(1 <= _val("snap_min") <= 60 and 60 % _val("snap_min") == 0,
             "cfg.snap_min must divide 60", errs)
    _require(_val("default_duration_min") >= 1, "cfg.default_duration_min must be >= 1", errs)
    _require(0 <= _val("default_start_hour") <= 23, "cfg.default_start_hour must be in 0..23", errs)
    _require(0 <= _val("default_end_hour") <= 23, "cfg.default_end_hour must be in 0..23", errs)
    return errs


def assert_valid_cfg(cfg: Mapping[str, Any]) -> None:
    errs = validate_cfg(cfg)
    if errs:
        raise ConfigError(errs[0])


__all__ = [
    "ConfigError",
    "DEFAULT_CFG",
    "assert_valid_cfg",
    "cfg_int",
    "load_cfg",
    "validate_cfg",
]
