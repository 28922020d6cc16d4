"""Configuration models and helpers for the status service."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from .classifier import PersonProfile, profile_for as resolve_profile
from .errors import ConfigError
from .paths import get_config_path

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "http://127.0.0.1:3100"
PIMENG_NAME = "皮梦"
PIMENG_API_BASE = "https://shijian.lyxmb.com"

# Original plugin config used camelCase keys.
_KEY_ALIASES = {
    "apiBase": "api_base",
    "teamTrigger": "team_trigger",
    "teamNames": "team_names",
    "teamForwardTitle": "team_forward_title",
    "teamIntro": "team_intro",
    "allTrigger": "all_trigger",
    "allForwardTitle": "all_forward_title",
    "todaySuffix": "today_suffix",
    "heartbeatSeconds": "heartbeat_seconds",
    "perPersonLimit": "per_person_limit",
}


def _strip_base(value: str) -> str:
    return str(value).rstrip("/")


@dataclass(slots=True)
class PersonConfig:
    name: str
    trigger: Optional[str] = None
    api_base: Optional[str] = None
    profile: Optional[PersonProfile] = None

    def __post_init__(self) -> None:
        if self.profile is None:
            self.profile = resolve_profile(self.name)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PersonConfig":
        data = _normalize_keys(data)
        name = str(data.get("name") or "").strip()
        if not name:
            raise ConfigError("every person entry needs a name")
        api_base = data.get("api_base")
        return cls(
            name=name,
            trigger=str(data["trigger"]).strip() if data.get("trigger") else None,
            api_base=_strip_base(api_base) if api_base else None,
            profile=resolve_profile(name, _profile_overrides(name, data.get("profile"))),
        )


@dataclass(slots=True)
class SpySettings:
    """Runtime configuration for status queries."""

    api_base: str = DEFAULT_API_BASE
    timeout: timedelta = timedelta(seconds=10)
    per_person_limit: int = 5
    cache_expire: timedelta = timedelta(seconds=8)
    heartbeat_seconds: int = 60
    persons: list[PersonConfig] = field(default_factory=list)
    team_trigger: str = "时间开发团队"
    team_names: list[str] = field(default_factory=list)
    team_forward_title: str = "开发团队状态"
    team_intro: Optional[str] = "这是当前knd dev team成员状态"
    all_trigger: str = "时间所有人"
    all_forward_title: str = "所有人状态"
    today_suffix: str = "今日"

    def __post_init__(self) -> None:
        if int(self.heartbeat_seconds) <= 0:
            raise ConfigError("heartbeat_seconds must be a positive integer")
        self.heartbeat_seconds = int(self.heartbeat_seconds)
        self.api_base = _strip_base(self.api_base)

    def person(self, name: str) -> Optional[PersonConfig]:
        return next((p for p in self.persons if p.name == name), None)

    def profile_for(self, name: str) -> PersonProfile:
        person = self.person(name)
        return person.profile if person else resolve_profile(name)

    def api_base_for(self, name: str) -> str:
        person = self.person(name)
        if person and person.api_base:
            return person.api_base
        return self.api_base

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SpySettings":
        data = _normalize_keys(data)
        persons_raw = data.get("persons") or []
        if not isinstance(persons_raw, list):
            raise ConfigError("persons must be a list")
        kwargs: dict[str, Any] = {
            "persons": [PersonConfig.from_mapping(p) for p in persons_raw if p],
        }
        for key in (
            "api_base",
            "team_trigger",
            "team_forward_title",
            "team_intro",
            "all_trigger",
            "all_forward_title",
            "today_suffix",
        ):
            if key in data and data[key] is not None:
                kwargs[key] = str(data[key])
        if "team_names" in data:
            kwargs["team_names"] = [str(n) for n in data.get("team_names") or []]
        for key in ("heartbeat_seconds", "per_person_limit"):
            if data.get(key) is not None:
                kwargs[key] = _as_int(data[key], key)
        if data.get("timeout_seconds") is not None:
            kwargs["timeout"] = timedelta(seconds=float(data["timeout_seconds"]))
        if data.get("cache_expire_seconds") is not None:
            kwargs["cache_expire"] = timedelta(seconds=float(data["cache_expire_seconds"]))
        return cls(**kwargs)


def load_settings(path: Optional[Path] = None) -> SpySettings:
    """Load settings from YAML, applying environment overrides.

    Environment variable overrides (if set):
        SPY_API_BASE         -> api_base
        SPY_PIMENG_API_BASE  -> api_base of the 皮梦 entry when it has none
    """
    config_path = Path(path) if path else get_config_path()
    data: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path, encoding="utf-8") as fh:
            try:
                loaded = yaml.safe_load(fh)
            except yaml.YAMLError as exc:
                raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc
        if loaded is not None and not isinstance(loaded, dict):
            raise ConfigError(f"Expected a mapping at the top of {config_path}")
        data = loaded or {}
    elif path:
        raise ConfigError(f"Config file not found: {config_path}")
    else:
        logger.info("No config at %s; using defaults.", config_path)

    env_base = os.environ.get("SPY_API_BASE")
    if env_base:
        data["api_base"] = env_base
    settings = SpySettings.from_mapping(data)

    pimeng = settings.person(PIMENG_NAME)
    if pimeng and not pimeng.api_base:
        pimeng.api_base = _strip_base(os.environ.get("SPY_PIMENG_API_BASE", PIMENG_API_BASE))
    return settings


def _normalize_keys(data: Mapping[str, Any]) -> dict[str, Any]:
    return {_KEY_ALIASES.get(key, key): value for key, value in data.items()}


def _as_int(value: Any, key: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{key} must be an integer, got {value!r}") from exc


_PROFILE_BOOL_KEYS = ("show_pc", "music")
_PROFILE_STR_KEYS = (
    "phone_label",
    "pc_label",
    "phone_machine",
    "pc_machine",
    "phone_prefix",
    "music_prefix",
    "advisory_keyword",
    "advisory_text",
)
_TRUE_WORDS = {"true", "yes", "on", "1"}
_FALSE_WORDS = {"false", "no", "off", "0"}


def _profile_overrides(name: str, raw: Any) -> Optional[dict[str, Any]]:
    """Validate a person's ``profile`` mapping and coerce its values."""
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        raise ConfigError(f"profile for {name} must be a mapping, got {type(raw).__name__}")
    overrides: dict[str, Any] = {}
    for key, value in raw.items():
        if key in _PROFILE_BOOL_KEYS:
            overrides[key] = _as_bool(value, f"{name}.profile.{key}")
        elif key in _PROFILE_STR_KEYS:
            overrides[key] = None if value is None else str(value)
        elif key == "special_apps":
            if value is None:
                continue
            if not isinstance(value, Mapping):
                raise ConfigError(f"{name}.profile.special_apps must be a mapping")
            overrides[key] = {str(app): str(text) for app, text in value.items()}
        else:
            raise ConfigError(f"Unknown profile key {key!r} for {name}")
    return overrides


def _as_bool(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, str)):
        word = str(value).strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    raise ConfigError(f"{key} must be a boolean, got {value!r}")
