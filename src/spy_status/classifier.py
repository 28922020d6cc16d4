"""App classification tables and per-person display profiles."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping, Optional

from .models import ActivityEvent, AppCategory, AppKind

NOISE_APPS: frozenset[str] = frozenset(
    {
        "生物识别",
        "系统 UI",
        "Android 系统",
        "系统界面",
        "搜狗输入法小米版",
        "指纹UI",
        "One UI 主屏幕",
        "安全服务",
    }
)

SCREEN_OFF_APPS: frozenset[str] = frozenset(
    {
        "生物识别",
        "系统 UI",
        "Android 系统",
        "指纹UI",
        "One UI 主屏幕",
    }
)

MYSTERY_GAME_TEXT = "在打游戏，但是采集不到在打什么神秘游戏"


@dataclass(slots=True, frozen=True)
class PersonProfile:
    """Display rules for one tracked person.

    ``special_apps`` maps an exact app name to a template; ``{app}`` in the
    template is replaced by the matched name and any other braces are kept.
    """

    phone_label: str = "手机"
    pc_label: str = "PC"
    phone_machine: Optional[str] = None
    pc_machine: Optional[str] = None
    show_pc: bool = True
    music: bool = False
    phone_prefix: Optional[str] = None
    music_prefix: Optional[str] = None
    special_apps: Mapping[str, str] = field(default_factory=dict)
    advisory_keyword: Optional[str] = None
    advisory_text: Optional[str] = None

    @property
    def uses_fixed_machines(self) -> bool:
        return bool(self.phone_machine or self.pc_machine)

    def merged(self, overrides: Mapping[str, Any]) -> "PersonProfile":
        known = {f.name for f in fields(self)}
        updates = {key: value for key, value in overrides.items() if key in known}
        if "special_apps" in updates:
            updates["special_apps"] = {**self.special_apps, **dict(updates["special_apps"] or {})}
        return replace(self, **updates)


GENERIC_PROFILE = PersonProfile(special_apps={"游戏助推器": MYSTERY_GAME_TEXT})

BUILTIN_PROFILES: dict[str, PersonProfile] = {
    "皮梦": PersonProfile(
        phone_label="iQOO13",
        phone_machine="pimeng-iq13",
        pc_machine="pimeng-pc",
        music=True,
        phone_prefix="♿️皮梦正在",
        music_prefix="🎵皮梦正在听音乐：",
        special_apps={
            "三角洲行动": "得吃",
            "交互池": "神秘应用（采集不准确）「{app}」",
            "系统桌面": "神秘应用（采集不准确）「{app}」",
            "系统界面组件": "神秘应用（采集不准确）「{app}」",
            "游戏魔盒": MYSTERY_GAME_TEXT,
            "PiliPlus": "哔哩哔哩（第三方客户端）",
        },
    ),
    "雨核": replace(
        GENERIC_PROFILE,
        advisory_keyword="范式：起源",
        advisory_text="雨核在推制霸呢...不要打扰他",
    ),
}


def profile_for(name: str, overrides: Optional[Mapping[str, Any]] = None) -> PersonProfile:
    profile = BUILTIN_PROFILES.get(name, GENERIC_PROFILE)
    if overrides:
        profile = profile.merged(overrides)
    return profile


def is_noise_app(app_name: Optional[str]) -> bool:
    return (app_name or "").strip() in NOISE_APPS


def is_screen_off_app(app_name: Optional[str]) -> bool:
    return (app_name or "").strip() in SCREEN_OFF_APPS


class AppClassifier:
    """Maps an extracted app name to a display category by exact match."""

    def __init__(self, profile: PersonProfile = GENERIC_PROFILE) -> None:
        self.profile = profile

    def classify(self, app_name: Optional[str]) -> AppCategory:
        name = (app_name or "").strip()
        if name in SCREEN_OFF_APPS:
            return AppCategory(AppKind.SCREEN_OFF)
        if name in NOISE_APPS:
            return AppCategory(AppKind.NOISE)
        template = self.profile.special_apps.get(name)
        if template is not None:
            return AppCategory(AppKind.KNOWN, template.replace("{app}", name))
        return AppCategory(AppKind.GENERIC)

    def advisory_for(self, event: Optional[ActivityEvent]) -> Optional[str]:
        """Return the advisory line when the phone event mentions the keyword."""
        keyword = self.profile.advisory_keyword
        if event is None or not keyword or not self.profile.advisory_text:
            return None
        if keyword in (event.window_title or "") or keyword in (event.app or ""):
            return self.profile.advisory_text
        return None
