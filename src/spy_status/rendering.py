"""Render person states and daily reports as chat text."""

from __future__ import annotations

from typing import Optional

from .classifier import GENERIC_PROFILE, AppClassifier, PersonProfile
from .interpreter import app_name_from_event
from .models import (
    ActivityEvent,
    AppKind,
    DailyReport,
    DeviceKind,
    PersonState,
    TitleKind,
)
from .normalization import classify_title, first_segment
from .reporting import format_duration

PHONE_HEADER = "====== 手机状态 ======"
PC_HEADER = "====== 电脑状态 ======"
NO_DATA = "  暂无数据"
UNKNOWN_APP_LABEL = "未知应用"
UNKNOWN_WINDOW_LABEL = "未知窗口"

_DEVICE_TITLES = {DeviceKind.PHONE: "手机", DeviceKind.DESKTOP: "电脑"}


def format_event_time(event: Optional[ActivityEvent]) -> str:
    """``MM-DD HH:MM`` in the event's own wall-clock time."""
    if event is None or event.access_time is None:
        return "--"
    return event.access_time.strftime("%m-%d %H:%M")


def person_header(name: str) -> str:
    return f"【{name}】"


def render_error(name: str, message: str) -> str:
    return f"{person_header(name)}\n  查询失败：{message}\n"


class PersonRenderer:
    """Turns interpreter and aggregator output into the fixed text layout."""

    def __init__(self, profile: PersonProfile = GENERIC_PROFILE) -> None:
        self.profile = profile
        self.classifier = AppClassifier(profile)

    def render_state(self, state: PersonState) -> str:
        name = state.name
        if not state.has_events:
            return f"{person_header(name)}\n  暂无记录\n"
        if state.asleep:
            return f"{person_header(name)}\n  {name}好像睡着了呢\n"

        text = f"{person_header(name)}\n{self._phone_block(name, state.phone_event)}"
        if self.profile.show_pc:
            text += "\n" + self._pc_block(name, state.pc_event)
        advisory = self.classifier.advisory_for(state.phone_event)
        if advisory:
            text += "\n" + advisory
        return text

    def _phone_block(self, name: str, event: Optional[ActivityEvent]) -> str:
        if event is None:
            return "\n".join([PHONE_HEADER, NO_DATA, ""])

        source = f"来自：{name} の {self.profile.phone_label}"
        app = app_name_from_event(event)
        category = self.classifier.classify(app)
        if category.is_noise:
            text = "  熄屏" if category.kind is AppKind.SCREEN_OFF else NO_DATA
            return "\n".join([PHONE_HEADER, text, source, ""])

        lines = [PHONE_HEADER]
        classified = classify_title(event.title)
        if self.profile.music and classified.kind is TitleKind.MUSIC:
            if self.profile.music_prefix:
                lines.append(self.profile.music_prefix)
            lines.append(f"▶曲目：{classified.song or UNKNOWN_APP_LABEL}")
            lines.append(f"▶用{classified.app or UNKNOWN_APP_LABEL}听的")
        else:
            if self.profile.phone_prefix:
                lines.append(self.profile.phone_prefix)
            if category.kind is AppKind.KNOWN:
                lines.append(category.text or "")
            else:
                lines.append(f"▶应用：{app or UNKNOWN_APP_LABEL}")
        lines.extend([f"时间：{format_event_time(event)}", source, ""])
        return "\n".join(lines)

    def _pc_block(self, name: str, event: Optional[ActivityEvent]) -> str:
        source = f"来自：{name} の {self.profile.pc_label}"
        if event is None:
            return "\n".join([PC_HEADER, NO_DATA, source])

        full_title = (event.window_title or "").strip() or UNKNOWN_WINDOW_LABEL
        classified = classify_title(event.window_title)
        if classified.kind is TitleKind.BROWSER:
            app, page = classified.app, classified.page_title
        else:
            app, page = first_segment(full_title), full_title
        return "\n".join(
            [
                PC_HEADER,
                f"💻{name}的电脑正在运行：",
                f"▶应用：{app or '未知'}",
                f"▶窗口标题：{page or full_title}",
                f"时间：{format_event_time(event)}",
                source,
            ]
        )

    def render_daily(self, report: DailyReport) -> str:
        name = report.person_name
        if report.is_empty:
            return f"{person_header(name)}\n  今天还没有记录\n"

        lines = [
            f"{person_header(name)}今日统计",
            f"今天已过去 {format_duration(report.elapsed_seconds)}，"
            f"设备记录覆盖约 {report.total_percent}%",
        ]
        for kind in DeviceKind:
            buckets = report.per_device.get(kind) or []
            if not buckets:
                continue
            covered = report.covered_seconds.get(kind, 0)
            lines.append(f"====== {_DEVICE_TITLES[kind]} · 共 {format_duration(covered)} ======")
            for rank, bucket in enumerate(buckets, start=1):
                lines.append(
                    f"{rank}. {bucket.app_name}  {format_duration(bucket.seconds)}"
                    f"（{bucket.percent}%）"
                )
        return "\n".join(lines) + "\n"
