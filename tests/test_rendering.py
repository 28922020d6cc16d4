"""Tests for the chat text layout."""

from __future__ import annotations

from datetime import timedelta

from spy_status.classifier import profile_for
from spy_status.models import AppUsageBucket, DailyReport, DeviceKind, PersonState
from spy_status.rendering import PersonRenderer, format_event_time, render_error

from tests.conftest import make_event


def _state(name: str, phone=None, pc=None, **kwargs) -> PersonState:
    return PersonState(name=name, phone_event=phone, pc_event=pc, **kwargs)


def test_format_event_time() -> None:
    assert format_event_time(make_event("pc", "x", ago=timedelta(minutes=1))) == "03-14 11:59"
    assert format_event_time(None) == "--"


class TestRenderState:
    def test_generic_two_blocks(self) -> None:
        text = PersonRenderer().render_state(
            _state(
                "音落",
                phone=make_event("xiaomi-phone", "微信 - com.tencent.mm"),
                pc=make_event("DESKTOP-1", "知乎 - 个人 - Microsoft Edge", ago=timedelta(minutes=2)),
            )
        )
        assert text.startswith("【音落】\n====== 手机状态 ======\n▶应用：微信\n时间：03-14 11:59\n")
        assert "com.tencent.mm" not in text
        assert "来自：音落 の 手机" in text
        assert "💻音落的电脑正在运行：" in text
        assert "▶应用：Microsoft Edge\n▶窗口标题：知乎 - 个人\n时间：03-14 11:58" in text
        assert text.endswith("来自：音落 の PC")

    def test_no_data_blocks(self) -> None:
        text = PersonRenderer().render_state(_state("音落"))
        assert text == (
            "【音落】\n====== 手机状态 ======\n  暂无数据\n\n"
            "====== 电脑状态 ======\n  暂无数据\n来自：音落 の PC"
        )

    def test_screen_off_and_noise(self) -> None:
        renderer = PersonRenderer()
        pc = make_event("pc", "Code")
        assert "  熄屏\n来自：夜合 の 手机" in renderer.render_state(
            _state("夜合", phone=make_event("phone", "系统 UI"), pc=pc)
        )
        assert "  暂无数据\n来自：夜合 の 手机" in renderer.render_state(
            _state("夜合", phone=make_event("phone", "安全服务"), pc=pc)
        )

    def test_asleep_collapses_output(self) -> None:
        text = PersonRenderer().render_state(_state("夜合", asleep=True))
        assert text == "【夜合】\n  夜合好像睡着了呢\n"

    def test_no_events(self) -> None:
        assert PersonRenderer().render_state(_state("夜合", has_events=False)) == "【夜合】\n  暂无记录\n"

    def test_known_app_text(self) -> None:
        text = PersonRenderer().render_state(_state("音落", phone=make_event("phone", "游戏助推器")))
        assert "在打游戏，但是采集不到在打什么神秘游戏" in text
        assert "▶应用：游戏助推器" not in text

    def test_hidden_pc_block(self) -> None:
        profile = profile_for("夜合", {"show_pc": False})
        text = PersonRenderer(profile).render_state(
            _state("夜合", phone=make_event("phone", "微信"), pc=make_event("pc", "Code"))
        )
        assert "电脑状态" not in text

    def test_advisory_suffix(self) -> None:
        text = PersonRenderer(profile_for("雨核")).render_state(
            _state("雨核", phone=make_event("phone", "范式：起源 - com.game"))
        )
        assert text.endswith("\n雨核在推制霸呢...不要打扰他")

    def test_pimeng_music(self) -> None:
        text = PersonRenderer(profile_for("皮梦")).render_state(
            _state("皮梦", phone=make_event("pimeng-iq13", "🎵 网易云音乐 - 晴天"))
        )
        assert "🎵皮梦正在听音乐：\n▶曲目：晴天\n▶用网易云音乐听的" in text
        assert "来自：皮梦 の iQOO13" in text

    def test_pimeng_special_app(self) -> None:
        text = PersonRenderer(profile_for("皮梦")).render_state(
            _state("皮梦", phone=make_event("pimeng-iq13", "三角洲行动 - com.tencent.tmgp"))
        )
        assert "♿️皮梦正在\n得吃\n" in text


def test_render_error() -> None:
    assert render_error("音落", "请求超时") == "【音落】\n  查询失败：请求超时\n"


class TestRenderDaily:
    def test_ranked_lists_skip_empty_devices(self) -> None:
        report = DailyReport(
            person_name="音落",
            elapsed_seconds=3600,
            per_device={
                DeviceKind.PHONE: [
                    AppUsageBucket("微信", 3, 180, 60.0),
                    AppUsageBucket("抖音", 2, 120, 40.0),
                ],
                DeviceKind.DESKTOP: [],
            },
            covered_seconds={DeviceKind.PHONE: 300, DeviceKind.DESKTOP: 0},
            total_percent=8.3,
        )
        text = PersonRenderer().render_daily(report)
        assert text.splitlines() == [
            "【音落】今日统计",
            "今天已过去 01:00:00，设备记录覆盖约 8.3%",
            "====== 手机 · 共 00:05:00 ======",
            "1. 微信  00:03:00（60.0%）",
            "2. 抖音  00:02:00（40.0%）",
        ]

    def test_empty_day(self) -> None:
        report = DailyReport(person_name="音落", elapsed_seconds=10)
        assert PersonRenderer().render_daily(report) == "【音落】\n  今天还没有记录\n"

    def test_hidden_pc_policy_does_not_apply_to_daily_view(self) -> None:
        report = DailyReport(
            person_name="夜合",
            elapsed_seconds=43200,
            per_device={
                DeviceKind.PHONE: [],
                DeviceKind.DESKTOP: [AppUsageBucket("Visual Studio Code", 30, 1800, 100.0)],
            },
            covered_seconds={DeviceKind.PHONE: 0, DeviceKind.DESKTOP: 1800},
            total_percent=4.2,
        )
        text = PersonRenderer(profile_for("夜合", {"show_pc": False})).render_daily(report)
        assert "====== 电脑 · 共 00:30:00 ======" in text
        assert "1. Visual Studio Code  00:30:00（100.0%）" in text
