"""Tests for app classification and person profiles."""

from __future__ import annotations

import pytest

from spy_status.classifier import (
    NOISE_APPS,
    SCREEN_OFF_APPS,
    AppClassifier,
    profile_for,
)
from spy_status.models import AppKind

from tests.conftest import make_event


@pytest.mark.parametrize("name", sorted(SCREEN_OFF_APPS))
def test_screen_off_entries(name: str) -> None:
    assert AppClassifier().classify(name).kind is AppKind.SCREEN_OFF


@pytest.mark.parametrize("name", sorted(NOISE_APPS - SCREEN_OFF_APPS))
def test_noise_entries_are_not_screen_off(name: str) -> None:
    assert AppClassifier().classify(name).kind is AppKind.NOISE


def test_exact_match_only() -> None:
    classifier = AppClassifier()
    assert classifier.classify("  系统 UI  ").kind is AppKind.SCREEN_OFF
    assert classifier.classify("系统 UI 设置").kind is AppKind.GENERIC


def test_generic_known_app() -> None:
    category = AppClassifier().classify("游戏助推器")
    assert category.kind is AppKind.KNOWN
    assert "神秘游戏" in (category.text or "")


def test_pimeng_templates_substitute_app_name() -> None:
    classifier = AppClassifier(profile_for("皮梦"))
    assert classifier.classify("三角洲行动").text == "得吃"
    assert classifier.classify("交互池").text == "神秘应用（采集不准确）「交互池」"
    assert classifier.classify("PiliPlus").text == "哔哩哔哩（第三方客户端）"
    assert classifier.classify("游戏助推器").kind is AppKind.GENERIC


def test_profile_overrides_merge_special_apps() -> None:
    profile = profile_for("皮梦", {"special_apps": {"微信": "在摸鱼"}, "show_pc": False})
    assert profile.special_apps["微信"] == "在摸鱼"
    assert profile.special_apps["三角洲行动"] == "得吃"
    assert profile.show_pc is False
    assert profile.phone_machine == "pimeng-iq13"


def test_advisory_uses_containment() -> None:
    classifier = AppClassifier(profile_for("雨核"))
    event = make_event("xiaomi-phone", "游戏 范式：起源 - com.game")
    assert classifier.advisory_for(event) == "雨核在推制霸呢...不要打扰他"
    assert classifier.advisory_for(make_event("xiaomi-phone", "微信")) is None
    assert AppClassifier().advisory_for(event) is None


def test_template_with_other_braces_is_kept() -> None:
    classifier = AppClassifier(profile_for("音落", {"special_apps": {"微信": "在{where}摸鱼「{app}」"}}))
    assert classifier.classify("微信").text == "在{where}摸鱼「微信」"
