"""Utilities to classify and split raw window titles."""

from __future__ import annotations

import re
from typing import Optional

from .models import UNKNOWN_APP, ClassifiedTitle, TitleKind

SEPARATOR = " - "
MUSIC_MARKERS: tuple[str, ...] = ("\U0001F3B5", "\U0001F3B6")

# Replacement characters, whitespace and lone surrogates left behind when a
# multi-byte emoji prefix is mangled in transport.
_LEADING_NOISE_PATTERN = re.compile(r"^[\ufffd\s\ud800-\udfff]+")


def strip_leading_noise(value: Optional[str]) -> str:
    """Remove a corrupted-emoji / whitespace prefix."""
    if not value:
        return ""
    return _LEADING_NOISE_PATTERN.sub("", value)


def is_music_title(value: Optional[str]) -> bool:
    return strip_leading_noise(value).startswith(MUSIC_MARKERS)


def first_segment(value: Optional[str]) -> str:
    """Return the trimmed text before the first separator."""
    if not value:
        return ""
    return value.split(SEPARATOR, 1)[0].strip()


def classify_title(raw_title: Optional[str]) -> ClassifiedTitle:
    """Classify a raw title as music, browser-style or plain."""
    if raw_title is None or not raw_title.strip():
        return ClassifiedTitle(TitleKind.PLAIN, app=UNKNOWN_APP)

    cleaned = strip_leading_noise(raw_title)
    if cleaned.startswith(MUSIC_MARKERS):
        remainder = strip_leading_noise(cleaned[1:])
        if SEPARATOR in remainder:
            app, song = remainder.split(SEPARATOR, 1)
            return ClassifiedTitle(TitleKind.MUSIC, app=app.strip(), song=song.strip())
        remainder = remainder.strip()
        return ClassifiedTitle(TitleKind.MUSIC, app=remainder, song=remainder)

    segments = [part.strip() for part in raw_title.split(SEPARATOR)]
    non_empty = [part for part in segments if part]
    if len(non_empty) >= 2:
        return ClassifiedTitle(
            TitleKind.BROWSER,
            app=non_empty[-1],
            page_title=SEPARATOR.join(non_empty[:-1]),
        )

    return ClassifiedTitle(TitleKind.PLAIN, app=first_segment(raw_title))
