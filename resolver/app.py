#!/usr/bin/env python3
# Path / locale helpers shared by the grouper, emitter and publisher.
from enum import Enum
from typing import Optional, Tuple


class Locale(str, Enum):
    EN = "en"
    ZH = "zh"
    JA = "ja"
    KO = "ko"
    FR = "fr"
    DE = "de"
    ES = "es"
    IT = "it"
    PT = "pt"
    RU = "ru"

    def __str__(self) -> str:
        return self.value


DEFAULT_LOCALE = Locale.EN
SUPPORTED_LOCALES = tuple(loc.value for loc in Locale)

LANGUAGE_NAMES = {
    "zh": "中文",
    "en": "English",
    "ja": "日本語",
    "ko": "한국어",
    "fr": "Français",
    "de": "Deutsch",
    "es": "Español",
    "it": "Italiano",
    "pt": "Português",
    "ru": "Русский",
}


def parse_locale(text: Optional[str]) -> Optional[Locale]:
    """Exact, case-sensitive lookup in the closed locale set."""
    if not text:
        return None
    try:
        return Locale(text)
    except ValueError:
        return None


# NOTE: suffix detection cannot tell a real "_it" slug from an Italian
# variant; the naming scheme of the content itself has no escape.
def split_locale_suffix(path: str) -> Tuple[str, Optional[Locale]]:
    """
    Split "posts/foo_zh" into ("posts/foo", Locale.ZH).

    Only the text after the LAST underscore is considered. Anything that is
    not a supported locale leaves the path untouched.
    """
    path = path or ""
    idx = path.rfind("_")
    if idx < 0:
        return path, None
    locale = parse_locale(path[idx + 1:])
    if locale is None:
        return path, None
    return path[:idx], locale


def extract_locale(path: str) -> Locale:
    _, locale = split_locale_suffix(path)
    return locale or DEFAULT_LOCALE


def extract_base_path(path: str) -> str:
    base, _ = split_locale_suffix(path)
    return base


def language_name(code: str) -> str:
    code = str(code or "")
    return LANGUAGE_NAMES.get(code, code.capitalize())


def absolute_url(path: str) -> str:
    return "/" + (path or "").lstrip("/")
