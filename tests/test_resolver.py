# tests/test_resolver.py

import sys
from pathlib import Path

import pytest

# Make sure the project root is on sys.path so we can import resolver.app
ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

import resolver.app as resolver  # type: ignore


# ---------- paths with a locale suffix ----------

@pytest.mark.parametrize(
    "path,base,locale",
    [
        ("posts/my-article_zh", "posts/my-article", "zh"),
        ("posts/my-article_en", "posts/my-article", "en"),
        ("posts/climate_it", "posts/climate", "it"),   # known ambiguity: slug read as Italian
        ("posts/a_b_ru", "posts/a_b", "ru"),
        ("notes_ja", "notes", "ja"),
    ],
)
def test_suffixed_paths_split_into_base_and_locale(path, base, locale):
    assert resolver.extract_locale(path) == locale
    assert resolver.extract_base_path(path) == base
    assert resolver.extract_base_path(path) + "_" + resolver.extract_locale(path) == path


# ---------- paths without a recognised suffix ----------

@pytest.mark.parametrize(
    "path",
    [
        "posts/my-article",
        "posts/hello_world",
        "posts/trailing_",
        "posts/upper_ZH",
        "posts/zh",
        "about",
        "",
    ],
)
def test_unsuffixed_paths_default_to_english(path):
    assert resolver.extract_locale(path) == "en"
    assert resolver.extract_locale(path) is resolver.Locale.EN
    assert resolver.extract_base_path(path) == path


def test_split_locale_suffix_returns_none_when_no_locale():
    assert resolver.split_locale_suffix("posts/hello_world") == ("posts/hello_world", None)
    assert resolver.split_locale_suffix("posts/x_fr") == ("posts/x", resolver.Locale.FR)


# ---------- parse_locale ----------

@pytest.mark.parametrize(
    "text,expected",
    [
        ("zh", resolver.Locale.ZH),
        ("pt", resolver.Locale.PT),
        ("ZH", None),
        ("zh_cn", None),
        ("xx", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_locale_closed_set(text, expected):
    assert resolver.parse_locale(text) is expected


def test_supported_locales_are_the_fixed_ten():
    assert set(resolver.SUPPORTED_LOCALES) == {"en", "zh", "ja", "ko", "fr", "de", "es", "it", "pt", "ru"}
    assert str(resolver.Locale.ZH) == "zh"


# ---------- display helpers ----------

def test_language_name_known_and_unknown():
    assert resolver.language_name("zh") == "中文"
    assert resolver.language_name("en") == "English"
    assert resolver.language_name(resolver.Locale.JA) == "日本語"
    assert resolver.language_name("xx") == "Xx"


def test_absolute_url_single_leading_slash():
    assert resolver.absolute_url("posts/a") == "/posts/a"
    assert resolver.absolute_url("/posts/a") == "/posts/a"
    assert resolver.absolute_url("") == "/"
