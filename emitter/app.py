#!/usr/bin/env python3
# Build the homepage language-data blob and the JS that consumes it.
import os, json
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

import yaml

from content.app import ContentItem
from grouper.app import group_language_variants
from resolver.app import absolute_url, parse_locale

TRANSLATIONS_FILE = Path(os.getenv("TRANSLATIONS_FILE", "/config/translations.yml"))

# number of article groups the homepage can switch
HOMEPAGE_LIMIT = 6

EMPTY_BLOB = "const homepageLanguageData = {};"


def format_date(dt: datetime) -> str:
    """Medium date in zh_CN style, e.g. 2024年6月1日."""
    return f"{dt.year}年{dt.month}月{dt.day}日"


def load_translations(path=None) -> dict:
    """
    Load hand-written translation records:

        posts/some-article:
          zh:
            title: ...
            description: ...
            url: /posts/some-article     # optional
            date: 2024年6月1日            # optional

    Unknown locales are dropped. A missing or broken file yields {} so the
    build keeps going without overrides.
    """
    path = Path(path or TRANSLATIONS_FILE)
    if not path.exists():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except Exception as e:
        print(f"[WARN] could not read translations {path}: {e}", flush=True)
        return {}
    if not isinstance(raw, dict):
        print(f"[WARN] translations {path} is not a mapping, ignoring", flush=True)
        return {}

    records = {}
    for base_path, by_locale in raw.items():
        if not isinstance(by_locale, dict):
            continue
        for code, rec in by_locale.items():
            locale = parse_locale(str(code))
            if locale is None or not isinstance(rec, dict):
                print(f"[WARN] ignoring translation {base_path}/{code}", flush=True)
                continue
            records.setdefault(str(base_path).strip("/"), {})[locale.value] = {
                k: str(v) for k, v in rec.items() if v is not None
            }
    return records


def _entry(item: ContentItem, base_path: str) -> dict:
    return {
        "title": item.title,
        "description": item.description,
        "url": absolute_url(base_path),
        "date": format_date(item.date),
    }


def build_language_data(items: Iterable[ContentItem], translations: Optional[dict] = None) -> dict:
    """
    base path -> locale -> {title, description, url, date}

    Only the HOMEPAGE_LIMIT most recently updated groups are included. A
    translation record replaces the whole derived entry for its locale.
    """
    translations = translations or {}
    data = {}

    for group in group_language_variants(items)[:HOMEPAGE_LIMIT]:
        entries = {v.locale.value: _entry(v.item, group.base_path) for v in group.variants}

        for code, rec in translations.get(group.base_path, {}).items():
            entries[code] = {
                "title": rec.get("title", ""),
                "description": rec.get("description", ""),
                "url": rec.get("url") or absolute_url(group.base_path),
                "date": rec.get("date") or format_date(group.latest),
            }

        data[group.base_path] = entries

    return data


def serialize_language_data(data) -> str:
    """JSON statement for the blob; falls back to an empty mapping on any failure."""
    try:
        payload = json.dumps(data, ensure_ascii=False)
    except Exception as e:
        print(f"[emitter] language data not serializable, emitting empty blob: {e}", flush=True)
        return EMPTY_BLOB
    # keep a literal "</script>" inside a title from ending the tag early
    payload = payload.replace("</", "<\\/")
    return f"const homepageLanguageData = {payload};"


UPDATE_HOMEPAGE_JS = r"""
function updateHomepageContent(lang) {
    const DEBUG = window.location.hostname === 'localhost' || window.location.hostname === '127.0.0.1';
    // page bodies (.prose and anything inside it) never hold cards
    const articles = Array.prototype.slice.call(document.querySelectorAll('article'))
        .filter(function(article) { return !article.closest('.prose'); });

    Object.keys(homepageLanguageData).forEach(function(basePath) {
        const itemData = homepageLanguageData[basePath];
        const langData = itemData[lang] || itemData['en'];
        if (!langData) return;

        // exact match on data-base-path; cards without it use the old href heuristic
        const segments = basePath.split('/');
        const lastPart = segments[segments.length - 1];
        const matched = articles.filter(function(article) {
            const key = article.getAttribute('data-base-path');
            if (key !== null) return key === basePath;
            const link = article.querySelector('h3 a');
            return !!link && link.href.includes(lastPart);
        });

        matched.forEach(function(article) {
            const titleLink = article.querySelector('h3 a');
            if (!titleLink) return;
            titleLink.textContent = langData.title;
            titleLink.setAttribute('href', langData.url);

            const description = article.querySelector('p.text-zinc-500, p.mt-2');
            if (description) description.textContent = langData.description;
            if (DEBUG) console.log('[lang] updated', basePath, '->', lang);
        });
    });
}

window.updateHomepageContent = updateHomepageContent;
"""


def render_language_script(data) -> str:
    return serialize_language_data(data) + "\n" + UPDATE_HOMEPAGE_JS
