#!/usr/bin/env python3
# Client-side language switching: the scripts/markup shipped with every
# page, plus a BeautifulSoup mirror of the switch so builds can check that
# the language data actually lines up with the rendered cards.
import textwrap
from bs4 import BeautifulSoup

from resolver.app import language_name

STORAGE_KEY = "preferredLanguage"

# languages offered in the picker; others still resolve through fallback
PICKER_LANGUAGES = ("en", "zh")

# zh is persisted as "zh_cn" (kept for compatibility with existing visitors)
_STORED = {"en": "en", "zh": "zh_cn"}


def stored_value(lang: str) -> str:
    return _STORED.get(lang, "en")


def from_stored(value) -> str:
    if value in ("zh_cn", "zh"):
        return "zh"
    return "en"


def html_lang(lang: str) -> str:
    return "zh-CN" if lang == "zh" else "en"


# Head script: runs on first paint, before the body is parsed.
# Defines LocalePreference, the single owner of the persisted choice.
DETECT_JS = textwrap.dedent(r"""
var LocalePreference = (function() {
    var STORAGE_KEY = '__STORAGE_KEY__';
    var listeners = [];

    function toStored(lang) { return lang === 'zh' ? 'zh_cn' : 'en'; }
    function fromStored(value) { return (value === 'zh_cn' || value === 'zh') ? 'zh' : 'en'; }

    function readStored() {
        try { return localStorage.getItem(STORAGE_KEY); } catch (e) { return null; }
    }

    function detect() {
        var langs = (navigator.languages && navigator.languages.length)
            ? navigator.languages
            : [navigator.language || navigator.userLanguage || ''];
        for (var i = 0; i < langs.length; i++) {
            var l = String(langs[i] || '').toLowerCase();
            if (l.indexOf('zh') !== -1 || l.indexOf('chinese') !== -1) return 'zh';
        }
        return 'en';
    }

    return {
        isStored: function() { return !!readStored(); },
        get: function() {
            var stored = readStored();
            return stored ? fromStored(stored) : detect();
        },
        set: function(lang) {
            try { localStorage.setItem(STORAGE_KEY, toStored(lang)); } catch (e) {}
            listeners.forEach(function(cb) { cb(lang); });
        },
        onChange: function(cb) { listeners.push(cb); }
    };
})();

(function detectAndSetInitialLanguage() {
    var lang = LocalePreference.get();
    if (!LocalePreference.isStored()) {
        try { localStorage.setItem('__STORAGE_KEY__', lang === 'zh' ? 'zh_cn' : 'en'); } catch (e) {}
    }
    document.documentElement.lang = lang === 'zh' ? 'zh-CN' : 'en';
})();
""").strip().replace("__STORAGE_KEY__", STORAGE_KEY)


PICKER_JS = textwrap.dedent(r"""
function toggleRootLanguagePicker() {
    const dropdown = document.querySelector('.language-dropdown');
    if (!dropdown) return;
    dropdown.style.display = dropdown.style.display === 'none' ? 'block' : 'none';
}

function getCurrentRootLanguage() {
    return LocalePreference.get();
}

function updateRootPageContent(lang) {
    document.querySelectorAll('[data-multilang-item]').forEach(function(item) {
        const variants = Array.prototype.slice.call(item.querySelectorAll('[data-lang]'));
        const shown = variants.find(function(v) { return v.getAttribute('data-lang') === lang; })
            || variants.find(function(v) { return v.getAttribute('data-lang') === 'en'; })
            || variants[0];
        variants.forEach(function(v) {
            v.style.display = v === shown ? 'block' : 'none';
        });
    });

    if (typeof window.updateHomepageContent === 'function') {
        window.updateHomepageContent(lang);
    }
}

LocalePreference.onChange(function(lang) {
    document.documentElement.lang = lang === 'zh' ? 'zh-CN' : 'en';
});

LocalePreference.onChange(function(lang) {
    const names = __NAMES__;
    const button = document.querySelector('.language-picker-button');
    if (button) button.textContent = (names[lang] || names['en']) + ' ▼';

    document.querySelectorAll('.language-dropdown button[data-lang]').forEach(function(btn) {
        const selected = btn.getAttribute('data-lang') === lang;
        btn.style.background = selected ? '#3b82f6' : 'white';
        btn.style.color = selected ? 'white' : '#374151';
    });
});

LocalePreference.onChange(updateRootPageContent);

function switchRootLanguage(lang) {
    const dropdown = document.querySelector('.language-dropdown');
    if (dropdown) dropdown.style.display = 'none';
    LocalePreference.set(lang);
}

document.addEventListener('DOMContentLoaded', function() {
    switchRootLanguage(getCurrentRootLanguage());
});

document.addEventListener('click', function(event) {
    if (!event.target.closest('.language-picker-container')) {
        const dropdown = document.querySelector('.language-dropdown');
        if (dropdown) dropdown.style.display = 'none';
    }
});
""").strip()


def render_detect_script() -> str:
    return DETECT_JS


def render_language_picker(current: str = "en") -> str:
    """Dropdown markup plus the script exposing the picker functions."""
    names = "{" + ", ".join(f"'{code}': '{language_name(code)}'" for code in PICKER_LANGUAGES) + "}"

    buttons = []
    for code in PICKER_LANGUAGES:
        selected = code == current
        style = "background: #3b82f6; color: white;" if selected else "background: white; color: #374151;"
        buttons.append(
            f'<button data-lang="{code}" onclick="switchRootLanguage(\'{code}\')" '
            f'style="display: block; width: 100%; text-align: left; padding: 8px 12px; '
            f'border: none; cursor: pointer; font-size: 14px; {style}">{language_name(code)}</button>'
        )

    return textwrap.dedent("""
    <div class="language-picker-container" style="position: relative; display: inline-block;">
    <button class="language-picker-button" onclick="toggleRootLanguagePicker()" style="background: none; border: none; color: inherit; cursor: pointer; font-size: inherit;">{label} ▼</button>
    <div class="language-dropdown" style="display: none; position: absolute; top: 100%; right: 0; background: white; border: 2px solid #e2e8f0; border-radius: 8px; z-index: 1000; min-width: 120px; margin-top: 4px;">
    {buttons}
    </div>
    </div>
    <script>
    {script}
    </script>
    """).strip().format(
        label=language_name(current),
        buttons="\n".join(buttons),
        script=PICKER_JS.replace("__NAMES__", names),
    )


# Server-side mirror of updateRootPageContent (PICKER_JS) and
# updateHomepageContent (emitter.app.UPDATE_HOMEPAGE_JS). The card selection,
# matching and fallback rules here must stay in sync with those scripts.

def _in_prose(tag) -> bool:
    if "prose" in (tag.get("class") or []):
        return True
    return tag.find_parent(class_="prose") is not None


# page bodies (.prose and anything inside it) never hold cards
def _cards(soup):
    return [a for a in soup.find_all("article") if not _in_prose(a)]


def _article_matches(article, base_path: str) -> bool:
    key = article.get("data-base-path")
    if key is not None:
        return key == base_path
    link = article.select_one("h3 a")
    last_part = base_path.split("/")[-1]
    return bool(link) and last_part in (link.get("href") or "")


def _set_display(tag, visible: bool):
    styles = [s.strip() for s in (tag.get("style") or "").split(";")
              if s.strip() and not s.strip().startswith("display")]
    styles.insert(0, "display: block" if visible else "display: none")
    tag["style"] = "; ".join(styles) + ";"


def apply_switch(soup: BeautifulSoup, lang: str, data: dict) -> BeautifulSoup:
    """Mutate soup the way the browser would after switching to lang."""
    for container in soup.select("[data-multilang-item]"):
        variants = container.select("[data-lang]")
        if not variants:
            continue
        by_lang = {v.get("data-lang"): v for v in variants}
        shown = by_lang.get(lang) or by_lang.get("en") or variants[0]
        for v in variants:
            _set_display(v, v is shown)

    articles = _cards(soup)
    for base_path, item_data in (data or {}).items():
        lang_data = item_data.get(lang) or item_data.get("en")
        if not lang_data:
            continue
        for article in articles:
            if not _article_matches(article, base_path):
                continue
            title_link = article.select_one("h3 a")
            if title_link is None:
                continue
            title_link.string = lang_data.get("title", "")
            title_link["href"] = lang_data.get("url", "")
            description = article.select_one("p.text-zinc-500, p.mt-2")
            if description is not None:
                description.string = lang_data.get("description", "")
    return soup


def audit_language_links(html: str, data: dict) -> dict:
    """
    Report base paths from the language data that match no card, or more
    than one card, on the given page. Variants inside one multi-language
    container count as a single card.
    """
    soup = BeautifulSoup(html, "lxml")
    articles = _cards(soup)
    report = {"missing": [], "ambiguous": []}

    for base_path in (data or {}):
        cards = set()
        for article in articles:
            if _article_matches(article, base_path):
                container = article.find_parent(attrs={"data-multilang-item": True})
                cards.add(id(container if container is not None else article))
        if not cards:
            report["missing"].append(base_path)
        elif len(cards) > 1:
            report["ambiguous"].append(base_path)
    return report
