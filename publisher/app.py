#!/usr/bin/env python3
import os, json, html
from pathlib import Path
from typing import Optional
import textwrap

from content.app import ContentItem, load_items, load_site_config
from emitter.app import build_language_data, load_translations, render_language_script, HOMEPAGE_LIMIT
from grouper.app import group_language_variants
from resolver.app import absolute_url, extract_base_path, extract_locale
from switcher.app import audit_language_links, render_detect_script, render_language_picker

# Read environment variables for directories
CONTENT_DIR       = Path(os.getenv("CONTENT_DIR", "/data/content"))
SITE_DIR          = Path(os.getenv("SITE_DIR", "/site"))
SITE_CONFIG       = Path(os.getenv("SITE_CONFIG", "/config/site.yml"))
TRANSLATIONS_FILE = Path(os.getenv("TRANSLATIONS_FILE", "/config/translations.yml"))

CARD_CLASS = "rounded-lg my-6 p-6 bg-zinc-100 dark:bg-zinc-800"


def esc(text) -> str:
    return html.escape(str(text or ""), quote=True)


def card_date(item: ContentItem) -> str:
    return item.date.strftime("%Y-%m-%d")


# "Swift UI!" -> "swift-ui"; tags that reduce to nothing get no page
def tag_slug(tag: str) -> str:
    kept = "".join(c for c in str(tag).lower() if c.isalnum() or c in " -_")
    return "-".join(kept.split())


def tag_url(tag: str) -> str:
    return absolute_url(f"tags/{tag_slug(tag)}")


def site_tags(items) -> dict:
    """slug -> display name, first spelling seen wins."""
    tags = {}
    for item in items:
        for tag in item.tags:
            slug = tag_slug(tag)
            if slug:
                tags.setdefault(slug, tag)
    return tags


# Single article card. Variant cards (inside a multi-language container)
# carry data-lang and start hidden unless they are English.
def render_item_card(item: ContentItem, locale: Optional[str] = None) -> str:
    base_path = extract_base_path(item.path)
    attrs = [f'class="{CARD_CLASS}"', f'data-base-path="{esc(base_path)}"']
    if locale is not None:
        attrs.append(f'data-lang="{esc(locale)}"')
        attrs.append('style="display: block;"' if locale == "en" else 'style="display: none;"')

    tags = "".join(
        f'<a class="hashtag" href="{esc(tag_url(t))}">{esc(t)}</a>' for t in item.tags if tag_slug(t)
    )
    attr_text = " ".join(attrs)

    return textwrap.dedent(f"""
    <article {attr_text}>
    <h3 class="font-semibold"><a href="{esc(absolute_url(base_path))}">{esc(item.title)}</a></h3>
    <p class="mt-2 text-zinc-500 dark:text-zinc-400">{esc(item.description)}</p>
    <div class="mt-8 item-meta"><span class="item-date">{card_date(item)}</span>{tags}</div>
    </article>
    """).strip()


def render_item_list(items) -> str:
    """
    One entry per language group: a plain card when the article exists in a
    single language, otherwise a container holding every variant, of which
    the client shows exactly one.
    """
    parts = []
    for group in group_language_variants(items):
        if not group.is_multilingual:
            parts.append(f"<li>{render_item_card(group.variants[0].item)}</li>")
            continue
        variants = "\n".join(render_item_card(v.item, v.locale.value) for v in group.variants)
        parts.append(
            f'<li><div data-multilang-item="{esc(group.base_path)}">\n{variants}\n</div></li>'
        )
    return '<ul class="item-list">\n' + "\n".join(parts) + "\n</ul>"


def render_year_list(items) -> str:
    by_year = {}
    for item in items:
        by_year.setdefault(item.date.year, []).append(item)

    blocks = []
    for year in sorted(by_year, reverse=True):
        rows = []
        for item in sorted(by_year[year], key=lambda it: it.date, reverse=True):
            rows.append(
                f'<li class="flex my-2"><span class="flex-none w-32 text-zinc-500">{card_date(item)}</span>'
                f'<span class="flex-3 link-underline"><a href="{esc(absolute_url(item.path))}">{esc(item.title)}</a></span></li>'
            )
        blocks.append(
            f'<div><h2 class="top-h2">{year}</h2>\n<ul class="group-item-list">\n' + "\n".join(rows) + "\n</ul></div>"
        )
    return '<div class="space-y-16">\n' + "\n".join(blocks) + "\n</div>"


def render_nav(site: dict, selected: Optional[str] = None) -> str:
    links = []
    for page in site.get("pages", []):
        cls = ' class="selected"' if page["id"] == selected else ""
        links.append(f'<li><a href="{esc(page["link"])}"{cls}>{esc(page["title"])}</a></li>')
    links.append(f"<li>{render_language_picker()}</li>")
    return '<nav><ul class="flex flex-wrap gap-4">\n' + "\n".join(links) + "\n</ul></nav>"


def render_page(site: dict, title: str, body: str, head_scripts=(), selected: Optional[str] = None) -> str:
    scripts = [render_detect_script(), *head_scripts]
    head_js = "\n".join(f"<script>\n{s}\n</script>" for s in scripts)

    return f"""<!DOCTYPE html>
<html lang="{esc(site.get('language', 'en'))}">
<head>
<meta charset="utf-8" />
<meta name="viewport" content="width=device-width,initial-scale=1" />
<title>{esc(title)}</title>
{head_js}
</head>
<body>
<header>
<a class="header-title" href="/">{esc(site.get('name'))}</a>
{render_nav(site, selected)}
</header>
<main>
{body}
</main>
</body>
</html>
"""


def render_about(text: str) -> str:
    paragraphs = [p.strip() for p in (text or "").split("\n\n") if p.strip()]
    return "\n".join(f"<p>{esc(p)}</p>" for p in paragraphs)


def render_social_bar(site: dict) -> str:
    links = [
        f'<li><a class="link-underline" href="{esc(s["url"])}" rel="me noopener" target="_blank">{esc(s["title"])}</a></li>'
        for s in site.get("social") or []
    ]
    if not links:
        return ""
    return '<ul class="social-bar flex flex-wrap gap-4 mt-4">\n' + "\n".join(links) + "\n</ul>"


def index_page(site: dict) -> Optional[dict]:
    return next((p for p in site.get("pages", []) if p.get("is_index")), None)


def render_index(items, site: dict, translations: Optional[dict] = None) -> str:
    data = build_language_data(items, translations)
    latest = list(items)[:HOMEPAGE_LIMIT]
    selected = (index_page(site) or {}).get("id")

    body = textwrap.dedent("""
    <div class="mb-16">
    <h2 class="top-h2">About</h2>
    <article class="prose prose-zinc min-w-full"><div class="content">{about}</div></article>
    {social}
    </div>
    <h2 class="top-h2">Latest Writing</h2>
    {latest}
    <div class="overflow-hidden"><a class="float-right" href="/posts">Show more</a></div>
    """).strip().format(
        about=render_about(site.get("about")),
        social=render_social_bar(site),
        latest=render_item_list(latest),
    )

    return render_page(site, site.get("name"), body, [render_language_script(data)], selected)


def section_items(items, section_id: str) -> list:
    prefix = section_id.strip("/") + "/"
    return [it for it in items if it.path.startswith(prefix)]


def render_section(page: dict, items, site: dict, translations: Optional[dict] = None) -> str:
    listed = section_items(items, page["id"])
    if page.get("list_type") == "group_by_year":
        body = render_year_list(listed)
    else:
        body = render_item_list(listed)
    # blob covers the whole site, same as on the homepage
    data = build_language_data(items, translations)
    return render_page(site, page["title"], body, [render_language_script(data)], page["id"])


def post_neighbours(item: ContentItem, items) -> tuple:
    """
    (older, newer) posts next to item: same section, same language, ordered
    by date. Either side is None at the ends.
    """
    section = item.path.split("/")[0]
    locale = extract_locale(item.path)
    siblings = sorted(
        (it for it in items if it.path.split("/")[0] == section and extract_locale(it.path) == locale),
        key=lambda it: (it.date, it.path),
    )
    paths = [it.path for it in siblings]
    if item.path not in paths:
        return None, None
    i = paths.index(item.path)
    older = siblings[i - 1] if i > 0 else None
    newer = siblings[i + 1] if i + 1 < len(siblings) else None
    return older, newer


def render_post_nav(older: Optional[ContentItem] = None, newer: Optional[ContentItem] = None) -> str:
    if older is None and newer is None:
        return ""
    prev_link = (
        f'<a class="post-prev link-underline" href="{esc(absolute_url(older.path))}">← {esc(older.title)}</a>'
        if older else "<span></span>"
    )
    next_link = (
        f'<a class="post-next link-underline" href="{esc(absolute_url(newer.path))}">{esc(newer.title)} →</a>'
        if newer else "<span></span>"
    )
    return f'<nav class="post-nav mt-16 flex justify-between">\n{prev_link}\n{next_link}\n</nav>'


def render_item_page(item: ContentItem, site: dict, language_script: Optional[str] = None,
                     older: Optional[ContentItem] = None, newer: Optional[ContentItem] = None) -> str:
    body = textwrap.dedent("""
    <div class="mb-1 item-meta"><span class="item-date">{date}</span></div>
    <article class="prose prose-zinc min-w-full"><div class="content">
    {content}
    </div></article>
    {nav}
    """).strip().format(date=card_date(item), content=item.body_html, nav=render_post_nav(older, newer))
    scripts = [language_script] if language_script else []
    return render_page(site, item.title, body, scripts)


def render_standalone_page(page: dict, site: dict, language_script: Optional[str] = None) -> str:
    body = (
        '<article class="prose prose-zinc min-w-full"><div class="content">\n'
        f'{page.get("body_html", "")}\n'
        "</div></article>"
    )
    scripts = [language_script] if language_script else []
    return render_page(site, page["title"], body, scripts, page["id"])


def render_tag_list(items, site: dict, language_script: Optional[str] = None) -> str:
    tags = site_tags(items)
    links = [
        f'<li><a class="hashtag link-underline" href="{esc(tag_url(name))}">{esc(name)}</a></li>'
        for _, name in sorted(tags.items(), key=lambda kv: kv[1])
    ]
    body = '<div>\n<ul class="flex flex-wrap gap-4">\n' + "\n".join(links) + "\n</ul>\n</div>"
    scripts = [language_script] if language_script else []
    return render_page(site, "Tags", body, scripts)


def tagged_items(items, tag: str) -> list:
    slug = tag_slug(tag)
    tagged = [it for it in items if any(tag_slug(t) == slug for t in it.tags)]
    return sorted(tagged, key=lambda it: it.date, reverse=True)


def render_tag_details(tag: str, items, site: dict, language_script: Optional[str] = None) -> str:
    selected = next((p["id"] for p in site.get("pages", []) if p["title"] == tag), None)
    body = textwrap.dedent("""
    <div>
    <h2 class="top-h2">Tagged with <span class="hashtag">{tag}</span></h2>
    {items}
    <div class="overflow-hidden"><a class="float-right" href="/tags">Browse all tags</a></div>
    </div>
    """).strip().format(tag=esc(tag), items=render_item_list(tagged_items(items, tag)))
    scripts = [language_script] if language_script else []
    return render_page(site, f"Tagged with {tag}", body, scripts, selected)


def _write(path: Path, text: str):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def publish(items, site: dict, translations: dict) -> int:
    """Write every page into SITE_DIR. Returns the number of pages written."""
    SITE_DIR.mkdir(parents=True, exist_ok=True)
    written = 0

    # the picker expects the blob on every page it appears on
    data = build_language_data(items, translations)
    language_script = render_language_script(data)

    index_html = render_index(items, site, translations)
    _write(SITE_DIR / "index.html", index_html)
    written += 1

    for page in site.get("pages", []):
        if page.get("is_index") or not page.get("id"):
            continue
        if page.get("body_html"):
            html_text = render_standalone_page(page, site, language_script)
        else:
            html_text = render_section(page, items, site, translations)
        _write(SITE_DIR / page["id"] / "index.html", html_text)
        written += 1

    for item in items:
        try:
            older, newer = post_neighbours(item, items)
            _write(SITE_DIR / item.path / "index.html",
                   render_item_page(item, site, language_script, older, newer))
            written += 1
        except Exception as e:
            print(f"[WARN] failed to render {item.path}: {e}", flush=True)

    tags = site_tags(items)
    if tags:
        _write(SITE_DIR / "tags" / "index.html", render_tag_list(items, site, language_script))
        written += 1
    for slug, name in tags.items():
        _write(SITE_DIR / "tags" / slug / "index.html", render_tag_details(name, items, site, language_script))
        written += 1
    print(f"[publisher] {len(tags)} tag pages", flush=True)

    # same blob the pages embed, for tooling and the preview server
    out = SITE_DIR / "output" / "language-data.json"
    _write(out, json.dumps(data, ensure_ascii=False, indent=2))
    print(f"[publisher] Wrote language data to {out} ({len(data)} groups)", flush=True)

    report = audit_language_links(index_html, data)
    for base_path in report["missing"]:
        print(f"[WARN] language data for '{base_path}' matches no card on the homepage", flush=True)
    for base_path in report["ambiguous"]:
        print(f"[WARN] language data for '{base_path}' matches several cards on the homepage", flush=True)

    return written


def main():
    print(f"[publisher] CONTENT_DIR={CONTENT_DIR} SITE_DIR={SITE_DIR}", flush=True)
    site = load_site_config(SITE_CONFIG)
    items = load_items(CONTENT_DIR)
    if not items:
        print("[publisher] No content found; nothing to publish.", flush=True)
        return
    translations = load_translations(TRANSLATIONS_FILE)
    count = publish(items, site, translations)
    print(f"[publisher] Done. {count} pages written.", flush=True)

if __name__ == "__main__":
    main()
