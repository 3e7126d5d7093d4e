#!/usr/bin/env python3
# Adapters for what the upstream content pipeline hands us:
# rendered item records (JSON) and the site configuration (YAML).
import os, json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Tuple

import yaml

CONTENT_DIR = Path(os.getenv("CONTENT_DIR", "/data/content"))
SITE_CONFIG = Path(os.getenv("SITE_CONFIG", "/config/site.yml"))

LIST_TYPES = ("default", "group_by_year")


@dataclass(frozen=True)
class ContentItem:
    path: str
    title: str
    description: str
    date: datetime
    body_html: str = ""
    tags: Tuple[str, ...] = field(default_factory=tuple)


def item_from_record(data: dict) -> ContentItem:
    """Build a ContentItem from one pipeline record. Raises on missing path/date."""
    path = (data.get("path") or "").strip().strip("/")
    if not path:
        raise ValueError("record has no path")
    raw_date = data.get("date")
    if not raw_date:
        raise ValueError(f"record {path!r} has no date")
    if isinstance(raw_date, datetime):
        date = raw_date
    else:
        text = str(raw_date).strip()
        # fromisoformat only learned the "Z" suffix in 3.11
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        date = datetime.fromisoformat(text)
    # compare everything as naive UTC so mixed offsets still sort
    if date.tzinfo is not None:
        date = date.astimezone(timezone.utc).replace(tzinfo=None)

    return ContentItem(
        path=path,
        title=(data.get("title") or path).strip(),
        description=(data.get("description") or "").strip(),
        date=date,
        body_html=data.get("body_html") or data.get("bodyHTML") or "",
        tags=tuple(t for t in (data.get("tags") or []) if t),
    )


def load_items(content_dir=None) -> list[ContentItem]:
    """
    Read every *.json record in content_dir.

    Broken records are reported and skipped so a single bad file never
    stops the site from being rendered. Result is newest first.
    """
    content_dir = Path(content_dir or CONTENT_DIR)
    items = []
    for json_path in sorted(content_dir.glob("*.json")):
        try:
            data = json.loads(json_path.read_text(encoding="utf-8-sig"))
            items.append(item_from_record(data))
        except Exception as e:
            print(f"[WARN] skipping {json_path.name}: {e}", flush=True)

    items.sort(key=lambda it: it.date, reverse=True)
    print(f"[content] Loaded {len(items)} items from {content_dir}", flush=True)
    return items


def _normalize_page(page: dict) -> dict:
    page_id = str(page.get("id") or "").strip()
    list_type = page.get("list_type") or "default"
    if list_type not in LIST_TYPES:
        print(f"[WARN] page '{page_id}' has unknown list_type '{list_type}', using default", flush=True)
        list_type = "default"
    normalized = {
        "id": page_id,
        "title": page.get("title") or page_id.capitalize(),
        "link": page.get("link") or f"/{page_id}",
        "is_index": bool(page.get("is_index", False)),
        "list_type": list_type,
    }
    # a page with its own body is rendered standalone instead of as a listing
    body = page.get("body_html") or page.get("body")
    if body:
        normalized["body_html"] = str(body)
    return normalized


def _normalize_social(entry) -> Optional[dict]:
    if not isinstance(entry, dict):
        return None
    url = str(entry.get("url") or entry.get("link") or "").strip()
    if not url:
        print(f"[WARN] social link {entry!r} has no url, skipping", flush=True)
        return None
    return {"title": str(entry.get("title") or entry.get("name") or url), "url": url}


def load_site_config(path=None) -> dict:
    path = Path(path or SITE_CONFIG)
    cfg = {}
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    else:
        print(f"[WARN] site config {path} not found, using defaults", flush=True)

    pages = cfg.get("pages", [])
    # allow grouped page lists in YAML (list of lists)
    if isinstance(pages, list) and pages and isinstance(pages[0], list):
        pages = [p for sub in pages for p in sub]

    cfg["name"] = cfg.get("name") or "My Site"
    cfg["language"] = cfg.get("language") or "en"
    cfg["about"] = cfg.get("about") or ""
    cfg["pages"] = [_normalize_page(p) for p in pages if isinstance(p, dict)]
    cfg["social"] = [s for s in map(_normalize_social, cfg.get("social") or []) if s]
    return cfg
