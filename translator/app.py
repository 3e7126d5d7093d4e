#!/usr/bin/env python3
# Drafts missing Chinese translation records for homepage articles with a
# local OpenAI-compatible LLM. Drafts go to their own file for review and are
# copied into the hand-written translations file by a person; that file is
# only ever read here.
import os, sys, time, signal
from pathlib import Path
from typing import Optional

import yaml
from openai import OpenAI

from content.app import load_items
from emitter.app import HOMEPAGE_LIMIT, load_translations
from grouper.app import group_language_variants
from resolver.app import Locale, absolute_url

CONTENT_DIR       = Path(os.getenv("CONTENT_DIR", "/data/content"))
TRANSLATIONS_FILE = Path(os.getenv("TRANSLATIONS_FILE", "/config/translations.yml"))
DRAFTS_FILE       = Path(os.getenv("TRANSLATION_DRAFTS_FILE", str(TRANSLATIONS_FILE.with_name("translations.drafts.yml"))))

LLM_BASE_URL = os.getenv("LLM_BASE_URL", "http://localhost:8000/v1")
LLM_API_KEY  = os.getenv("LLM_API_KEY", "local")
MODEL_NAME   = os.getenv("LLM_MODEL", "llama-3.1-8b-instruct")
INTERVAL     = int(os.getenv("IDLE_INTERVAL", "3600"))
MAX_LLM_CHARS = int(os.getenv("MAX_LLM_CHARS", "2000"))

client = OpenAI(base_url=LLM_BASE_URL, api_key=LLM_API_KEY)


def _graceful_exit(signum, frame):
    print("Translator shutting down...", flush=True)
    sys.exit(0)


def chat_once(system_prompt: str, user_text: str) -> Optional[str]:
    text = (user_text or "")
    if len(text) > MAX_LLM_CHARS:
        print(f"[translator] truncating input from {len(text)} to {MAX_LLM_CHARS} chars", flush=True)
        text = text[:MAX_LLM_CHARS]

    try:
        resp = client.chat.completions.create(
            model=MODEL_NAME,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": text},
            ],
            temperature=0.0,
        )
        return (resp.choices[0].message.content or "").strip() or None
    except Exception as e:
        print(f"[ERROR] LLM call failed: {e}", flush=True)
        return None


def translate_title_zh(title: str) -> Optional[str]:
    return chat_once(
        "Translate this blog article title into Simplified Chinese. "
        "保留技术名词（如 SwiftUI、iOS）原文；只输出译文，不要引号或解释。",
        title,
    )


def translate_description_zh(description: str) -> Optional[str]:
    if not description:
        return ""
    return chat_once(
        "Translate this blog article description into Simplified Chinese. "
        "保持事实一致，不要新增内容；只输出一段译文，不能使用任何标记。",
        description,
    )


def save_translations(records: dict, path: Path):
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(yaml.safe_dump(records, allow_unicode=True, sort_keys=True), encoding="utf-8")
    os.replace(tmp, path)


def process_once() -> int:
    """Draft zh records for homepage groups with no zh item, record or earlier draft."""
    items = load_items(CONTENT_DIR)
    records = load_translations(TRANSLATIONS_FILE)
    drafts = load_translations(DRAFTS_FILE)
    drafted = 0

    for group in group_language_variants(items)[:HOMEPAGE_LIMIT]:
        if group.variant_for(Locale.ZH):
            continue
        if any(Locale.ZH.value in store.get(group.base_path, {}) for store in (records, drafts)):
            continue
        source = group.variant_for(Locale.EN) or group.variants[0]

        title = translate_title_zh(source.item.title)
        description = translate_description_zh(source.item.description)
        if not title or description is None:
            print(f"[WARN] no translation drafted for {group.base_path}", flush=True)
            continue

        drafts.setdefault(group.base_path, {})[Locale.ZH.value] = {
            "title": title,
            "description": description,
            "url": absolute_url(group.base_path),
        }
        drafted += 1
        print(f"[translator] drafted zh record for {group.base_path}", flush=True)

    if drafted:
        save_translations(drafts, DRAFTS_FILE)
        print(f"[translator] wrote {drafted} drafts to {DRAFTS_FILE}", flush=True)
    return drafted

# to make automation + services play nicely together
RUN_ONCE = os.getenv("RUN_ONCE") == "1"

if __name__ == "__main__":
    signal.signal(signal.SIGINT, _graceful_exit)
    signal.signal(signal.SIGTERM, _graceful_exit)
    print(f"Translator running... (model={MODEL_NAME})", flush=True)
    if RUN_ONCE:
        process_once()
        sys.exit(0)
    while True:
        process_once()
        time.sleep(INTERVAL)
