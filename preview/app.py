#!/usr/bin/env python3
# FastAPI preview server: serves the generated site and exposes the
# language-data blob rebuilt from the current content.
import os
from pathlib import Path

from fastapi import FastAPI, HTTPException
from fastapi.staticfiles import StaticFiles

from content.app import load_items
from emitter.app import build_language_data, load_translations

CONTENT_DIR       = Path(os.getenv("CONTENT_DIR", "/data/content"))
SITE_DIR          = Path(os.getenv("SITE_DIR", "/site"))
TRANSLATIONS_FILE = Path(os.getenv("TRANSLATIONS_FILE", "/config/translations.yml"))

app = FastAPI(title="theme-preview", version="1.0.0")


@app.get("/healthz")
async def healthz():
    pages = len(list(SITE_DIR.rglob("index.html"))) if SITE_DIR.exists() else 0
    return {"ok": SITE_DIR.exists(), "site_dir": str(SITE_DIR), "pages": pages}


@app.get("/language-data")
async def language_data():
    try:
        items = load_items(CONTENT_DIR)
        return build_language_data(items, load_translations(TRANSLATIONS_FILE))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"could not build language data: {e!r}")


# mounted last so the API routes above take precedence
if SITE_DIR.exists():
    app.mount("/", StaticFiles(directory=str(SITE_DIR), html=True), name="site")
else:
    print(f"[WARN] SITE_DIR {SITE_DIR} does not exist; static pages disabled", flush=True)
