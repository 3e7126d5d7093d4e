# tests/test_content.py

import json
import sys
from datetime import datetime
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

import content.app as content  # type: ignore


def _write_json(folder: Path, name: str, obj: dict):
    (folder / name).write_text(json.dumps(obj, ensure_ascii=False), encoding="utf-8")


# ---------- item_from_record ----------

def test_item_from_record_normalizes_fields():
    item = content.item_from_record({
        "path": "/posts/a_zh/",
        "title": "  标题 ",
        "description": "desc",
        "date": "2024-06-01T08:00:00",
        "bodyHTML": "<p>hi</p>",
        "tags": ["swift", ""],
    })
    assert item.path == "posts/a_zh"
    assert item.title == "标题"
    assert item.date == datetime(2024, 6, 1, 8, 0)
    assert item.body_html == "<p>hi</p>"
    assert item.tags == ("swift",)


def test_item_from_record_converts_offsets_to_naive_utc():
    item = content.item_from_record({"path": "posts/a", "date": "2024-06-01T08:00:00+08:00"})
    assert item.date == datetime(2024, 6, 1, 0, 0)
    assert item.date.tzinfo is None
    assert item.title == "posts/a"


@pytest.mark.parametrize("stamp", ["2024-06-01T00:00:00Z", "2024-06-01T00:00:00z", "2024-06-01T08:00:00+08:00"])
def test_item_from_record_accepts_utc_z_suffix(stamp):
    item = content.item_from_record({"path": "posts/a", "date": stamp})
    assert item.date == datetime(2024, 6, 1, 0, 0)


@pytest.mark.parametrize("record", [{"date": "2024-01-01"}, {"path": "posts/a"}, {"path": "posts/a", "date": "soon"}])
def test_item_from_record_rejects_incomplete_records(record):
    with pytest.raises(ValueError):
        content.item_from_record(record)


# ---------- load_items ----------

def test_load_items_sorts_newest_first_and_skips_bad_files(tmp_path, capsys):
    _write_json(tmp_path, "old.json", {"path": "posts/old", "title": "Old", "date": "2023-01-01"})
    _write_json(tmp_path, "new.json", {"path": "posts/new", "title": "New", "date": "2024-01-01"})
    (tmp_path / "bad.json").write_text("{ not json", encoding="utf-8")
    _write_json(tmp_path, "nodate.json", {"path": "posts/nodate"})

    items = content.load_items(tmp_path)
    assert [it.path for it in items] == ["posts/new", "posts/old"]

    out = capsys.readouterr().out
    assert "[WARN] skipping bad.json" in out
    assert "[WARN] skipping nodate.json" in out


def test_load_items_empty_dir(tmp_path):
    assert content.load_items(tmp_path) == []


# ---------- load_site_config ----------

def test_load_site_config_defaults_when_missing(tmp_path, capsys):
    cfg = content.load_site_config(tmp_path / "missing.yml")
    assert cfg["name"] == "My Site"
    assert cfg["language"] == "en"
    assert cfg["pages"] == []
    assert "not found" in capsys.readouterr().out


def test_load_site_config_normalizes_pages(tmp_path):
    cfg_path = tmp_path / "site.yml"
    cfg_path.write_text(
        "name: Blog\n"
        "pages:\n"
        "  - - id: home\n"
        "      is_index: true\n"
        "  - - id: posts\n"
        "      list_type: group_by_year\n"
        "    - id: notes\n"
        "      list_type: sideways\n",
        encoding="utf-8",
    )
    cfg = content.load_site_config(cfg_path)
    assert cfg["name"] == "Blog"
    assert [p["id"] for p in cfg["pages"]] == ["home", "posts", "notes"]
    home, posts, notes = cfg["pages"]
    assert home["is_index"] is True
    assert posts == {"id": "posts", "title": "Posts", "link": "/posts", "is_index": False, "list_type": "group_by_year"}
    assert notes["list_type"] == "default"


def test_load_site_config_social_links_and_standalone_pages(tmp_path, capsys):
    cfg_path = tmp_path / "site.yml"
    cfg_path.write_text(
        "pages:\n"
        "  - id: about\n"
        "    body_html: <p>Hi</p>\n"
        "social:\n"
        "  - title: GitHub\n"
        "    url: https://github.com/someone\n"
        "  - name: Mastodon\n"
        "    link: https://mastodon.social/@someone\n"
        "  - title: Broken\n",
        encoding="utf-8",
    )
    cfg = content.load_site_config(cfg_path)
    assert cfg["pages"][0]["body_html"] == "<p>Hi</p>"
    assert cfg["social"] == [
        {"title": "GitHub", "url": "https://github.com/someone"},
        {"title": "Mastodon", "url": "https://mastodon.social/@someone"},
    ]
    assert "has no url" in capsys.readouterr().out


def test_shipped_site_config_loads():
    cfg = content.load_site_config(ROOT / "config" / "site.yml")
    assert any(p["is_index"] for p in cfg["pages"])
    assert "SwiftUI" in cfg["about"]
