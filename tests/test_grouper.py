# tests/test_grouper.py

import sys
from datetime import datetime
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from content.app import ContentItem  # type: ignore
from grouper.app import group_language_variants  # type: ignore


def make_item(path, date, title=None, description=""):
    return ContentItem(path=path, title=title or path, description=description, date=date)


D1 = datetime(2024, 1, 1)
D2 = datetime(2024, 3, 1)
D3 = datetime(2024, 6, 1)


# Every item lands in exactly one group.
def test_grouping_is_a_partition():
    items = [
        make_item("posts/a", D1),
        make_item("posts/a_zh", D2),
        make_item("posts/b", D3),
        make_item("posts/c_fr", D1),
        make_item("posts/c_it", D2),
    ]
    groups = group_language_variants(items)
    assert sum(len(g.variants) for g in groups) == len(items)

    seen = [v.item.path for g in groups for v in g.variants]
    assert sorted(seen) == sorted(it.path for it in items)
    assert {g.base_path for g in groups} == {"posts/a", "posts/b", "posts/c"}


def test_variants_sorted_by_locale_code():
    items = [make_item("posts/a_zh", D2), make_item("posts/a", D1)]
    groups = group_language_variants(items)
    assert len(groups) == 1
    assert groups[0].locales() == ["en", "zh"]


def test_variants_sort_is_plain_string_order():
    items = [make_item("posts/a_zh", D1), make_item("posts/a_de", D1), make_item("posts/a_ja", D1)]
    assert group_language_variants(items)[0].locales() == ["de", "ja", "zh"]


# B has a newer variant than anything in A, so B comes first.
def test_groups_ordered_by_newest_variant():
    items = [
        make_item("posts/a", datetime(2024, 1, 1)),
        make_item("posts/b", datetime(2024, 1, 1)),
        make_item("posts/b_zh", datetime(2024, 6, 1)),
    ]
    groups = group_language_variants(items)
    assert [g.base_path for g in groups] == ["posts/b", "posts/a"]
    assert groups[0].latest == datetime(2024, 6, 1)


def test_equal_dates_break_ties_by_base_path():
    items = [make_item("posts/zeta", D1), make_item("posts/alpha", D1), make_item("posts/mid", D1)]
    groups = group_language_variants(items)
    assert [g.base_path for g in groups] == ["posts/alpha", "posts/mid", "posts/zeta"]


def test_single_and_multi_variant_flags():
    groups = group_language_variants([make_item("posts/a", D1), make_item("posts/a_zh", D1), make_item("posts/b", D2)])
    by_base = {g.base_path: g for g in groups}
    assert by_base["posts/a"].is_multilingual is True
    assert by_base["posts/b"].is_multilingual is False
    assert by_base["posts/a"].variant_for("zh").item.path == "posts/a_zh"
    assert by_base["posts/b"].variant_for("zh") is None


# Same base path AND same locale: later input wins, and we log it.
def test_duplicate_locale_last_one_wins(capsys):
    first = make_item("posts/a", D1, title="first")
    second = make_item("posts/a_en", D2, title="second")
    groups = group_language_variants([first, second])
    assert len(groups) == 1
    assert [v.item.title for v in groups[0].variants] == ["second"]
    assert "[grouper] duplicate en variant" in capsys.readouterr().out


def test_empty_input_gives_no_groups():
    assert group_language_variants([]) == []
