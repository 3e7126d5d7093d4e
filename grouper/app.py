#!/usr/bin/env python3
# Group content items that are translations of the same article.
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Tuple

from content.app import ContentItem
from resolver.app import Locale, split_locale_suffix, DEFAULT_LOCALE


@dataclass(frozen=True)
class LanguageVariant:
    item: ContentItem
    locale: Locale


@dataclass(frozen=True)
class MultiLanguageGroup:
    base_path: str
    variants: Tuple[LanguageVariant, ...]

    @property
    def latest(self) -> datetime:
        return max((v.item.date for v in self.variants), default=datetime.min)

    @property
    def is_multilingual(self) -> bool:
        return len(self.variants) > 1

    def locales(self) -> list[str]:
        return [v.locale.value for v in self.variants]

    def variant_for(self, locale) -> LanguageVariant | None:
        for v in self.variants:
            if v.locale == locale:
                return v
        return None


def group_language_variants(items: Iterable[ContentItem]) -> list[MultiLanguageGroup]:
    """
    Partition items by base path.

      - variants inside a group are ordered by locale code (plain string order)
      - groups are ordered by their newest variant, newest first
      - equal dates fall back to base path order so output is deterministic

    Two items with the same base path AND locale collapse into one variant;
    the later one in input order wins.
    """
    grouped: dict[str, dict[Locale, ContentItem]] = {}

    for item in items:
        base_path, locale = split_locale_suffix(item.path)
        locale = locale or DEFAULT_LOCALE
        slot = grouped.setdefault(base_path, {})
        if locale in slot:
            print(
                f"[grouper] duplicate {locale.value} variant for '{base_path}': "
                f"{slot[locale].path} replaced by {item.path}",
                flush=True,
            )
        slot[locale] = item

    groups = [
        MultiLanguageGroup(
            base_path=base_path,
            variants=tuple(
                LanguageVariant(item=it, locale=loc)
                for loc, it in sorted(by_locale.items(), key=lambda kv: kv[0].value)
            ),
        )
        for base_path, by_locale in grouped.items()
    ]

    # two stable sorts: secondary key first
    groups.sort(key=lambda g: g.base_path)
    groups.sort(key=lambda g: g.latest, reverse=True)
    return groups
