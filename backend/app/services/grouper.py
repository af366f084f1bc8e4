# app/services/grouper.py
from typing import Dict, Iterable, List, Tuple

from app.schemas import FuriganaSegment, SearchResultItem, TagInfo
from app.services.dictionary_store import DictionaryStore
from app.services.tag_service import TagResolver
from app.utils.domain import Entry


class Grouper:
    """
    将匹配到的词条按 (term, reading) 合并

    - 结果顺序 = 每个 (term, reading) 首次出现的顺序（输入已按频率排序）
    - 标签、振假名、频率取自该组的第一个词条
    - 释义按出现顺序追加，保留重复项
    """

    def __init__(self, store: DictionaryStore, tag_resolver: TagResolver):
        self.store = store
        self.tag_resolver = tag_resolver

    def group(self, entries: Iterable[Entry]) -> List[SearchResultItem]:
        # 使用 (term, reading) 元组作为键，避免字符串拼接带来的键冲突
        grouped: Dict[Tuple[str, str], SearchResultItem] = {}
        for entry in entries:
            key = (entry.term, entry.reading)
            item = grouped.get(key)
            if item is None:
                item = self._new_item(entry)
                grouped[key] = item
            item.meanings.extend(entry.meanings)
        return list(grouped.values())

    def _new_item(self, entry: Entry) -> SearchResultItem:
        tags = [
            TagInfo(tag=tag.symbol, description=tag.description)
            for tag in self.tag_resolver.describe(entry.tags)
        ]

        furigana = None
        furigana_entry = self.store.find_furigana(entry.term, entry.reading)
        if furigana_entry is not None:
            furigana = [FuriganaSegment(**segment) for segment in furigana_entry.segments]

        return SearchResultItem(
            term=entry.term,
            reading=entry.reading,
            meanings=[],
            furigana=furigana,
            tags=tags,
            frequency=entry.frequency_rank,
        )
