# app/services/dictionary_store.py
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from app.utils.domain import Entry, FuriganaEntry


class DictionaryStore:
    """
    内存词典

    持有全部词条（保持加载顺序）以及按词形索引的振假名数据。
    启动时加载一次，之后只读。
    """

    def __init__(
        self,
        entries: Optional[Iterable[Entry]] = None,
        furigana: Optional[Iterable[FuriganaEntry]] = None,
    ):
        self._entries: Tuple[Entry, ...] = tuple(entries or ())
        # 同一词形可能对应多个读音，查找时需同时匹配 term 和 reading
        self._furigana: Dict[str, List[FuriganaEntry]] = {}
        for item in furigana or ():
            self._furigana.setdefault(item.term, []).append(item)

    @property
    def entries(self) -> Tuple[Entry, ...]:
        return self._entries

    def find_furigana(self, term: str, reading: str) -> Optional[FuriganaEntry]:
        """返回第一个 reading 完全一致的振假名条目，没有则返回 None"""
        for item in self._furigana.get(term, ()):
            if item.reading == reading:
                return item
        return None

    def iter_furigana(self) -> Iterator[Tuple[str, List[FuriganaEntry]]]:
        return iter(self._furigana.items())

    @property
    def furigana_count(self) -> int:
        return sum(len(items) for items in self._furigana.values())

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
