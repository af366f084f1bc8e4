# app/services/matcher.py
import logging
from typing import Callable, Dict, List, Optional

from app.enums import QueryKind, SearchMode
from app.services.dictionary_store import DictionaryStore
from app.services.tag_service import TagResolver
from app.utils.domain import Entry, ParsedQuery

logger = logging.getLogger(__name__)

TermPredicate = Callable[[Entry, str], bool]


# ==================== 词条匹配规则 ====================
# 词形/读音比较区分大小写；释义比较忽略大小写
def _match_exact(entry: Entry, search_term: str) -> bool:
    return entry.term == search_term or entry.reading == search_term


def _match_any(entry: Entry, search_term: str) -> bool:
    return search_term in entry.term or search_term in entry.reading


def _match_both(entry: Entry, search_term: str) -> bool:
    # "猫,ねこ"：必须恰好包含一个逗号，否则不匹配任何词条
    parts = search_term.split(",")
    if len(parts) != 2:
        return False
    term, reading = parts
    return entry.term == term and entry.reading == reading


def _match_en_exact(entry: Entry, search_term: str) -> bool:
    needle = search_term.lower()
    return any(meaning.lower() == needle for meaning in entry.meanings)


def _match_en_any(entry: Entry, search_term: str) -> bool:
    needle = search_term.lower()
    return any(needle in meaning.lower() for meaning in entry.meanings)


TERM_PREDICATES: Dict[SearchMode, TermPredicate] = {
    SearchMode.EXACT: _match_exact,
    SearchMode.ANY: _match_any,
    SearchMode.BOTH: _match_both,
    SearchMode.EN_EXACT: _match_en_exact,
    SearchMode.EN_ANY: _match_en_any,
}


def _frequency_sort_key(entry: Entry) -> float:
    # 没有频率的词条排在最后
    if entry.frequency_rank is None:
        return float("-inf")
    return entry.frequency_rank


class Matcher:
    """
    按 ParsedQuery 过滤词条

    结果按 frequency_rank 降序排列；频率相同的词条保持词典中的原顺序。
    """

    def __init__(self, tag_resolver: TagResolver):
        self.tag_resolver = tag_resolver

    def match(self, store: DictionaryStore, query: ParsedQuery) -> List[Entry]:
        """
        查询匹配的词条

        Args:
            store: 词典
            query: 解析后的查询

        Returns:
            按频率降序排列的词条列表
        """
        kind = query.kind
        if kind == QueryKind.FREQUENCY:
            matched = [e for e in store if e.frequency_rank == query.frequency_filter]
        elif kind == QueryKind.TAG:
            matched = self._match_tag_only(store, query.tag_filter or "")
        else:
            matched = self._match_term(store, query)

        return sorted(matched, key=_frequency_sort_key, reverse=True)

    def _match_tag_only(self, store: DictionaryStore, tag_filter: str) -> List[Entry]:
        if not tag_filter:
            return list(store)

        tag = self.tag_resolver.resolve(tag_filter)
        if tag is None:
            logger.debug(f"Unknown tag filter '{tag_filter}', no entries match")
            return []
        return [e for e in store if tag.symbol in e.tags]

    def _match_term(self, store: DictionaryStore, query: ParsedQuery) -> List[Entry]:
        predicate: Optional[TermPredicate] = TERM_PREDICATES.get(query.mode) if query.mode else None
        if predicate is None:
            # 缺省或无法识别的 mode 不做任何词条匹配
            return []

        required_tag: Optional[str] = None
        if query.tag_filter:
            tag = self.tag_resolver.resolve(query.tag_filter)
            if tag is None:
                logger.debug(f"Unknown tag filter '{query.tag_filter}', no entries match")
                return []
            required_tag = tag.symbol

        search_term = query.search_term or ""
        matched = []
        for entry in store:
            if not predicate(entry, search_term):
                continue
            if required_tag is not None and required_tag not in entry.tags:
                continue
            if query.frequency_filter is not None and entry.frequency_rank != query.frequency_filter:
                continue
            matched.append(entry)
        return matched
