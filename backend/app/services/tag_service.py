# app/services/tag_service.py
import logging
from typing import Dict, Iterable, List, Optional

from app.utils.domain import TagDescriptor

logger = logging.getLogger(__name__)


class TagResolver:
    """
    标签解析

    维护 symbol -> TagDescriptor 与 id -> TagDescriptor 两个索引。
    启动时构建一次，之后只读。
    """

    def __init__(self, tags: Optional[Iterable[TagDescriptor]] = None):
        self._by_symbol: Dict[str, TagDescriptor] = {}
        self._by_id: Dict[int, TagDescriptor] = {}
        for tag in tags or []:
            self._register(tag)

    def _register(self, tag: TagDescriptor) -> None:
        previous = self._by_symbol.get(tag.symbol)
        if previous is not None:
            logger.debug(f"Duplicate tag symbol '{tag.symbol}', replacing description")
            self._by_id.pop(previous.id, None)
        self._by_symbol[tag.symbol] = tag
        self._by_id[tag.id] = tag

    @classmethod
    def from_bank_rows(cls, rows: Iterable[list]) -> "TagResolver":
        """
        从 tag_bank 行构建: [name, category, order, notes, score]

        数字 id 按加载顺序从 1 开始分配；重复的 symbol 保留首次分配的 id，
        描述以最后一次出现为准。
        """
        tags: Dict[str, TagDescriptor] = {}
        for row in rows:
            symbol = str(row[0])
            category = str(row[1]) if len(row) > 1 and row[1] is not None else ""
            order = row[2] if len(row) > 2 and isinstance(row[2], int) else 0
            description = str(row[3]) if len(row) > 3 and row[3] is not None else ""
            tag_id = tags[symbol].id if symbol in tags else len(tags) + 1
            tags[symbol] = TagDescriptor(
                symbol=symbol,
                id=tag_id,
                description=description,
                category=category,
                order=order,
            )
        return cls(tags.values())

    def resolve(self, symbol: str) -> Optional[TagDescriptor]:
        """按 symbol 查找标签，未知标签返回 None"""
        return self._by_symbol.get(symbol)

    def resolve_id(self, tag_id: int) -> Optional[TagDescriptor]:
        """按数字 id 查找标签（数据库数据源以 id 列表存储标签）"""
        return self._by_id.get(tag_id)

    def describe(self, symbols: Iterable[str]) -> List[TagDescriptor]:
        """将 symbol 序列解析为描述列表，跳过未知标签，保持原顺序"""
        resolved = []
        for symbol in symbols:
            tag = self._by_symbol.get(symbol)
            if tag is not None:
                resolved.append(tag)
        return resolved

    def all_tags(self) -> List[TagDescriptor]:
        return list(self._by_symbol.values())

    def __contains__(self, symbol: str) -> bool:
        return symbol in self._by_symbol

    def __len__(self) -> int:
        return len(self._by_symbol)
