from dataclasses import dataclass
from typing import Dict, Any, Optional, Tuple

from app.enums import QueryKind, SearchMode

# ==================== 词典数据 =================
# 词条、振假名与标签在启动时加载一次，之后只读。
# 所有记录均为 frozen dataclass，由 DictionaryStore / TagResolver 持有。


@dataclass(frozen=True)
class Entry:
    """单个词条（对应 term_bank 中的一行）"""
    term: str
    reading: str
    part_of_speech_tags: Tuple[str, ...] = ()
    extra_tags: Tuple[str, ...] = ()
    frequency_rank: Optional[int] = None
    meanings: Tuple[str, ...] = ()
    group_id: Optional[int] = None
    rules: str = ""

    @property
    def tags(self) -> Tuple[str, ...]:
        """词性标签 + 附加标签（保持原顺序）"""
        return self.part_of_speech_tags + self.extra_tags


@dataclass(frozen=True)
class FuriganaEntry:
    """振假名注音: (term, reading) -> [{"ruby": "猫", "rt": "ねこ"}, ...]"""
    term: str
    reading: str
    segments: Tuple[Dict[str, Any], ...] = ()


@dataclass(frozen=True)
class TagDescriptor:
    """标签描述（对应 tag_bank 中的一行）"""
    symbol: str
    id: int
    description: str = ""
    category: str = ""
    order: int = 0


# ================= 查询 =================
@dataclass(frozen=True)
class ParsedQuery:
    """
    结构化查询

    - frequency:  "#frq12"      -> frequency_filter=12, tag_only=True
    - tag:        "#n"          -> tag_filter="n", tag_only=True
    - term:       "犬 #n"       -> search_term="犬", tag_filter="n"
                  "犬 #frq12"   -> search_term="犬", frequency_filter=12
                  "犬"          -> search_term="犬"
    """
    search_term: Optional[str] = None
    tag_filter: Optional[str] = None
    frequency_filter: Optional[int] = None
    tag_only: bool = False
    mode: Optional[SearchMode] = None

    @property
    def kind(self) -> QueryKind:
        if self.tag_only and self.frequency_filter is not None:
            return QueryKind.FREQUENCY
        if self.tag_only:
            return QueryKind.TAG
        return QueryKind.TERM
