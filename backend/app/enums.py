from enum import Enum
from typing import Optional


class SearchMode(str, Enum):
    """词条匹配模式"""
    EXACT = "exact"          # 词形或读音完全一致
    ANY = "any"              # 词形或读音包含查询词
    BOTH = "both"            # "词形,读音" 同时一致
    EN_EXACT = "en_exact"    # 释义完全一致（忽略大小写）
    EN_ANY = "en_any"        # 释义包含查询词（忽略大小写）

    @classmethod
    def from_param(cls, value: Optional[str]) -> Optional["SearchMode"]:
        """解析 mode 查询参数，缺省或无法识别时返回 None"""
        if not value:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class QueryKind(str, Enum):
    """查询的主选择条件"""
    FREQUENCY = "frequency"  # #frq<int>
    TAG = "tag"              # #<tag>
    TERM = "term"            # 普通词条查询（可附带 " #tag" / " #frq<int>"）
