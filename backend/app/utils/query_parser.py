import re
from typing import Optional

from app.enums import SearchMode
from app.exceptions import InvalidFrequencyError
from app.utils.domain import ParsedQuery

# ================= 查询语法 =================
# 按优先级依次判断:
#   1. "#frq<int>"        频率查询
#   2. "#<tag>"           标签查询（"#" 单独出现时匹配全部词条）
#   3. "<term> #<tag>"    词条 + 标签过滤
#      "<term> #frq<int>" 词条 + 频率过滤
#   4. "<term>"           普通词条查询
FREQUENCY_PREFIX = "#frq"
TAG_PREFIX = "#"
FILTER_SEPARATOR = " #"
FILTER_FREQUENCY_PREFIX = "frq"


class QueryParser:
    def __init__(self):
        # 仅接受 ASCII 十进制整数（可带符号）
        self.integer_pattern = re.compile(r'[+-]?[0-9]+', re.ASCII)

    def parse(self, raw_query: str, mode: Optional[str] = None) -> ParsedQuery:
        """
        将原始查询字符串解析为 ParsedQuery

        Args:
            raw_query: 原始查询字符串
            mode: 匹配模式参数，缺省或无法识别时为 None（词条条件不匹配任何词条）

        Returns:
            ParsedQuery

        Raises:
            InvalidFrequencyError: 频率后缀不是整数
        """
        search_mode = SearchMode.from_param(mode)
        query = raw_query.strip()

        if query.startswith(FREQUENCY_PREFIX):
            return self._parse_frequency_query(query, search_mode)
        if query.startswith(TAG_PREFIX):
            return self._parse_tag_query(query, search_mode)
        if FILTER_SEPARATOR in query:
            return self._parse_filtered_term_query(query, search_mode)
        return ParsedQuery(search_term=query, mode=search_mode)

    def _parse_frequency_query(self, query: str, mode: Optional[SearchMode]) -> ParsedQuery:
        frequency = self._parse_frequency(query[len(FREQUENCY_PREFIX):])
        return ParsedQuery(frequency_filter=frequency, tag_only=True, mode=mode)

    def _parse_tag_query(self, query: str, mode: Optional[SearchMode]) -> ParsedQuery:
        # 空标签为通配（匹配全部词条）
        tag = query[len(TAG_PREFIX):].strip()
        return ParsedQuery(tag_filter=tag, tag_only=True, mode=mode)

    def _parse_filtered_term_query(self, query: str, mode: Optional[SearchMode]) -> ParsedQuery:
        term_part, filter_part = query.split(FILTER_SEPARATOR, 1)
        search_term = term_part.strip()
        filter_part = filter_part.strip()

        if filter_part.startswith(FILTER_FREQUENCY_PREFIX):
            frequency = self._parse_frequency(filter_part[len(FILTER_FREQUENCY_PREFIX):])
            return ParsedQuery(search_term=search_term, frequency_filter=frequency, mode=mode)

        return ParsedQuery(search_term=search_term, tag_filter=filter_part, mode=mode)

    def _parse_frequency(self, raw_value: str) -> int:
        value = raw_value.strip()
        if not self.integer_pattern.fullmatch(value):
            raise InvalidFrequencyError(value)
        try:
            return int(value)
        except ValueError:
            # 超出整数字符串转换位数上限
            raise InvalidFrequencyError(value) from None


_default_parser = QueryParser()


def parse_query(raw_query: str, mode: Optional[str] = None) -> ParsedQuery:
    """使用默认解析器解析查询"""
    return _default_parser.parse(raw_query, mode)
