# app/services/search_service.py
import logging
from typing import List, Optional

from fastapi import Request

from app.exceptions import MissingQueryError, SearchFailedError
from app.schemas import SearchResponse, TagListItem
from app.services.dictionary_store import DictionaryStore
from app.services.grouper import Grouper
from app.services.matcher import Matcher
from app.services.result_cache import ResultCache, make_cache_key
from app.services.tag_service import TagResolver
from app.utils.query_parser import QueryParser

logger = logging.getLogger(__name__)


class SearchService:
    """
    词典查询服务

    流程: 校验 -> 缓存 -> 解析 -> 匹配 -> 合并 -> 写入缓存。
    词典与标签在启动时加载一次后注入，服务本身不持有可变的全局状态，
    唯一的共享可变结构是 ResultCache（内部加锁）。
    """

    def __init__(
        self,
        store: DictionaryStore,
        tag_resolver: TagResolver,
        cache: Optional[ResultCache] = None,
        parser: Optional[QueryParser] = None,
        matcher: Optional[Matcher] = None,
        grouper: Optional[Grouper] = None,
    ):
        self.store = store
        self.tag_resolver = tag_resolver
        self.cache = cache if cache is not None else ResultCache()
        self.parser = parser or QueryParser()
        self.matcher = matcher or Matcher(tag_resolver)
        self.grouper = grouper or Grouper(store, tag_resolver)

    def search(self, query: Optional[str], mode: Optional[str] = None) -> SearchResponse:
        """
        查询词典

        Args:
            query: 原始查询字符串（支持 "#tag"、"#frq12"、"犬 #n" 等语法）
            mode: 匹配模式 exact / any / both / en_exact / en_any

        Returns:
            SearchResponse: 合并后的查询结果

        Raises:
            MissingQueryError: 查询为空
            InvalidFrequencyError: 频率后缀不是整数
            SearchFailedError: 匹配或合并阶段出现意外错误
        """
        if not query or not query.strip():
            raise MissingQueryError()

        cache_key = make_cache_key(query, mode)
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.info(f"Cache hit for: {cache_key}")
            return cached

        parsed = self.parser.parse(query, mode)

        try:
            entries = self.matcher.match(self.store, parsed)
            results = self.grouper.group(entries)
        except Exception as e:
            logger.error(f"Search failed for '{query}' (mode={mode}): {e}", exc_info=True)
            raise SearchFailedError(str(e)) from e

        response = SearchResponse(total_results=len(results), results=results)
        self.cache.put(cache_key, response)
        logger.info(f"Cache miss - stored result for: {cache_key}")
        return response

    def list_tags(self) -> List[TagListItem]:
        """返回全部已加载的标签"""
        return [
            TagListItem(tag=tag.symbol, description=tag.description, category=tag.category)
            for tag in self.tag_resolver.all_tags()
        ]

    @property
    def entry_count(self) -> int:
        return len(self.store)


# ==================== FastAPI 依赖注入 ====================
def get_search_service(request: Request) -> SearchService:
    """获取启动时创建的查询服务实例"""
    return request.app.state.search_service
