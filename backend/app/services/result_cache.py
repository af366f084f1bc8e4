# app/services/result_cache.py
import logging
import threading
from typing import Dict, Optional

from app.schemas import SearchResponse

logger = logging.getLogger(__name__)


def make_cache_key(query: str, mode: Optional[str]) -> str:
    """缓存键: 原始查询 + "_" + mode（缺省为 "default"）"""
    return f"{query}_{mode or 'default'}"


class ResultCache:
    """
    查询结果缓存

    淘汰策略: 条目数达到 max_entries 后，插入新键前清空整个缓存（非 LRU）。
    max_entries <= 0 表示不限制，缓存在进程生命周期内持续增长。
    词典数据加载后不再变化，因此缓存条目无需失效。

    FastAPI 在线程池中执行同步路由，读写均加锁。
    存入和取出时都做深拷贝，调用方修改返回的响应不会影响缓存条目。
    """

    def __init__(self, max_entries: int = 0):
        self.max_entries = max_entries
        self._entries: Dict[str, SearchResponse] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[SearchResponse]:
        with self._lock:
            response = self._entries.get(key)
        return response.model_copy(deep=True) if response is not None else None

    def put(self, key: str, response: SearchResponse) -> None:
        with self._lock:
            if (
                self.max_entries > 0
                and key not in self._entries
                and len(self._entries) >= self.max_entries
            ):
                logger.info(f"Result cache reached {self.max_entries} entries, clearing")
                self._entries.clear()
            self._entries[key] = response.model_copy(deep=True)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
