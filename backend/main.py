# main.py
import uvicorn
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware

from app.config import (
    DATA_DIR, HOST, PORT, CORS_ALLOWED_ORIGINS, CORS_ALLOW_CREDENTIALS,
    DICTIONARY_CACHE_SIZE, DICTIONARY_DATABASE_URL, LOG_LEVEL,
)
from app.routers import dictionary
from app.schemas import HealthResponse
from app.services.dictionary_loader import load_dictionary
from app.services.result_cache import ResultCache
from app.services.search_service import SearchService, get_search_service


def _setup_logging():
    """配置日志级别"""
    logging.basicConfig(
        level=LOG_LEVEL,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    # 启动时
    print("=" * 50)
    print("JMdict Search API 启动中...")
    print("=" * 50)

    _setup_logging()

    print(f"后端地址: http://{HOST}:{PORT}")
    print(f"数据源: {'数据库' if DICTIONARY_DATABASE_URL else DATA_DIR}")
    print(f"CORS 允许源: {', '.join(CORS_ALLOWED_ORIGINS)}")
    print(f"查询缓存上限: {DICTIONARY_CACHE_SIZE or '不限制'}")
    print("-" * 50)

    # 词典数据只加载一次，加载完成后才开始处理请求
    print("加载词典数据...")
    result = load_dictionary()
    app.state.search_service = SearchService(
        result.store,
        result.tag_resolver,
        cache=ResultCache(max_entries=DICTIONARY_CACHE_SIZE),
    )
    print(f"词条: {len(result.store)}, 标签: {len(result.tag_resolver)}, 振假名: {result.store.furigana_count}")
    if result.warnings:
        print(f"加载告警 {len(result.warnings)} 条（详见日志）")
    print("词典服务就绪")
    print("=" * 50)

    yield

    # 关闭时
    print("Shutting down...")


# 创建 FastAPI 应用
app = FastAPI(
    title="JMdict Search API",
    description="Japanese dictionary lookup with tag/frequency filters and furigana",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS 配置（从配置读取）
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(dictionary.router)


# 健康检查
@app.get("/health", response_model=HealthResponse)
async def health_check(search_service: SearchService = Depends(get_search_service)):
    """健康检查端点"""
    return HealthResponse(status="ok", entries=search_service.entry_count)


def main():
    """开发服务器启动入口"""
    uvicorn.run(
        "main:app",
        host=HOST,
        port=PORT,
        log_level=LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
