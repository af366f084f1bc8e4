# app/routers/dictionary.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from app.exceptions import QueryValidationError, SearchFailedError
from app.schemas import ErrorResponse, SearchResponse, TagListItem
from app.services.search_service import SearchService, get_search_service

router = APIRouter(prefix="/api", tags=["Dictionary"])


@router.get(
    "/search",
    response_model=SearchResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def search_dictionary(
    query: Optional[str] = Query(None, description="查询词"),
    mode: Optional[str] = Query(None, description="匹配模式"),
    search_service: SearchService = Depends(get_search_service),
):
    """
    查询日语词典

    **查询参数**:
    - query: 查询字符串
      - `猫`: 普通查询
      - `#n`: 按标签查询（`#` 单独出现时返回全部词条）
      - `#frq12`: 按频率查询
      - `犬 #n` / `犬 #frq12`: 普通查询 + 标签/频率过滤
    - mode: `exact` | `any` | `both`（`猫,ねこ`）| `en_exact` | `en_any`

    **返回结果**:
    - totalResults: 结果数量
    - results: 按 (term, reading) 合并后的词条，按频率降序

    **示例**:
    - GET /api/search?query=食べる&mode=exact
    - GET /api/search?query=猫,ねこ&mode=both
    """
    try:
        return search_service.search(query, mode)

    except QueryValidationError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})

    except SearchFailedError:
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


@router.get("/tags", response_model=List[TagListItem])
def list_tags(search_service: SearchService = Depends(get_search_service)):
    """
    获取全部标签

    标签符号可用于 `#tag` 查询语法
    """
    return search_service.list_tags()
