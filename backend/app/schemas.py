# app/schemas.py
from pydantic import BaseModel, Field
from typing import List, Optional


# ==================== Dictionary 相关 ====================
class FuriganaSegment(BaseModel):
    """振假名片段"""
    ruby: str = Field(..., description="正文片段")
    rt: Optional[str] = Field(None, description="注音（假名片段为空）")


class TagInfo(BaseModel):
    """词条标签"""
    tag: str = Field(..., description="标签符号，如 n、v5r")
    description: str = Field("", description="标签说明")


class SearchResultItem(BaseModel):
    """按 (term, reading) 合并后的查询结果"""
    term: str
    reading: str
    # 同组所有词条的释义按出现顺序合并，保留重复项
    meanings: List[str] = Field(default_factory=list)
    furigana: Optional[List[FuriganaSegment]] = None
    tags: List[TagInfo] = Field(default_factory=list)
    frequency: Optional[int] = None


class SearchResponse(BaseModel):
    """查询响应"""
    total_results: int = Field(..., alias="totalResults", description="结果数量")
    results: List[SearchResultItem] = Field(default_factory=list)

    class Config:
        populate_by_name = True


class TagListItem(BaseModel):
    """标签列表项"""
    tag: str
    description: str = ""
    category: str = ""


class ErrorResponse(BaseModel):
    """错误响应"""
    error: str


class HealthResponse(BaseModel):
    status: str = "ok"
    entries: int = 0
