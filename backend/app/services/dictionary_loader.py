# app/services/dictionary_loader.py
"""
词典数据加载

支持两种数据源:
- JSON（默认）: DATA_DIR 下的 Yomichan 格式 term_bank_N.json / tag_bank_1.json，
  以及 JmdictFurigana 的 furigana.json
- 数据库: 配置 DICTIONARY_DATABASE_URL 后从 dictionary_* 表加载

单个文件缺失或格式错误只记录告警并跳过，不会中断启动。
"""
import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import (
    DATA_DIR,
    DICTIONARY_TERM_BANK_COUNT,
    DICTIONARY_TAG_BANK_FILE,
    DICTIONARY_FURIGANA_FILE,
    DICTIONARY_DATABASE_URL,
)
from app.database import create_db_engine, create_session_factory, check_db_connection
from app.models import DictionaryTag, DictionaryTerm, FuriganaReading
from app.services.dictionary_store import DictionaryStore
from app.services.tag_service import TagResolver
from app.utils.domain import Entry, FuriganaEntry, TagDescriptor

logger = logging.getLogger(__name__)

# term_bank 行: [term, reading, definition_tags, rules, score, glossary, sequence, term_tags]
_TERM_ROW_MIN_LENGTH = 6


@dataclass
class DictionaryLoadResult:
    store: DictionaryStore
    tag_resolver: TagResolver
    sources_loaded: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def warn(self, message: str) -> None:
        logger.warning(message)
        self.warnings.append(message)


# ==================== 行解析 ====================
def _split_tags(value: Any) -> Tuple[str, ...]:
    """标签字段为空格分隔的字符串（或 null）"""
    if not value:
        return ()
    if isinstance(value, list):
        return tuple(str(v) for v in value if v)
    return tuple(tag for tag in str(value).split(" ") if tag)


def _optional_int(value: Any) -> Optional[int]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return int(value)
    return None


def parse_term_row(row: Any) -> Entry:
    """
    解析 term_bank 中的一行

    Raises:
        ValueError: 行结构不符合预期
    """
    if not isinstance(row, list) or len(row) < _TERM_ROW_MIN_LENGTH:
        raise ValueError(f"unexpected term row: {row!r}")
    term, reading = row[0], row[1]
    if not isinstance(term, str):
        raise ValueError(f"term must be a string: {term!r}")
    glossary = row[5]
    if not isinstance(glossary, list):
        raise ValueError(f"glossary must be a list: {glossary!r}")

    return Entry(
        term=term,
        reading=reading if isinstance(reading, str) else "",
        part_of_speech_tags=_split_tags(row[2]),
        extra_tags=_split_tags(row[7]) if len(row) > 7 else (),
        frequency_rank=_optional_int(row[4]),
        # 结构化释义（非字符串）不参与文本匹配，直接忽略
        meanings=tuple(g for g in glossary if isinstance(g, str)),
        group_id=_optional_int(row[6]) if len(row) > 6 else None,
        rules=row[3] if isinstance(row[3], str) else "",
    )


def _normalize_segments(raw_segments: Any) -> Tuple[Dict[str, str], ...]:
    """校验振假名片段并统一为 {"ruby", "rt"?}，"rt" 为空时省略"""
    if raw_segments is None:
        return ()
    if not isinstance(raw_segments, list):
        raise ValueError(f"furigana segments must be a list: {raw_segments!r}")
    segments = []
    for segment in raw_segments:
        if not isinstance(segment, dict) or not isinstance(segment.get("ruby"), str):
            raise ValueError(f"unexpected furigana segment: {segment!r}")
        rt = segment.get("rt")
        if rt is not None and not isinstance(rt, str):
            raise ValueError(f"furigana rt must be a string: {rt!r}")
        normalized = {"ruby": segment["ruby"]}
        if rt:
            normalized["rt"] = rt
        segments.append(normalized)
    return tuple(segments)


def parse_furigana_item(item: Any) -> FuriganaEntry:
    """解析 furigana.json 中的一项: {"text", "reading", "furigana": [{"ruby", "rt"}]}"""
    if not isinstance(item, dict) or not isinstance(item.get("text"), str):
        raise ValueError(f"unexpected furigana item: {item!r}")
    reading = item.get("reading") or ""
    if not isinstance(reading, str):
        raise ValueError(f"furigana reading must be a string: {reading!r}")
    return FuriganaEntry(
        term=item["text"],
        reading=reading,
        segments=_normalize_segments(item.get("furigana")),
    )


# ==================== JSON 数据源 ====================
def _load_json(file_path: str, result: DictionaryLoadResult) -> Optional[Any]:
    """读取 JSON 文件（自动去除 BOM），失败时记录告警并返回 None"""
    try:
        with open(file_path, "r", encoding="utf-8-sig") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
        result.warn(f"Skipping file: {file_path} - {e}")
        return None
    if not isinstance(data, list):
        result.warn(f"Skipping file: {file_path} - expected a JSON array")
        return None
    result.sources_loaded.append(os.path.basename(file_path))
    return data


def load_from_json(
    data_dir: str,
    term_bank_count: int = DICTIONARY_TERM_BANK_COUNT,
    tag_bank_file: str = DICTIONARY_TAG_BANK_FILE,
    furigana_file: str = DICTIONARY_FURIGANA_FILE,
) -> DictionaryLoadResult:
    """
    从 JSON 文件加载词典

    Args:
        data_dir: 数据目录
        term_bank_count: 加载 term_bank_1.json ... term_bank_{N}.json
        tag_bank_file: 标签文件名
        furigana_file: 振假名文件名
    """
    result = DictionaryLoadResult(store=DictionaryStore(), tag_resolver=TagResolver())

    tag_rows = _load_json(os.path.join(data_dir, tag_bank_file), result)
    if tag_rows is not None:
        valid_rows = [row for row in tag_rows if isinstance(row, list) and row]
        if len(valid_rows) != len(tag_rows):
            result.warn(f"Skipped {len(tag_rows) - len(valid_rows)} malformed rows in {tag_bank_file}")
        result.tag_resolver = TagResolver.from_bank_rows(valid_rows)

    furigana: List[FuriganaEntry] = []
    furigana_items = _load_json(os.path.join(data_dir, furigana_file), result)
    if furigana_items is not None:
        skipped = 0
        for item in furigana_items:
            try:
                furigana.append(parse_furigana_item(item))
            except (KeyError, ValueError):
                skipped += 1
        if skipped:
            result.warn(f"Skipped {skipped} malformed rows in {furigana_file}")

    entries: List[Entry] = []
    for i in range(1, term_bank_count + 1):
        file_name = f"term_bank_{i}.json"
        rows = _load_json(os.path.join(data_dir, file_name), result)
        if rows is None:
            continue
        skipped = 0
        for row in rows:
            try:
                entries.append(parse_term_row(row))
            except ValueError:
                skipped += 1
        if skipped:
            result.warn(f"Skipped {skipped} malformed rows in {file_name}")

    result.store = DictionaryStore(entries, furigana)
    return result


# ==================== 数据库数据源 ====================
def _query_table(db: Session, model, result: DictionaryLoadResult) -> list:
    """读取整张表，失败时记录告警并返回空列表"""
    try:
        rows = db.query(model).order_by(model.id).all()
    except SQLAlchemyError as e:
        db.rollback()
        result.warn(f"Skipping table: {model.__tablename__} - {e}")
        return []
    result.sources_loaded.append(model.__tablename__)
    return rows


def load_from_database(db: Session) -> DictionaryLoadResult:
    """从 dictionary_* 表加载词典，未知的标签 id 会被丢弃并记录告警"""
    result = DictionaryLoadResult(store=DictionaryStore(), tag_resolver=TagResolver())

    tags = [
        TagDescriptor(
            symbol=row.symbol,
            id=row.id,
            description=row.description or "",
            category=row.category or "",
            order=row.sort_order or 0,
        )
        for row in _query_table(db, DictionaryTag, result)
    ]
    result.tag_resolver = TagResolver(tags)

    unknown_ids = set()

    def _symbols(tag_ids) -> Tuple[str, ...]:
        symbols = []
        for tag_id in tag_ids or []:
            tag = result.tag_resolver.resolve_id(tag_id)
            if tag is None:
                unknown_ids.add(tag_id)
            else:
                symbols.append(tag.symbol)
        return tuple(symbols)

    entries = [
        Entry(
            term=row.term,
            reading=row.reading or "",
            part_of_speech_tags=_symbols(row.pos_tag_ids),
            extra_tags=_symbols(row.extra_tag_ids),
            frequency_rank=row.frequency,
            meanings=tuple(m for m in (row.meanings or []) if isinstance(m, str)),
            group_id=row.sequence,
            rules=row.rules or "",
        )
        for row in _query_table(db, DictionaryTerm, result)
    ]
    if unknown_ids:
        result.warn(f"Dropped unknown tag ids from terms: {sorted(unknown_ids)}")

    furigana: List[FuriganaEntry] = []
    skipped = 0
    for row in _query_table(db, FuriganaReading, result):
        try:
            segments = _normalize_segments(row.segments)
        except ValueError:
            skipped += 1
            continue
        furigana.append(FuriganaEntry(term=row.text, reading=row.reading or "", segments=segments))
    if skipped:
        result.warn(f"Skipped {skipped} malformed rows in {FuriganaReading.__tablename__}")

    result.store = DictionaryStore(entries, furigana)
    return result


def save_to_database(db: Session, store: DictionaryStore, tag_resolver: TagResolver) -> int:
    """
    将已加载的词典写入数据库（用于把 JSON 数据导入数据库数据源）

    Returns:
        写入的词条数量
    """
    tag_ids: Dict[str, int] = {}
    for tag in tag_resolver.all_tags():
        row = DictionaryTag(
            symbol=tag.symbol,
            category=tag.category,
            sort_order=tag.order,
            description=tag.description,
        )
        db.add(row)
        db.flush()
        tag_ids[tag.symbol] = row.id

    for entry in store:
        db.add(DictionaryTerm(
            term=entry.term,
            reading=entry.reading,
            pos_tag_ids=[tag_ids[s] for s in entry.part_of_speech_tags if s in tag_ids],
            extra_tag_ids=[tag_ids[s] for s in entry.extra_tags if s in tag_ids],
            rules=entry.rules,
            frequency=entry.frequency_rank,
            meanings=list(entry.meanings),
            sequence=entry.group_id,
        ))

    for term, items in store.iter_furigana():
        for item in items:
            db.add(FuriganaReading(text=term, reading=item.reading, segments=list(item.segments)))

    db.commit()
    logger.info(f"Saved {len(store)} terms and {len(tag_ids)} tags to database")
    return len(store)


def import_json_into_database(
    db: Session,
    data_dir: str,
    term_bank_count: int = DICTIONARY_TERM_BANK_COUNT,
) -> DictionaryLoadResult:
    """
    读取 data_dir 下的 JSON 词典并写入数据库

    没有加载到任何词条时不写入数据库。

    Returns:
        JSON 加载结果（含告警）
    """
    result = load_from_json(data_dir, term_bank_count=term_bank_count)
    if not len(result.store):
        result.warn(f"No dictionary entries loaded from {data_dir}, nothing to import")
        return result
    save_to_database(db, result.store, result.tag_resolver)
    return result


# ==================== 启动入口 ====================
def load_dictionary(
    data_dir: str = DATA_DIR,
    database_url: Optional[str] = DICTIONARY_DATABASE_URL,
) -> DictionaryLoadResult:
    """按配置选择数据源加载词典"""
    if database_url:
        engine = create_db_engine(database_url)
        if not check_db_connection(engine):
            result = DictionaryLoadResult(store=DictionaryStore(), tag_resolver=TagResolver())
            result.warn(f"Skipping database source: cannot connect to {engine.url!r}")
            return result
        session_factory = create_session_factory(engine)
        db = session_factory()
        try:
            return load_from_database(db)
        finally:
            db.close()

    return load_from_json(data_dir)
