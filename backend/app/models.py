from sqlalchemy import Column, Integer, String, Text, JSON
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class DictionaryTag(Base):
    """标签定义（对应 tag_bank 的一行）"""
    __tablename__ = "dictionary_tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    symbol = Column(String(64), nullable=False, unique=True, index=True)  # 查询使用的符号，如 n、v5r
    category = Column(String(64), default="")
    sort_order = Column(Integer, default=0)
    description = Column(Text, default="")


class DictionaryTerm(Base):
    """
    词条（对应 term_bank 的一行）
    标签以 dictionary_tags.id 列表存储
    """
    __tablename__ = "dictionary_terms"

    id = Column(Integer, primary_key=True, autoincrement=True)
    term = Column(String(255), nullable=False, index=True)
    reading = Column(String(255), nullable=False, default="", index=True)

    pos_tag_ids = Column(JSON, nullable=False, default=list)    # 词性标签 id 列表
    extra_tag_ids = Column(JSON, nullable=False, default=list)  # 附加标签 id 列表
    rules = Column(String(64), default="")

    frequency = Column(Integer, nullable=True)  # 越大越常用
    meanings = Column(JSON, nullable=False, default=list)
    sequence = Column(Integer, nullable=True)   # 同一词头的多个义项共享 sequence


class FuriganaReading(Base):
    """振假名（JmdictFurigana）"""
    __tablename__ = "furigana_readings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    text = Column(String(255), nullable=False, index=True)
    reading = Column(String(255), nullable=False)
    segments = Column(JSON, nullable=False, default=list)  # [{"ruby": "猫", "rt": "ねこ"}]
