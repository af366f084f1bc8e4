# database.py
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from app.models import Base


def create_db_engine(database_url: str) -> Engine:
    """
    创建词典数据库引擎

    SQLite 需要 check_same_thread=False，启动加载与导入脚本可能不在同一线程
    """
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(database_url, connect_args=connect_args)


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine):
    """初始化数据库表结构"""
    Base.metadata.create_all(bind=engine)


def check_db_connection(engine: Engine) -> bool:
    """检查数据库连接是否正常"""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("Database connection OK")
        return True
    except Exception as e:
        print(f"Database connection failed: {e}")
        return False
