# app/config.py
# 统一配置管理
# 配置优先级: 环境变量 > config/user.json > 代码默认值
import os
import json
from pathlib import Path
from typing import Dict, Any, Optional

# ==================== 基础路径 ====================
BASE_DIR = Path(__file__).resolve().parent.parent.parent


# ==================== 辅助函数 ====================
def _strip_value(value: Any) -> Any:
    """对字符串值去除首尾空白，其他类型原样返回"""
    if isinstance(value, str):
        return value.strip()
    return value


def _strip_list(values: list) -> list:
    """对列表中每个字符串元素去除首尾空白"""
    return [_strip_value(v) for v in values]


# ==================== 用户配置文件 ====================
def _load_user_config() -> Dict[str, Any]:
    """加载用户配置文件 config/user.json（如果存在）"""
    config_path = BASE_DIR / "config" / "user.json"
    if config_path.exists():
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            print(f"Warning: Failed to load user config from {config_path}: {e}")
    return {}


def _get_config(key: str, default: Any = None, env_var: str = "", strip: bool = True) -> Any:
    """
    获取配置值，优先级：环境变量 > user.json > 默认值

    Args:
        key: user.json 中的键路径（点分隔，如 "backend.port"）
        default: 默认值
        env_var: 环境变量名
        strip: 是否对字符串值去除首尾空白（默认 True）
    """
    # 1. 优先检查环境变量
    if env_var and env_var in os.environ:
        value = os.environ[env_var]
        return _strip_value(value) if strip else value

    # 2. 检查 user.json
    user_config = _load_user_config()
    if user_config:
        value = user_config
        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                value = None
                break
        if value is not None:
            return _strip_value(value) if strip else value

    # 3. 返回默认值
    return default


def _get_str_config(key: str, default: str = "", env_var: str = "") -> str:
    """获取字符串配置，确保返回字符串类型并去除空白"""
    value = _get_config(key, default, env_var, strip=True)
    if value is None:
        return default
    return str(value)


def _get_int_config(key: str, default: int = 0, env_var: str = "") -> int:
    """获取整数配置，支持字符串转整数"""
    value = _get_config(key, default, env_var, strip=True)
    if value is None:
        return default
    try:
        return int(value)
    except (ValueError, TypeError):
        return default


def _get_bool_config(key: str, default: bool = False, env_var: str = "") -> bool:
    """获取布尔配置，支持字符串转布尔"""
    value = _get_config(key, default, env_var, strip=True)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.lower() in ("true", "1", "yes", "on")
    return bool(value)


def _get_list_config(key: str, default: Optional[list] = None, env_var: str = "", separator: str = ",") -> list:
    """获取列表配置，支持字符串分割"""
    if default is None:
        default = []
    value = _get_config(key, default, env_var, strip=False)
    if value is None:
        return default
    if isinstance(value, list):
        return _strip_list(value)
    if isinstance(value, str):
        return [v.strip() for v in value.split(separator) if v.strip()]
    return default


# ==================== 路径配置 ====================
def _resolve_path(path: str) -> str:
    """解析路径: 相对路径基于 BASE_DIR, 绝对路径直接返回"""
    path = path.strip() if isinstance(path, str) else str(path)
    if os.path.isabs(path):
        return path
    return str(BASE_DIR / path)


def _get_data_dir() -> str:
    """获取词典数据目录（term_bank_*.json 等文件所在目录）"""
    if "DATA_DIR" in os.environ:
        return _resolve_path(os.environ["DATA_DIR"])
    return _resolve_path(_get_str_config("paths.data_dir", "data"))


DATA_DIR = _get_data_dir()

# ==================== 服务器 ====================
HOST = _get_str_config("backend.host", "0.0.0.0", "HOST")
PORT = _get_int_config("backend.port", 8010, "PORT")

# ==================== CORS ====================
# 默认允许所有来源（词典 API 为公开只读接口）
CORS_ALLOWED_ORIGINS = _get_list_config("cors.allowed_origins", ["*"], "CORS_ORIGINS")
CORS_ALLOW_CREDENTIALS = _get_bool_config("cors.allow_credentials", False)

# ==================== 词典数据源 ====================
# term_bank_1.json ... term_bank_N.json
DICTIONARY_TERM_BANK_COUNT = _get_int_config("dictionary.term_bank_count", 29, "TERM_BANK_COUNT")
DICTIONARY_TAG_BANK_FILE = _get_str_config("dictionary.tag_bank_file", "tag_bank_1.json")
DICTIONARY_FURIGANA_FILE = _get_str_config("dictionary.furigana_file", "furigana.json")

# 数据库数据源（可选，为空则从 DATA_DIR 下的 JSON 文件加载）
DICTIONARY_DATABASE_URL: Optional[str] = _get_config("dictionary.database_url", None, "DICTIONARY_DATABASE_URL")

# ==================== 查询缓存 ====================
# 超过该条目数时整体清空缓存；0 表示不限制
DICTIONARY_CACHE_SIZE = _get_int_config("dictionary.cache_size", 4096, "DICT_CACHE_SIZE")

# ==================== 日志 ====================
LOG_LEVEL = _get_str_config("logging.level", "INFO", "LOG_LEVEL")
