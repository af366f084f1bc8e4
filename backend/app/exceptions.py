# app/exceptions.py
"""
词典查询异常

- QueryValidationError: 客户端输入错误，路由层映射为 400
- SearchFailedError: 匹配/分组阶段的意外错误，路由层映射为 500
"""


class DictionaryError(Exception):
    """词典服务异常基类"""


class QueryValidationError(DictionaryError, ValueError):
    """查询参数校验失败"""


class MissingQueryError(QueryValidationError):
    def __init__(self):
        super().__init__("Query parameter is required")


class InvalidFrequencyError(QueryValidationError):
    def __init__(self, raw_value: str):
        self.raw_value = raw_value
        super().__init__(f"Invalid frequency value: '{raw_value}'")


class SearchFailedError(DictionaryError):
    """查询过程中出现的内部错误"""
