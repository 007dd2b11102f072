"""
数据源配置异常
"""
from config import Messages


class DataSourceError(Exception):
    """数据源配置相关异常的基类"""


class NotFoundError(DataSourceError, LookupError):
    """请求的数据源名称不存在"""

    def __init__(self, name):
        self.name = name
        super().__init__(f"{Messages.DATASOURCE_NOT_FOUND}: {name}")


class ValidationError(DataSourceError, ValueError):
    """数据源定义不完整或格式错误

    消息中只包含数据源名称、字段名和原因，不包含字段值，避免泄露密码。
    """

    def __init__(self, name, field, reason):
        self.name = name
        self.field = field
        self.reason = reason
        location = f"{name}.{field}" if field else name
        super().__init__(f"{reason}: {location}")
