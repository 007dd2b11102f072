import logging
from collections.abc import Mapping
from config import LOG_LEVEL, SECRET_FIELDS

MASK = '******'


def setup_logging(level=None):
    """配置日志输出格式"""
    logging.basicConfig(
        level=level or LOG_LEVEL,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def mask_secrets(data):
    """
    返回屏蔽了密码等敏感字段的副本，用于日志输出
    """
    if not isinstance(data, Mapping):
        return data
    masked = {}
    for key, value in data.items():
        if key in SECRET_FIELDS:
            masked[key] = MASK
        else:
            masked[key] = mask_secrets(value)
    return masked
