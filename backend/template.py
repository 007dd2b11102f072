"""
数据源定义占位符替换
定义中的 __NAME__ 形式的占位符在加载时由变量表替换，
例如 '__ANEMOMETER_MYSQL_DB___writer' -> 'slow_query_db_writer'
"""
import re
from collections.abc import Mapping

PLACEHOLDER_PATTERN = re.compile(r'__([A-Z][A-Z0-9_]*?)__')


def render(text, variables):
    """替换字符串中的占位符

    返回 (替换后的字符串, 未找到的占位符名称列表)
    """
    missing = []

    def substitute(match):
        key = match.group(1)
        if key in variables:
            return str(variables[key])
        missing.append(key)
        return match.group(0)

    return PLACEHOLDER_PATTERN.sub(substitute, text), missing


def render_value(value, variables):
    """递归替换定义中所有字符串值（包括映射的键）的占位符

    映射替换后返回 (键, 值) 列表，替换后重复的键保留给调用方校验
    """
    if isinstance(value, str):
        return render(value, variables)
    if isinstance(value, Mapping):
        rendered = []
        missing = []
        for key, item in value.items():
            new_key, key_missing = render_value(key, variables)
            new_item, item_missing = render_value(item, variables)
            rendered.append((new_key, new_item))
            missing.extend(key_missing + item_missing)
        return rendered, missing
    if isinstance(value, (list, tuple)):
        items = []
        missing = []
        for item in value:
            new_item, item_missing = render_value(item, variables)
            items.append(new_item)
            missing.extend(item_missing)
        return type(value)(items), missing
    return value, []
