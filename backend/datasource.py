"""
数据源配置加载模块
按名称读取数据源定义，校验后生成不可变的 DataSourceConfig
"""
import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import config
from config import Messages
from errors import NotFoundError, ValidationError
from template import render_value
from utils import mask_secrets

logger = logging.getLogger(__name__)


class PairList(list):
    """JSON对象的原始键值对列表，保留重复键供校验使用"""


@dataclass(frozen=True)
class DataSourceConfig:
    name: str
    host: str
    port: int
    database: str
    user: str
    password: str = field(repr=False)
    tables: Tuple[Tuple[str, str], ...]
    source_type: str

    @property
    def table_mapping(self) -> Dict[str, str]:
        """逻辑表名到映射值的有序字典（值原样保留）"""
        return dict(self.tables)

    def connection_params(self) -> Dict[str, Any]:
        """mysql.connector 连接参数"""
        return {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "database": self.database,
        }

    def describe(self) -> Dict[str, Any]:
        """用于日志输出的摘要，不含密码"""
        return {
            "name": self.name,
            "host": self.host,
            "port": self.port,
            "database": self.database,
            "user": self.user,
            "tables": self.table_mapping,
            "source_type": self.source_type,
        }


def _pairs_hook(pairs):
    return PairList(pairs)


def _to_dict(value, name, field_name):
    """把映射或键值对列表转换为字典，重复键抛出 ValidationError"""
    if isinstance(value, Mapping):
        return dict(value)
    if not isinstance(value, (list, tuple)):
        raise ValidationError(name, field_name, Messages.FIELD_TYPE)
    result = {}
    for pair in value:
        if not isinstance(pair, (list, tuple)) or len(pair) != 2:
            raise ValidationError(name, field_name, Messages.FIELD_TYPE)
        key, item = pair
        if key in result:
            raise ValidationError(name, field_name, Messages.DUPLICATE_KEY)
        result[key] = item
    return result


def _check_string(name, field_name, value, allow_empty=False):
    if not isinstance(value, str):
        raise ValidationError(name, field_name, Messages.FIELD_TYPE)
    if not allow_empty and not value.strip():
        raise ValidationError(name, field_name, Messages.FIELD_EMPTY)
    return value


def _check_port(name, value):
    # 占位符替换后的端口是数字字符串
    if isinstance(value, str) and value.strip().isascii() and value.strip().isdigit():
        value = int(value.strip())
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(name, 'port', Messages.INVALID_PORT)
    if value <= 0 or value > config.MAX_PORT:
        raise ValidationError(name, 'port', Messages.INVALID_PORT)
    return value


def _check_tables(name, value):
    if isinstance(value, Mapping):
        pairs = list(value.items())
    elif isinstance(value, (list, tuple)):
        pairs = list(value)
    else:
        raise ValidationError(name, 'tables', Messages.FIELD_TYPE)

    if not pairs:
        raise ValidationError(name, 'tables', Messages.EMPTY_TABLES)

    seen = set()
    tables = []
    for pair in pairs:
        if not isinstance(pair, (list, tuple)) or len(pair) != 2:
            raise ValidationError(name, 'tables', Messages.FIELD_TYPE)
        key, role = pair
        _check_string(name, 'tables', key)
        _check_string(name, 'tables', role)
        if key in seen:
            raise ValidationError(name, 'tables', Messages.DUPLICATE_TABLE)
        seen.add(key)
        tables.append((key, role))
    return tuple(tables)


def build_config(name, definition, variables=None, render=False) -> DataSourceConfig:
    """校验单个数据源定义并生成 DataSourceConfig

    render 为 True 时先替换定义中的 __NAME__ 占位符（仅用于内置模板），
    否则字段值原样保留。
    """
    definition = _to_dict(definition, name, None)
    logger.debug(f"数据源定义 {name}: {mask_secrets(definition)}")

    for key in definition:
        if key not in config.REQUIRED_FIELDS:
            raise ValidationError(name, key, Messages.UNKNOWN_FIELD)
    for key in config.REQUIRED_FIELDS:
        if key not in definition:
            raise ValidationError(name, key, Messages.FIELD_MISSING)

    if variables is None:
        variables = os.environ
    values = {}
    for key in config.REQUIRED_FIELDS:
        value = definition[key]
        if render:
            value, missing = render_value(value, variables)
            if missing:
                # 密码中的占位符名本身就是密码的一部分
                if key in config.SECRET_FIELDS:
                    reason = Messages.UNRESOLVED_PLACEHOLDER
                else:
                    reason = f"{Messages.UNRESOLVED_PLACEHOLDER} __{missing[0]}__"
                raise ValidationError(name, key, reason)
        values[key] = value

    for key in config.NON_EMPTY_FIELDS:
        _check_string(name, key, values[key])
    _check_string(name, 'password', values['password'], allow_empty=True)

    return DataSourceConfig(
        name=name,
        host=values['host'],
        port=_check_port(name, values['port']),
        database=values['db'],
        user=values['user'],
        password=values['password'],
        tables=_check_tables(name, values['tables']),
        source_type=values['source_type'],
    )


class ConfigLoader:
    """数据源配置加载器

    定义来源按优先级：显式传入的 definitions、JSON 文件 path、
    config.DATASOURCE_FILE、内置的 config.DATASOURCES。
    占位符替换默认只对内置模板 config.DATASOURCES 开启，可用 render 参数指定。
    """

    def __init__(self, definitions: Optional[Mapping] = None, path: Optional[str] = None,
                 variables: Optional[Mapping] = None, render: Optional[bool] = None):
        if definitions is not None and path is not None:
            raise ValueError("definitions 和 path 不能同时指定")
        if definitions is None and path is None:
            path = config.DATASOURCE_FILE
            if path is None:
                definitions = config.DATASOURCES
        self.definitions = definitions
        self.path = path
        self.variables = variables
        if render is None:
            render = definitions is config.DATASOURCES
        self.render = render

    def _read_file(self):
        logger.debug(f"读取数据源配置文件: {self.path}")
        with open(self.path, 'r', encoding='utf-8') as f:
            try:
                payload = json.load(f, object_pairs_hook=_pairs_hook)
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                raise ValidationError(self.path, None, Messages.INVALID_FILE) from e

        if not isinstance(payload, PairList):
            raise ValidationError(self.path, None, Messages.INVALID_FILE)
        top = _to_dict(payload, self.path, None)
        datasources = top.get('datasources')
        if not isinstance(datasources, PairList):
            raise ValidationError(self.path, 'datasources', Messages.INVALID_FILE)
        return datasources

    def _read_definitions(self) -> List[Tuple[str, Any]]:
        if self.path is not None:
            return list(self._read_file())
        return list(self.definitions.items())

    def names(self) -> List[str]:
        """已定义的数据源名称"""
        names = []
        for name, _ in self._read_definitions():
            if name not in names:
                names.append(name)
        return names

    def load(self, name: str) -> DataSourceConfig:
        """加载并校验指定名称的数据源配置"""
        matches = [definition for key, definition in self._read_definitions() if key == name]
        if not matches:
            logger.warning(f"数据源不存在: {name}")
            raise NotFoundError(name)
        if len(matches) > 1:
            raise ValidationError(name, None, Messages.DUPLICATE_DATASOURCE)

        definition = matches[0]
        try:
            datasource = build_config(name, definition, self.variables, self.render)
        except ValidationError as e:
            logger.error(f"数据源配置校验失败: {e}")
            raise

        logger.info(f"已加载数据源 {name}: {datasource.describe()}")
        return datasource
