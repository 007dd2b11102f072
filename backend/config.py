import os
from dotenv import load_dotenv

# 加载.env文件（如果存在）
load_dotenv()

# 数据源定义文件（JSON），未设置时使用下方内置定义
DATASOURCE_FILE = os.getenv('DATASOURCE_FILE') or None

# 日志级别
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

# 内置数据源定义 - 安装时占位符由环境变量替换
DATASOURCES = {
    'writer': {
        'host': '__ANEMOMETER_MYSQL_HOST__',
        'port': '__ANEMOMETER_MYSQL_PORT__',
        'db': '__ANEMOMETER_MYSQL_DB___writer',
        'user': '__ANEMOMETER_MYSQL_USER__',
        'password': '__ANEMOMETER_MYSQL_PASSWORD__',
        'tables': {
            'global_query_review': 'fact',
            'global_query_review_history': 'dimension',
        },
        'source_type': 'slow_query_log',
    },
}

# 连接池配置
POOL_CONFIG = {
    "pool_size": int(os.getenv('DB_POOL_SIZE', '5')),
    "pool_reset_session": True,
    "autocommit": True,
}

# 数据源字段
REQUIRED_FIELDS = ('host', 'port', 'db', 'user', 'password', 'tables', 'source_type')
NON_EMPTY_FIELDS = ('host', 'db', 'user', 'source_type')
SECRET_FIELDS = ('password',)

MAX_PORT = 65535

# 错误消息
class Messages:
    DATASOURCE_NOT_FOUND = "未找到数据源配置"
    FIELD_MISSING = "缺少必填字段"
    FIELD_EMPTY = "字段不能为空"
    FIELD_TYPE = "字段类型错误"
    UNKNOWN_FIELD = "未知字段"
    INVALID_PORT = "端口必须是1-65535之间的整数"
    DUPLICATE_TABLE = "表映射中存在重复的键"
    DUPLICATE_KEY = "存在重复的键"
    DUPLICATE_DATASOURCE = "数据源名称重复"
    EMPTY_TABLES = "表映射不能为空"
    UNRESOLVED_PLACEHOLDER = "占位符未替换"
    INVALID_FILE = "数据源配置文件格式错误"
