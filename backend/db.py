import logging
from mysql.connector import pooling
from config import POOL_CONFIG

logger = logging.getLogger(__name__)


def create_pool(datasource, **overrides):
    """根据数据源配置创建连接池，由宿主应用在启动时显式调用"""
    pool_config = {"pool_name": f"{datasource.name}_pool", **POOL_CONFIG, **overrides}
    logger.info(
        f"创建连接池 {pool_config['pool_name']}: "
        f"{datasource.user}@{datasource.host}:{datasource.port}/{datasource.database}"
    )
    return pooling.MySQLConnectionPool(
        **datasource.connection_params(),
        **pool_config
    )
