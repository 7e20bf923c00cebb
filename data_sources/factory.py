# data_sources/factory.py
import logging
from context import RunContext
from .base import DataSource
from .local_git import LocalGitDataSource
from .remote_git import RemoteGitDataSource
import utils

logger = logging.getLogger(__name__)


def get_data_source(context: RunContext) -> DataSource:
    """
    数据源工厂
    远程 URL 先克隆再按本地仓库分析
    """
    if utils.is_remote_url(context.repo_path):
        logger.info("🔌 [Factory] 检测到远程 URL，初始化数据源: Remote Git")
        return RemoteGitDataSource(context)

    logger.info("🔌 [Factory] 初始化数据源: Local Git")
    return LocalGitDataSource(context)
