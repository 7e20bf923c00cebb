# data_sources/remote_git.py
import logging
import os

from .local_git import LocalGitDataSource
from context import RunContext
import git_utils

logger = logging.getLogger(__name__)


class RemoteGitDataSource(LocalGitDataSource):
    """
    远程仓库数据源。
    validate() 时先克隆到 .repositories/<仓库名> 并检出所有 origin/* 分支，
    之后与本地数据源完全一致。
    """

    def __init__(self, context: RunContext):
        super().__init__(context)
        self.repo_url = context.repo_path
        # 克隆目录相对于当前工作目录
        self.clone_root = os.path.abspath(self.global_config.REPOSITORIES_DIR_NAME)

    def validate(self) -> bool:
        logger.info(f"🌐 检测到远程地址，正在克隆仓库: {self.repo_url}")
        try:
            local_path = git_utils.clone_repository(self.repo_url, self.clone_root)
            git_utils.checkout_remote_branches(local_path, self.global_config)
        except git_utils.GitCommandError as e:
            logger.error(f"❌ {e}")
            return False

        # 之后的所有 git 调用都在克隆目录中进行
        self.context.repo_path = local_path
        return super().validate()
