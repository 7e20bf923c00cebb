# data_sources/local_git.py
import logging
import os
from typing import List, Optional

from .base import DataSource
from context import RunContext
import git_utils
import utils

logger = logging.getLogger(__name__)


class LocalGitDataSource(DataSource):
    """
    本地 Git 数据源实现。
    通过调用 git 命令行工具分析本地仓库。
    """

    def __init__(self, context: RunContext):
        self.context = context
        self.global_config = context.global_config

    @property
    def repo_path(self) -> str:
        return self.context.repo_path

    @property
    def repo_name(self) -> str:
        return utils.repo_display_name(self.repo_path)

    def validate(self) -> bool:
        if not os.path.exists(self.repo_path):
            logger.error(f"❌ 仓库路径不存在: {self.repo_path}")
            return False
        if not git_utils.is_git_repository(self.repo_path):
            logger.error(f"❌ 指定路径不是 Git 仓库: {self.repo_path}")
            return False
        return True

    def list_branches(self) -> List[str]:
        return git_utils.list_branches(self.repo_path, self.global_config)

    def get_merge_base(self, ref_a: str, ref_b: str) -> Optional[str]:
        return git_utils.get_merge_base(
            self.repo_path, ref_a, ref_b, self.global_config
        )

    def get_log(self, rev: str, path_filter: str = "") -> Optional[str]:
        return git_utils.get_history_log(
            self.repo_path, rev, self.global_config, path_filter
        )
