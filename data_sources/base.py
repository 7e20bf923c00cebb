# data_sources/base.py
from abc import ABC, abstractmethod
from typing import List, Optional


class DataSource(ABC):
    """
    数据源抽象基类
    定义了获取分支与提交历史的标准接口，屏蔽了底层是本地仓库还是需要先克隆的远程仓库的差异。
    """

    @abstractmethod
    def validate(self) -> bool:
        """
        验证数据源是否可用。
        例如：本地路径是否存在且为 Git 仓库；远程仓库是否已成功克隆。
        """
        pass

    @abstractmethod
    def list_branches(self) -> List[str]:
        """
        按 git 输出顺序返回本地分支短名。
        失败时抛出异常 (整个运行无法继续)。
        """
        pass

    @abstractmethod
    def get_merge_base(self, ref_a: str, ref_b: str) -> Optional[str]:
        """
        获取两个引用的公共祖先提交，无法解析时返回 None。
        """
        pass

    @abstractmethod
    def get_log(self, rev: str, path_filter: str = "") -> Optional[str]:
        """
        获取 rev 的 "提交头 + numstat" 原始日志文本，失败时返回 None。
        """
        pass

    @property
    @abstractmethod
    def repo_name(self) -> str:
        """仓库展示名"""
        pass
