# orchestrator.py
"""
业务逻辑编排器
- Context/Orchestrator 模式
- DataSource 屏蔽本地/远程仓库差异
- Hook 系统 (Lifecycle & Plugins)
"""
import logging
from typing import Optional

from context import RunContext
from data_sources.base import DataSource
from data_sources.factory import get_data_source
from hooks.manager import PluginManager
from models import ReportData
import aggregator
import git_utils
import report_builder
import utils

logger = logging.getLogger(__name__)


class ReportOrchestrator:
    """
    负责执行报告生成的核心业务逻辑。
    run() 返回 False 表示致命错误，调用方应以非零状态退出。
    """

    def __init__(
        self,
        context: RunContext,
        data_source: Optional[DataSource] = None,
        plugin_manager: Optional[PluginManager] = None,
    ):
        self.context = context
        self.global_config = context.global_config

        self.data_source = data_source or get_data_source(context)

        if plugin_manager is None:
            plugin_manager = PluginManager(context)
            plugin_manager.load_plugins()
        self.plugin_manager = plugin_manager

        self.report: Optional[ReportData] = None
        self.report_path: Optional[str] = None

    def run(self) -> bool:
        self.plugin_manager.trigger("on_start")

        # --- 0. 验证数据源 ---
        if not self.data_source.validate():
            logger.error("❌ 数据源验证失败，终止运行。")
            return False

        logger.info(f"🔍 正在分析仓库: {self.data_source.repo_name}")

        # --- 1. 聚合 ---
        try:
            self.report = aggregator.build_report_data(
                self.data_source,
                main_branch=self.context.main_branch,
                group_by=self.context.group_by,
                file_filter=self.context.file_filter,
                date_format=self.global_config.LOG_DATE_FORMAT,
            )
        except git_utils.GitCommandError as e:
            logger.error(f"❌ 分析 git 历史失败: {e}")
            return False

        self.plugin_manager.trigger("on_report_aggregated", report=self.report)

        # --- 2. 控制台汇总 ---
        for line in report_builder.generate_text_report(self.report).splitlines():
            logger.info(line)

        # --- 3. 生成并保存 HTML 报告 ---
        html_content = report_builder.generate_html_report(
            self.report, self.global_config
        )
        html_content = self.plugin_manager.filter("on_html_generated", html_content)

        try:
            self.report_path = report_builder.save_html_report(
                html_content, self.report, self.context
            )
        except OSError as e:
            logger.error(f"❌ 写入 HTML 报告失败: {e}")
            return False

        # --- 4. 浏览器打开 ---
        if not self.context.no_browser:
            utils.open_report_in_browser(self.report_path)

        self.plugin_manager.trigger("on_finish")
        return True
