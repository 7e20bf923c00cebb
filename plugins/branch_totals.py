import html
import logging

from hooks.base import BasePlugin
from context import RunContext
from models import ReportData

logger = logging.getLogger(__name__)


class BranchTotalsPlugin(BasePlugin):
    """
    示例插件：分支汇总
    在日志中输出每个分支的提交与代码行合计，并在 HTML 底部追加一行汇总。
    """

    name = "BranchTotals"

    def __init__(self):
        self.totals = {}

    def on_report_aggregated(self, context: RunContext, report: ReportData):
        for branch_name, branch_report in report.branch_reports.items():
            commits = sum(r.commit_count for r in branch_report.records)
            edited = sum(r.lines_edited for r in branch_report.records)
            self.totals[branch_name] = (commits, edited)
            logger.info(
                f"📊 [BranchTotals] {branch_name}: {commits} 次提交, {edited} 行变更"
            )

    def on_html_generated(self, context: RunContext, html_content: str) -> str:
        if not self.totals:
            return html_content
        summary = " | ".join(
            f"{html.escape(name)}: {commits} commits / {edited} lines"
            for name, (commits, edited) in self.totals.items()
        )
        footer = f"<p class='text-center text-secondary small'>{summary}</p>"
        return html_content.replace("</body>", f"{footer}</body>")
