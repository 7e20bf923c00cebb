from abc import ABC
from context import RunContext
from models import ReportData


class BasePlugin(ABC):
    """
    插件基类
    定义所有生命周期钩子。用户自定义插件应继承此类。
    """

    # 插件名称 (建议子类覆盖)
    name: str = "BasePlugin"

    def on_start(self, context: RunContext):
        """
        [钩子] 流程开始时调用。
        """
        pass

    def on_report_aggregated(self, context: RunContext, report: ReportData):
        """
        [钩子] 所有分支聚合完成后调用。
        report 是只读快照，可用于统计自定义指标或输出额外日志。
        """
        pass

    def on_html_generated(self, context: RunContext, html_content: str) -> str:
        """
        [Filter 钩子] HTML 生成后，保存前调用。
        **必须返回字符串**。可用于注入自定义 script 标签或 footer。
        """
        return html_content

    def on_finish(self, context: RunContext):
        """
        [钩子] 流程结束时调用（只要成功生成了报告）。
        """
        pass
