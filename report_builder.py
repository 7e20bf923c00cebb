# report_builder.py
"""
报告生成器 - Jinja2 模板引擎
负责把 ReportData 整理为模板上下文，渲染 HTML 并写入文件。
作者排序只在这里进行，聚合阶段不关心顺序。
"""
import logging
import os
from typing import Any, Dict, List, Tuple

from jinja2 import Environment, FileSystemLoader, select_autoescape

from git_utils import MONTH_ABBRS
from models import ContributionRecord, ReportData
from config import GlobalConfig
from context import RunContext

logger = logging.getLogger(__name__)


def sort_contributions(records: List[ContributionRecord]) -> List[ContributionRecord]:
    """按新增行数降序排列作者"""
    return sorted(records, key=lambda r: r.lines_added, reverse=True)


def _bucket_sort_key(bucket: str) -> Tuple[str, int, str]:
    # "YYYY-MON" 按月份序号排序，"YYYY-WW" 的周序号本身可直接比较
    year, _, rest = bucket.partition("-")
    if rest in MONTH_ABBRS:
        return (year, MONTH_ABBRS.index(rest) + 1, "")
    return (year, 0, rest)


def sorted_timeline(record: ContributionRecord) -> List[Tuple[str, int]]:
    """时间线按时间先后排列"""
    return sorted(record.timeline.items(), key=lambda item: _bucket_sort_key(item[0]))


def generate_text_report(report: ReportData) -> str:
    """
    生成纯文本格式的汇总 (用于终端输出)。
    """
    lines = [
        "=" * 80,
        f"  贡献统计: {report.repo_name}",
        "=" * 80,
        f"生成时间: {report.generated_at.strftime('%Y-%m-%d %H:%M:%S')}",
        f"主分支: {report.main_branch}    分组: {report.group_by}    "
        f"文件过滤: {report.file_filter or '无'}",
        "",
    ]
    if not report.branch_reports:
        lines.append("⚠️  未找到提交记录")
    for branch_name, branch_report in report.branch_reports.items():
        lines.append(f"分支: {branch_name} ({len(branch_report)} 位作者)")
        lines.append("-" * 80)
        lines.append(f" {'作者':<36} | {'提交':>6} | {'新增':>8} | {'删除':>8} | {'变更':>8}")
        for record in sort_contributions(branch_report.records):
            lines.append(
                f" {record.email:<36} | {record.commit_count:>6} | "
                f"+{record.lines_added:>7} | -{record.lines_removed:>7} | "
                f"{record.lines_edited:>8}"
            )
        lines.append("")
    lines.append("=" * 80)
    return "\n".join(lines)


def _get_css_styles(global_config: GlobalConfig) -> str:
    """读取 CSS 文件内容"""
    css_path = os.path.join(
        global_config.SCRIPT_BASE_PATH, global_config.TEMPLATES_DIR_NAME, "styles.css"
    )
    try:
        with open(css_path, "r", encoding="utf-8") as f:
            return f.read()
    except OSError as e:
        logger.error(f"❌ 加载 CSS 模板失败 ({css_path}): {e}")
        return "/* CSS 模板文件未找到 */"


def build_template_context(
    report: ReportData, global_config: GlobalConfig
) -> Dict[str, Any]:
    return {
        "title": f"Git Contribution Report: {report.repo_name}",
        "repo_name": report.repo_name,
        "file_filter": report.file_filter,
        "main_branch": report.main_branch,
        "group_by": report.group_by,
        "generation_time": report.generated_at.strftime("%Y-%m-%d %H:%M:%S"),
        "css_content": _get_css_styles(global_config),
        "branch_reports": report.branch_reports,
    }


def generate_html_report(report: ReportData, global_config: GlobalConfig) -> str:
    """
    使用 Jinja2 模板引擎生成 HTML 报告。
    模板渲染失败会直接抛出异常。
    """
    templates_dir = os.path.join(
        global_config.SCRIPT_BASE_PATH, global_config.TEMPLATES_DIR_NAME
    )
    env = Environment(
        loader=FileSystemLoader(templates_dir),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    env.filters["sort_contributions"] = sort_contributions
    env.filters["sorted_timeline"] = sorted_timeline

    template = env.get_template(global_config.REPORT_TEMPLATE)
    logger.info(f"🎨 正在渲染 Jinja2 模板: {global_config.REPORT_TEMPLATE}")
    return template.render(**build_template_context(report, global_config))


def report_filename(report: ReportData, global_config: GlobalConfig) -> str:
    timestamp = report.generated_at.strftime(global_config.OUTPUT_TIMESTAMP_FORMAT)
    return f"{global_config.OUTPUT_FILENAME_PREFIX}_{report.repo_name}_{timestamp}.html"


def save_html_report(
    html_content: str, report: ReportData, context: RunContext
) -> str:
    """
    保存HTML报告到输出目录，返回文件完整路径。
    写入失败抛出 OSError。
    """
    output_dir = context.output_dir or os.getcwd()
    os.makedirs(output_dir, exist_ok=True)
    full_path = os.path.join(output_dir, report_filename(report, context.global_config))

    with open(full_path, "w", encoding="utf-8") as f:
        f.write(html_content)
    logger.info(f"✅ HTML报告已保存: {full_path}")
    return full_path
