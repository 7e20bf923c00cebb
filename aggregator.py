# aggregator.py
"""
历史聚合器
按分支调用数据源 -> 解析日志流 -> 折叠为每个作者的贡献统计。
"""
import logging
from typing import Dict, Iterable, Optional, Union

from data_sources.base import DataSource
from models import BranchReport, CommitHeader, ContributionRecord, FileChange, ReportData
import git_utils

logger = logging.getLogger(__name__)


def resolve_log_range(data_source: DataSource, main_branch: str, branch: str) -> str:
    """
    计算分支独有的提交范围 "<merge-base>..<branch>"。
    - 主分支本身: 直接使用完整历史
    - merge-base 失败 (例如历史不相关): 记录日志并退回到分支完整历史
    """
    if branch == main_branch:
        return branch

    merge_base = data_source.get_merge_base(main_branch, branch)
    if not merge_base:
        logger.info(f"⚠️ 分支 '{branch}' 与 '{main_branch}' 无法解析 merge-base")
        logger.info(f"   使用默认 'git log' 范围: {branch}")
        return branch
    return f"{merge_base}..{branch}"


def fold_history(
    report: BranchReport,
    records: Iterable[Union[CommitHeader, FileChange]],
    group_by: str,
    date_format: str = "%Y-%m-%d",
) -> BranchReport:
    """
    把解析出的记录累加进分支报告。
    日期无法解析的提交照样计数，只是不进入时间线。
    """
    current: Optional[ContributionRecord] = None
    for record in records:
        if isinstance(record, CommitHeader):
            current = report.record_for(record.email)
            current.add_commit(
                git_utils.timeline_bucket(record.date, group_by, date_format) or ""
            )
        elif current is not None:
            current.add_changes(record.added, record.removed)
    return report


def analyze_history_by_branch(
    data_source: DataSource,
    main_branch: str,
    group_by: str,
    file_filter: str = "",
    date_format: str = "%Y-%m-%d",
) -> Dict[str, BranchReport]:
    """
    逐个分支统计贡献。
    只有设置了文件过滤时才使用 resolve_log_range 得到的范围；
    不过滤时统计分支的完整历史。
    分支列表获取失败会直接抛出异常。
    """
    branch_reports: Dict[str, BranchReport] = {}

    for branch_name in data_source.list_branches():
        log_range = resolve_log_range(data_source, main_branch, branch_name)

        branch_reports[branch_name] = BranchReport(branch_name, file_filter)

        if file_filter:
            logger.info(f"🔎 分支 '{branch_name}' 应用文件过滤: {file_filter}")
            log_output = data_source.get_log(log_range, file_filter)
        else:
            log_output = data_source.get_log(branch_name)

        if log_output is None:
            logger.info(f"⚠️ 分支 '{branch_name}' 的 git log 失败，跳过")
            continue

        fold_history(
            branch_reports[branch_name],
            git_utils.parse_history_stream(log_output),
            group_by,
            date_format,
        )
        logger.info(
            f"✅ 分支 '{branch_name}': {len(branch_reports[branch_name])} 位作者"
        )

    # 所有分支处理完后再移除空报告
    for branch_name in [name for name, r in branch_reports.items() if len(r) == 0]:
        logger.info(f"ℹ️ 分支 '{branch_name}' 没有可统计的提交，已从报告中移除")
        del branch_reports[branch_name]

    return branch_reports


def build_report_data(
    data_source: DataSource,
    main_branch: str,
    group_by: str,
    file_filter: str = "",
    date_format: str = "%Y-%m-%d",
) -> ReportData:
    """聚合所有分支并生成只读的 ReportData"""
    branch_reports = analyze_history_by_branch(
        data_source, main_branch, group_by, file_filter, date_format
    )
    return ReportData(
        repo_name=data_source.repo_name,
        file_filter=file_filter,
        branch_reports=branch_reports,
        main_branch=main_branch,
        group_by=group_by,
    )
