from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List


@dataclass
class CommitHeader:
    """提交头行: <email>,<date>,<hash>"""

    email: str
    date: str
    commit_hash: str


@dataclass
class FileChange:
    """numstat 行: <added>\t<removed>\t<path>"""

    added: int
    removed: int
    path: str


@dataclass
class ContributionRecord:
    """单个作者在某个分支上的贡献统计"""

    email: str
    file_filter: str = ""
    commit_count: int = 0
    lines_added: int = 0
    lines_removed: int = 0
    timeline: Dict[str, int] = field(default_factory=dict)

    @property
    def lines_edited(self) -> int:
        return self.lines_added + self.lines_removed

    def add_commit(self, bucket: str = "") -> None:
        self.commit_count += 1
        if bucket:
            self.timeline[bucket] = self.timeline.get(bucket, 0) + 1

    def add_changes(self, added: int, removed: int) -> None:
        self.lines_added += added
        self.lines_removed += removed


class BranchReport:
    """
    分支报告。
    记录按作者首次出现的顺序保存在列表中，另用 email -> 下标 的映射定位。
    """

    def __init__(self, branch_name: str, file_filter: str = ""):
        self.branch_name = branch_name
        self.file_filter = file_filter
        self._records: List[ContributionRecord] = []
        self._index: Dict[str, int] = {}

    def record_for(self, email: str) -> ContributionRecord:
        """获取作者的贡献记录，首次出现时创建"""
        idx = self._index.get(email)
        if idx is None:
            idx = len(self._records)
            self._records.append(
                ContributionRecord(email=email, file_filter=self.file_filter)
            )
            self._index[email] = idx
        return self._records[idx]

    @property
    def contributions(self) -> Dict[str, ContributionRecord]:
        return {record.email: record for record in self._records}

    @property
    def records(self) -> List[ContributionRecord]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, email: object) -> bool:
        return email in self._index

    def __repr__(self) -> str:
        return f"BranchReport({self.branch_name!r}, authors={len(self)})"


@dataclass(frozen=True)
class ReportData:
    """一次运行的最终聚合结果 (只读快照)，交给 report_builder 渲染"""

    repo_name: str
    file_filter: str
    branch_reports: Dict[str, BranchReport]
    main_branch: str = "main"
    group_by: str = "month"
    generated_at: datetime = field(default_factory=datetime.now)

    @property
    def total_commits(self) -> int:
        return sum(
            record.commit_count
            for report in self.branch_reports.values()
            for record in report.records
        )
