# git_utils.py
import subprocess
import logging
import os
import shutil
from datetime import datetime
from typing import Iterator, List, Optional, Union

from config import GlobalConfig
from models import CommitHeader, FileChange

logger = logging.getLogger(__name__)

# numstat 对二进制文件输出的占位符
BINARY_SENTINEL = "-"

MONTH_ABBRS = (
    "JAN", "FEB", "MAR", "APR", "MAY", "JUN",
    "JUL", "AUG", "SEP", "OCT", "NOV", "DEC",
)


class GitCommandError(RuntimeError):
    """无法继续运行的 git 调用失败"""


def run_git_command(
    args: List[str], repo_path: str, context: str = "执行Git命令"
) -> Optional[str]:
    """
    统一的Git命令执行函数
    - 在 repo_path 下执行 git <args>
    - 失败时记录 stderr 并返回 None
    - 不设置超时: 卡住的 git 进程会阻塞整个运行
    """
    try:
        logger.debug(f"在 {repo_path} 中执行命令: git {' '.join(args)}")
        result = subprocess.run(
            ["git", *args],
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            cwd=repo_path,
        )
        if result.returncode != 0:
            logger.error(f"{context}失败: {result.stderr.strip()}")
            return None
        logger.debug(f"{context}成功，输出 {len(result.stdout.splitlines())} 行")
        return result.stdout
    except OSError as e:
        logger.error(f"{context}出错: {e}")
        return None


def is_git_installed() -> bool:
    """检查 git 是否在 PATH 中"""
    return shutil.which("git") is not None


def is_git_repository(repo_path: str) -> bool:
    """检查指定路径是否为Git仓库"""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--is-inside-work-tree"],
            capture_output=True,
            text=True,
            cwd=repo_path,
        )
        return result.returncode == 0
    except OSError:
        return False


def list_branches(repo_path: str, global_config: GlobalConfig) -> List[str]:
    """
    列出本地分支短名 (保持 git 输出顺序)。
    空行与 HEAD 伪分支被丢弃；命令失败直接抛出 GitCommandError。
    """
    output = run_git_command(global_config.GIT_BRANCH_ARGS, repo_path, "获取分支列表")
    if output is None:
        raise GitCommandError(f"git branch 在 {repo_path} 中执行失败")

    branches = []
    for line in output.split("\n"):
        name = line.strip()
        if not name or name == "HEAD" or name.startswith("(HEAD"):
            continue
        branches.append(name)
    return branches


def get_merge_base(
    repo_path: str, ref_a: str, ref_b: str, global_config: GlobalConfig
) -> Optional[str]:
    """获取两个引用的最佳公共祖先，失败返回 None"""
    output = run_git_command(
        [*global_config.GIT_MERGE_BASE_ARGS, ref_a, ref_b],
        repo_path,
        f"获取 {ref_a} 与 {ref_b} 的 merge-base",
    )
    if output is None:
        return None
    merge_base = output.strip()
    return merge_base or None


def get_history_log(
    repo_path: str,
    rev: str,
    global_config: GlobalConfig,
    path_filter: str = "",
) -> Optional[str]:
    """获取 rev (分支名或 a..b 范围) 的 "提交头 + numstat" 日志"""
    args = [*global_config.GIT_LOG_ARGS, rev]
    if path_filter:
        args += ["--", path_filter]
    return run_git_command(args, repo_path, f"获取 {rev} 的提交历史")


def clone_repository(repo_url: str, dest_dir: str) -> str:
    """
    把远程仓库克隆到 dest_dir/<仓库名>，已存在则直接复用。
    返回本地仓库路径。
    """
    os.makedirs(dest_dir, exist_ok=True)

    repo_name = os.path.basename(repo_url.rstrip("/"))
    local_repo_path = os.path.join(dest_dir, repo_name)

    if os.path.exists(local_repo_path):
        logger.info(f"ℹ️ 仓库已存在: {local_repo_path}")
        return local_repo_path

    try:
        result = subprocess.run(
            ["git", "clone", repo_url, local_repo_path],
            capture_output=True,
            text=True,
        )
    except OSError as e:
        raise GitCommandError(f"克隆仓库失败: {e}") from e
    if result.returncode != 0:
        raise GitCommandError(
            f"克隆仓库失败: {repo_url}, 输出: {result.stdout}{result.stderr}"
        )
    logger.info(f"✅ 仓库已克隆到: {local_repo_path}")
    return local_repo_path


def checkout_remote_branches(repo_path: str, global_config: GlobalConfig) -> None:
    """
    为每个 origin/<name> 远程分支创建同名本地分支。
    本地分支已存在时忽略，其余失败抛出 GitCommandError。
    """
    logger.info("🔀 正在检出远程分支")
    output = run_git_command(
        global_config.GIT_REMOTE_BRANCH_ARGS, repo_path, "获取远程分支"
    )
    if output is None:
        raise GitCommandError(f"获取远程分支失败: {repo_path}")

    for line in output.split("\n"):
        branch = line.strip()
        if not branch or "HEAD ->" in branch:
            continue
        if not branch.startswith("origin/"):
            continue

        local_name = branch[len("origin/"):].strip()
        result = subprocess.run(
            ["git", "checkout", "-b", local_name, branch],
            capture_output=True,
            text=True,
            cwd=repo_path,
        )
        if result.returncode != 0 and "already exists" not in result.stderr:
            raise GitCommandError(
                f"检出分支 {local_name} 失败: {result.stderr.strip()}"
            )


def _parse_count(field: str) -> int:
    """numstat 计数字段: 只接受 ASCII 数字，其余一律按 0 计"""
    if not (field.isascii() and field.isdigit()):
        return 0
    return int(field)


def parse_history_stream(
    log_output: str,
) -> Iterator[Union[CommitHeader, FileChange]]:
    """
    把 git log 输出拆分为 CommitHeader / FileChange 记录。

    行的类别只由形状决定：
    - 同时含 "@" 与 "," 的行视为提交头 (取前三个逗号字段)。
      提交说明里恰好同时含 "@" 和 "," 的行会被误判，这是已知的取舍。
    - 在见到第一个提交头之后，含制表符的行视为 numstat 行；
      二进制文件 ("-") 整行跳过，非数字字段按 0 计。
    - 其余行忽略。
    """
    in_commit = False
    for line in log_output.split("\n"):
        if "@" in line and "," in line:
            parts = line.split(",")
            if len(parts) >= 3:
                in_commit = True
                yield CommitHeader(email=parts[0], date=parts[1], commit_hash=parts[2])
        elif "\t" in line and in_commit:
            parts = line.split("\t")
            if len(parts) != 3:
                continue
            if parts[0] == BINARY_SENTINEL or parts[1] == BINARY_SENTINEL:
                continue
            yield FileChange(
                added=_parse_count(parts[0]),
                removed=_parse_count(parts[1]),
                path=parts[2],
            )


def timeline_bucket(
    date_str: str, group_by: str, date_format: str = "%Y-%m-%d"
) -> Optional[str]:
    """
    把提交日期换算为时间桶键：
    - week:  ISO 周所属年份-ISO 周序号，如 "2024-02"
    - month: 年份-大写月份缩写，如 "2024-JAN"
    日期无法解析或不是严格的 date_format 形式 (如 "2024-1-5") 时返回 None。
    """
    try:
        parsed = datetime.strptime(date_str, date_format)
    except ValueError:
        return None
    if parsed.strftime(date_format) != date_str:
        return None

    if group_by == "week":
        iso_year, iso_week, _ = parsed.isocalendar()
        return f"{iso_year}-{iso_week:02d}"
    return f"{parsed.year}-{MONTH_ABBRS[parsed.month - 1]}"
