# cli.py
"""
命令行界面 (Interface) 层
负责参数解析、配置合并 (命令行 > 项目 config.json > 全局 .env) 并组装 RunContext。
"""
import argparse
import logging
import sys
import os
from typing import Any, Dict, List, Optional

import config_manager
import git_utils
import utils
from config import GlobalConfig
from context import RunContext
from orchestrator import ReportOrchestrator

logger = logging.getLogger(__name__)


def setup_parser() -> argparse.ArgumentParser:
    """
    负责所有 argparse 的定义。
    """
    parser = argparse.ArgumentParser(
        description="Git 分支贡献统计报告生成器",
        formatter_class=argparse.RawTextHelpFormatter,
    )

    target_group = parser.add_mutually_exclusive_group()
    target_group.add_argument(
        "-r",
        "--repository",
        type=str,
        default=None,
        help="Git 仓库路径 (本地目录或 http/https/git/ssh URL)。\n"
        "   URL 会先被克隆到 .repositories/ 下",
    )
    target_group.add_argument(
        "-p",
        "--project",
        type=str,
        default=None,
        help="使用已保存的项目别名 (见 --save-project)。\n   (与 -r 互斥)",
    )

    parser.add_argument(
        "-f",
        "--filter",
        type=str,
        default=None,
        help="文件过滤 (git pathspec，例如 '*.go')。可选。\n"
        "   设置过滤时，非主分支只统计 merge-base 之后的提交",
    )
    parser.add_argument(
        "-m",
        "--mainbranch",
        type=str,
        default=None,
        help="用于 merge-base 的主分支名。\n(默认: .env 中的 MAIN_BRANCH 或 'main')",
    )
    parser.add_argument(
        "-g",
        "--groupby",
        type=str,
        default=None,
        help="时间线分组方式: 'week' 或 'month'。\n(默认: .env 中的 GROUP_BY 或 'month')",
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        type=str,
        default=None,
        help="HTML 报告输出目录。\n(默认: 当前工作目录)",
    )
    parser.add_argument(
        "--save-project",
        nargs="?",
        const="",
        default=None,
        metavar="ALIAS",
        help="把本次的主分支/分组/过滤/输出目录保存为项目默认值，\n"
        "   可选地同时保存别名 (之后用 -p ALIAS 运行)",
    )
    parser.add_argument(
        "--no-browser", action="store_true", help="不自动在浏览器中打开报告"
    )

    return parser


def _fatal(message: str):
    logger.error(message)
    sys.exit(1)


def run_cli(argv: Optional[List[str]] = None):
    """
    主入口点。致命错误以退出码 1 结束进程。
    """

    # 1. 解析 Args
    parser = setup_parser()
    args = parser.parse_args(argv)

    # 2. 加载 GlobalConfig 和 Data Root
    global_config = GlobalConfig()
    data_root_path = os.path.join(
        global_config.SCRIPT_BASE_PATH, global_config.DATA_ROOT_DIR_NAME
    )

    if not git_utils.is_git_installed():
        _fatal("❌ git 未安装或不在 PATH 中")

    # 3. 确定仓库路径
    repo_path: str
    if args.project:
        repo_path_from_alias = config_manager.get_path_from_alias(
            data_root_path, args.project
        )
        if not repo_path_from_alias:
            _fatal(f"❌ 别名 '{args.project}' 未在 projects.json 中找到。")
        repo_path = repo_path_from_alias
        logger.info(f"ℹ️ 使用别名 '{args.project}' (路径: {repo_path})")
    elif args.repository:
        if utils.is_remote_url(args.repository):
            repo_path = args.repository
            logger.info(f"ℹ️ 检测到远程仓库 URL: {repo_path}")
        else:
            repo_path = os.path.abspath(args.repository)
    else:
        _fatal("❌ 请使用 `--repository` 提供 Git 仓库路径 (或使用 -p 指定项目别名)")

    project_data_path = config_manager.get_project_data_path(data_root_path, repo_path)
    project_config: Dict[str, Any] = config_manager.load_project_config(
        project_data_path
    )

    # 4. 合并配置
    if args.filter is not None:
        file_filter = args.filter
    else:
        file_filter = project_config.get("filter") or ""
    main_branch = (
        args.mainbranch
        or project_config.get("main_branch")
        or global_config.DEFAULT_MAIN_BRANCH
    )
    group_by = (
        args.groupby or project_config.get("group_by") or global_config.DEFAULT_GROUP_BY
    ).lower()
    output_dir = (
        args.output_dir or project_config.get("output_dir") or global_config.OUTPUT_DIR
    )

    if not global_config.is_supported_group_by(group_by):
        _fatal(
            f"❌ 不支持的 groupby 参数。期望 'week' 或 'month'，实际为: {group_by}"
        )

    if args.save_project is not None:
        config_manager.save_project_defaults(
            data_root_path,
            repo_path,
            args.save_project or None,
            {
                "main_branch": main_branch,
                "group_by": group_by,
                "filter": file_filter,
                "output_dir": output_dir,
            },
        )

    logger.info("=" * 50)
    logger.info("🚀 Git 贡献统计启动...")
    logger.info(f"   [目标仓库]: {repo_path}")
    logger.info(f"   [主分支]: {main_branch}")
    logger.info(f"   [分组方式]: {group_by}")
    logger.info(f"   [文件过滤]: {file_filter or '无'}")
    logger.info("=" * 50)

    run_context = RunContext(
        repo_path=repo_path,
        project_data_path=project_data_path,
        output_dir=output_dir,
        file_filter=file_filter,
        main_branch=main_branch,
        group_by=group_by,
        no_browser=args.no_browser,
        global_config=global_config,
    )

    # 5. 运行 Orchestrator
    orchestrator = ReportOrchestrator(run_context)
    if not orchestrator.run():
        sys.exit(1)
    logger.info(f"✅ HTML 报告已生成: {orchestrator.report_path}")
