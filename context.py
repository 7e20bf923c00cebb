# context.py
"""
运行时配置的数据模型
"""
from dataclasses import dataclass
from config import GlobalConfig


@dataclass
class RunContext:
    """
    封装一次运行所需的所有配置和状态。
    这是从 CLI 传递到 Orchestrator 的唯一对象。
    主分支名与分组方式在这里显式传递，不使用模块级全局变量。
    """

    # --- 核心路径 ---
    # 本地路径或远程 URL (远程仓库在 validate 阶段被克隆后会改写为本地路径)
    repo_path: str
    project_data_path: str
    output_dir: str

    # --- 分析参数 ---
    file_filter: str
    main_branch: str
    group_by: str

    # --- 标志 ---
    no_browser: bool

    # --- 全局配置 ---
    global_config: GlobalConfig
