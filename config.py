# config.py
"""
全局配置
- 从 .env 读取可覆盖的默认值 (主分支名、分组方式、日志级别、输出目录)
- 集中存放 git 命令参数模板
"""
import os
from dotenv import load_dotenv


# --- 脚本基础路径 ---
SCRIPT_BASE_PATH = os.path.abspath(os.path.dirname(__file__))
env_path = os.path.join(SCRIPT_BASE_PATH, ".env")
if os.path.exists(env_path):
    load_dotenv(env_path)
    print(f"✅ 已从脚本目录加载 .env: {env_path}")
else:
    load_dotenv()


class GlobalConfig:
    """
    贡献报告的全局应用配置。
    """

    # --- 路径配置 ---
    SCRIPT_BASE_PATH: str = SCRIPT_BASE_PATH
    DATA_ROOT_DIR_NAME: str = "data"
    REPOSITORIES_DIR_NAME: str = ".repositories"
    TEMPLATES_DIR_NAME: str = "templates"
    REPORT_TEMPLATE: str = "report.html.j2"

    # --- Git 命令参数 ---
    GIT_BRANCH_ARGS = ["branch", "--format=%(refname:short)"]
    GIT_REMOTE_BRANCH_ARGS = ["branch", "-r"]
    GIT_MERGE_BASE_ARGS = ["merge-base"]
    # 每个提交输出一行 "邮箱,日期,哈希"，随后是 numstat 行
    GIT_LOG_ARGS = [
        "log",
        "--pretty=format:%ae,%ad,%H",
        "--date=short",
        "--numstat",
    ]
    LOG_DATE_FORMAT: str = "%Y-%m-%d"

    # --- 文件名 ---
    OUTPUT_FILENAME_PREFIX: str = "report"
    OUTPUT_TIMESTAMP_FORMAT: str = "%Y-%m-%d_%H%M%S"
    OUTPUT_DIR: str = os.getenv("REPORT_OUTPUT_DIR", "")

    # --- 默认值 ---
    DEFAULT_MAIN_BRANCH: str = os.getenv("MAIN_BRANCH", "main")
    DEFAULT_GROUP_BY: str = os.getenv("GROUP_BY", "month").lower()
    SUPPORTED_GROUP_BY = ("week", "month")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    def is_supported_group_by(self, group_by: str) -> bool:
        return group_by in self.SUPPORTED_GROUP_BY
