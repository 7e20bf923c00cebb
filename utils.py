import logging
import sys
import os
from urllib.parse import urlparse


REMOTE_SCHEMES = ("http", "https", "git", "ssh")


# 将日志配置移到这里，作为一个可被调用的函数
def setup_logging(level: str = "INFO"):
    """配置全局日志"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def is_remote_url(repo_path: str) -> bool:
    """判断仓库参数是否为远程地址 (http/https/git/ssh 或 git@host:path)"""
    if repo_path.startswith("git@"):
        return True
    try:
        parsed = urlparse(repo_path)
    except ValueError:
        return False
    return parsed.scheme in REMOTE_SCHEMES


def repo_display_name(repo_path: str) -> str:
    """仓库展示名: 路径的最后一段"""
    return os.path.basename(os.path.normpath(repo_path.rstrip("/")))


def open_report_in_browser(filename: str):
    """在浏览器中打开报告"""
    logger = logging.getLogger(__name__)
    try:
        if os.name == "nt":  # Windows
            os.startfile(filename)
        elif os.name == "posix":  # macOS/Linux
            if sys.platform == "darwin":
                os.system(f'open "{filename}"')
            else:
                os.system(f'xdg-open "{filename}"')
        logger.info(f"🌐 已在浏览器中打开报告: {filename}")
    except Exception as e:
        logger.warning(f"无法自动打开报告，请手动打开: {filename}, 错误: {e}")
