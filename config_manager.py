"""
配置管理器
- 负责处理全局项目别名 (data/projects.json)
- 负责处理项目级默认配置 (data/<Project>/config.json)
"""

import os
import json
import logging
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

PROJECTS_JSON_FILE = "projects.json"
CONFIG_JSON_FILE = "config.json"

# config.json 中允许的键
PROJECT_CONFIG_KEYS = ("main_branch", "group_by", "filter", "output_dir")


def load_project_aliases(data_root_path: str) -> Dict[str, str]:
    """加载全局别名文件 (data/projects.json)"""
    aliases_path = os.path.join(data_root_path, PROJECTS_JSON_FILE)
    if not os.path.exists(aliases_path):
        return {}
    try:
        with open(aliases_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"❌ 加载别名文件 {aliases_path} 失败: {e}")
        return {}


def save_project_aliases(data_root_path: str, aliases: Dict[str, str]):
    """保存全局别名文件 (data/projects.json)"""
    aliases_path = os.path.join(data_root_path, PROJECTS_JSON_FILE)
    try:
        os.makedirs(data_root_path, exist_ok=True)
        with open(aliases_path, "w", encoding="utf-8") as f:
            json.dump(aliases, f, indent=4)
    except OSError as e:
        logger.error(f"❌ 保存别名文件 {aliases_path} 失败: {e}")


def get_path_from_alias(data_root_path: str, alias: str) -> Optional[str]:
    """通过别名获取仓库路径"""
    return load_project_aliases(data_root_path).get(alias)


def load_project_config(project_data_path: str) -> Dict[str, Any]:
    """
    加载特定项目的配置文件 (data/<Project>/config.json)
    未知键被忽略。
    """
    config_path = os.path.join(project_data_path, CONFIG_JSON_FILE)
    if not os.path.exists(config_path):
        return {}
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"❌ 加载项目配置 {config_path} 失败: {e}")
        return {}
    if not isinstance(data, dict):
        logger.error(f"❌ 项目配置 {config_path} 格式错误，应为 JSON 对象")
        return {}
    return {k: v for k, v in data.items() if k in PROJECT_CONFIG_KEYS}


def save_project_config(project_data_path: str, config_data: Dict[str, Any]):
    """保存特定项目的配置文件 (data/<Project>/config.json)"""
    config_path = os.path.join(project_data_path, CONFIG_JSON_FILE)
    try:
        os.makedirs(project_data_path, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(config_data, f, indent=4)
        logger.info(f"✅ 项目配置已保存至 {config_path}")
    except OSError as e:
        logger.error(f"❌ 保存项目配置 {config_path} 失败: {e}")


def get_project_data_path(data_root_path: str, repo_path: str) -> str:
    """根据仓库路径 (或远程 URL) 获取其数据存储路径"""
    name = os.path.basename(os.path.normpath(repo_path.rstrip("/")))
    if name in ("", "."):
        name = "current_dir_project"
    if name.endswith(".git"):
        name = name[: -len(".git")]
    return os.path.join(data_root_path, name)


def save_project_defaults(
    data_root_path: str,
    repo_path: str,
    alias: Optional[str],
    config_data: Dict[str, Any],
) -> str:
    """保存项目默认值，并 (可选) 把别名指向该仓库。返回项目数据目录。"""
    project_data_path = get_project_data_path(data_root_path, repo_path)
    save_project_config(
        project_data_path,
        {k: v for k, v in config_data.items() if k in PROJECT_CONFIG_KEYS},
    )
    if alias:
        aliases = load_project_aliases(data_root_path)
        aliases[alias] = repo_path
        save_project_aliases(data_root_path, aliases)
        logger.info(f"✅ 别名 '{alias}' 已保存至 {PROJECTS_JSON_FILE}")
    return project_data_path
