import logging
import os
import importlib.util
import inspect
from typing import Any, List, Type
from context import RunContext
from .base import BasePlugin

logger = logging.getLogger(__name__)


def discover_plugin_classes(plugins_dir: str) -> List[Type[BasePlugin]]:
    """
    扫描目录下的 .py 文件，返回其中所有 BasePlugin 子类。
    单个文件加载失败只记录日志。
    """
    if not os.path.isdir(plugins_dir):
        return []

    classes: List[Type[BasePlugin]] = []
    for filename in sorted(os.listdir(plugins_dir)):
        if not filename.endswith(".py") or filename.startswith("__"):
            continue
        filepath = os.path.join(plugins_dir, filename)
        try:
            module_name = f"plugins_{os.path.splitext(filename)[0]}"
            spec = importlib.util.spec_from_file_location(module_name, filepath)
            if not (spec and spec.loader):
                continue
            module = importlib.util.module_from_spec(spec)
            spec.loader.exec_module(module)
        except Exception as e:
            logger.error(f"❌ [Hooks] 加载插件失败 {filepath}: {e}")
            continue

        found = [
            obj
            for _, obj in inspect.getmembers(module, inspect.isclass)
            if issubclass(obj, BasePlugin)
            and obj is not BasePlugin
            and obj.__module__ == module.__name__
        ]
        if not found:
            logger.warning(f"   ⚠️ [Hooks] 文件 {filepath} 中未发现 BasePlugin 子类")
        classes.extend(found)
    return classes


class PluginManager:
    """
    插件管理器
    负责从 plugins/ 目录动态加载脚本，并管理钩子调用链。
    插件抛出的异常只记录日志，不会中断报告生成。
    """

    def __init__(self, context: RunContext):
        self.context = context
        self.plugins: List[BasePlugin] = []

    def load_plugins(self, plugins_dir: str = ""):
        """从 plugins_dir (默认: 脚本根目录下的 plugins) 加载插件"""
        plugins_dir = plugins_dir or os.path.join(
            self.context.global_config.SCRIPT_BASE_PATH, "plugins"
        )
        logger.info(f"🔌 [Hooks] 正在扫描插件目录: {plugins_dir}")

        for plugin_cls in discover_plugin_classes(plugins_dir):
            try:
                self.register(plugin_cls())
            except Exception as e:
                logger.error(f"❌ [Hooks] 实例化插件 {plugin_cls.__name__} 失败: {e}")

    def register(self, plugin: BasePlugin):
        """手动注册插件实例"""
        self.plugins.append(plugin)
        logger.info(f"   ✅ [Hooks] 已加载插件: {plugin.name}")

    def trigger(self, event_name: str, *args, **kwargs):
        """
        触发无返回值的通知型钩子 (如 on_start)。
        """
        for plugin in self.plugins:
            method = getattr(plugin, event_name, None)
            if not method:
                continue
            try:
                method(self.context, *args, **kwargs)
            except Exception as e:
                logger.error(f"❌ [Hooks] 插件 {plugin.name} 执行 {event_name} 失败: {e}")

    def filter(self, event_name: str, initial_value: Any, *args, **kwargs) -> Any:
        """
        触发链式处理型钩子 (如 on_html_generated)。
        初始值依次经过所有插件；插件返回 None 时保持原值。
        """
        value = initial_value
        for plugin in self.plugins:
            method = getattr(plugin, event_name, None)
            if not method:
                continue
            try:
                new_value = method(self.context, value, *args, **kwargs)
            except Exception as e:
                logger.error(f"❌ [Hooks] 插件 {plugin.name} 执行 {event_name} 失败: {e}")
                continue
            if new_value is not None:
                value = new_value
        return value
