"""
配置管理器

负责加载、保存和管理各种配置。
"""

import copy
import json
import logging
from dataclasses import asdict, fields
from pathlib import Path
from typing import Any, Dict, Type, TypeVar

import yaml

from ..utils.exceptions import ConfigurationError
from .game_config import (
    SessionConfig, LoggingConfig,
    DEFAULT_SESSION_CONFIG, DEFAULT_LOGGING_CONFIG
)

T = TypeVar('T')

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


class ConfigManager:
    """
    配置管理器

    负责加载、保存和管理系统的各种配置。
    """

    def __init__(self, config_dir: str = "banqi_project/configs/banqi_engine"):
        """
        初始化配置管理器

        Args:
            config_dir: 配置文件目录
        """
        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)

        # 配置文件路径
        self.config_files = {
            'session': self.config_dir / 'session_config.yaml',
            'logging': self.config_dir / 'logging_config.yaml'
        }

        # 默认配置
        self.default_configs = {
            'session': DEFAULT_SESSION_CONFIG,
            'logging': DEFAULT_LOGGING_CONFIG
        }

        # 配置类型映射
        self.config_types = {
            'session': SessionConfig,
            'logging': LoggingConfig
        }

        self._initialize_default_configs()

    def _initialize_default_configs(self):
        """初始化默认配置文件"""
        for config_name, config_obj in self.default_configs.items():
            config_file = self.config_files[config_name]
            if not config_file.exists():
                self.save_config(config_name, config_obj)
                logger.info(f"创建默认配置文件: {config_file}")

    def _default(self, config_name: str) -> Any:
        return copy.deepcopy(self.default_configs[config_name])

    def load_config(self, config_name: str, config_class: Type[T]) -> T:
        """
        加载配置

        Args:
            config_name: 配置名称
            config_class: 配置类

        Returns:
            配置对象，文件不存在或无法解析时返回默认配置
        """
        config_file = self.config_files.get(config_name)
        if not config_file or not config_file.exists():
            logger.warning(f"配置文件不存在: {config_file}，使用默认配置")
            return self._default(config_name)

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                if config_file.suffix == '.yaml':
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)

            config = self._dict_to_dataclass(data or {}, config_class)
            logger.info(f"成功加载配置: {config_file}")
            return config

        except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
            logger.error(f"加载配置文件失败: {config_file}, 错误: {e}")
            return self._default(config_name)

    def save_config(self, config_name: str, config_obj: Any):
        """
        保存配置

        Args:
            config_name: 配置名称
            config_obj: 配置对象
        """
        config_file = self.config_files.get(config_name)
        if not config_file:
            raise ConfigurationError(config_name, "未知的配置名称")

        data = asdict(config_obj)

        with open(config_file, 'w', encoding='utf-8') as f:
            if config_file.suffix == '.yaml':
                yaml.dump(data, f, default_flow_style=False,
                          allow_unicode=True, indent=2)
            else:
                json.dump(data, f, ensure_ascii=False, indent=2)

        logger.info(f"成功保存配置: {config_file}")

    def get_session_config(self) -> SessionConfig:
        """获取会话配置"""
        return self.load_config('session', SessionConfig)

    def get_logging_config(self) -> LoggingConfig:
        """获取日志配置"""
        return self.load_config('logging', LoggingConfig)

    def update_config(self, config_name: str, **kwargs):
        """
        更新配置

        Args:
            config_name: 配置名称
            **kwargs: 要更新的配置项
        """
        if config_name not in self.config_types:
            raise ConfigurationError(config_name, "未知的配置名称")

        config_class = self.config_types[config_name]
        config = self.load_config(config_name, config_class)

        for key, value in kwargs.items():
            if hasattr(config, key):
                setattr(config, key, value)
            else:
                logger.warning(f"配置项不存在: {key}")

        self.save_config(config_name, config)

    def reset_config(self, config_name: str):
        """
        重置配置为默认值

        Args:
            config_name: 配置名称
        """
        self.save_config(config_name, self._default(config_name))
        logger.info(f"配置已重置为默认值: {config_name}")

    def validate_config(self, config_name: str) -> bool:
        """
        验证配置的有效性

        Args:
            config_name: 配置名称

        Returns:
            bool: 配置是否有效
        """
        if config_name not in self.config_types:
            return False

        config = self.load_config(config_name, self.config_types[config_name])

        if config_name == 'session':
            return (config.max_log_entries > 0 and
                    config.capture_overlay_ms >= 0 and
                    (config.seed is None or config.seed >= 0))
        elif config_name == 'logging':
            return (str(config.level).upper() in VALID_LOG_LEVELS and
                    config.max_size > 0 and
                    config.backup_count >= 0)

        return True

    def get_all_configs(self) -> Dict[str, Any]:
        """
        获取所有配置

        Returns:
            Dict[str, Any]: 所有配置的字典
        """
        configs = {}
        for config_name, config_class in self.config_types.items():
            configs[config_name] = self.load_config(config_name, config_class)
        return configs

    def export_configs(self, export_path: str):
        """
        导出所有配置到文件

        Args:
            export_path: 导出文件路径
        """
        export_data = {name: asdict(obj) for name, obj in self.get_all_configs().items()}

        export_file = Path(export_path)
        with open(export_file, 'w', encoding='utf-8') as f:
            if export_file.suffix == '.yaml':
                yaml.dump(export_data, f, default_flow_style=False,
                          allow_unicode=True, indent=2)
            else:
                json.dump(export_data, f, ensure_ascii=False, indent=2)

        logger.info(f"配置已导出到: {export_path}")

    def _dict_to_dataclass(self, data: Dict[str, Any], dataclass_type: Type[T]) -> T:
        """
        将字典转换为数据类对象

        Args:
            data: 字典数据
            dataclass_type: 数据类类型

        Returns:
            数据类对象
        """
        if not isinstance(data, dict):
            raise TypeError(f"配置内容应为字典: {type(data).__name__}")

        field_names = {f.name for f in fields(dataclass_type)}
        filtered_data = {k: v for k, v in data.items() if k in field_names}

        return dataclass_type(**filtered_data)
