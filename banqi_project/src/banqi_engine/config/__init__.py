"""
配置管理模块

包含会话配置、日志配置和配置文件管理。
"""

from .config_manager import ConfigManager
from .game_config import SessionConfig, LoggingConfig, DEFAULT_SESSION_CONFIG, DEFAULT_LOGGING_CONFIG

__all__ = [
    'ConfigManager', 'SessionConfig', 'LoggingConfig',
    'DEFAULT_SESSION_CONFIG', 'DEFAULT_LOGGING_CONFIG'
]
