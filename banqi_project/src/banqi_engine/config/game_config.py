"""
配置数据结构

定义会话配置、日志配置和默认参数。规则本身 (棋盘尺寸、棋子构成、等级表)
是固定常量，不在配置范围内。
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class SessionConfig:
    """对局会话配置"""
    max_log_entries: int = 50           # 保留的日志条数
    seed: Optional[int] = None          # 洗牌随机种子 (None为随机)
    capture_overlay_ms: int = 600       # 被吃棋子的过渡显示时长(毫秒)
    record_history: bool = True         # 是否记录动作历史


@dataclass
class LoggingConfig:
    """日志配置"""
    name: str = 'banqi'                 # 根日志记录器名称
    level: str = 'INFO'                 # 日志级别
    log_file: Optional[str] = None      # 日志文件 (None为不写文件)
    log_dir: str = 'logs/banqi_engine'  # 日志目录
    max_size: int = 10                  # 日志文件最大大小(MB)
    backup_count: int = 5               # 日志备份数量
    console_output: bool = True         # 是否输出到控制台


# 默认配置实例
DEFAULT_SESSION_CONFIG = SessionConfig()
DEFAULT_LOGGING_CONFIG = LoggingConfig()
