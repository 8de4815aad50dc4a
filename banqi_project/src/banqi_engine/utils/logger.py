"""
日志系统

提供统一的日志记录功能。
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional


def setup_logger(
    name: str = 'banqi',
    level: str = 'INFO',
    log_file: Optional[str] = None,
    log_dir: str = 'logs/banqi_engine',
    max_size: int = 10,  # MB
    backup_count: int = 5,
    console_output: bool = True
) -> logging.Logger:
    """
    设置日志记录器

    Args:
        name: 日志记录器名称
        level: 日志级别
        log_file: 日志文件名
        log_dir: 日志目录
        max_size: 日志文件最大大小(MB)
        backup_count: 备份文件数量
        console_output: 是否输出到控制台

    Returns:
        logging.Logger: 配置好的日志记录器
    """
    logger = logging.getLogger(name)

    # 如果已经配置过，直接返回
    if logger.handlers:
        return logger

    log_level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(log_level)

    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # 控制台处理器
    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    # 文件处理器
    if log_file:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_path / log_file,
            maxBytes=max_size * 1024 * 1024,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def setup_logger_from_config(config) -> logging.Logger:
    """
    按LoggingConfig设置日志记录器

    Args:
        config: LoggingConfig对象

    Returns:
        logging.Logger: 配置好的日志记录器
    """
    return setup_logger(
        name=config.name,
        level=config.level,
        log_file=config.log_file,
        log_dir=config.log_dir,
        max_size=config.max_size,
        backup_count=config.backup_count,
        console_output=config.console_output
    )


def get_logger(name: str = 'banqi') -> logging.Logger:
    """
    获取日志记录器

    Args:
        name: 日志记录器名称

    Returns:
        logging.Logger: 日志记录器
    """
    return logging.getLogger(name)


class LoggerMixin:
    """
    日志记录器混入类

    为类提供日志记录功能。
    """

    @property
    def logger(self) -> logging.Logger:
        """获取日志记录器"""
        class_name = self.__class__.__name__
        return get_logger(f'banqi.{class_name}')

    def log_info(self, message: str, *args, **kwargs):
        """记录信息日志"""
        self.logger.info(message, *args, **kwargs)

    def log_warning(self, message: str, *args, **kwargs):
        """记录警告日志"""
        self.logger.warning(message, *args, **kwargs)

    def log_error(self, message: str, *args, **kwargs):
        """记录错误日志"""
        self.logger.error(message, *args, **kwargs)

    def log_debug(self, message: str, *args, **kwargs):
        """记录调试日志"""
        self.logger.debug(message, *args, **kwargs)
