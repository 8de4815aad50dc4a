"""
暗棋系统 (Banqi Kiro)

暗棋 (翻翻棋) 规则引擎，附带会话管理和命令行入口。
"""

__version__ = "0.1.0"
__author__ = "Banqi Kiro Team"
__description__ = "暗棋系统 - 4x8暗棋规则引擎与对局会话管理"

from banqi_project.src import banqi_engine

__all__ = [
    "banqi_engine",
    "__version__",
    "__author__",
    "__description__",
]
