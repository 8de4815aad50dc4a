"""
Banqi Kiro 源代码模块

包含子系统：
- banqi_engine: 暗棋规则引擎
"""

from . import banqi_engine

__all__ = [
    "banqi_engine",
]
