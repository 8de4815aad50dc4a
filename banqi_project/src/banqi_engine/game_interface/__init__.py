"""
对局接口模块

包含会话管理、动作历史和对局日志。
"""

from .session_manager import SessionManager, GameSession, ActionRecord, describe_result

__all__ = ['SessionManager', 'GameSession', 'ActionRecord', 'describe_result']
