"""
暗棋规则引擎

4x8棋盘、32枚暗子的暗棋 (翻翻棋) 规则引擎。
包括走法合法性、吃子等级、炮的翻山吃子、颜色分配、轮换与终局检测，
以及会话管理、配置和日志等外围组件。
"""

__version__ = "0.1.0"
__author__ = "Banqi Team"

from .rules_engine import (
    BanqiBoard, Piece, PieceType, PlayerColor, Move, RuleEngine, RejectReason,
    GameController, ActionResult, new_game, flip, move, surrender,
    legal_targets, has_any_legal_move, winner
)
from .config import ConfigManager, SessionConfig, LoggingConfig
from .game_interface import SessionManager, GameSession
from .utils import setup_logger, get_logger, BanqiError

__all__ = [
    "__version__", "__author__",
    "BanqiBoard", "Piece", "PieceType", "PlayerColor", "Move", "RuleEngine", "RejectReason",
    "GameController", "ActionResult",
    "new_game", "flip", "move", "surrender", "legal_targets", "has_any_legal_move", "winner",
    "ConfigManager", "SessionConfig", "LoggingConfig",
    "SessionManager", "GameSession",
    "setup_logger", "get_logger", "BanqiError"
]
