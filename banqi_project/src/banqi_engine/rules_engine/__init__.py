"""
暗棋规则引擎模块

包含棋盘表示、走法合法性、吃子规则、回合控制和终局检测等核心功能。
"""

from .piece import (
    Piece, PieceType, PlayerColor, PieceStatus, Position, PIECE_RANKS, ROWS, COLS, normalize_position
)
from .move import Move
from .banqi_board import BanqiBoard, GamePhase, WinReason, make_piece
from .board_validator import BoardValidator
from .rule_engine import RuleEngine, RejectReason
from .capture_overlay import CaptureOverlay
from .game_controller import (
    GameController, ActionResult, GameEvent, EventType,
    new_game, flip, move, surrender, legal_targets, has_any_legal_move, winner
)

__all__ = [
    'Piece', 'PieceType', 'PlayerColor', 'PieceStatus', 'Position', 'PIECE_RANKS', 'ROWS', 'COLS',
    'normalize_position',
    'Move', 'BanqiBoard', 'GamePhase', 'WinReason', 'make_piece',
    'BoardValidator', 'RuleEngine', 'RejectReason', 'CaptureOverlay',
    'GameController', 'ActionResult', 'GameEvent', 'EventType',
    'new_game', 'flip', 'move', 'surrender', 'legal_targets', 'has_any_legal_move', 'winner'
]
