"""
暗棋回合控制器

负责翻子、走子、认输、重开，以及颜色分配、轮换行棋方和胜负判定。
每个动作都返回新的棋盘，被拒绝的动作不会修改任何状态。
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Set, Tuple

import numpy as np

from ..utils.exceptions import InvalidActionError
from ..utils.logger import LoggerMixin
from .banqi_board import BanqiBoard, WinReason
from .move import Move
from .piece import PieceStatus, PieceType, PlayerColor, Position, normalize_position
from .rule_engine import RejectReason, RuleEngine


class EventType(Enum):
    """引擎事件类型"""
    PIECE_REVEALED = "piece_revealed"    # 翻开棋子
    COLORS_ASSIGNED = "colors_assigned"  # 分配颜色
    PIECE_MOVED = "piece_moved"          # 走子
    PIECE_CAPTURED = "piece_captured"    # 吃子
    TURN_PASSED = "turn_passed"          # 轮到对方
    GAME_WON = "game_won"                # 分出胜负


@dataclass
class GameEvent:
    """引擎事件，供展示层播放动画、音效和记录日志"""
    event_type: EventType
    seat: int
    piece_id: Optional[str] = None
    piece_type: Optional[PieceType] = None
    color: Optional[PlayerColor] = None
    from_pos: Optional[Position] = None
    to_pos: Optional[Position] = None
    win_reason: Optional[WinReason] = None

    def to_dict(self) -> dict:
        """转换为字典"""
        return {
            'event_type': self.event_type.value,
            'seat': self.seat,
            'piece_id': self.piece_id,
            'piece_type': self.piece_type.value if self.piece_type else None,
            'color': self.color.value if self.color else None,
            'from_pos': self.from_pos,
            'to_pos': self.to_pos,
            'win_reason': self.win_reason.value if self.win_reason else None
        }


@dataclass
class ActionResult:
    """
    动作结果

    accepted为True时board为动作后的新棋盘；为False时board为原棋盘，
    rejection给出拒绝原因。
    """
    action: str
    accepted: bool
    board: BanqiBoard
    rejection: Optional[RejectReason] = None
    events: List[GameEvent] = field(default_factory=list)
    captured_id: Optional[str] = None

    @property
    def captured(self) -> bool:
        return self.captured_id is not None

    @property
    def winner(self) -> Optional[int]:
        return self.board.winner

    def raise_for_rejection(self) -> 'ActionResult':
        """
        被拒绝时抛出异常

        Raises:
            InvalidActionError: 动作被拒绝
        """
        if not self.accepted:
            raise InvalidActionError(self.action, self.rejection.value)
        return self


class GameController(LoggerMixin):
    """
    暗棋回合控制器

    状态机: AWAITING_FIRST_FLIP -> PLAYING -> GAME_OVER。
    调用方需要串行调用，同一棋盘上不能并发执行动作。
    """

    def __init__(self, rule_engine: Optional[RuleEngine] = None):
        """
        初始化回合控制器

        Args:
            rule_engine: 规则引擎，为None时创建默认实例
        """
        self.rule_engine = rule_engine or RuleEngine()

    def new_game(self, rng: Optional[np.random.Generator] = None,
                 seed: Optional[int] = None) -> BanqiBoard:
        """
        创建新对局

        Args:
            rng: 随机数生成器
            seed: 随机种子

        Returns:
            BanqiBoard: 新棋盘
        """
        board = BanqiBoard.new_game(rng=rng, seed=seed)
        self.log_debug("新对局已发牌")
        return board

    def reset(self, rng: Optional[np.random.Generator] = None,
              seed: Optional[int] = None) -> BanqiBoard:
        """重开对局，重新洗牌并回到等待第一次翻子的状态"""
        self.log_info("重开对局")
        return self.new_game(rng=rng, seed=seed)

    def _reject(self, action: str, board: BanqiBoard, reason: RejectReason) -> ActionResult:
        self.log_debug(f"拒绝动作 {action}: {reason.value}")
        return ActionResult(action=action, accepted=False, board=board, rejection=reason)

    # ==================== 翻子 ====================

    def flip(self, board: BanqiBoard, position: Position) -> ActionResult:
        """
        翻开指定位置的暗子

        任何暗子都可以翻，不论颜色。第一次翻子决定双方颜色：
        座位0持翻开棋子的颜色，座位1持另一种颜色。

        Args:
            board: 当前棋盘
            position: 暗子位置

        Returns:
            ActionResult: 动作结果
        """
        if board.is_game_over():
            return self._reject('flip', board, RejectReason.GAME_OVER)
        position = normalize_position(position)
        if position is None:
            return self._reject('flip', board, RejectReason.OUT_OF_BOUNDS)

        target = board.piece_at(position)
        if target is None:
            return self._reject('flip', board, RejectReason.NO_PIECE_THERE)
        if target.revealed:
            return self._reject('flip', board, RejectReason.PIECE_NOT_HIDDEN)

        new_board = board.copy()
        seat = new_board.current_seat
        piece = new_board.get_piece(target.piece_id)
        piece.revealed = True

        events = [GameEvent(
            event_type=EventType.PIECE_REVEALED,
            seat=seat,
            piece_id=piece.piece_id,
            piece_type=piece.piece_type,
            color=piece.color,
            to_pos=piece.position
        )]

        if not new_board.colors_assigned:
            new_board.player_colors = {0: piece.color, 1: piece.color.opponent()}
            events.append(GameEvent(event_type=EventType.COLORS_ASSIGNED, seat=0, color=piece.color))
            self.log_info(f"颜色分配完成: 座位0={piece.color.value}")

        new_board.metadata['flip_count'] += 1
        new_board.metadata['round_count'] += 1

        self._finish_turn(new_board, seat, events)
        return ActionResult(action='flip', accepted=True, board=new_board, events=events)

    # ==================== 走子 ====================

    def move(self, board: BanqiBoard, piece_id: str, target: Position) -> ActionResult:
        """
        移动明子，目标有对方棋子时吃子

        Args:
            board: 当前棋盘
            piece_id: 移动的棋子ID
            target: 目标位置

        Returns:
            ActionResult: 动作结果，吃子时 captured_id 为被吃棋子ID
        """
        if board.is_game_over():
            return self._reject('move', board, RejectReason.GAME_OVER)

        piece = board.get_piece(piece_id)
        if piece is None or not piece.is_live:
            return self._reject('move', board, RejectReason.NO_PIECE_THERE)
        if not self.rule_engine.can_select_piece(piece, board.current_color):
            return self._reject('move', board, RejectReason.NOT_YOUR_TURN)

        reason = self.rule_engine.check_move(board, piece, target)
        if reason is not None:
            return self._reject('move', board, reason)
        target = normalize_position(target)

        new_board = board.copy()
        seat = new_board.current_seat
        mover = new_board.get_piece(piece_id)
        victim = new_board.piece_at(target)
        from_pos = mover.position

        events = []
        captured_id = None
        if victim is not None:
            # 吃子在引擎内一次完成，移除动画由展示层负责
            victim.status = PieceStatus.DEAD
            captured_id = victim.piece_id
            events.append(GameEvent(
                event_type=EventType.PIECE_CAPTURED,
                seat=seat,
                piece_id=victim.piece_id,
                piece_type=victim.piece_type,
                color=victim.color,
                to_pos=victim.position
            ))

        mover.position = target
        events.insert(0, GameEvent(
            event_type=EventType.PIECE_MOVED,
            seat=seat,
            piece_id=mover.piece_id,
            piece_type=mover.piece_type,
            color=mover.color,
            from_pos=from_pos,
            to_pos=target
        ))

        new_board.move_history.append(Move(
            from_pos=from_pos, to_pos=target, piece_id=mover.piece_id, captured_id=captured_id
        ))
        new_board.metadata['round_count'] += 1

        # 吃光对方棋子，当前方立即获胜，不再轮换
        if self.rule_engine.is_eliminated(new_board, mover.color.opponent()):
            self._declare_winner(new_board, seat, WinReason.ELIMINATION, events)
        else:
            self._finish_turn(new_board, seat, events)

        return ActionResult(action='move', accepted=True, board=new_board,
                            events=events, captured_id=captured_id)

    # ==================== 认输 ====================

    def surrender(self, board: BanqiBoard, seat: Optional[int] = None) -> ActionResult:
        """
        认输，对方直接获胜

        Args:
            board: 当前棋盘
            seat: 认输的座位，None表示当前行棋方

        Returns:
            ActionResult: 动作结果
        """
        if board.is_game_over():
            return self._reject('surrender', board, RejectReason.GAME_OVER)
        if seat is None:
            seat = board.current_seat
        if seat not in BanqiBoard.SEATS:
            return self._reject('surrender', board, RejectReason.NOT_YOUR_TURN)

        new_board = board.copy()
        events: List[GameEvent] = []
        self._declare_winner(new_board, 1 - seat, WinReason.SURRENDER, events)
        return ActionResult(action='surrender', accepted=True, board=new_board, events=events)

    # ==================== 查询 ====================

    def legal_targets(self, board: BanqiBoard, piece_id: str) -> Set[Position]:
        """
        获取棋子的所有合法目标格

        Args:
            board: 棋盘状态
            piece_id: 棋子ID

        Returns:
            Set[Position]: 合法目标格集合，棋子不存在或为暗子时为空集
        """
        piece = board.get_piece(piece_id)
        if piece is None:
            return set()
        return self.rule_engine.legal_targets(board, piece)

    def has_any_legal_move(self, board: BanqiBoard, color: PlayerColor) -> bool:
        return self.rule_engine.has_any_legal_move(board, color)

    @staticmethod
    def winner(board: BanqiBoard) -> Optional[int]:
        """获胜座位，未分胜负时返回None"""
        return board.winner

    def terminal_state(self, board: BanqiBoard) -> Optional[Tuple[int, WinReason]]:
        """
        重新检查终局条件 (不修改棋盘)

        Args:
            board: 棋盘状态

        Returns:
            Optional[Tuple[int, WinReason]]: (获胜座位, 原因)，未终局时返回None
        """
        if board.winner is not None:
            return board.winner, board.win_reason

        color = board.current_color
        if color is None:
            return None
        if self.rule_engine.is_eliminated(board, color.opponent()):
            return board.current_seat, WinReason.ELIMINATION
        if self.rule_engine.is_eliminated(board, color):
            return 1 - board.current_seat, WinReason.ELIMINATION
        if not self.rule_engine.has_any_legal_move(board, color):
            return 1 - board.current_seat, WinReason.STALEMATE
        return None

    # ==================== 内部辅助 ====================

    def _finish_turn(self, board: BanqiBoard, seat: int, events: List[GameEvent]):
        """轮换行棋方，并检查下一方是否困毙"""
        board.current_seat = 1 - seat
        events.append(GameEvent(event_type=EventType.TURN_PASSED, seat=board.current_seat))

        next_color = board.current_color
        if next_color is not None and not self.rule_engine.has_any_legal_move(board, next_color):
            self._declare_winner(board, seat, WinReason.STALEMATE, events)

    def _declare_winner(self, board: BanqiBoard, seat: int, reason: WinReason,
                        events: List[GameEvent]):
        board.winner = seat
        board.win_reason = reason
        events.append(GameEvent(
            event_type=EventType.GAME_WON,
            seat=seat,
            color=board.seat_color(seat),
            win_reason=reason
        ))
        self.log_info(f"对局结束: 座位{seat}获胜 ({reason.value})")


# 默认控制器，供模块级函数使用
_default_controller = GameController()


def new_game(rng: Optional[np.random.Generator] = None, seed: Optional[int] = None) -> BanqiBoard:
    return _default_controller.new_game(rng=rng, seed=seed)


def flip(board: BanqiBoard, position: Position) -> ActionResult:
    return _default_controller.flip(board, position)


def move(board: BanqiBoard, piece_id: str, target: Position) -> ActionResult:
    return _default_controller.move(board, piece_id, target)


def surrender(board: BanqiBoard, seat: Optional[int] = None) -> ActionResult:
    return _default_controller.surrender(board, seat)


def legal_targets(board: BanqiBoard, piece_id: str) -> Set[Position]:
    return _default_controller.legal_targets(board, piece_id)


def has_any_legal_move(board: BanqiBoard, color: PlayerColor) -> bool:
    return _default_controller.has_any_legal_move(board, color)


def winner(board: BanqiBoard) -> Optional[int]:
    return _default_controller.winner(board)
