"""
对局会话管理

每个会话持有一块棋盘和一把锁，所有动作在会话锁内串行执行；
同时维护动作历史、对局日志和吃子过渡表。
"""

import logging
import threading
import time
import uuid
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Deque, Dict, List, Optional, Set

import numpy as np

from ..config.game_config import SessionConfig
from ..rules_engine import (
    ActionResult, BanqiBoard, CaptureOverlay, EventType, GameController, GameEvent,
    Move, Position, RejectReason, WinReason, normalize_position
)
from ..utils.exceptions import SessionNotFoundError


def _player(seat: int) -> str:
    return f"Player {seat + 1}"


def describe_result(result: ActionResult) -> List[str]:
    """
    把一次动作的事件转换为日志文本

    Args:
        result: 已接受的动作结果

    Returns:
        List[str]: 日志行，按发生顺序排列
    """
    lines = []
    events = result.events
    by_type: Dict[EventType, GameEvent] = {}
    for event in events:
        by_type.setdefault(event.event_type, event)

    revealed = by_type.get(EventType.PIECE_REVEALED)
    if revealed is not None:
        line = f"{_player(revealed.seat)} flipped {revealed.color.value} {revealed.piece_type.value}"
        assigned = by_type.get(EventType.COLORS_ASSIGNED)
        if assigned is not None:
            line += f". P1 is {assigned.color.value.upper()}."
        lines.append(line)

    moved = by_type.get(EventType.PIECE_MOVED)
    if moved is not None:
        row, col = moved.to_pos
        line = (f"{_player(moved.seat)} ({moved.color.value}): "
                f"{moved.piece_type.value} -> ({row},{col})")
        captured = by_type.get(EventType.PIECE_CAPTURED)
        if captured is not None:
            line += f" captures {captured.piece_type.value}"
        lines.append(line)

    won = by_type.get(EventType.GAME_WON)
    if won is not None:
        loser = 1 - won.seat
        if won.win_reason is WinReason.ELIMINATION:
            lines.append(f"GAME OVER! {_player(won.seat)} Wins (Elimination)!")
        elif won.win_reason is WinReason.STALEMATE:
            lines.append(f"Game Over: {_player(loser)} has no moves! {_player(won.seat)} Wins!")
        else:
            lines.append(f"{_player(loser)} Surrendered. {_player(won.seat)} Wins!")

    return lines


@dataclass
class ActionRecord:
    """动作记录"""
    action: str
    seat: int
    timestamp: datetime
    move: Optional[Move] = None
    position: Optional[Position] = None
    events: List[GameEvent] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典"""
        return {
            'action': self.action,
            'seat': self.seat,
            'timestamp': self.timestamp.isoformat(),
            'move': self.move.to_dict() if self.move else None,
            'position': self.position,
            'events': [e.to_dict() for e in self.events]
        }


@dataclass
class GameSession:
    """对局会话"""
    session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    config: SessionConfig = field(default_factory=SessionConfig)
    board: Optional[BanqiBoard] = None

    # 历史记录
    history: List[ActionRecord] = field(default_factory=list)
    logs: Deque[str] = field(default_factory=deque)

    # 元数据
    created_at: datetime = field(default_factory=datetime.now)
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)
    overlay: Optional[CaptureOverlay] = field(default=None, repr=False, compare=False)
    rng: Optional[np.random.Generator] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        """初始化后处理"""
        self.logs = deque(self.logs, maxlen=self.config.max_log_entries)
        # 每个会话只播种一次，重开时继续使用同一个生成器
        if self.rng is None:
            self.rng = np.random.default_rng(self.config.seed)
        if self.board is None:
            self.board = BanqiBoard.new_game(rng=self.rng)
        if self.overlay is None:
            self.overlay = CaptureOverlay(self.config.capture_overlay_ms)
        self.add_log("Game Start: Player 1's turn to flip.")

    def add_log(self, message: str):
        """添加日志 (最新的在最前)"""
        self.logs.appendleft(message)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典"""
        return {
            'session_id': self.session_id,
            'board': self.board.to_dict(),
            'text': self.board.to_text(),
            'history': [record.to_dict() for record in self.history],
            'logs': list(self.logs),
            'dying': self.overlay.dying_ids(),
            'created_at': self.created_at.isoformat()
        }


class SessionManager:
    """对局会话管理器"""

    def __init__(self, config: Optional[SessionConfig] = None,
                 controller: Optional[GameController] = None):
        """
        初始化会话管理器

        Args:
            config: 默认会话配置
            controller: 回合控制器
        """
        self.logger = logging.getLogger(__name__)
        self.config = config or SessionConfig()
        self.controller = controller or GameController()

        self.sessions: Dict[str, GameSession] = {}
        self._sessions_lock = threading.Lock()

    # ==================== 会话管理 ====================

    def create_session(self, config: Optional[SessionConfig] = None,
                       rng: Optional[np.random.Generator] = None) -> str:
        """
        创建新的对局会话

        Args:
            config: 会话配置，None时使用默认配置
            rng: 随机数生成器，优先于配置中的种子

        Returns:
            会话ID
        """
        config = config or self.config
        if rng is None:
            rng = np.random.default_rng(config.seed)
        board = self.controller.new_game(rng=rng)
        session = GameSession(config=config, board=board, rng=rng)

        with self._sessions_lock:
            self.sessions[session.session_id] = session

        self.logger.info(f"创建新会话: {session.session_id}")
        return session.session_id

    def get_session(self, session_id: str) -> GameSession:
        """
        获取会话

        Raises:
            SessionNotFoundError: 会话不存在
        """
        with self._sessions_lock:
            session = self.sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def close_session(self, session_id: str) -> bool:
        """关闭会话，返回会话是否存在"""
        with self._sessions_lock:
            removed = self.sessions.pop(session_id, None)
        if removed is not None:
            self.logger.info(f"关闭会话: {session_id}")
        return removed is not None

    def list_sessions(self) -> List[str]:
        with self._sessions_lock:
            return list(self.sessions)

    # ==================== 对局动作 ====================

    def flip(self, session_id: str, position: Position) -> ActionResult:
        """在会话中翻子"""
        session = self.get_session(session_id)
        with session.lock:
            result = self.controller.flip(session.board, position)
            self._apply(session, result, position=normalize_position(position))
            return result

    def move(self, session_id: str, piece_id: str, target: Position) -> ActionResult:
        """在会话中走子"""
        session = self.get_session(session_id)
        with session.lock:
            result = self.controller.move(session.board, piece_id, target)
            self._apply(session, result)
            return result

    def move_from(self, session_id: str, from_pos: Position, target: Position) -> ActionResult:
        """
        按起点坐标走子

        Args:
            session_id: 会话ID
            from_pos: 起点坐标
            target: 目标坐标

        Returns:
            ActionResult: 起点没有在场棋子时返回 NO_PIECE_THERE 拒绝结果
        """
        session = self.get_session(session_id)
        with session.lock:
            piece = session.board.piece_at(from_pos)
            if piece is None:
                return ActionResult(action='move', accepted=False, board=session.board,
                                    rejection=RejectReason.NO_PIECE_THERE)
            return self.move(session_id, piece.piece_id, target)

    def surrender(self, session_id: str, seat: Optional[int] = None) -> ActionResult:
        """在会话中认输"""
        session = self.get_session(session_id)
        with session.lock:
            acting_seat = session.board.current_seat if seat is None else seat
            result = self.controller.surrender(session.board, seat)
            self._apply(session, result, seat=acting_seat)
            return result

    def reset(self, session_id: str, rng: Optional[np.random.Generator] = None) -> BanqiBoard:
        """
        重开会话中的对局

        Args:
            session_id: 会话ID
            rng: 随机数生成器，None时继续使用会话自己的生成器

        Returns:
            BanqiBoard: 新棋盘
        """
        session = self.get_session(session_id)
        with session.lock:
            session.board = self.controller.reset(rng=rng if rng is not None else session.rng)
            session.history.clear()
            session.overlay.clear()
            session.logs.clear()
            session.add_log("Game Restarted: Player 1 to flip.")
            self.logger.info(f"会话重开: {session_id}")
            return session.board

    # ==================== 查询 ====================

    def legal_targets(self, session_id: str, position: Position) -> Set[Position]:
        """获取指定位置棋子的合法目标格"""
        session = self.get_session(session_id)
        with session.lock:
            piece = session.board.piece_at(position)
            if piece is None:
                return set()
            return self.controller.legal_targets(session.board, piece.piece_id)

    def expire_captures(self, session_id: str, now_ms: Optional[float] = None) -> List[str]:
        """清理到期的吃子过渡条目"""
        session = self.get_session(session_id)
        if now_ms is None:
            now_ms = time.monotonic() * 1000
        with session.lock:
            return session.overlay.expire(now_ms)

    def get_state(self, session_id: str) -> Dict[str, Any]:
        """获取会话状态快照"""
        session = self.get_session(session_id)
        with session.lock:
            state = session.to_dict()
            state['status'] = self.controller.rule_engine.get_game_status(session.board)
            return state

    # ==================== 内部辅助 ====================

    def _apply(self, session: GameSession, result: ActionResult,
               position: Optional[Position] = None, seat: Optional[int] = None):
        """把已接受的动作结果写回会话"""
        if not result.accepted:
            self.logger.debug(f"会话{session.session_id}动作被拒绝: "
                              f"{result.action} ({result.rejection.value})")
            return

        if seat is None:
            seat = session.board.current_seat
        session.board = result.board

        if session.config.record_history:
            session.history.append(ActionRecord(
                action=result.action,
                seat=seat,
                timestamp=datetime.now(),
                move=result.board.get_last_move() if result.action == 'move' else None,
                position=position,
                events=list(result.events)
            ))

        if result.captured:
            session.overlay.mark(result.captured_id, time.monotonic() * 1000)

        for line in describe_result(result):
            session.add_log(line)
