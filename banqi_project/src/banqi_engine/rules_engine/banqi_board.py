"""
暗棋棋盘数据结构

定义暗棋棋盘 (4x8) 的表示、发牌洗牌、占位查询和格式转换功能。
"""

import copy
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

import numpy as np

from .move import Move
from .piece import (
    ROWS, COLS, PIECE_COUNTS, Piece, PieceStatus, PieceType, PlayerColor, Position,
    all_positions, normalize_position
)


class GamePhase(Enum):
    """对局阶段枚举"""
    AWAITING_FIRST_FLIP = "awaiting_first_flip"  # 等待第一次翻子
    PLAYING = "playing"                          # 对局进行中
    GAME_OVER = "game_over"                      # 已结束


class WinReason(Enum):
    """胜负原因枚举"""
    ELIMINATION = "elimination"  # 吃光对方棋子
    STALEMATE = "stalemate"      # 对方无子可动
    SURRENDER = "surrender"      # 对方认输


class BanqiBoard:
    """
    暗棋棋盘类

    维护32枚棋子、两个座位的颜色分配、当前行棋座位和胜负结果。
    """

    # 矩阵编码
    EMPTY = 0
    HIDDEN = 8

    # 座位
    SEATS = (0, 1)

    def __init__(self, pieces: Optional[List[Piece]] = None,
                 rng: Optional[np.random.Generator] = None):
        """
        初始化棋盘

        Args:
            pieces: 棋子列表，如果为None则洗牌发出新的32枚暗子
            rng: 随机数生成器，用于可复现的洗牌
        """
        self.pieces: List[Piece] = pieces if pieces is not None else self.deal(rng)

        # 座位颜色 (第一次翻子前均为None)
        self.player_colors: Dict[int, Optional[PlayerColor]] = {0: None, 1: None}

        # 当前行棋座位 (0 或 1)
        self.current_seat = 0

        # 胜负结果
        self.winner: Optional[int] = None
        self.win_reason: Optional[WinReason] = None

        # 走法历史
        self.move_history: List[Move] = []

        # 棋局元数据
        self.metadata: Dict[str, Any] = {
            'created_at': datetime.now().isoformat(),
            'round_count': 0,
            'flip_count': 0
        }

    @staticmethod
    def deal(rng: Optional[np.random.Generator] = None) -> List[Piece]:
        """
        洗牌并按行优先顺序把32枚暗子发到全部格子上

        Args:
            rng: 随机数生成器，为None时使用新的默认生成器

        Returns:
            List[Piece]: 棋子列表，ID依次为 piece_0 ... piece_31
        """
        if rng is None:
            rng = np.random.default_rng()

        definitions = []
        for color in (PlayerColor.RED, PlayerColor.BLACK):
            for piece_type, count in PIECE_COUNTS.items():
                definitions.extend([(piece_type, color)] * count)

        order = rng.permutation(len(definitions))

        pieces = []
        for idx, pos in enumerate(all_positions()):
            piece_type, color = definitions[int(order[idx])]
            pieces.append(Piece(
                piece_id=f"piece_{idx}",
                piece_type=piece_type,
                color=color,
                position=pos
            ))
        return pieces

    @classmethod
    def new_game(cls, rng: Optional[np.random.Generator] = None,
                 seed: Optional[int] = None) -> 'BanqiBoard':
        """
        创建新对局

        Args:
            rng: 随机数生成器
            seed: 随机种子 (rng为None时生效)

        Returns:
            BanqiBoard: 全部为暗子、尚未分配颜色的棋盘
        """
        if rng is None and seed is not None:
            rng = np.random.default_rng(seed)
        return cls(rng=rng)

    @classmethod
    def from_pieces(cls, pieces: List[Piece],
                    player_colors: Optional[Dict[int, Optional[PlayerColor]]] = None,
                    current_seat: int = 0) -> 'BanqiBoard':
        """
        从棋子列表创建棋盘 (用于构造残局)

        Args:
            pieces: 棋子列表
            player_colors: 座位颜色分配
            current_seat: 当前行棋座位

        Returns:
            BanqiBoard: 棋盘对象
        """
        board = cls(pieces=list(pieces))
        if player_colors:
            board.player_colors = {0: player_colors.get(0), 1: player_colors.get(1)}
        board.current_seat = current_seat
        return board

    # ==================== 占位查询 ====================

    def piece_at(self, pos: Position) -> Optional[Piece]:
        """
        获取指定位置的在场棋子

        已死亡或移除中的棋子不占据格子。

        Args:
            pos: 位置坐标

        Returns:
            Optional[Piece]: 在场棋子，没有则返回None
        """
        pos = normalize_position(pos)
        if pos is None:
            return None
        for piece in self.pieces:
            if piece.is_live and piece.position == pos:
                return piece
        return None

    def is_empty(self, pos: Position) -> bool:
        """检查位置是否为空"""
        return self.piece_at(pos) is None

    def get_piece(self, piece_id: str) -> Optional[Piece]:
        """按ID查找棋子"""
        for piece in self.pieces:
            if piece.piece_id == piece_id:
                return piece
        return None

    def live_pieces(self, color: Optional[PlayerColor] = None) -> List[Piece]:
        """
        获取在场棋子

        Args:
            color: 颜色，None表示双方

        Returns:
            List[Piece]: 在场棋子列表
        """
        return [p for p in self.pieces
                if p.is_live and (color is None or p.color is color)]

    def hidden_pieces(self) -> List[Piece]:
        """获取所有在场暗子"""
        return [p for p in self.pieces if p.is_hidden]

    def has_hidden_pieces(self) -> bool:
        return any(p.is_hidden for p in self.pieces)

    def captured_pieces(self, color: PlayerColor) -> List[Piece]:
        """
        获取某方已被吃掉的棋子，按等级从高到低排序

        Args:
            color: 颜色

        Returns:
            List[Piece]: 阵亡棋子列表
        """
        dead = [p for p in self.pieces if p.dead and p.color is color]
        return sorted(dead, key=lambda p: p.rank, reverse=True)

    def count_pieces(self, color: Optional[PlayerColor] = None) -> Dict[PieceType, int]:
        """
        统计在场棋子数量

        Args:
            color: 颜色，None表示双方

        Returns:
            Dict[PieceType, int]: 棋子类型到数量的映射
        """
        counts: Dict[PieceType, int] = {}
        for piece in self.live_pieces(color):
            counts[piece.piece_type] = counts.get(piece.piece_type, 0) + 1
        return counts

    # ==================== 座位与阶段 ====================

    def seat_color(self, seat: int) -> Optional[PlayerColor]:
        """获取座位的颜色"""
        return self.player_colors.get(seat)

    def seat_of(self, color: PlayerColor) -> Optional[int]:
        """获取持某颜色的座位"""
        for seat, seat_color in self.player_colors.items():
            if seat_color is color:
                return seat
        return None

    @property
    def current_color(self) -> Optional[PlayerColor]:
        """当前行棋座位的颜色"""
        return self.seat_color(self.current_seat)

    @property
    def colors_assigned(self) -> bool:
        return self.player_colors[0] is not None

    @property
    def phase(self) -> GamePhase:
        """当前对局阶段"""
        if self.winner is not None:
            return GamePhase.GAME_OVER
        if not self.colors_assigned:
            return GamePhase.AWAITING_FIRST_FLIP
        return GamePhase.PLAYING

    def is_game_over(self) -> bool:
        return self.winner is not None

    def get_last_move(self) -> Optional[Move]:
        """
        获取最后一步走法

        Returns:
            Optional[Move]: 最后一步走法，如果没有则返回None
        """
        return self.move_history[-1] if self.move_history else None

    @property
    def last_move(self) -> Optional[Move]:
        return self.get_last_move()

    # ==================== 格式转换 ====================

    def to_matrix(self, reveal_hidden: bool = False) -> np.ndarray:
        """
        转换为矩阵格式

        红方为正数、黑方为负数、空格为0；暗子默认编码为HIDDEN。

        Args:
            reveal_hidden: 是否显示暗子的真实身份

        Returns:
            np.ndarray: 4x8的棋盘矩阵
        """
        matrix = np.zeros((ROWS, COLS), dtype=int)
        for piece in self.live_pieces():
            row, col = piece.position
            if piece.revealed or reveal_hidden:
                matrix[row, col] = piece.code()
            else:
                matrix[row, col] = self.HIDDEN
        return matrix

    def to_text(self) -> str:
        """
        转换为文本棋盘

        '.' 表示空格, '?' 表示暗子, 红方大写、黑方小写。

        Returns:
            str: 每行一行文本
        """
        lines = []
        for row in range(ROWS):
            cells = []
            for col in range(COLS):
                piece = self.piece_at((row, col))
                if piece is None:
                    cells.append('.')
                elif not piece.revealed:
                    cells.append('?')
                else:
                    cells.append(piece.letter())
            lines.append(' '.join(cells))
        return '\n'.join(lines) + '\n'

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典"""
        return {
            'pieces': [p.to_dict() for p in self.pieces],
            'player_colors': {
                seat: color.value if color else None
                for seat, color in self.player_colors.items()
            },
            'current_seat': self.current_seat,
            'phase': self.phase.value,
            'winner': self.winner,
            'win_reason': self.win_reason.value if self.win_reason else None,
            'move_history': [m.to_dict() for m in self.move_history],
            'metadata': dict(self.metadata)
        }

    def copy(self) -> 'BanqiBoard':
        """
        创建棋盘的深拷贝

        Returns:
            BanqiBoard: 新的棋盘对象
        """
        return copy.deepcopy(self)

    # ==================== 棋局验证功能 ====================

    def validate_board_state(self):
        """
        验证棋局状态的合法性

        Returns:
            Tuple[bool, List[str]]: (是否合法, 错误信息列表)
        """
        from .board_validator import BoardValidator
        validator = BoardValidator()
        return validator.full_validation(self)

    def __str__(self) -> str:
        return self.to_text()

    def __repr__(self) -> str:
        return (f"BanqiBoard(phase={self.phase.value}, current_seat={self.current_seat}, "
                f"live={len(self.live_pieces())}, hidden={len(self.hidden_pieces())})")


def make_piece(piece_id: str, piece_type: PieceType, color: PlayerColor, position: Position,
               revealed: bool = True, status: PieceStatus = PieceStatus.ALIVE) -> Piece:
    """
    构造单个棋子 (残局/测试辅助)

    Raises:
        ValueError: 位置越界
    """
    pos = normalize_position(position)
    if pos is None:
        raise ValueError(f"无效的位置坐标: {position}")
    return Piece(piece_id=piece_id, piece_type=piece_type, color=color,
                 position=pos, revealed=revealed, status=status)
