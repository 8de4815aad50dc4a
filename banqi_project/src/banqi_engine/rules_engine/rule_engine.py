"""
暗棋规则引擎

实现走子几何、吃子等级、炮的翻山吃子以及无子可动 (困毙) 检测。
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Set

from .banqi_board import BanqiBoard
from .move import Move
from .piece import Piece, PieceType, PlayerColor, Position, all_positions, normalize_position


class RejectReason(Enum):
    """动作被拒绝的原因"""
    OUT_OF_BOUNDS = "out_of_bounds"                  # 目标越界
    NO_PIECE_THERE = "no_piece_there"                # 该处没有棋子
    PIECE_NOT_HIDDEN = "piece_not_hidden"            # 翻子目标已是明子
    NOT_YOUR_TURN = "not_your_turn"                  # 不能选择该棋子
    ILLEGAL_GEOMETRY = "illegal_geometry"            # 走法不符合几何规则
    CANNOT_CAPTURE_HIDDEN = "cannot_capture_hidden"  # 不能吃暗子
    RANK_TOO_LOW = "rank_too_low"                    # 等级不足
    FRIENDLY_TARGET = "friendly_target"              # 目标是己方棋子
    GAME_OVER = "game_over"                          # 对局已结束


class RuleEngine:
    """
    暗棋规则引擎

    所有方法都不修改棋盘，只做查询和判定。
    """

    # count_obstacles 的"不在同一直线"标记
    NOT_LINEAR = -1

    def __init__(self):
        """初始化规则引擎"""
        # 上下左右四个方向
        self.orthogonal_moves = [(0, 1), (0, -1), (1, 0), (-1, 0)]

    # ==================== 几何判定 ====================

    @staticmethod
    def same_cell(a: Position, b: Position) -> bool:
        """两个坐标是否相同"""
        return a[0] == b[0] and a[1] == b[1]

    @staticmethod
    def is_adjacent(a: Position, b: Position) -> bool:
        """是否正交相邻 (曼哈顿距离为1，斜向不算相邻)"""
        return abs(a[0] - b[0]) + abs(a[1] - b[1]) == 1

    def count_obstacles(self, board: BanqiBoard, from_pos: Position, to_pos: Position) -> int:
        """
        统计两点之间 (不含两端) 的在场棋子数量

        暗子和明子都计入。

        Args:
            board: 棋盘状态
            from_pos: 起点
            to_pos: 终点

        Returns:
            int: 障碍数量；两点不在同一行或同一列时返回 NOT_LINEAR
        """
        if from_pos[0] != to_pos[0] and from_pos[1] != to_pos[1]:
            return self.NOT_LINEAR

        dr = (to_pos[0] > from_pos[0]) - (to_pos[0] < from_pos[0])
        dc = (to_pos[1] > from_pos[1]) - (to_pos[1] < from_pos[1])

        count = 0
        row, col = from_pos[0] + dr, from_pos[1] + dc
        while (row, col) != tuple(to_pos):
            if board.piece_at((row, col)) is not None:
                count += 1
            row += dr
            col += dc
        return count

    # ==================== 选子与走法合法性 ====================

    @staticmethod
    def can_select_piece(piece: Piece, active_color: Optional[PlayerColor]) -> bool:
        """
        检查当前方能否选中该棋子

        只有已翻开、且颜色等于当前方已分配颜色的在场棋子才能选中。

        Args:
            piece: 棋子
            active_color: 当前行棋方的颜色 (未分配时为None)

        Returns:
            bool: 是否可以选中
        """
        if not piece.is_live or not piece.revealed:
            return False
        if active_color is None:
            return False
        return piece.color is active_color

    @staticmethod
    def can_capture_by_rank(attacker: Piece, defender: Piece) -> bool:
        """
        等级吃子规则 (不适用于炮)

        兵可以吃帅，帅不能吃兵；其余按等级比较，等级相同可以互吃。
        """
        if attacker.piece_type is PieceType.SOLDIER and defender.piece_type is PieceType.GENERAL:
            return True
        if attacker.piece_type is PieceType.GENERAL and defender.piece_type is PieceType.SOLDIER:
            return False
        return attacker.rank >= defender.rank

    def check_move(self, board: BanqiBoard, piece: Piece, target: Position) -> Optional[RejectReason]:
        """
        检查走法是否合法

        调用方需先通过 can_select_piece 检查该棋子可以被选中。

        Args:
            board: 棋盘状态
            piece: 移动的棋子
            target: 目标位置

        Returns:
            Optional[RejectReason]: 合法时返回None，否则返回拒绝原因
        """
        target = normalize_position(target)
        if target is None:
            return RejectReason.OUT_OF_BOUNDS

        occupant = board.piece_at(target)

        if piece.piece_type is PieceType.CANNON:
            return self._check_cannon_move(board, piece, target, occupant)

        # 其它棋子只能走一步
        if not self.is_adjacent(piece.position, target):
            return RejectReason.ILLEGAL_GEOMETRY

        if occupant is None:
            return None
        if not occupant.revealed:
            return RejectReason.CANNOT_CAPTURE_HIDDEN
        if occupant.color is piece.color:
            return RejectReason.FRIENDLY_TARGET
        if not self.can_capture_by_rank(piece, occupant):
            return RejectReason.RANK_TOO_LOW
        return None

    def _check_cannon_move(self, board: BanqiBoard, piece: Piece, target: Position,
                           occupant: Optional[Piece]) -> Optional[RejectReason]:
        """炮：平移只能走一步到空格，吃子必须隔一个棋子"""
        if occupant is None:
            if self.is_adjacent(piece.position, target):
                return None
            return RejectReason.ILLEGAL_GEOMETRY

        if not occupant.revealed:
            return RejectReason.CANNOT_CAPTURE_HIDDEN
        if occupant.color is piece.color:
            return RejectReason.FRIENDLY_TARGET

        if self.count_obstacles(board, piece.position, target) != 1:
            return RejectReason.ILLEGAL_GEOMETRY
        return None

    def is_valid_move(self, board: BanqiBoard, piece: Piece, target: Position) -> bool:
        """
        检查走法是否合法

        Args:
            board: 棋盘状态
            piece: 移动的棋子
            target: 目标位置

        Returns:
            bool: 是否合法
        """
        return self.check_move(board, piece, target) is None

    # ==================== 走法生成 ====================

    def legal_targets(self, board: BanqiBoard, piece: Piece) -> Set[Position]:
        """
        获取棋子所有合法的目标格

        Args:
            board: 棋盘状态
            piece: 棋子

        Returns:
            Set[Position]: 合法目标格集合
        """
        if not piece.is_live or not piece.revealed:
            return set()
        return {pos for pos in all_positions() if self.is_valid_move(board, piece, pos)}

    def generate_legal_moves(self, board: BanqiBoard, color: Optional[PlayerColor] = None) -> List[Move]:
        """
        生成某方所有明子的合法走法 (不含翻子)

        Args:
            board: 棋盘状态
            color: 颜色，None表示当前行棋方

        Returns:
            List[Move]: 合法走法列表
        """
        if color is None:
            color = board.current_color
        if color is None:
            return []

        moves = []
        for piece in board.live_pieces(color):
            if not piece.revealed:
                continue
            for target in sorted(self.legal_targets(board, piece)):
                occupant = board.piece_at(target)
                moves.append(Move(
                    from_pos=piece.position,
                    to_pos=target,
                    piece_id=piece.piece_id,
                    captured_id=occupant.piece_id if occupant else None
                ))
        return moves

    # ==================== 终局检测 ====================

    def has_any_legal_move(self, board: BanqiBoard, color: PlayerColor) -> bool:
        """
        检查某方是否还有任何合法动作

        只要棋盘上还有暗子就可以翻子，直接返回True。

        Args:
            board: 棋盘状态
            color: 颜色

        Returns:
            bool: 是否有合法动作，False即困毙
        """
        if board.has_hidden_pieces():
            return True

        for piece in board.live_pieces(color):
            if not piece.revealed:
                continue
            for target in all_positions():
                if self.is_valid_move(board, piece, target):
                    return True
        return False

    def is_stalemate(self, board: BanqiBoard, color: PlayerColor) -> bool:
        """检查某方是否困毙"""
        return not self.has_any_legal_move(board, color)

    def is_eliminated(self, board: BanqiBoard, color: PlayerColor) -> bool:
        """检查某方是否已无在场棋子"""
        return not board.live_pieces(color)

    def get_game_status(self, board: BanqiBoard) -> Dict[str, Any]:
        """
        获取棋局状态摘要

        Args:
            board: 棋盘状态

        Returns:
            Dict[str, Any]: 状态信息
        """
        status = {
            'phase': board.phase.value,
            'current_seat': board.current_seat,
            'current_color': board.current_color.value if board.current_color else None,
            'hidden_count': len(board.hidden_pieces()),
            'live_count': {
                color.value: len(board.live_pieces(color)) for color in PlayerColor
            },
            'winner': board.winner,
            'win_reason': board.win_reason.value if board.win_reason else None,
        }
        if board.current_color is not None:
            status['has_legal_move'] = self.has_any_legal_move(board, board.current_color)
        return status
