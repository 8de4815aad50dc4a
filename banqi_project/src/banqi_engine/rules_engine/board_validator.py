"""
棋局合法性验证器

提供全面的暗棋棋局状态验证功能。
"""

from typing import Any, Dict, List, Tuple

from .banqi_board import BanqiBoard
from .piece import PIECE_COUNTS, PieceType, PlayerColor, in_bounds


class BoardValidator:
    """
    棋局合法性验证器

    提供各种棋局状态的验证功能。
    """

    TOTAL_PIECES = 32

    def validate_board_structure(self, board: BanqiBoard) -> Tuple[bool, List[str]]:
        """
        验证棋盘基本结构

        Args:
            board: 要验证的棋盘

        Returns:
            Tuple[bool, List[str]]: (是否合法, 错误信息列表)
        """
        errors = []

        if len(board.pieces) != self.TOTAL_PIECES:
            errors.append(f"棋子总数错误: {len(board.pieces)}, 应为{self.TOTAL_PIECES}")

        ids = [p.piece_id for p in board.pieces]
        if len(set(ids)) != len(ids):
            errors.append("棋子ID重复")

        if board.current_seat not in BanqiBoard.SEATS:
            errors.append(f"当前座位值错误: {board.current_seat}, 应为0或1")

        if board.winner is not None and board.winner not in BanqiBoard.SEATS:
            errors.append(f"获胜座位值错误: {board.winner}")

        return len(errors) == 0, errors

    def validate_piece_counts(self, board: BanqiBoard) -> Tuple[bool, List[str]]:
        """
        验证每方棋子构成 (含已阵亡棋子)

        Args:
            board: 要验证的棋盘

        Returns:
            Tuple[bool, List[str]]: (是否合法, 错误信息列表)
        """
        errors = []

        for color in PlayerColor:
            counts: Dict[PieceType, int] = {}
            for piece in board.pieces:
                if piece.color is color:
                    counts[piece.piece_type] = counts.get(piece.piece_type, 0) + 1
            for piece_type, expected in PIECE_COUNTS.items():
                actual = counts.get(piece_type, 0)
                if actual != expected:
                    errors.append(f"{color.value} {piece_type.value}数量错误: {actual}, 应为{expected}")

        return len(errors) == 0, errors

    def validate_piece_positions(self, board: BanqiBoard) -> Tuple[bool, List[str]]:
        """
        验证棋子位置：不越界，每格至多一个在场棋子

        Args:
            board: 要验证的棋盘

        Returns:
            Tuple[bool, List[str]]: (是否合法, 错误信息列表)
        """
        errors = []
        occupied = {}

        for piece in board.pieces:
            if not in_bounds(piece.position):
                errors.append(f"{piece.piece_id}位置越界: {piece.position}")
                continue
            if not piece.is_live:
                continue
            if piece.position in occupied:
                errors.append(f"位置{piece.position}被多个棋子占据: "
                              f"{occupied[piece.position]}, {piece.piece_id}")
            else:
                occupied[piece.position] = piece.piece_id

        return len(errors) == 0, errors

    def validate_piece_states(self, board: BanqiBoard) -> Tuple[bool, List[str]]:
        """
        验证棋子状态：暗子不可能已被吃掉

        Args:
            board: 要验证的棋盘

        Returns:
            Tuple[bool, List[str]]: (是否合法, 错误信息列表)
        """
        errors = []
        for piece in board.pieces:
            if not piece.is_live and not piece.revealed:
                errors.append(f"{piece.piece_id}未翻开却已离场")
        return len(errors) == 0, errors

    def validate_color_assignment(self, board: BanqiBoard) -> Tuple[bool, List[str]]:
        """
        验证座位颜色分配

        Args:
            board: 要验证的棋盘

        Returns:
            Tuple[bool, List[str]]: (是否合法, 错误信息列表)
        """
        errors = []
        seat0, seat1 = board.player_colors.get(0), board.player_colors.get(1)

        if (seat0 is None) != (seat1 is None):
            errors.append("颜色只分配给了一个座位")
        elif seat0 is not None and seat0 is seat1:
            errors.append(f"两个座位颜色相同: {seat0.value}")

        revealed = [p for p in board.pieces if p.revealed]
        if seat0 is None and revealed:
            errors.append(f"已有{len(revealed)}枚明子但尚未分配颜色")

        return len(errors) == 0, errors

    def full_validation(self, board: BanqiBoard) -> Tuple[bool, List[str]]:
        """
        完整的棋局验证

        Args:
            board: 要验证的棋盘

        Returns:
            Tuple[bool, List[str]]: (是否合法, 所有错误信息列表)
        """
        all_errors = []

        for validation_func in self._validations().values():
            _, errors = validation_func(board)
            all_errors.extend(errors)

        return len(all_errors) == 0, all_errors

    def get_validation_report(self, board: BanqiBoard) -> Dict[str, Any]:
        """
        获取详细的验证报告

        Args:
            board: 要验证的棋盘

        Returns:
            Dict[str, Any]: 验证报告
        """
        report = {
            'overall_valid': True,
            'total_errors': 0,
            'validations': {}
        }

        for test_name, test_func in self._validations().items():
            is_valid, errors = test_func(board)
            report['validations'][test_name] = {
                'valid': is_valid,
                'errors': errors,
                'error_count': len(errors)
            }

            if not is_valid:
                report['overall_valid'] = False
                report['total_errors'] += len(errors)

        return report

    def _validations(self):
        return {
            'structure': self.validate_board_structure,
            'piece_counts': self.validate_piece_counts,
            'piece_positions': self.validate_piece_positions,
            'piece_states': self.validate_piece_states,
            'color_assignment': self.validate_color_assignment
        }
