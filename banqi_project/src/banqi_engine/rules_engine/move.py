"""
暗棋走法数据结构

定义走子记录的表示和坐标记法转换功能。
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .piece import ROWS, COLS


@dataclass
class Move:
    """
    暗棋走法类

    记录一次走子：起始位置、目标位置、移动的棋子以及被吃掉的棋子。
    """
    from_pos: Tuple[int, int]  # 起始位置 (行, 列)
    to_pos: Tuple[int, int]    # 目标位置 (行, 列)
    piece_id: str              # 移动的棋子ID
    captured_id: Optional[str] = None  # 被吃掉的棋子ID

    def __post_init__(self):
        """初始化后验证数据有效性"""
        self._validate_positions()

    def _validate_positions(self):
        """验证位置坐标的有效性"""
        for pos in [self.from_pos, self.to_pos]:
            row, col = pos
            if not (0 <= row < ROWS and 0 <= col < COLS):
                raise ValueError(f"无效的位置坐标: {pos}")

    @property
    def is_capture(self) -> bool:
        return self.captured_id is not None

    def to_coordinate_notation(self) -> str:
        """
        转换为坐标记法

        Returns:
            str: 坐标记法字符串，如 "a0b0" (列用字母a-h, 行用数字0-3)
        """
        from_col = chr(ord('a') + self.from_pos[1])
        from_row = str(self.from_pos[0])
        to_col = chr(ord('a') + self.to_pos[1])
        to_row = str(self.to_pos[0])

        return f"{from_col}{from_row}{to_col}{to_row}"

    @classmethod
    def from_coordinate_notation(cls, notation: str, piece_id: str) -> 'Move':
        """
        从坐标记法创建Move对象

        Args:
            notation: 坐标记法字符串，如 "a0b0"
            piece_id: 移动的棋子ID

        Returns:
            Move: Move对象
        """
        if len(notation) != 4:
            raise ValueError(f"无效的坐标记法: {notation}")

        from_col = ord(notation[0]) - ord('a')
        from_row = int(notation[1])
        to_col = ord(notation[2]) - ord('a')
        to_row = int(notation[3])

        return cls(
            from_pos=(from_row, from_col),
            to_pos=(to_row, to_col),
            piece_id=piece_id
        )

    def __str__(self) -> str:
        return self.to_coordinate_notation()

    def to_dict(self) -> dict:
        """转换为字典"""
        return {
            'from_pos': self.from_pos,
            'to_pos': self.to_pos,
            'piece_id': self.piece_id,
            'captured_id': self.captured_id
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Move':
        """从字典创建Move对象"""
        return cls(
            from_pos=tuple(data['from_pos']),
            to_pos=tuple(data['to_pos']),
            piece_id=data['piece_id'],
            captured_id=data.get('captured_id')
        )
