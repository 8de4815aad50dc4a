"""
暗棋棋子数据结构

定义棋子类型、颜色、等级表以及棋子对象本身。
"""

import numbers
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

# 位置坐标 (行, 列)
Position = Tuple[int, int]

# 棋盘尺寸 (4行 x 8列)
ROWS = 4
COLS = 8


class PieceType(Enum):
    """棋子类型枚举"""
    GENERAL = "general"     # 帅/将
    ADVISOR = "advisor"     # 仕/士
    ELEPHANT = "elephant"   # 相/象
    CHARIOT = "chariot"     # 俥/車
    HORSE = "horse"         # 傌/馬
    CANNON = "cannon"       # 炮/砲
    SOLDIER = "soldier"     # 兵/卒


class PlayerColor(Enum):
    """棋子颜色枚举"""
    RED = "red"
    BLACK = "black"

    def opponent(self) -> 'PlayerColor':
        """返回对方颜色"""
        return PlayerColor.BLACK if self is PlayerColor.RED else PlayerColor.RED


class PieceStatus(Enum):
    """棋子存活状态"""
    ALIVE = "alive"     # 在场
    DYING = "dying"     # 移除中（仅供展示层使用）
    DEAD = "dead"       # 已被吃掉


# 等级表: 帅(7) > 仕(6) > 相(5) > 车(4) > 马(3) > 兵(1)
# 炮进攻时不比较等级，翻山吃子规则单独处理；炮被吃时按等级2比较
PIECE_RANKS: Dict[PieceType, int] = {
    PieceType.GENERAL: 7,
    PieceType.ADVISOR: 6,
    PieceType.ELEPHANT: 5,
    PieceType.CHARIOT: 4,
    PieceType.HORSE: 3,
    PieceType.CANNON: 2,
    PieceType.SOLDIER: 1,
}

# 每方各棋子数量
PIECE_COUNTS: Dict[PieceType, int] = {
    PieceType.GENERAL: 1,
    PieceType.ADVISOR: 2,
    PieceType.ELEPHANT: 2,
    PieceType.CHARIOT: 2,
    PieceType.HORSE: 2,
    PieceType.CANNON: 2,
    PieceType.SOLDIER: 5,
}

# 文本棋盘中的棋子符号 (红方大写, 黑方小写)
PIECE_LETTERS: Dict[PieceType, str] = {
    PieceType.GENERAL: 'K',
    PieceType.ADVISOR: 'A',
    PieceType.ELEPHANT: 'E',
    PieceType.CHARIOT: 'R',
    PieceType.HORSE: 'H',
    PieceType.CANNON: 'C',
    PieceType.SOLDIER: 'P',
}

# 矩阵编码 (红方为正, 黑方为负)
PIECE_CODES: Dict[PieceType, int] = {
    PieceType.GENERAL: 1,
    PieceType.ADVISOR: 2,
    PieceType.ELEPHANT: 3,
    PieceType.HORSE: 4,
    PieceType.CHARIOT: 5,
    PieceType.CANNON: 6,
    PieceType.SOLDIER: 7,
}

# 棋子中文名称
PIECE_CHARS: Dict[Tuple[PlayerColor, PieceType], str] = {
    (PlayerColor.RED, PieceType.GENERAL): "帥", (PlayerColor.BLACK, PieceType.GENERAL): "將",
    (PlayerColor.RED, PieceType.ADVISOR): "仕", (PlayerColor.BLACK, PieceType.ADVISOR): "士",
    (PlayerColor.RED, PieceType.ELEPHANT): "相", (PlayerColor.BLACK, PieceType.ELEPHANT): "象",
    (PlayerColor.RED, PieceType.HORSE): "傌", (PlayerColor.BLACK, PieceType.HORSE): "馬",
    (PlayerColor.RED, PieceType.CHARIOT): "俥", (PlayerColor.BLACK, PieceType.CHARIOT): "車",
    (PlayerColor.RED, PieceType.CANNON): "炮", (PlayerColor.BLACK, PieceType.CANNON): "砲",
    (PlayerColor.RED, PieceType.SOLDIER): "兵", (PlayerColor.BLACK, PieceType.SOLDIER): "卒",
}


def normalize_position(pos) -> Optional[Position]:
    """
    把外部传入的坐标规范为 (行, 列) 元组

    Args:
        pos: 坐标，可以是元组、列表或numpy数组

    Returns:
        Optional[Position]: 两个整数组成的元组；格式不对或越界时返回None
    """
    try:
        row, col = pos
    except (TypeError, ValueError):
        return None
    for value in (row, col):
        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            return None
    row, col = int(row), int(col)
    if not (0 <= row < ROWS and 0 <= col < COLS):
        return None
    return row, col


def in_bounds(pos) -> bool:
    """检查坐标是否为棋盘内的 (行, 列)"""
    return normalize_position(pos) is not None


def all_positions() -> List[Position]:
    """按行优先顺序返回全部32个格子"""
    return [(row, col) for row in range(ROWS) for col in range(COLS)]


@dataclass
class Piece:
    """
    暗棋棋子类

    记录棋子的身份、颜色、位置和翻开/存活状态。等级由类型决定。
    """
    piece_id: str
    piece_type: PieceType
    color: PlayerColor
    position: Position
    revealed: bool = False
    status: PieceStatus = PieceStatus.ALIVE

    @property
    def rank(self) -> int:
        """棋子等级"""
        return PIECE_RANKS[self.piece_type]

    @property
    def dead(self) -> bool:
        return self.status is PieceStatus.DEAD

    @property
    def dying(self) -> bool:
        return self.status is PieceStatus.DYING

    @property
    def is_live(self) -> bool:
        """是否仍占据格子 (既未死亡也不在移除中)"""
        return self.status is PieceStatus.ALIVE

    @property
    def is_hidden(self) -> bool:
        """是否为在场的暗子"""
        return self.is_live and not self.revealed

    def letter(self) -> str:
        """文本棋盘符号"""
        char = PIECE_LETTERS[self.piece_type]
        return char if self.color is PlayerColor.RED else char.lower()

    def code(self) -> int:
        """矩阵编码"""
        value = PIECE_CODES[self.piece_type]
        return value if self.color is PlayerColor.RED else -value

    def chinese_name(self) -> str:
        return PIECE_CHARS[(self.color, self.piece_type)]

    def __str__(self) -> str:
        return f"{self.color.value} {self.piece_type.value}"

    def to_dict(self) -> dict:
        """转换为字典"""
        return {
            'piece_id': self.piece_id,
            'piece_type': self.piece_type.value,
            'color': self.color.value,
            'position': self.position,
            'rank': self.rank,
            'revealed': self.revealed,
            'status': self.status.value
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Piece':
        """从字典创建Piece对象"""
        return cls(
            piece_id=data['piece_id'],
            piece_type=PieceType(data['piece_type']),
            color=PlayerColor(data['color']),
            position=tuple(data['position']),
            revealed=data.get('revealed', False),
            status=PieceStatus(data.get('status', PieceStatus.ALIVE.value))
        )
