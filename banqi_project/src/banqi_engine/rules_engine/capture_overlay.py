"""
吃子过渡层

引擎内吃子是一次完成的；被吃棋子的"移除中"显示窗口由展示层通过本类维护，
按棋子ID记录，到期时间由调用方驱动。
"""

from typing import Dict, List


class CaptureOverlay:
    """被吃棋子的过渡显示表"""

    def __init__(self, default_duration_ms: int = 600):
        """
        Args:
            default_duration_ms: 默认过渡时长(毫秒)
        """
        self.default_duration_ms = default_duration_ms
        self._expiry: Dict[str, float] = {}

    def mark(self, piece_id: str, now_ms: float, duration_ms: int = None):
        """登记被吃棋子，进入过渡显示"""
        if duration_ms is None:
            duration_ms = self.default_duration_ms
        self._expiry[piece_id] = now_ms + duration_ms

    def is_dying(self, piece_id: str) -> bool:
        return piece_id in self._expiry

    def dying_ids(self) -> List[str]:
        return sorted(self._expiry)

    def expire(self, now_ms: float) -> List[str]:
        """
        移除已到期的条目

        Args:
            now_ms: 当前时间(毫秒)

        Returns:
            List[str]: 本次到期的棋子ID
        """
        expired = [pid for pid, deadline in self._expiry.items() if deadline <= now_ms]
        for pid in expired:
            del self._expiry[pid]
        return sorted(expired)

    def clear(self):
        self._expiry.clear()

    def __len__(self) -> int:
        return len(self._expiry)
