"""
吃子过渡表测试
"""

from banqi_project.src.banqi_engine.rules_engine import CaptureOverlay


class TestCaptureOverlay:
    """测试CaptureOverlay类"""

    def setup_method(self):
        """每个测试方法前的设置"""
        self.overlay = CaptureOverlay(default_duration_ms=600)

    def test_mark_and_expire(self):
        """测试登记和到期清理"""
        self.overlay.mark("piece_3", now_ms=1000)

        assert self.overlay.is_dying("piece_3")
        assert self.overlay.expire(1599) == []
        assert self.overlay.expire(1600) == ["piece_3"]
        assert not self.overlay.is_dying("piece_3")
        assert len(self.overlay) == 0

    def test_custom_duration(self):
        self.overlay.mark("a", now_ms=0, duration_ms=100)
        self.overlay.mark("b", now_ms=0)

        assert self.overlay.expire(200) == ["a"]
        assert self.overlay.dying_ids() == ["b"]

    def test_expire_returns_sorted_ids(self):
        for pid in ("c", "a", "b"):
            self.overlay.mark(pid, now_ms=0)
        assert self.overlay.expire(10_000) == ["a", "b", "c"]

    def test_clear(self):
        self.overlay.mark("a", now_ms=0)
        self.overlay.clear()
        assert self.overlay.dying_ids() == []
