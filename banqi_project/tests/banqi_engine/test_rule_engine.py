"""
测试RuleEngine类的功能

测试走子几何、等级吃子、炮的翻山吃子以及无子可动检测。
"""

from banqi_project.src.banqi_engine.rules_engine import (
    BanqiBoard, PieceStatus, PieceType, PlayerColor, RejectReason, RuleEngine, make_piece
)

RED = PlayerColor.RED
BLACK = PlayerColor.BLACK


def build_board(*pieces, current_seat=0):
    """红方为座位0的残局棋盘"""
    return BanqiBoard.from_pieces(list(pieces), player_colors={0: RED, 1: BLACK},
                                  current_seat=current_seat)


class TestGeometry:
    """几何判定测试"""

    def setup_method(self):
        """每个测试方法前的设置"""
        self.rule_engine = RuleEngine()

    def test_same_cell(self):
        assert self.rule_engine.same_cell((1, 2), (1, 2))
        assert not self.rule_engine.same_cell((1, 2), (2, 1))

    def test_adjacency_is_orthogonal_only(self):
        """测试只有上下左右相邻"""
        assert self.rule_engine.is_adjacent((1, 1), (0, 1))
        assert self.rule_engine.is_adjacent((1, 1), (1, 2))
        assert not self.rule_engine.is_adjacent((1, 1), (2, 2))
        assert not self.rule_engine.is_adjacent((1, 1), (1, 3))
        assert not self.rule_engine.is_adjacent((1, 1), (1, 1))

    def test_count_obstacles(self):
        """测试障碍计数 (暗子明子都算)"""
        board = build_board(
            make_piece("a", PieceType.SOLDIER, BLACK, (0, 1), revealed=False),
            make_piece("b", PieceType.HORSE, RED, (0, 3)),
            make_piece("c", PieceType.HORSE, RED, (2, 0)),
        )

        assert self.rule_engine.count_obstacles(board, (0, 0), (0, 5)) == 2
        assert self.rule_engine.count_obstacles(board, (0, 5), (0, 0)) == 2
        assert self.rule_engine.count_obstacles(board, (0, 0), (0, 2)) == 1
        assert self.rule_engine.count_obstacles(board, (0, 0), (0, 1)) == 0
        assert self.rule_engine.count_obstacles(board, (0, 0), (3, 0)) == 1
        assert self.rule_engine.count_obstacles(board, (0, 0), (1, 1)) == RuleEngine.NOT_LINEAR

    def test_count_obstacles_skips_dying_pieces(self):
        """测试移除中的棋子不算障碍"""
        board = build_board(
            make_piece("a", PieceType.SOLDIER, BLACK, (0, 1), status=PieceStatus.DYING),
        )
        assert self.rule_engine.count_obstacles(board, (0, 0), (0, 3)) == 0


class TestRegularPieceMoves:
    """非炮棋子的走法测试"""

    def setup_method(self):
        """每个测试方法前的设置"""
        self.rule_engine = RuleEngine()

    def test_single_step_to_empty(self):
        """测试走一步到空格"""
        chariot = make_piece("r", PieceType.CHARIOT, RED, (1, 1))
        board = build_board(chariot)

        assert self.rule_engine.is_valid_move(board, chariot, (0, 1))
        assert self.rule_engine.is_valid_move(board, chariot, (1, 0))
        assert self.rule_engine.check_move(board, chariot, (1, 3)) is RejectReason.ILLEGAL_GEOMETRY
        assert self.rule_engine.check_move(board, chariot, (2, 2)) is RejectReason.ILLEGAL_GEOMETRY

    def test_out_of_bounds(self):
        """测试越界"""
        horse = make_piece("h", PieceType.HORSE, RED, (0, 0))
        board = build_board(horse)

        assert self.rule_engine.check_move(board, horse, (-1, 0)) is RejectReason.OUT_OF_BOUNDS
        assert self.rule_engine.check_move(board, horse, (0, 8)) is RejectReason.OUT_OF_BOUNDS
        assert self.rule_engine.check_move(board, horse, (4, 0)) is RejectReason.OUT_OF_BOUNDS

    def test_cannot_capture_hidden(self):
        """测试不能吃暗子"""
        general = make_piece("g", PieceType.GENERAL, RED, (1, 1))
        hidden = make_piece("x", PieceType.SOLDIER, BLACK, (1, 2), revealed=False)
        board = build_board(general, hidden)

        assert self.rule_engine.check_move(board, general, (1, 2)) is RejectReason.CANNOT_CAPTURE_HIDDEN

    def test_cannot_capture_own_color(self):
        """测试不能吃己方棋子"""
        chariot = make_piece("r", PieceType.CHARIOT, RED, (1, 1))
        soldier = make_piece("s", PieceType.SOLDIER, RED, (1, 2))
        board = build_board(chariot, soldier)

        assert self.rule_engine.check_move(board, chariot, (1, 2)) is RejectReason.FRIENDLY_TARGET

    def test_rank_hierarchy(self):
        """测试等级吃子: 高吃低、同级互吃、低不能吃高"""
        horse = make_piece("h", PieceType.HORSE, RED, (1, 1))
        chariot = make_piece("r", PieceType.CHARIOT, BLACK, (1, 2))
        black_horse = make_piece("bh", PieceType.HORSE, BLACK, (0, 1))
        board = build_board(horse, chariot, black_horse)

        assert self.rule_engine.check_move(board, horse, (1, 2)) is RejectReason.RANK_TOO_LOW
        assert self.rule_engine.is_valid_move(board, horse, (0, 1))
        assert self.rule_engine.is_valid_move(board, chariot, (1, 1))

    def test_cannon_as_defender_uses_rank_two(self):
        """测试炮作为被吃方时按等级2比较"""
        soldier = make_piece("s", PieceType.SOLDIER, RED, (1, 1))
        horse = make_piece("h", PieceType.HORSE, RED, (2, 2))
        cannon = make_piece("c", PieceType.CANNON, BLACK, (1, 2))
        board = build_board(soldier, horse, cannon)

        assert self.rule_engine.check_move(board, soldier, (1, 2)) is RejectReason.RANK_TOO_LOW
        assert self.rule_engine.is_valid_move(board, horse, (1, 2))

    def test_soldier_captures_general(self):
        """场景B: 兵吃帅"""
        soldier = make_piece("s", PieceType.SOLDIER, RED, (1, 3))
        general = make_piece("g", PieceType.GENERAL, BLACK, (1, 4))
        board = build_board(soldier, general)

        assert self.rule_engine.is_valid_move(board, soldier, (1, 4))

    def test_general_cannot_capture_soldier(self):
        """场景C: 帅不能吃兵"""
        general = make_piece("g", PieceType.GENERAL, RED, (1, 3))
        soldier = make_piece("s", PieceType.SOLDIER, BLACK, (1, 4))
        board = build_board(general, soldier)

        assert self.rule_engine.check_move(board, general, (1, 4)) is RejectReason.RANK_TOO_LOW

    def test_general_captures_everything_else(self):
        """测试帅可以吃除兵以外的棋子"""
        general = make_piece("g", PieceType.GENERAL, RED, (1, 1))
        board = build_board(general)
        for piece_type in (PieceType.GENERAL, PieceType.ADVISOR, PieceType.ELEPHANT,
                           PieceType.CHARIOT, PieceType.HORSE, PieceType.CANNON):
            target = make_piece("t", piece_type, BLACK, (1, 2))
            board = build_board(general, target)
            assert self.rule_engine.is_valid_move(board, general, (1, 2)), piece_type

    def test_dying_target_is_empty_square(self):
        """测试移除中的棋子所在格视为空格"""
        soldier = make_piece("s", PieceType.SOLDIER, RED, (1, 1))
        dying = make_piece("d", PieceType.GENERAL, RED, (1, 2), status=PieceStatus.DYING)
        board = build_board(soldier, dying)

        assert self.rule_engine.is_valid_move(board, soldier, (1, 2))


class TestCannonMoves:
    """炮的走法测试"""

    def setup_method(self):
        """每个测试方法前的设置"""
        self.rule_engine = RuleEngine()

    def test_plain_move_single_step(self):
        """测试炮平移只能走一步"""
        cannon = make_piece("c", PieceType.CANNON, RED, (0, 0))
        board = build_board(cannon)

        assert self.rule_engine.is_valid_move(board, cannon, (0, 1))
        assert self.rule_engine.is_valid_move(board, cannon, (1, 0))
        assert self.rule_engine.check_move(board, cannon, (0, 3)) is RejectReason.ILLEGAL_GEOMETRY
        assert self.rule_engine.check_move(board, cannon, (1, 1)) is RejectReason.ILLEGAL_GEOMETRY

    def test_plain_move_cannot_jump(self):
        """测试炮不能越子平移到空格"""
        cannon = make_piece("c", PieceType.CANNON, RED, (0, 0))
        screen = make_piece("x", PieceType.SOLDIER, BLACK, (0, 1), revealed=False)
        board = build_board(cannon, screen)

        assert self.rule_engine.check_move(board, cannon, (0, 2)) is RejectReason.ILLEGAL_GEOMETRY

    def test_capture_over_one_screen(self):
        """场景D: 隔一个暗子吃子合法，隔两个不合法"""
        cannon = make_piece("c", PieceType.CANNON, RED, (0, 0))
        hidden = make_piece("x", PieceType.SOLDIER, BLACK, (0, 2), revealed=False)
        first = make_piece("t1", PieceType.CHARIOT, BLACK, (0, 4))
        second = make_piece("t2", PieceType.HORSE, BLACK, (0, 6))
        board = build_board(cannon, hidden, first, second)

        assert self.rule_engine.is_valid_move(board, cannon, (0, 4))
        assert self.rule_engine.check_move(board, cannon, (0, 6)) is RejectReason.ILLEGAL_GEOMETRY

    def test_capture_vertical(self):
        """测试纵向翻山吃子"""
        cannon = make_piece("c", PieceType.CANNON, RED, (0, 3))
        screen = make_piece("x", PieceType.ADVISOR, RED, (1, 3))
        target = make_piece("t", PieceType.GENERAL, BLACK, (3, 3))
        board = build_board(cannon, screen, target)

        assert self.rule_engine.is_valid_move(board, cannon, (3, 3))

    def test_adjacent_capture_without_screen_is_illegal(self):
        """测试炮不能直接吃相邻棋子"""
        cannon = make_piece("c", PieceType.CANNON, RED, (0, 0))
        target = make_piece("t", PieceType.SOLDIER, BLACK, (0, 1))
        board = build_board(cannon, target)

        assert self.rule_engine.check_move(board, cannon, (0, 1)) is RejectReason.ILLEGAL_GEOMETRY

    def test_cannon_cannot_capture_hidden(self):
        """测试炮不能吃暗子"""
        cannon = make_piece("c", PieceType.CANNON, RED, (0, 0))
        screen = make_piece("x", PieceType.SOLDIER, RED, (0, 1))
        hidden = make_piece("t", PieceType.SOLDIER, BLACK, (0, 2), revealed=False)
        board = build_board(cannon, screen, hidden)

        assert self.rule_engine.check_move(board, cannon, (0, 2)) is RejectReason.CANNOT_CAPTURE_HIDDEN

    def test_cannon_cannot_capture_own_color(self):
        cannon = make_piece("c", PieceType.CANNON, RED, (0, 0))
        screen = make_piece("x", PieceType.SOLDIER, BLACK, (0, 1))
        own = make_piece("o", PieceType.HORSE, RED, (0, 2))
        board = build_board(cannon, screen, own)

        assert self.rule_engine.check_move(board, cannon, (0, 2)) is RejectReason.FRIENDLY_TARGET

    def test_cannon_ignores_rank(self):
        """测试炮吃子不看等级"""
        cannon = make_piece("c", PieceType.CANNON, RED, (2, 0))
        screen = make_piece("x", PieceType.SOLDIER, RED, (2, 3))
        general = make_piece("g", PieceType.GENERAL, BLACK, (2, 7))
        board = build_board(cannon, screen, general)

        assert self.rule_engine.is_valid_move(board, cannon, (2, 7))

    def test_diagonal_capture_is_illegal(self):
        cannon = make_piece("c", PieceType.CANNON, RED, (0, 0))
        screen = make_piece("x", PieceType.SOLDIER, RED, (1, 1))
        target = make_piece("t", PieceType.SOLDIER, BLACK, (2, 2))
        board = build_board(cannon, screen, target)

        assert self.rule_engine.check_move(board, cannon, (2, 2)) is RejectReason.ILLEGAL_GEOMETRY

    def test_dying_screen_does_not_count(self):
        """测试移除中的棋子不能作炮架"""
        cannon = make_piece("c", PieceType.CANNON, RED, (0, 0))
        dying = make_piece("d", PieceType.SOLDIER, BLACK, (0, 1), status=PieceStatus.DYING)
        target = make_piece("t", PieceType.SOLDIER, BLACK, (0, 2))
        board = build_board(cannon, dying, target)

        assert not self.rule_engine.is_valid_move(board, cannon, (0, 2))


class TestSelectionAndTargets:
    """选子与目标格测试"""

    def setup_method(self):
        """每个测试方法前的设置"""
        self.rule_engine = RuleEngine()

    def test_can_select_piece(self):
        """测试选子规则"""
        red = make_piece("r", PieceType.HORSE, RED, (0, 0))
        hidden = make_piece("h", PieceType.HORSE, RED, (0, 1), revealed=False)
        dead = make_piece("d", PieceType.HORSE, RED, (0, 2), status=PieceStatus.DEAD)

        assert self.rule_engine.can_select_piece(red, RED)
        assert not self.rule_engine.can_select_piece(red, BLACK)
        assert not self.rule_engine.can_select_piece(red, None)
        assert not self.rule_engine.can_select_piece(hidden, RED)
        assert not self.rule_engine.can_select_piece(dead, RED)

    def test_legal_targets(self):
        """测试合法目标格"""
        horse = make_piece("h", PieceType.HORSE, RED, (0, 0))
        blocker = make_piece("b", PieceType.CHARIOT, BLACK, (0, 1))
        board = build_board(horse, blocker)

        assert self.rule_engine.legal_targets(board, horse) == {(1, 0)}

    def test_legal_targets_for_hidden_piece_is_empty(self):
        hidden = make_piece("h", PieceType.HORSE, RED, (0, 0), revealed=False)
        board = build_board(hidden)
        assert self.rule_engine.legal_targets(board, hidden) == set()

    def test_generate_legal_moves(self):
        """测试生成走法并标记吃子"""
        soldier = make_piece("s", PieceType.SOLDIER, RED, (0, 0))
        general = make_piece("g", PieceType.GENERAL, BLACK, (0, 1))
        board = build_board(soldier, general)

        moves = self.rule_engine.generate_legal_moves(board, RED)
        by_target = {m.to_pos: m for m in moves}
        assert set(by_target) == {(0, 1), (1, 0)}
        assert by_target[(0, 1)].captured_id == "g"
        assert by_target[(1, 0)].captured_id is None


class TestTerminalScan:
    """无子可动检测测试"""

    def setup_method(self):
        """每个测试方法前的设置"""
        self.rule_engine = RuleEngine()

    def test_any_hidden_piece_means_legal_move(self):
        """测试只要有暗子，任何一方都有合法动作"""
        hidden = make_piece("h", PieceType.SOLDIER, BLACK, (3, 7), revealed=False)
        board = build_board(hidden)

        assert self.rule_engine.has_any_legal_move(board, RED)
        assert self.rule_engine.has_any_legal_move(board, BLACK)

    def test_blocked_color_has_no_legal_move(self):
        """场景E: 没有暗子且所有明子都动不了"""
        soldier = make_piece("s", PieceType.SOLDIER, RED, (0, 0))
        right = make_piece("c1", PieceType.CHARIOT, BLACK, (0, 1))
        below = make_piece("c2", PieceType.CHARIOT, BLACK, (1, 0))
        board = build_board(soldier, right, below)

        assert not self.rule_engine.has_any_legal_move(board, RED)
        assert self.rule_engine.is_stalemate(board, RED)
        assert self.rule_engine.has_any_legal_move(board, BLACK)

    def test_color_without_pieces_has_no_legal_move(self):
        board = build_board(make_piece("g", PieceType.GENERAL, BLACK, (2, 2)))
        assert not self.rule_engine.has_any_legal_move(board, RED)
        assert self.rule_engine.is_eliminated(board, RED)

    def test_game_status(self):
        """测试状态摘要"""
        board = BanqiBoard.new_game(seed=11)
        status = self.rule_engine.get_game_status(board)

        assert status['phase'] == 'awaiting_first_flip'
        assert status['current_color'] is None
        assert status['hidden_count'] == 32
        assert status['live_count'] == {'red': 16, 'black': 16}
        assert status['winner'] is None
        assert 'has_legal_move' not in status
