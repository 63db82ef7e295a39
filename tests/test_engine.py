import numpy as np
import pytest

from hanoix.engine import PuzzleEngine

OPTIMAL_THREE_DISKS = [(0, 2), (0, 1), (2, 1), (0, 2), (1, 0), (1, 2), (0, 2)]


@pytest.fixture
def engine():
    return PuzzleEngine(3, 3)


def assert_invariants(engine):
    """Every disk appears exactly once and every rod shrinks bottom to top."""
    rods = engine.get_state()
    assert len(rods) == engine.get_rods_count()
    disks = sorted(disk for rod in rods for disk in rod)
    assert disks == list(range(1, engine.get_disks_count() + 1))
    for rod in rods:
        assert all(below > above for below, above in zip(rod, rod[1:]))


class TestScenarios:
    def test_initial_state(self, engine):
        assert engine.get_state() == [[3, 2, 1], [], []]
        assert engine.moves_count == 0
        assert engine.get_disks_count() == 3
        assert engine.get_rods_count() == 3
        assert not engine.is_game_completed()

    def test_first_move(self, engine):
        assert engine.move(0, 2) is True
        assert engine.get_state() == [[3, 2], [], [1]]
        assert engine.moves_count == 1

    def test_blocked_move(self, engine):
        engine.move(0, 2)
        assert engine.move(0, 1) is True
        assert engine.get_state() == [[3], [2], [1]]
        assert engine.moves_count == 2

        assert engine.move(0, 2) is False
        assert engine.get_state() == [[3], [2], [1]]
        assert engine.moves_count == 2

    def test_optimal_solution(self, engine):
        for from_rod, to_rod in OPTIMAL_THREE_DISKS:
            assert engine.move(from_rod, to_rod)
        assert engine.get_state() == [[], [], [3, 2, 1]]
        assert engine.is_game_completed()
        assert engine.moves_count == 7

    def test_initial_possible_moves(self, engine):
        assert engine.get_possible_moves() == [(0, 1), (0, 2)]


class TestQueries:
    def test_get_state_is_a_copy(self, engine):
        rods = engine.get_state()
        rods[0].pop()
        rods[1].append(99)
        rods.append([7])
        assert engine.get_state() == [[3, 2, 1], [], []]

    def test_get_top_disk(self, engine):
        assert engine.get_top_disk(0) == 1
        assert engine.get_top_disk(1) is None
        engine.move(0, 2)
        engine.move(0, 1)
        assert engine.get_top_disk(0) == 3
        assert engine.get_top_disk(1) == 2
        assert engine.get_top_disk(2) == 1

    @pytest.mark.parametrize("rod_index", [-1, 3, 10])
    def test_get_top_disk_out_of_range(self, engine, rod_index):
        with pytest.raises(IndexError):
            engine.get_top_disk(rod_index)

    def test_is_valid_move_has_no_side_effects(self, engine):
        assert engine.is_valid_move(0, 1)
        assert engine.get_state() == [[3, 2, 1], [], []]
        assert engine.moves_count == 0

    @pytest.mark.parametrize(
        "from_rod, to_rod", [(-1, 0), (0, -1), (3, 0), (0, 3), (1, 0), (2, 1)]
    )
    def test_invalid_requests_return_false(self, engine, from_rod, to_rod):
        assert engine.is_valid_move(from_rod, to_rod) is False
        assert engine.move(from_rod, to_rod) is False
        assert engine.get_state() == [[3, 2, 1], [], []]
        assert engine.moves_count == 0

    def test_self_moves_rejected(self, engine):
        engine.move(0, 1)
        for rod in range(engine.get_rods_count()):
            assert not engine.is_valid_move(rod, rod)
            assert not engine.move(rod, rod)
        assert engine.moves_count == 1

    def test_possible_moves_follow_state(self, engine):
        engine.move(0, 2)
        assert engine.get_possible_moves() == [(0, 1), (2, 0), (2, 1)]
        engine.move(0, 1)
        assert engine.get_possible_moves() == [(1, 0), (2, 0), (2, 1)]

    def test_moves_allowed_after_completion(self, engine):
        for from_rod, to_rod in OPTIMAL_THREE_DISKS:
            engine.move(from_rod, to_rod)
        assert engine.is_game_completed()
        assert engine.move(2, 0)
        assert not engine.is_game_completed()
        assert engine.moves_count == 8

    def test_str_lists_rods(self, engine):
        text = str(engine)
        assert "rod 0: 3 2 1" in text
        assert "rod 1" in text
        assert "PuzzleEngine(num_disks=3, num_rods=3, moves_count=0)" == repr(engine)

    def test_exposes_functional_state(self, engine):
        engine.move(0, 1)
        assert engine.puzzle.state_to_rods(engine.state) == engine.get_state()
        assert engine.puzzle.is_solved(engine.solve_config, engine.puzzle.get_solve_config().TargetState)


class TestConstruction:
    def test_defaults(self):
        engine = PuzzleEngine()
        assert engine.get_disks_count() == 3
        assert engine.get_rods_count() == 3

    def test_many_rods(self):
        engine = PuzzleEngine(4, 5)
        assert engine.get_state() == [[4, 3, 2, 1], [], [], [], []]
        assert engine.get_possible_moves() == [(0, 1), (0, 2), (0, 3), (0, 4)]

    def test_single_rod_is_already_complete(self):
        engine = PuzzleEngine(2, 1)
        assert engine.get_state() == [[2, 1]]
        assert engine.is_game_completed()
        assert engine.get_possible_moves() == []
        assert not engine.move(0, 0)

    def test_two_rods_single_disk(self):
        engine = PuzzleEngine(1, 2)
        assert engine.move(0, 1)
        assert engine.is_game_completed()

    @pytest.mark.parametrize("num_disks, num_rods", [(0, 3), (-2, 3), (3, 0), (3, -1)])
    def test_degenerate_sizes_rejected(self, num_disks, num_rods):
        with pytest.raises(ValueError):
            PuzzleEngine(num_disks, num_rods)


@pytest.mark.parametrize("num_disks, num_rods, seed", [(3, 3, 0), (4, 4, 1), (5, 3, 2)])
def test_random_play_keeps_invariants(num_disks, num_rods, seed):
    engine = PuzzleEngine(num_disks, num_rods)
    rng = np.random.default_rng(seed)

    for _ in range(60):
        from_rod, to_rod = (int(x) for x in rng.integers(-1, num_rods + 1, size=2))
        before_state = engine.get_state()
        before_count = engine.moves_count
        expected = engine.is_valid_move(from_rod, to_rod)

        moved = engine.move(from_rod, to_rod)

        assert moved == expected
        if moved:
            assert engine.moves_count == before_count + 1
            assert engine.get_state() != before_state
        else:
            assert engine.moves_count == before_count
            assert engine.get_state() == before_state
        assert_invariants(engine)

        expected_moves = [
            (src, dst)
            for src in range(num_rods)
            for dst in range(num_rods)
            if src != dst and engine.is_valid_move(src, dst)
        ]
        assert engine.get_possible_moves() == expected_moves
        assert engine.is_game_completed() == (
            len(engine.get_state()[-1]) == engine.get_disks_count()
        )
