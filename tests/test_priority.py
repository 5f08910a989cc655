"""
Priority reordering: append, start-now, move-to-top, move-up, compact.
"""

import config
from features.queue import priority


class TestAppend:
    def test_empty_queue_uses_base_priority(self):
        assert priority.append_priority([]) == config.BASE_PRIORITY

    def test_appends_after_max(self):
        assert priority.append_priority([3.0, 10.0, 7.5]) == 11.0


class TestFront:
    def test_empty_queue_uses_front_priority(self):
        assert priority.front_priority([]) == config.FRONT_PRIORITY

    def test_front_is_zero_when_everything_is_positive(self):
        assert priority.front_priority([5.0, 100.0]) == 0

    def test_front_goes_below_negative_minimum(self):
        """After move-to-top pushed someone below zero, start-now still wins."""
        assert priority.front_priority([-4.0, 2.0]) == -5.0

    def test_front_is_at_most_existing_minimum(self):
        for values in ([0.0], [1.0, 2.0], [-1.5], [0.0, 0.0, 3.0]):
            assert priority.front_priority(values) <= min(values)


class TestTop:
    def test_strictly_below_every_pending(self):
        values = [4.0, -2.0, 9.5, 0.0]
        top = priority.top_priority(values)
        assert all(top < v for v in values)

    def test_empty_queue(self):
        assert priority.top_priority([]) == config.FRONT_PRIORITY


class TestMoveUp:
    def test_decrements_by_delta(self):
        assert priority.move_up_priority(10.0) == 10.0 - config.MOVE_UP_DELTA

    def test_overtakes_exactly_one_integer_neighbour(self):
        """With unit gaps the moved feature lands between its two predecessors."""
        moved = priority.move_up_priority(12.0)
        assert 10.0 < moved < 11.0


class TestCompact:
    def test_respaces_in_given_order(self):
        result = priority.compact_priorities(["a", "b", "c"])
        assert result == {
            "a": config.BASE_PRIORITY,
            "b": config.BASE_PRIORITY + 1,
            "c": config.BASE_PRIORITY + 2,
        }
