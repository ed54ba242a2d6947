"""Unit tests for delivery delay calculation"""

import itertools
from datetime import datetime, timedelta, timezone

from domain.guid_filter.delay import calculate_delay, sort_timestamps


T0 = datetime(2006, 1, 2, 22, 4, 5, tzinfo=timezone.utc)


class TestCalculateDelay:
    """Delay is whole seconds between earliest and latest timestamp"""

    def test_empty_is_zero(self):
        assert calculate_delay([]) == 0

    def test_none_is_zero(self):
        assert calculate_delay(None) == 0

    def test_single_timestamp_is_zero(self):
        assert calculate_delay([T0]) == 0

    def test_two_timestamps(self):
        """Test hops 10s and 70s after T0 give 60s"""
        times = [T0 + timedelta(seconds=70), T0 + timedelta(seconds=10)]
        assert calculate_delay(times) == 60

    def test_invariant_under_reordering(self):
        """Test every permutation yields the same delay"""
        times = [
            T0,
            T0 + timedelta(seconds=5),
            T0 + timedelta(minutes=3),
            T0 + timedelta(seconds=42),
        ]
        delays = {calculate_delay(list(p)) for p in itertools.permutations(times)}
        assert delays == {180}

    def test_fraction_is_truncated(self):
        """Test sub-second remainders are dropped"""
        times = [T0, T0 + timedelta(seconds=59, microseconds=999_999)]
        assert calculate_delay(times) == 59

    def test_equal_instants(self):
        assert calculate_delay([T0, T0, T0]) == 0

    def test_mixed_zones_compare_by_instant(self):
        """Test timestamps in different zones are compared as instants"""
        minus_seven = timezone(timedelta(hours=-7))
        plus_one = timezone(timedelta(hours=1))
        times = [
            datetime(2006, 1, 2, 15, 4, 5, tzinfo=minus_seven),  # 22:04:05Z
            datetime(2006, 1, 2, 23, 5, 5, tzinfo=plus_one),  # 22:05:05Z
        ]
        assert calculate_delay(times) == 60

    def test_accepts_generators(self):
        times = (T0 + timedelta(seconds=s) for s in (30, 0, 15))
        assert calculate_delay(times) == 30


class TestSortTimestamps:
    """Test ascending ordering by instant"""

    def test_sorted_ascending(self):
        later = T0 + timedelta(hours=1)
        earlier = T0 - timedelta(hours=1)
        assert sort_timestamps([later, T0, earlier]) == [earlier, T0, later]

    def test_empty(self):
        assert sort_timestamps([]) == []
