"""Tests for the seedable random source and the time-of-day helpers."""

from datetime import UTC, datetime

import pytest
from hypothesis import given
from hypothesis import strategies as st

from tradecord.domain.enums import TimeOfDay
from tradecord.domain.evolution import evolution_time
from tradecord.utils.clock import SystemClock, local_time_of_day
from tradecord.utils.rng import RandomRoller


class TestRandomRoller:
    def test_same_seed_same_sequence(self):
        first = RandomRoller("player-1:catch")
        second = RandomRoller("player-1:catch")
        assert [first.randint(0, 100) for _ in range(20)] == [
            second.randint(0, 100) for _ in range(20)
        ]

    def test_string_and_int_seeds_are_accepted(self):
        assert 0 <= RandomRoller(42).randint(0, 10) <= 10
        assert 0 <= RandomRoller("42").randint(0, 10) <= 10

    def test_inverted_range_raises(self):
        with pytest.raises(ValueError, match="cannot be greater"):
            RandomRoller(1).randint(5, 1)

    def test_choice_of_empty_sequence_raises(self):
        with pytest.raises(ValueError, match="cannot be empty"):
            RandomRoller(1).choice([])

    @given(st.integers(), st.integers(min_value=-50, max_value=50), st.integers(0, 50))
    def test_randint_stays_in_bounds(self, seed, low, span):
        value = RandomRoller(seed).randint(low, low + span)
        assert low <= value <= low + span

    @given(st.integers(), st.lists(st.integers(), min_size=1, max_size=10))
    def test_choice_returns_a_member(self, seed, options):
        assert RandomRoller(seed).choice(options) in options


class TestTimeOfDay:
    @pytest.mark.parametrize(
        ("hour", "expected"),
        [
            (5, TimeOfDay.DAWN),
            (6, TimeOfDay.MORNING),
            (9, TimeOfDay.MORNING),
            (10, TimeOfDay.DAY),
            (16, TimeOfDay.DAY),
            (17, TimeOfDay.EVENING),
            (19, TimeOfDay.EVENING),
            (20, TimeOfDay.NIGHT),
            (0, TimeOfDay.NIGHT),
            (4, TimeOfDay.NIGHT),
        ],
    )
    def test_buckets(self, hour, expected):
        assert local_time_of_day(datetime(2024, 1, 1, hour, tzinfo=UTC), 0) is expected

    def test_offset_shifts_the_local_hour(self):
        noon = datetime(2024, 1, 1, 12, tzinfo=UTC)
        assert local_time_of_day(noon, 9) is TimeOfDay.NIGHT
        assert local_time_of_day(noon, -7) is TimeOfDay.DAWN

    def test_evolution_treats_dawn_as_morning(self):
        assert evolution_time(datetime(2024, 1, 1, 5, tzinfo=UTC), 0) is TimeOfDay.MORNING

    def test_system_clock_is_timezone_aware(self):
        assert SystemClock().now().tzinfo is not None
