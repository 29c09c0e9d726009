import pytest

from src.pm_common.floats import (
    floating_equal,
    floating_lesser_equal,
    format_large_number,
    format_percent,
)


class TestComparisons:
    def test_floating_equal(self) -> None:
        assert floating_equal(0.1 + 0.2, 0.3)
        assert not floating_equal(1.0, 1.001)

    def test_explicit_epsilon(self) -> None:
        assert floating_equal(1.0, 1.001, epsilon=0.01)

    def test_floating_lesser_equal(self) -> None:
        assert floating_lesser_equal(1.00000001, 1.0)
        assert not floating_lesser_equal(1.1, 1.0)


class TestFormatting:
    @pytest.mark.parametrize(
        ("prob", "expected"),
        [(0.5, "50%"), (0.015, "1.5%"), (0.995, "99.5%"), (0.123, "12%")],
    )
    def test_format_percent(self, prob: float, expected: str) -> None:
        assert format_percent(prob) == expected

    @pytest.mark.parametrize(
        ("num", "expected"),
        [(1500, "1500"), (25_000, "25K"), (3_400_000, "3.4M"), (42, "42"), (0.5, "0.5")],
    )
    def test_format_large_number(self, num: float, expected: str) -> None:
        assert format_large_number(num) == expected
