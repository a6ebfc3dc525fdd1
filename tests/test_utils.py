import pytest

from game.survivor.utils import round_half_up


@pytest.mark.parametrize("x, expected", [
    (0.5, 1),
    (1.5, 2),
    (2.5, 3),
    (3.25, 3),
    (2.49, 2),
    (4.0, 4),
])
def test_round_half_up(x, expected):
    assert round_half_up(x) == expected
