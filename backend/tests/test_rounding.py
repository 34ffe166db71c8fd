import pytest

from energy_portal.rounding import round_half_up


@pytest.mark.parametrize("value, places, expected", [
    (52.25, 1, 52.3),
    (0.125, 2, 0.13),
    (2.5, 0, 3),
    (-2.5, 0, -3),
    (12.34567, 4, 12.3457),
])
def test_round_half_up(value, places, expected):
    assert round_half_up(value, places) == expected
