"""
Testy dla geometrii hexagonalnej.

Testuje:
- Odległość cube (symetria, trójkąt)
- Kolejność sąsiadów (E, NE, NW, W, SW, SE)
- Klucz kanoniczny "q,r"
- Konwersję piksele <-> axial
- hex_range
"""

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from lighthouse.core.hex_coord import (
    HEX_DIRECTIONS,
    HexCoord,
    axial_to_pixel,
    hex_range,
    pixel_to_axial,
)


# ═══════════════════════════════════════════════════════════════════════════
# TEST: DISTANCE
# ═══════════════════════════════════════════════════════════════════════════

def test_distance_to_self_is_zero():
    assert HexCoord(3, -2).distance(HexCoord(3, -2)) == 0


def test_distance_examples():
    """Wzór max(|dq|, |dr|, |ds|)."""
    origin = HexCoord(0, 0)
    assert origin.distance(HexCoord(2, 1)) == 3
    assert origin.distance(HexCoord(2, -1)) == 2
    assert origin.distance(HexCoord(-3, 3)) == 3


def test_distance_is_symmetric():
    a, b = HexCoord(1, -3), HexCoord(-2, 2)
    assert a.distance(b) == b.distance(a)


def test_distance_triangle_inequality():
    a, b, c = HexCoord(0, 0), HexCoord(2, -1), HexCoord(-1, 3)
    assert a.distance(c) <= a.distance(b) + b.distance(c)


def test_cube_coordinates_sum_to_zero():
    coord = HexCoord(4, -7)
    assert sum(coord.cube) == 0
    assert coord.s == 3


# ═══════════════════════════════════════════════════════════════════════════
# TEST: NEIGHBORS
# ═══════════════════════════════════════════════════════════════════════════

def test_neighbors_order():
    """Kolejność sąsiadów rozstrzyga remisy w BFS."""
    assert HexCoord(0, 0).neighbors() == [
        HexCoord(1, 0),
        HexCoord(1, -1),
        HexCoord(0, -1),
        HexCoord(-1, 0),
        HexCoord(-1, 1),
        HexCoord(0, 1),
    ]


def test_neighbors_are_adjacent():
    center = HexCoord(2, -1)
    for neighbor in center.neighbors():
        assert center.distance(neighbor) == 1


def test_neighbor_by_direction():
    assert HexCoord(1, 1).neighbor(3) == HexCoord(0, 1)
    with pytest.raises(IndexError):
        HexCoord(0, 0).neighbor(len(HEX_DIRECTIONS))


# ═══════════════════════════════════════════════════════════════════════════
# TEST: KEY
# ═══════════════════════════════════════════════════════════════════════════

def test_key_format():
    assert HexCoord(-1, 2).key() == "-1,2"


def test_from_key_parses():
    assert HexCoord.from_key("3,-2") == HexCoord(3, -2)


@pytest.mark.parametrize("key", ["", "1", "1,2,3", "a,b", None, 12])
def test_from_key_malformed_returns_none(key):
    """Błędny klucz to brak wyniku, nie wyjątek."""
    assert HexCoord.from_key(key) is None


def test_coord_usable_as_dict_key():
    tiles = {HexCoord(1, 0): "trail"}
    assert tiles[HexCoord(1, 0)] == "trail"


# ═══════════════════════════════════════════════════════════════════════════
# TEST: PIXELS
# ═══════════════════════════════════════════════════════════════════════════

def test_axial_to_pixel_origin():
    assert axial_to_pixel(HexCoord(0, 0), 40) == (0.0, 0.0)


def test_axial_to_pixel_row_offset():
    x, y = axial_to_pixel(HexCoord(0, 2), 10)
    assert y == pytest.approx(30.0)
    assert x == pytest.approx(10 * 3 ** 0.5)


def test_pixel_to_axial_returns_hex_containing_point():
    size = 30
    coord = HexCoord(2, -1)
    x, y = axial_to_pixel(coord, size)
    assert pixel_to_axial(x + 3, y - 4, size) == coord


# ═══════════════════════════════════════════════════════════════════════════
# TEST: RANGE
# ═══════════════════════════════════════════════════════════════════════════

def test_hex_range_sizes():
    """1 + 3R(R+1) hexów."""
    center = HexCoord(0, 0)
    assert len(hex_range(center, 0)) == 1
    assert len(hex_range(center, 1)) == 7
    assert len(hex_range(center, 2)) == 19


def test_hex_range_within_radius():
    center = HexCoord(1, -1)
    for coord in hex_range(center, 2):
        assert center.distance(coord) <= 2


def test_hex_range_negative_radius_is_empty():
    assert hex_range(HexCoord(0, 0), -1) == []
