"""
System współrzędnych hexagonalnych wyspy (Axial Coordinates).

Używamy Axial Coordinates (q, r) w orientacji pointy-top:
- q = kolumna (oś pozioma)
- r = wiersz (oś ukośna)

Konwersja do Cube Coordinates:
    s = -q - r
    Cube: (q, r, s) gdzie q + r + s = 0

Układ sąsiadów (kolejność stała - od niej zależy rozstrzyganie remisów w BFS):
    Kierunek   (dq, dr)
    ─────────────────────
    E  (→)     (+1,  0)
    NE (↗)     (+1, -1)
    NW (↖)     ( 0, -1)
    W  (←)     (-1,  0)
    SW (↙)     (-1, +1)
    SE (↘)     ( 0, +1)

Odległość między hexami:
    distance = max(|dq|, |dr|, |ds|)

Klucz kanoniczny:
    Współrzędna zapisywana w stanie gry i w zapisach jako string "q,r"
    (np. zbiór odkrytych pól). HexCoord.key() / HexCoord.from_key().

Przykład użycia:
    >>> a = HexCoord(0, 0)
    >>> a.distance(HexCoord(2, -1))
    2
    >>> a.key()
    '0,0'
    >>> HexCoord.from_key("3,-2")
    HexCoord(q=3, r=-2)
"""

from __future__ import annotations
from dataclasses import dataclass
from math import sqrt
from typing import List, Optional, Tuple


# Kierunki sąsiadów w układzie axial (pointy-top)
# Kolejność: E, NE, NW, W, SW, SE
HEX_DIRECTIONS: List[Tuple[int, int]] = [
    (+1, 0),   # E
    (+1, -1),  # NE
    (0, -1),   # NW
    (-1, 0),   # W
    (-1, +1),  # SW
    (0, +1),   # SE
]

SQRT3 = sqrt(3)


@dataclass(frozen=True)
class HexCoord:
    """
    Współrzędna hexagonalna w systemie axial (q, r).

    Klasa jest niemutowalna (frozen=True).
    Może być używana jako klucz w słowniku lub element zbioru.

    Attributes:
        q (int): Współrzędna kolumny
        r (int): Współrzędna wiersza
    """
    q: int
    r: int

    # ─────────────────────────────────────────────────────────────────────────
    # WŁAŚCIWOŚCI
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def s(self) -> int:
        """Trzecia współrzędna w systemie cube (q + r + s = 0)."""
        return -self.q - self.r

    @property
    def cube(self) -> Tuple[int, int, int]:
        """Współrzędne cube (q, r, s)."""
        return (self.q, self.r, self.s)

    @property
    def axial(self) -> Tuple[int, int]:
        """Współrzędne axial jako krotka."""
        return (self.q, self.r)

    # ─────────────────────────────────────────────────────────────────────────
    # KLUCZ KANONICZNY
    # ─────────────────────────────────────────────────────────────────────────

    def key(self) -> str:
        """
        Zwraca kanoniczny klucz tekstowy "q,r".

        Returns:
            str: Klucz używany w stanie gry i w zapisach
        """
        return f"{self.q},{self.r}"

    @classmethod
    def from_key(cls, key: str) -> Optional[HexCoord]:
        """
        Parsuje klucz "q,r".

        Args:
            key: Klucz w formacie "q,r"

        Returns:
            Optional[HexCoord]: Współrzędna lub None dla błędnego klucza
        """
        if not isinstance(key, str):
            return None
        parts = key.split(",")
        if len(parts) != 2:
            return None
        try:
            return cls(int(parts[0]), int(parts[1]))
        except ValueError:
            return None

    def to_dict(self) -> dict:
        """Serializuje do {"q": .., "r": ..}."""
        return {"q": self.q, "r": self.r}

    # ─────────────────────────────────────────────────────────────────────────
    # ODLEGŁOŚĆ I SĄSIEDZI
    # ─────────────────────────────────────────────────────────────────────────

    def distance(self, other: HexCoord) -> int:
        """
        Oblicza odległość między dwoma hexami (cube distance).

        Wzór:
            distance = max(|dq|, |dr|, |ds|)

        Args:
            other: Druga współrzędna

        Returns:
            int: Odległość w liczbie kroków

        Example:
            >>> HexCoord(0, 0).distance(HexCoord(2, 1))
            3
        """
        return max(
            abs(self.q - other.q),
            abs(self.r - other.r),
            abs(self.s - other.s),
        )

    def neighbors(self) -> List[HexCoord]:
        """
        Zwraca listę 6 sąsiednich hexów w kolejności HEX_DIRECTIONS.

        Returns:
            List[HexCoord]: Sąsiedzi (E, NE, NW, W, SW, SE)
        """
        return [
            HexCoord(self.q + dq, self.r + dr)
            for dq, dr in HEX_DIRECTIONS
        ]

    def neighbor(self, direction: int) -> HexCoord:
        """
        Zwraca sąsiada w określonym kierunku.

        Args:
            direction: Indeks kierunku (0-5), zgodnie z HEX_DIRECTIONS

        Raises:
            IndexError: Jeśli direction nie jest w zakresie 0-5
        """
        dq, dr = HEX_DIRECTIONS[direction]
        return HexCoord(self.q + dq, self.r + dr)

    # ─────────────────────────────────────────────────────────────────────────
    # OPERATORY
    # ─────────────────────────────────────────────────────────────────────────

    def __add__(self, other: HexCoord) -> HexCoord:
        return HexCoord(self.q + other.q, self.r + other.r)

    def __sub__(self, other: HexCoord) -> HexCoord:
        return HexCoord(self.q - other.q, self.r - other.r)

    def __repr__(self) -> str:
        return f"HexCoord(q={self.q}, r={self.r})"

    def __str__(self) -> str:
        return f"({self.q}, {self.r})"


# ─────────────────────────────────────────────────────────────────────────────
# KONWERSJA PIKSELE <-> AXIAL
# ─────────────────────────────────────────────────────────────────────────────

def axial_to_pixel(coord: HexCoord, size: float) -> Tuple[float, float]:
    """
    Środek hexa w pikselach (pointy-top).

    Wzór:
        x = size * (√3 * q + √3/2 * r)
        y = size * (3/2 * r)

    Args:
        coord: Współrzędna axial
        size: Promień hexa w pikselach

    Returns:
        Tuple[float, float]: (x, y)
    """
    x = size * (SQRT3 * coord.q + (SQRT3 / 2) * coord.r)
    y = size * (1.5 * coord.r)
    return (x, y)


def pixel_to_axial(x: float, y: float, size: float) -> HexCoord:
    """
    Zamienia pozycję w pikselach na najbliższy hex.

    Args:
        x, y: Pozycja w pikselach (względem środka hexa (0, 0))
        size: Promień hexa w pikselach

    Returns:
        HexCoord: Hex zawierający punkt
    """
    q = ((SQRT3 / 3) * x - (1 / 3) * y) / size
    r = ((2 / 3) * y) / size
    return _cube_round(q, r, -q - r)


def _cube_round(q: float, r: float, s: float) -> HexCoord:
    """
    Zaokrągla współrzędne cube do najbliższego hexa.

    Algorytm:
    1. Zaokrąglij każdą współrzędną do najbliższej int
    2. Znajdź współrzędną z największym błędem zaokrąglenia
    3. Skoryguj ją tak, żeby q + r + s = 0
    """
    rq = round(q)
    rr = round(r)
    rs = round(s)

    dq = abs(rq - q)
    dr = abs(rr - r)
    ds = abs(rs - s)

    if dq > dr and dq > ds:
        rq = -rr - rs
    elif dr > ds:
        rr = -rq - rs
    # else: rs = -rq - rr (nie używamy s w axial)

    return HexCoord(int(rq), int(rr))


def hex_range(center: HexCoord, radius: int) -> List[HexCoord]:
    """
    Zwraca wszystkie hexy w odległości <= radius od centrum.

    Pętla po dq z ograniczeniem:
        max(-R, -dq - R) <= dr <= min(R, -dq + R)

    Note:
        Zawiera centrum. Dla radius=1 zwraca 7 hexów.
        Ujemny promień zwraca pustą listę.
    """
    result = []
    for dq in range(-radius, radius + 1):
        for dr in range(max(-radius, -dq - radius), min(radius, -dq + radius) + 1):
            result.append(HexCoord(center.q + dq, center.r + dr))
    return result
