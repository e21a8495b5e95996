"""
Harmonogram kontynuacji z wirtualnym zegarem (ms).

Pauzy narracyjne (napis aktu, zmierzch po ostatnim ruchu) nie blokują -
kolejny krok jest kolejkowany jako kontynuacja i odpalany, gdy
wywołujący przesunie zegar:

    scheduler.schedule(2500, "start_day", cycle.start_day)
    scheduler.advance(1000)    # nic
    scheduler.advance(1500)    # start_day()

Kolejność: czas wykonania, potem kolejność dodania.
Kontynuacje nie są anulowalne poza pełnym clear() (nowa gra).
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, List
import heapq
import itertools
import logging


logger = logging.getLogger(__name__)


@dataclass(order=True)
class Continuation:
    """
    Zaplanowany krok.

    Attributes:
        due (int): Czas wykonania (ms wirtualnego zegara)
        seq (int): Numer dodania (rozstrzyga remisy)
        label (str): Nazwa do inspekcji w testach
        callback (Callable): Funkcja do wywołania
    """
    due: int
    seq: int
    label: str = field(compare=False)
    callback: Callable[[], None] = field(compare=False, repr=False)

    def to_dict(self) -> dict:
        return {"label": self.label, "due": self.due}


class Scheduler:
    """
    Kolejka kontynuacji wykonywanych na wątku wywołującego.

    Attributes:
        now (int): Aktualny czas wirtualny (ms)
    """

    def __init__(self):
        self.now = 0
        self._heap: List[Continuation] = []
        self._counter = itertools.count()

    def schedule(self, delay_ms: int, label: str, callback: Callable[[], None]) -> Continuation:
        """
        Kolejkuje callback za delay_ms.

        Args:
            delay_ms: Opóźnienie (ujemne traktowane jak 0)
            label: Nazwa kontynuacji
            callback: Funkcja bez argumentów
        """
        continuation = Continuation(
            due=self.now + max(0, int(delay_ms)),
            seq=next(self._counter),
            label=label,
            callback=callback,
        )
        heapq.heappush(self._heap, continuation)
        logger.debug("Scheduled %s at %d ms", label, continuation.due)
        return continuation

    def advance(self, ms: int) -> int:
        """
        Przesuwa zegar o ms i wykonuje kontynuacje, których czas minął.

        Kontynuacje dodane w trakcie (z opóźnieniem mieszczącym się
        w oknie) też zostaną wykonane.

        Returns:
            int: Liczba wykonanych kontynuacji
        """
        target = self.now + max(0, int(ms))
        executed = 0
        while self._heap and self._heap[0].due <= target:
            continuation = heapq.heappop(self._heap)
            self.now = max(self.now, continuation.due)
            logger.debug("Running %s at %d ms", continuation.label, self.now)
            continuation.callback()
            executed += 1
        self.now = target
        return executed

    def run_pending(self, limit: int = 1000) -> int:
        """
        Przewija zegar, aż kolejka będzie pusta.

        Args:
            limit: Bezpiecznik na łańcuchy kontynuacji

        Returns:
            int: Liczba wykonanych kontynuacji
        """
        executed = 0
        while self._heap and executed < limit:
            executed += self.advance(self._heap[0].due - self.now)
        return executed

    @property
    def pending(self) -> List[Continuation]:
        return sorted(self._heap)

    def has_pending(self, label: str) -> bool:
        return any(c.label == label for c in self._heap)

    def clear(self) -> None:
        self._heap = []
