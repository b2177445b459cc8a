from typing import Callable, List, Optional

from .logger import logger
from .models import WordResult

# Time for the card to turn face-up before the next word is shown
FLIP_RESET_DELAY_MS = 200


class FlashcardDeck:
    """
    Review cursor over the notebook's current words.

    The cursor wraps in both directions. Moving always un-flips first and
    only moves after FLIP_RESET_DELAY_MS, so the back of the old card never
    shows under the next word. The cursor is read modulo the live deck
    length, which keeps it valid after notebook deletions.
    """

    def __init__(
        self,
        words: Callable[[], List[WordResult]],
        schedule: Callable[[int, Callable[[], None]], None],
    ) -> None:
        self._words = words
        self._schedule = schedule
        self._index = 0
        self.flipped = False
        self._pending_moves = 0
        # Bumped by reset(); moves scheduled before it are dropped
        self._generation = 0

    def reset(self) -> None:
        self._generation += 1
        self._pending_moves = 0
        self._index = 0
        self.flipped = False

    @property
    def is_moving(self) -> bool:
        return self._pending_moves > 0

    @property
    def size(self) -> int:
        return len(self._words())

    @property
    def is_empty(self) -> bool:
        return self.size == 0

    @property
    def index(self) -> Optional[int]:
        """Cursor position, or None when there are no cards."""
        size = self.size
        if size == 0:
            return None
        return self._index % size

    def current(self) -> Optional[WordResult]:
        words = self._words()
        if not words:
            return None
        return words[self._index % len(words)]

    def flip(self) -> None:
        # The next card is not on screen yet while a move is pending
        if self.is_empty or self.is_moving:
            return
        self.flipped = not self.flipped

    def next(self, on_moved: Optional[Callable[[], None]] = None) -> bool:
        return self._step(1, on_moved)

    def prev(self, on_moved: Optional[Callable[[], None]] = None) -> bool:
        return self._step(-1, on_moved)

    def _step(self, delta: int, on_moved: Optional[Callable[[], None]]) -> bool:
        if self.is_empty:
            return False
        self.flipped = False
        self._pending_moves += 1
        generation = self._generation

        def _move() -> None:
            if generation != self._generation:
                return
            self._pending_moves -= 1
            size = self.size
            if size == 0:
                return
            self._index = (self._index + delta) % size
            logger.ui(f"Flashcard {self._index + 1}/{size}")
            if on_moved is not None:
                on_moved()

        self._schedule(FLIP_RESET_DELAY_MS, _move)
        return True
