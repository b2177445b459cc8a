from typing import Iterator, List, Optional

from .logger import logger
from .models import WordResult


class Notebook:
    """
    Saved words, newest first, unique by id.

    There is no update operation: a saved WordResult is never mutated.
    """

    def __init__(self) -> None:
        self._items: List[WordResult] = []

    def save(self, item: WordResult) -> bool:
        """Add to the front. Returns False (no-op) if the id is already present."""
        if self.contains(item.id):
            logger.debug(f"Notebook already has {item.id}, ignoring save")
            return False
        self._items.insert(0, item)
        logger.ui(f"Saved \"{item.original_text}\" to notebook ({len(self._items)} words)")
        return True

    def delete(self, item_id: str) -> bool:
        """Remove the entry with ``item_id``. Returns False if it was absent."""
        remaining = [w for w in self._items if w.id != item_id]
        if len(remaining) == len(self._items):
            return False
        self._items = remaining
        logger.ui(f"Deleted {item_id} from notebook ({len(self._items)} words)")
        return True

    def contains(self, item_id: str) -> bool:
        return any(w.id == item_id for w in self._items)

    def get(self, item_id: str) -> Optional[WordResult]:
        return next((w for w in self._items if w.id == item_id), None)

    @property
    def words(self) -> List[WordResult]:
        """Snapshot of the saved words, newest first."""
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[WordResult]:
        return iter(list(self._items))
