import re
from typing import Any, Callable, List, Optional, Tuple

from .logger import logger
from .models import RequestState, WordResult

MIN_STORY_WORDS = 3
STORY_FALLBACK_TEXT = "Sorry, could not generate a story right now."

_BOLD_RE = re.compile(r"\*\*(.+?)\*\*")

Segment = Tuple[str, bool]  # (text, bold)


def parse_story_markup(text: str) -> List[List[Segment]]:
    """
    Split story text into lines, and each line into (text, bold) segments.

    ``**word**`` becomes a bold segment; unmatched asterisks stay literal.
    Empty lines come back as empty lists.
    """
    lines: List[List[Segment]] = []
    for line in text.split("\n"):
        segments: List[Segment] = []
        pos = 0
        for match in _BOLD_RE.finditer(line):
            if match.start() > pos:
                segments.append((line[pos:match.start()], False))
            segments.append((match.group(1), True))
            pos = match.end()
        if pos < len(line):
            segments.append((line[pos:], False))
        lines.append(segments)
    return lines


class StoryGenerator:
    """Story mode: one remote call weaving all notebook words together."""

    def __init__(self, backend: Any, dispatcher: Any, on_change: Optional[Callable[[], None]] = None) -> None:
        self.backend = backend
        self.dispatcher = dispatcher
        self.on_change = on_change
        self.text: Optional[str] = None
        self.state = RequestState.IDLE

    @property
    def is_loading(self) -> bool:
        return self.state is RequestState.PENDING

    def request(self, words: List[WordResult], native_lang: str) -> bool:
        if len(words) < MIN_STORY_WORDS:
            logger.debug(f"Story needs {MIN_STORY_WORDS} words, notebook has {len(words)}")
            return False
        if self.is_loading:
            return False

        self.state = RequestState.PENDING
        self.text = None
        self._changed()

        def on_done(story: str) -> None:
            self.text = story
            self.state = RequestState.IDLE
            self._changed()

        def on_error(error: BaseException) -> None:
            logger.error(f"Story generation failed: {error}")
            self.text = STORY_FALLBACK_TEXT
            self.state = RequestState.IDLE
            self._changed()

        snapshot = list(words)
        self.dispatcher.submit(
            "generate_story",
            lambda: self.backend.generate_story(snapshot, native_lang),
            on_done,
            on_error,
        )
        return True

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()
