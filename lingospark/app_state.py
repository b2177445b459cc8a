"""
Application state and orchestration for LingoSpark.

``AppState`` owns everything that survives between screens: the chosen
languages, the active view, the current result, the notebook, and the
per-resource request markers. Views read from it and call its methods;
they never mutate state directly. Remote work goes through an injectable
backend (``lingospark.api`` by default) and dispatcher, so the whole flow
runs headless in tests.
"""

import time
import uuid
from typing import Any, Callable, List, Optional

from . import api
from .audio import play_pcm_base64
from .conversation import Conversation
from .flashcards import FlashcardDeck
from .logger import logger
from .models import AppView, Language, RequestState, WordResult
from .notebook import Notebook
from .story import StoryGenerator
from .tasks import InlineDispatcher

SEARCH_ERROR_MESSAGE = "Something went wrong. Please try again."
DEFAULT_NATIVE_NAME = "English"


def new_result_id() -> str:
    """Time-based id, unique within the process."""
    return uuid.uuid1().hex


def build_word_result(backend: Any, text: str, target_lang: str, native_lang: str) -> WordResult:
    """
    Run analysis, then (only if it produced a prompt) image generation, and
    assemble the result. Analysis errors propagate; a missing or failed
    image just leaves ``image_url`` unset.
    """
    analysis = backend.analyze_text(text, target_lang, native_lang)

    image_url = None
    if analysis.image_prompt:
        media = backend.generate_image(analysis.image_prompt)
        if media.has_payload:
            image_url = api.image_data_url(media.payload)
        else:
            logger.img(f"Continuing without image ({media.status.value}"
                       f"{': ' + media.error if media.error else ''})")

    return WordResult(
        id=new_result_id(),
        original_text=text,
        definition=analysis.definition,
        examples=list(analysis.examples),
        usage_notes=analysis.usage_notes,
        target_lang=target_lang,
        native_lang=native_lang,
        timestamp=time.time(),
        image_url=image_url,
    )


class AppState:
    def __init__(
        self,
        backend: Any = None,
        dispatcher: Any = None,
        notify_error: Optional[Callable[[str], None]] = None,
        player: Optional[Callable[[str], Any]] = None,
    ) -> None:
        self.backend = backend if backend is not None else api
        self.dispatcher = dispatcher if dispatcher is not None else InlineDispatcher()
        self.notify_error = notify_error
        self.player = player if player is not None else play_pcm_base64

        self.view = AppView.LANGUAGE_SELECT
        self.native_lang: Optional[Language] = None
        self.target_lang: Optional[Language] = None
        self.picker_step = 1

        self.input_text = ""
        self.current_result: Optional[WordResult] = None
        self.search_state = RequestState.IDLE
        self._search_token = 0

        self.audio_state = RequestState.IDLE
        self.audio_key: Optional[str] = None
        self.playback = None

        self.notebook = Notebook()
        self.conversation = Conversation(self.backend, self.dispatcher, on_change=self._emit)
        self.story = StoryGenerator(self.backend, self.dispatcher, on_change=self._emit)
        self.flashcards = FlashcardDeck(lambda: self.notebook.words, self.dispatcher.later)

        self._listeners: List[Callable[[], None]] = []

    # Observers ------------------------------------------------------------

    def subscribe(self, callback: Callable[[], None]) -> None:
        self._listeners.append(callback)

    def _emit(self) -> None:
        for callback in list(self._listeners):
            callback()

    # Navigation -----------------------------------------------------------

    @property
    def is_loading(self) -> bool:
        return self.search_state is RequestState.PENDING

    @property
    def languages_chosen(self) -> bool:
        return self.native_lang is not None and self.target_lang is not None

    def _transition(self, view: AppView) -> None:
        if view is not self.view:
            logger.ui_transition(self.view.value, view.value)
        self.view = view

    def navigate(self, view: AppView) -> bool:
        """Explicit navigation; only available once onboarding is done."""
        if view is AppView.LANGUAGE_SELECT or not self.languages_chosen:
            return False
        if view is AppView.FLASHCARDS and self.view is not AppView.FLASHCARDS:
            self.flashcards.reset()
        self._transition(view)
        self._emit()
        return True

    # Language picker ------------------------------------------------------

    def select_language(self, lang: Language) -> bool:
        """
        Two-step picker: the first pick is the native language, the second
        the target. Picking the native language again as target is rejected.
        """
        if self.view is not AppView.LANGUAGE_SELECT:
            return False

        if self.picker_step == 1:
            self.native_lang = lang
            self.picker_step = 2
            logger.ui(f"Native language: {lang.name}")
            self._emit()
            return True

        if self.native_lang is None or lang.code == self.native_lang.code:
            return False

        self.target_lang = lang
        logger.ui(f"Target language: {lang.name}")
        self._transition(AppView.SEARCH)
        self._emit()
        return True

    def back_to_native_step(self) -> bool:
        if self.view is not AppView.LANGUAGE_SELECT or self.picker_step != 2:
            return False
        self.picker_step = 1
        self._emit()
        return True

    # Search ---------------------------------------------------------------

    def set_input_text(self, text: str) -> None:
        self.input_text = text

    def _set_current_result(self, result: Optional[WordResult]) -> None:
        self.current_result = result
        self.conversation.bind(result)

    def submit_search(self) -> bool:
        """
        Analyse the input text. Switches to RESULT at once with the loading
        flag set; on failure the view returns to SEARCH and the user is
        told. Loading flag and input are cleared however it ends.
        """
        text = self.input_text
        if not text.strip() or not self.languages_chosen:
            return False

        target_name = self.target_lang.name
        native_name = self.native_lang.name

        self._search_token += 1
        token = self._search_token
        self.search_state = RequestState.PENDING
        self._set_current_result(None)
        self._transition(AppView.RESULT)
        self._emit()

        def finish() -> None:
            self.search_state = RequestState.IDLE
            self.input_text = ""

        def on_done(result: WordResult) -> None:
            if token != self._search_token:
                logger.debug(f"Discarding superseded result for \"{text}\"")
                return
            self._set_current_result(result)
            finish()
            self._emit()

        def on_error(error: BaseException) -> None:
            if token != self._search_token:
                return
            logger.error(f"Search failed: {error}")
            if self.notify_error is not None:
                self.notify_error(SEARCH_ERROR_MESSAGE)
            self._transition(AppView.SEARCH)
            finish()
            self._emit()

        self.dispatcher.submit(
            "search",
            lambda: build_word_result(self.backend, text, target_name, native_name),
            on_done,
            on_error,
        )
        return True

    def open_word(self, word: WordResult) -> bool:
        """Show a saved word on the result screen. Supersedes a pending search."""
        if not self.languages_chosen:
            return False
        if self.is_loading:
            self._search_token += 1
            self.search_state = RequestState.IDLE
            self.input_text = ""
        self._set_current_result(word)
        self._transition(AppView.RESULT)
        self._emit()
        return True

    # Notebook -------------------------------------------------------------

    def save(self, item: Optional[WordResult] = None) -> bool:
        item = item if item is not None else self.current_result
        if item is None:
            return False
        saved = self.notebook.save(item)
        if saved:
            self._emit()
        return saved

    def delete(self, item_id: str) -> bool:
        deleted = self.notebook.delete(item_id)
        if deleted:
            self._emit()
        return deleted

    def is_saved(self, item_id: str) -> bool:
        return self.notebook.contains(item_id)

    # Speech ---------------------------------------------------------------

    @property
    def audio_busy(self) -> bool:
        return self.audio_state is RequestState.PENDING

    def play_audio(self, text: str, key: str) -> bool:
        """
        Speak ``text``; ``key`` names the element being voiced ("main",
        "ex-0", ...). Dropped while another request is pending.
        """
        if self.audio_busy or not text.strip():
            return False

        self.audio_state = RequestState.PENDING
        self.audio_key = key
        self._emit()

        def work():
            media = self.backend.generate_speech(text)
            if not media.has_payload:
                logger.audio(f"No audio to play ({media.status.value})")
                return None
            return self.player(media.payload)

        def finish() -> None:
            self.audio_state = RequestState.IDLE
            self.audio_key = None
            self._emit()

        def on_done(handle) -> None:
            self.playback = handle
            finish()

        def on_error(error: BaseException) -> None:
            logger.audio_error(f"Playback failed: {error}")
            finish()

        self.dispatcher.submit("speech_" + key, work, on_done, on_error)
        return True

    # Chat, story, flashcards ----------------------------------------------

    def send_chat(self, text: str) -> bool:
        return self.conversation.send(text)

    def request_story(self) -> bool:
        native = self.native_lang.name if self.native_lang else DEFAULT_NATIVE_NAME
        return self.story.request(self.notebook.words, native)

    def flip_card(self) -> None:
        self.flashcards.flip()
        self._emit()

    def next_card(self) -> bool:
        moved = self.flashcards.next(on_moved=self._emit)
        self._emit()
        return moved

    def prev_card(self) -> bool:
        moved = self.flashcards.prev(on_moved=self._emit)
        self._emit()
        return moved
