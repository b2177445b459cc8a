import uuid
from typing import Any, Callable, List, Optional

from .logger import logger
from .models import ChatMessage, ChatRole, ChatStatus, RequestState, WordResult
from .schemas import CHAT_CONTEXT_TEMPLATE


def new_message_id() -> str:
    return uuid.uuid1().hex


def context_preamble(result: WordResult) -> str:
    return CHAT_CONTEXT_TEMPLATE.format(
        word=result.original_text,
        definition=result.definition,
        usage=result.usage_notes,
    )


class Conversation:
    """
    Visible chat about the currently shown word.

    Bound to one WordResult at a time; binding a different result throws
    away the history and opens a fresh remote session. A user turn is shown
    at once as PENDING, then marked SENT (with the model turn appended) or
    FAILED. Only one turn may be in flight.
    """

    def __init__(self, backend: Any, dispatcher: Any, on_change: Optional[Callable[[], None]] = None) -> None:
        self.backend = backend
        self.dispatcher = dispatcher
        self.on_change = on_change
        self.messages: List[ChatMessage] = []
        self.state = RequestState.IDLE
        self.bound_id: Optional[str] = None
        self._session = None
        self._generation = 0

    def bind(self, result: Optional[WordResult]) -> None:
        new_id = result.id if result is not None else None
        if new_id == self.bound_id and (result is None or self._session is not None):
            return

        self._generation += 1
        self.messages = []
        self.state = RequestState.IDLE
        self.bound_id = new_id
        self._session = None

        if result is not None:
            self._session = self.backend.create_chat_session(context_preamble(result), result.native_lang)
            logger.chat(f"Chat bound to \"{result.original_text}\"")
        self._changed()

    @property
    def is_sending(self) -> bool:
        return self.state is RequestState.PENDING

    def send(self, text: str) -> bool:
        """Send one user turn. Returns False when the send was not allowed."""
        if not text or not text.strip() or self._session is None or self.is_sending:
            return False

        user_msg = ChatMessage(id=new_message_id(), role=ChatRole.USER, text=text,
                               status=ChatStatus.PENDING)
        self.messages.append(user_msg)
        self.state = RequestState.PENDING
        generation = self._generation
        session = self._session
        self._changed()

        def on_done(reply: str) -> None:
            if generation != self._generation:
                logger.debug("Dropping chat reply for a previous word")
                return
            user_msg.status = ChatStatus.SENT
            self.messages.append(ChatMessage(id=new_message_id(), role=ChatRole.MODEL, text=reply))
            self.state = RequestState.IDLE
            self._changed()

        def on_error(error: BaseException) -> None:
            if generation != self._generation:
                return
            logger.chat_error(f"Chat error: {error}")
            user_msg.status = ChatStatus.FAILED
            self.state = RequestState.IDLE
            self._changed()

        self.dispatcher.submit("chat_turn", lambda: session.send_message(text), on_done, on_error)
        return True

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()
