from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class AppView(str, Enum):
    """The five screens; exactly one is active at a time."""
    LANGUAGE_SELECT = "LANGUAGE_SELECT"
    SEARCH = "SEARCH"
    RESULT = "RESULT"
    NOTEBOOK = "NOTEBOOK"
    FLASHCARDS = "FLASHCARDS"


class RequestState(str, Enum):
    """In-flight marker for a single remote resource (search, audio, chat, story)."""
    IDLE = "idle"
    PENDING = "pending"


class MediaStatus(str, Enum):
    OK = "ok"            # Call succeeded with a payload
    EMPTY = "empty"      # Call succeeded but returned nothing
    FAILED = "failed"    # Call raised or the client is not configured


class ChatRole(str, Enum):
    USER = "user"
    MODEL = "model"


class ChatStatus(str, Enum):
    PENDING = "pending"  # User turn shown, reply not yet received
    SENT = "sent"
    FAILED = "failed"


@dataclass(frozen=True)
class Language:
    """An entry of the fixed language catalog."""
    code: str                        # Unique short identifier, e.g. "es"
    name: str                        # Display name, e.g. "Spanish"
    flag: str                        # Flag emoji


@dataclass(frozen=True)
class ExampleSentence:
    target: str                      # Sentence in the target language
    native: str                      # Translation in the native language


@dataclass(frozen=True)
class AnalysisResponse:
    """Validated output of the analysis call."""
    definition: str
    examples: List[ExampleSentence] = field(default_factory=list)
    usage_notes: str = ""
    image_prompt: str = ""           # Empty means no image is generated


@dataclass(frozen=True)
class WordResult:
    """
    One analysed word or phrase.

    Immutable once assembled. Identity is the ``id`` field: notebook
    membership compares ids, never content.
    """
    id: str                          # Time-derived, unique within a session
    original_text: str
    definition: str
    examples: List[ExampleSentence]
    usage_notes: str
    target_lang: str                 # Target language display name
    native_lang: str                 # Native language display name
    timestamp: float                 # Creation time, epoch seconds
    image_url: Optional[str] = None  # data:image/png;base64,... or None


@dataclass
class ChatMessage:
    id: str
    role: ChatRole
    text: str
    status: ChatStatus = ChatStatus.SENT


@dataclass(frozen=True)
class MediaResult:
    """
    Outcome of an image or speech call.

    Keeps "legitimately absent" (EMPTY) apart from "call failed" (FAILED);
    callers that only care whether there is something to show use
    ``has_payload``.
    """
    status: MediaStatus
    payload: Optional[str] = None    # base64 text when status is OK
    error: Optional[str] = None

    @classmethod
    def ok(cls, payload: str) -> "MediaResult":
        return cls(MediaStatus.OK, payload=payload)

    @classmethod
    def empty(cls) -> "MediaResult":
        return cls(MediaStatus.EMPTY)

    @classmethod
    def failed(cls, error: str) -> "MediaResult":
        return cls(MediaStatus.FAILED, error=error)

    @property
    def has_payload(self) -> bool:
        return self.status is MediaStatus.OK and bool(self.payload)
