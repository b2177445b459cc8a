import base64
import os
import struct
from types import SimpleNamespace

import pytest

# Keep test output quiet and never pick up a developer's real key
os.environ.setdefault("LINGOSPARK_DEBUG", "0")
os.environ["OPENAI_API_KEY"] = ""

from lingospark.languages import get_language  # noqa: E402
from lingospark.models import AnalysisResponse, ExampleSentence, MediaResult, WordResult  # noqa: E402


def pcm_b64(*samples: int) -> str:
    return base64.b64encode(struct.pack(f"<{len(samples)}h", *samples)).decode("ascii")


def completion(content):
    """Shape of an OpenAI chat completion, as far as the client reads it."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def make_word(word_id: str, text: str = "hola") -> WordResult:
    return WordResult(
        id=word_id,
        original_text=text,
        definition=f"definition of {text}",
        examples=[ExampleSentence(target=f"{text}!", native="hi!")],
        usage_notes="casual",
        target_lang="Spanish",
        native_lang="English",
        timestamp=0.0,
    )


class FakeChatSession:
    def __init__(self, context: str, native_lang: str, replies: list) -> None:
        self.context = context
        self.native_lang = native_lang
        self.replies = replies
        self.sent = []

    def send_message(self, message: str) -> str:
        self.sent.append(message)
        reply = self.replies.pop(0) if self.replies else "ok"
        if isinstance(reply, BaseException):
            raise reply
        return reply


class FakeBackend:
    """Stands in for lingospark.api; records every call."""

    def __init__(self) -> None:
        self.calls = []
        self.image_prompt = "a waving hand"
        self.analysis_error = None
        self.image_result = MediaResult.ok("aW1hZ2U=")
        self.speech_result = MediaResult.ok(pcm_b64(0, 1000, -1000))
        self.story_text = "Once upon a time **hola**."
        self.story_error = None
        self.chat_replies = []
        self.sessions = []

    def call_names(self):
        return [call[0] for call in self.calls]

    def analyze_text(self, text, target_lang, native_lang):
        self.calls.append(("analyze_text", text, target_lang, native_lang))
        if self.analysis_error is not None:
            raise self.analysis_error
        return AnalysisResponse(
            definition=f"meaning of {text}",
            examples=[
                ExampleSentence(target="¡Hola, amigo!", native="Hello, friend!"),
                ExampleSentence(target="Hola a todos.", native="Hello everyone."),
            ],
            usage_notes="Use it anywhere.",
            image_prompt=self.image_prompt,
        )

    def generate_image(self, prompt):
        self.calls.append(("generate_image", prompt))
        return self.image_result

    def generate_speech(self, text):
        self.calls.append(("generate_speech", text))
        return self.speech_result

    def create_chat_session(self, context, native_lang):
        self.calls.append(("create_chat_session", context, native_lang))
        session = FakeChatSession(context, native_lang, self.chat_replies)
        self.sessions.append(session)
        return session

    def generate_story(self, words, native_lang):
        self.calls.append(("generate_story", [w.id for w in words], native_lang))
        if self.story_error is not None:
            raise self.story_error
        return self.story_text


class QueuedDispatcher:
    """Holds submitted work until the test runs it, so pending states are observable."""

    def __init__(self) -> None:
        self.jobs = []
        self.delayed = []

    def submit(self, task_name, work, on_done, on_error=None):
        self.jobs.append((task_name, work, on_done, on_error))

    def later(self, delay_ms, callback):
        self.delayed.append((delay_ms, callback))

    def run_next(self):
        task_name, work, on_done, on_error = self.jobs.pop(0)
        try:
            result = work()
        except Exception as e:
            if on_error is not None:
                on_error(e)
            return
        on_done(result)

    def run_all(self):
        while self.jobs:
            self.run_next()

    def flush_delayed(self):
        while self.delayed:
            _, callback = self.delayed.pop(0)
            callback()


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def dispatcher():
    return QueuedDispatcher()


@pytest.fixture
def errors():
    return []


@pytest.fixture
def played():
    return []


@pytest.fixture
def app(backend, dispatcher, errors, played):
    from lingospark.app_state import AppState

    def player(payload):
        played.append(payload)
        return "handle"

    return AppState(backend=backend, dispatcher=dispatcher, notify_error=errors.append, player=player)


@pytest.fixture
def ready_app(app):
    """English speaker learning Spanish, sitting on the search screen."""
    app.select_language(get_language("en"))
    app.select_language(get_language("es"))
    return app
