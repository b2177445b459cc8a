from lingospark.models import RequestState
from lingospark.story import STORY_FALLBACK_TEXT, StoryGenerator, parse_story_markup
from lingospark.tasks import InlineDispatcher

from conftest import make_word


def test_bold_markup_becomes_segments():
    lines = parse_story_markup("El **gato** come **pan**.")
    assert lines == [[("El ", False), ("gato", True), (" come ", False), ("pan", True), (".", False)]]


def test_lines_are_split_and_blank_lines_kept():
    lines = parse_story_markup("Uno\n\nDos")
    assert lines == [[("Uno", False)], [], [("Dos", False)]]


def test_unmatched_asterisks_stay_literal():
    assert parse_story_markup("a **b") == [[("a **b", False)]]


def test_story_failure_uses_fallback_text(backend):
    backend.story_error = RuntimeError("timeout")
    story = StoryGenerator(backend, InlineDispatcher())
    words = [make_word(str(i)) for i in range(3)]

    assert story.request(words, "English")
    assert story.text == STORY_FALLBACK_TEXT
    assert story.state is RequestState.IDLE


def test_story_request_ignored_while_loading(backend, dispatcher):
    story = StoryGenerator(backend, dispatcher)
    words = [make_word(str(i)) for i in range(3)]

    assert story.request(words, "English")
    assert not story.request(words, "English")
    assert len(dispatcher.jobs) == 1


def test_story_clears_previous_text_on_new_request(backend, dispatcher):
    story = StoryGenerator(backend, dispatcher)
    words = [make_word(str(i)) for i in range(3)]
    story.request(words, "English")
    dispatcher.run_all()
    assert story.text

    story.request(words, "English")
    assert story.text is None
    assert story.is_loading
