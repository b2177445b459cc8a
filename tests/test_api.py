import base64
import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from lingospark import api
from lingospark.api import AnalysisError, ChatSession, parse_analysis
from lingospark.models import MediaStatus

from conftest import completion, make_word

ANALYSIS_JSON = json.dumps({
    "definition": "A friendly greeting. ",
    "examples": [
        {"target": "¡Hola, María!", "native": "Hi, María!"},
        {"target": "Hola, ¿qué tal?", "native": "Hi, how are you?"},
    ],
    "usageNotes": "Works everywhere.",
    "imagePrompt": "two people waving",
})


@pytest.fixture
def mock_client(monkeypatch):
    client = MagicMock()
    monkeypatch.setattr(api, "client", client)
    return client


# Analysis -------------------------------------------------------------------

def test_parse_analysis_builds_response():
    analysis = parse_analysis(ANALYSIS_JSON)
    assert analysis.definition == "A friendly greeting."
    assert analysis.examples[1].native == "Hi, how are you?"
    assert analysis.usage_notes == "Works everywhere."
    assert analysis.image_prompt == "two people waving"


def test_parse_analysis_tolerates_missing_image_prompt():
    data = json.loads(ANALYSIS_JSON)
    del data["imagePrompt"]
    assert parse_analysis(json.dumps(data)).image_prompt == ""


@pytest.mark.parametrize("raw", [
    None,
    "not json",
    "[1, 2]",
    json.dumps({"examples": [], "usageNotes": ""}),
    json.dumps({"definition": "d", "examples": "none", "usageNotes": ""}),
    json.dumps({"definition": "d", "examples": [{"target": "x"}], "usageNotes": ""}),
])
def test_parse_analysis_rejects_bad_payloads(raw):
    with pytest.raises(AnalysisError):
        parse_analysis(raw)


def test_analyze_text_uses_json_schema(mock_client):
    mock_client.chat.completions.create.return_value = completion(ANALYSIS_JSON)

    analysis = api.analyze_text("hola", "Spanish", "English")

    assert analysis.definition == "A friendly greeting."
    kwargs = mock_client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == api.DEFAULT_CHAT_MODEL
    assert kwargs["response_format"]["type"] == "json_schema"
    assert kwargs["response_format"]["json_schema"]["name"] == "word_analysis"
    prompt = kwargs["messages"][0]["content"]
    assert '"hola"' in prompt
    assert "Target Language: Spanish" in prompt
    assert "Native Language: English" in prompt


def test_analyze_text_wraps_transport_errors(mock_client):
    mock_client.chat.completions.create.side_effect = ConnectionError("reset")
    with pytest.raises(AnalysisError, match="reset"):
        api.analyze_text("hola", "Spanish", "English")


def test_analyze_text_rejects_non_json(mock_client):
    mock_client.chat.completions.create.return_value = completion("Sure! Here you go")
    with pytest.raises(AnalysisError):
        api.analyze_text("hola", "Spanish", "English")


def test_analyze_text_without_client(monkeypatch):
    monkeypatch.setattr(api, "client", None)
    assert not api.is_api_available()
    with pytest.raises(AnalysisError):
        api.analyze_text("hola", "Spanish", "English")


# Images ---------------------------------------------------------------------

def test_generate_image_returns_base64(mock_client):
    mock_client.images.generate.return_value = SimpleNamespace(data=[SimpleNamespace(b64_json="UE5H")])

    result = api.generate_image("a cat")

    assert result.status is MediaStatus.OK
    assert result.payload == "UE5H"
    kwargs = mock_client.images.generate.call_args.kwargs
    assert kwargs["size"] == "1024x1024"
    assert kwargs["response_format"] == "b64_json"
    assert "a cat" in kwargs["prompt"]


def test_generate_image_without_data_is_empty(mock_client):
    mock_client.images.generate.return_value = SimpleNamespace(data=[SimpleNamespace(b64_json=None)])
    result = api.generate_image("a cat")
    assert result.status is MediaStatus.EMPTY
    assert not result.has_payload


def test_generate_image_error_is_failed(mock_client):
    mock_client.images.generate.side_effect = RuntimeError("content_policy_violation")
    result = api.generate_image("a cat")
    assert result.status is MediaStatus.FAILED
    assert "content_policy" in result.error


def test_generate_image_without_client(monkeypatch):
    monkeypatch.setattr(api, "client", None)
    assert api.generate_image("a cat").status is MediaStatus.FAILED


def test_data_url_round_trip():
    url = api.image_data_url("UE5H")
    assert url == "data:image/png;base64,UE5H"
    assert api.decode_data_url(url) == b"PNG"


# Speech ---------------------------------------------------------------------

def test_generate_speech_requests_pcm(mock_client):
    response = MagicMock()
    response.iter_bytes.return_value = [b"\x00\x01", b"\x02\x03"]
    mock_client.audio.speech.create.return_value = response

    result = api.generate_speech("hola")

    assert result.status is MediaStatus.OK
    assert base64.b64decode(result.payload) == b"\x00\x01\x02\x03"
    kwargs = mock_client.audio.speech.create.call_args.kwargs
    assert kwargs["response_format"] == "pcm"
    assert kwargs["voice"] == api.DEFAULT_TTS_VOICE
    assert kwargs["input"] == "hola"


def test_generate_speech_empty_audio(mock_client):
    response = MagicMock()
    response.iter_bytes.return_value = []
    mock_client.audio.speech.create.return_value = response
    assert api.generate_speech("hola").status is MediaStatus.EMPTY


def test_generate_speech_blank_text_skips_call(mock_client):
    assert api.generate_speech("  ").status is MediaStatus.EMPTY
    mock_client.audio.speech.create.assert_not_called()


def test_generate_speech_error_is_failed(mock_client):
    mock_client.audio.speech.create.side_effect = TimeoutError("slow")
    assert api.generate_speech("hola").status is MediaStatus.FAILED


# Chat -----------------------------------------------------------------------

def test_chat_session_is_seeded_with_context():
    session = ChatSession("Word: hola.", "German")
    assert "Answer in German" in session.system_instruction
    assert session.history == [
        {"role": "user", "content": "Context: Word: hola."},
        {"role": "assistant", "content": "Understood. I am ready to answer questions about this word."},
    ]


def test_chat_turn_appends_to_history(mock_client):
    mock_client.chat.completions.create.return_value = completion("Yes, very common.")
    session = api.create_chat_session("Word: hola.", "English")

    assert session.send_message("Is it common?") == "Yes, very common."

    messages = mock_client.chat.completions.create.call_args.kwargs["messages"]
    assert messages[0]["role"] == "system"
    assert messages[-1] == {"role": "user", "content": "Is it common?"}
    assert session.history[-1] == {"role": "assistant", "content": "Yes, very common."}
    assert len(session.history) == 4


def test_failed_chat_turn_leaves_history(mock_client):
    mock_client.chat.completions.create.side_effect = ConnectionError("offline")
    session = ChatSession("Word: hola.", "English")

    with pytest.raises(ConnectionError):
        session.send_message("Is it common?")
    assert len(session.history) == 2


def test_empty_chat_reply_gets_placeholder(mock_client):
    mock_client.chat.completions.create.return_value = completion(None)
    session = ChatSession("Word: hola.", "English")
    assert session.send_message("?") == api.CHAT_EMPTY_REPLY


# Story ----------------------------------------------------------------------

def test_generate_story_joins_words(mock_client):
    mock_client.chat.completions.create.return_value = completion("Un **gato** y un **perro**.")
    words = [make_word("1", "gato"), make_word("2", "perro"), make_word("3", "pan")]

    story = api.generate_story(words, "English")

    assert story == "Un **gato** y un **perro**."
    prompt = mock_client.chat.completions.create.call_args.kwargs["messages"][0]["content"]
    assert "gato, perro, pan" in prompt
    assert "translation in English" in prompt


def test_generate_story_empty_response(mock_client):
    mock_client.chat.completions.create.return_value = completion("")
    assert api.generate_story([make_word("1")], "English") == api.STORY_EMPTY_TEXT


def test_generate_story_without_client(monkeypatch):
    monkeypatch.setattr(api, "client", None)
    with pytest.raises(RuntimeError):
        api.generate_story([make_word("1")], "English")
