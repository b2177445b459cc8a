"""
OpenAI-backed services for LingoSpark.

This module handles:
- Word analysis (definition, example pairs, usage notes, image prompt)
- Illustration generation from the analysis image prompt
- Text-to-speech as raw 24 kHz PCM
- Per-word conversational sessions
- Story generation from the notebook

API key is expected in a .env file at the project root:

    OPENAI_API_KEY=sk-...

Every call is attempted exactly once (``max_retries=0``) and bounded by
LINGOSPARK_REQUEST_TIMEOUT seconds.
"""

import base64
import json
import os
import threading
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from openai import OpenAI

from .logger import logger, Timer
from .models import AnalysisResponse, ExampleSentence, MediaResult, WordResult
from .schemas import (
    ANALYSIS_PROMPT,
    ANALYSIS_RESPONSE_SCHEMA,
    CHAT_ACKNOWLEDGEMENT,
    CHAT_SYSTEM_INSTRUCTION,
    EXPECTED_EXAMPLE_COUNT,
    IMAGE_PROMPT_TEMPLATE,
    STORY_PROMPT,
)

# ---------------------------------------------------------------------------
# Environment & OpenAI client setup
# ---------------------------------------------------------------------------

logger.separator("LingoSpark - API Module Initialization")

logger.env("Loading environment variables from .env file...")
if load_dotenv():
    logger.env_success("dotenv file loaded successfully")
else:
    logger.warning("No .env file found or file is empty")

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")

DEFAULT_CHAT_MODEL = os.getenv("LINGOSPARK_CHAT_MODEL", "gpt-4o-mini")
DEFAULT_IMAGE_MODEL = os.getenv("LINGOSPARK_IMAGE_MODEL", "dall-e-3")
DEFAULT_TTS_MODEL = os.getenv("LINGOSPARK_TTS_MODEL", "tts-1")
DEFAULT_TTS_VOICE = os.getenv("LINGOSPARK_TTS_VOICE", "nova")
REQUEST_TIMEOUT_SECONDS = float(os.getenv("LINGOSPARK_REQUEST_TIMEOUT", "60"))

# Square output, the 1:1 aspect ratio the result card expects
IMAGE_SIZE = "1024x1024"

STORY_EMPTY_TEXT = "Could not generate story."
CHAT_EMPTY_REPLY = "Sorry, I couldn't understand that."

if OPENAI_API_KEY:
    masked_key = f"{OPENAI_API_KEY[:8]}...{OPENAI_API_KEY[-4:]}" if len(OPENAI_API_KEY) > 12 else "***"
    logger.env_success(f"OPENAI_API_KEY found: {masked_key}")
    client: Optional[OpenAI] = OpenAI(
        api_key=OPENAI_API_KEY,
        timeout=REQUEST_TIMEOUT_SECONDS,
        max_retries=0,
    )
    logger.env_success("OpenAI client initialized successfully")
else:
    logger.env_error("OPENAI_API_KEY not found in environment!")
    logger.warning("Analysis will fail and media will be skipped until a key is configured")
    client = None

logger.env(f"Chat model: {DEFAULT_CHAT_MODEL}, image model: {DEFAULT_IMAGE_MODEL}, "
           f"TTS: {DEFAULT_TTS_MODEL}/{DEFAULT_TTS_VOICE}, timeout: {REQUEST_TIMEOUT_SECONDS:.0f}s")
logger.separator("API Module Ready")


class AnalysisError(Exception):
    """The analysis call failed or returned something unusable."""


def is_api_available() -> bool:
    """Check if the OpenAI API client is properly configured."""
    return client is not None


# ---------------------------------------------------------------------------
# Word analysis
# ---------------------------------------------------------------------------

def parse_analysis(raw: Optional[str]) -> AnalysisResponse:
    """
    Validate the JSON text returned by the analysis call.

    Raises AnalysisError on non-JSON output or when a required field is
    missing or has the wrong type. ``imagePrompt`` may be absent, which
    means no illustration.
    """
    try:
        data = json.loads(raw or "")
    except (TypeError, ValueError) as e:
        raise AnalysisError(f"Analysis response is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise AnalysisError("Analysis response is not a JSON object")

    definition = data.get("definition")
    usage_notes = data.get("usageNotes")
    raw_examples = data.get("examples")
    image_prompt = data.get("imagePrompt") or ""

    if not isinstance(definition, str):
        raise AnalysisError("Analysis response is missing 'definition'")
    if not isinstance(usage_notes, str):
        raise AnalysisError("Analysis response is missing 'usageNotes'")
    if not isinstance(raw_examples, list):
        raise AnalysisError("Analysis response is missing 'examples'")
    if not isinstance(image_prompt, str):
        raise AnalysisError("'imagePrompt' must be a string")

    examples: List[ExampleSentence] = []
    for item in raw_examples:
        if not isinstance(item, dict) or not isinstance(item.get("target"), str) \
                or not isinstance(item.get("native"), str):
            raise AnalysisError(f"Malformed example sentence: {item!r}")
        examples.append(ExampleSentence(target=item["target"], native=item["native"]))

    if len(examples) != EXPECTED_EXAMPLE_COUNT:
        logger.warning(f"Expected {EXPECTED_EXAMPLE_COUNT} examples, got {len(examples)}")

    return AnalysisResponse(
        definition=definition.strip(),
        examples=examples,
        usage_notes=usage_notes.strip(),
        image_prompt=image_prompt.strip(),
    )


def analyze_text(text: str, target_lang: str, native_lang: str) -> AnalysisResponse:
    """
    Ask the model for a definition, two example pairs, usage notes and an
    image prompt for ``text``. Any failure raises AnalysisError.
    """
    logger.api(f"analyze_text() called: \"{text[:40]}\" ({native_lang} → {target_lang})")

    if client is None:
        raise AnalysisError("OpenAI client not configured (missing OPENAI_API_KEY)")

    prompt = ANALYSIS_PROMPT.format(text=text, target_lang=target_lang, native_lang=native_lang)

    try:
        logger.api_call("chat.completions.create", model=DEFAULT_CHAT_MODEL)
        with Timer() as timer:
            completion = client.chat.completions.create(
                model=DEFAULT_CHAT_MODEL,
                messages=[{"role": "user", "content": prompt}],
                response_format={"type": "json_schema", "json_schema": ANALYSIS_RESPONSE_SCHEMA},
            )
        logger.api_response("chat.completions.create", duration_ms=timer.duration_ms)
        raw = completion.choices[0].message.content
    except Exception as e:
        logger.api_error(f"Analysis call failed: {e}")
        raise AnalysisError(f"Analysis call failed: {e}") from e

    analysis = parse_analysis(raw)
    logger.success(f"Analysis ready ({len(analysis.examples)} examples, "
                   f"image prompt: {'yes' if analysis.image_prompt else 'no'})")
    return analysis


# ---------------------------------------------------------------------------
# Image generation
# ---------------------------------------------------------------------------

def image_data_url(b64_png: str) -> str:
    """Wrap base64 PNG data as a data URL."""
    return f"data:image/png;base64,{b64_png}"


def decode_data_url(url: str) -> bytes:
    """Inverse of image_data_url; accepts bare base64 as well."""
    _, _, data = url.partition("base64,")
    return base64.b64decode(data or url)


def generate_image(prompt: str) -> MediaResult:
    """
    Generate a square illustration for ``prompt``.

    Never raises. The payload is base64 PNG data.
    """
    if client is None:
        logger.warning("OpenAI client not available, skipping image generation")
        return MediaResult.failed("OpenAI client not configured")

    full_prompt = IMAGE_PROMPT_TEMPLATE.format(prompt=prompt)
    logger.img_start(full_prompt)

    try:
        logger.api_call("images.generate", model=DEFAULT_IMAGE_MODEL)
        with Timer() as timer:
            result = client.images.generate(
                model=DEFAULT_IMAGE_MODEL,
                prompt=full_prompt,
                size=IMAGE_SIZE,
                quality="standard",
                response_format="b64_json",
            )
        logger.api_response("images.generate", duration_ms=timer.duration_ms)
    except Exception as e:
        logger.img_error(f"Image generation failed: {e}")
        return MediaResult.failed(str(e))

    data = result.data or []
    b64 = getattr(data[0], "b64_json", None) if data else None
    if not b64:
        logger.img_error("Response missing b64_json data")
        return MediaResult.empty()

    logger.img_complete(len(b64) * 3 // 4, duration_ms=timer.duration_ms)
    return MediaResult.ok(b64)


# ---------------------------------------------------------------------------
# Text-to-Speech
# ---------------------------------------------------------------------------

def generate_speech(text: str, voice: Optional[str] = None) -> MediaResult:
    """
    Synthesize ``text`` as raw PCM (24 kHz, 16-bit LE, mono).

    Never raises. The payload is the base64-encoded PCM buffer, ready for
    ``lingospark.audio.play_pcm_base64``.
    """
    if client is None:
        logger.warning("OpenAI client not available, skipping TTS generation")
        return MediaResult.failed("OpenAI client not configured")

    if not text or not text.strip():
        logger.warning("Empty text provided for TTS")
        return MediaResult.empty()

    selected_voice = voice or DEFAULT_TTS_VOICE
    logger.audio(f"generate_speech() - {len(text)} chars, voice={selected_voice}")

    try:
        logger.api_call("audio.speech.create", model=DEFAULT_TTS_MODEL)
        with Timer() as timer:
            response = client.audio.speech.create(
                model=DEFAULT_TTS_MODEL,
                voice=selected_voice,
                input=text,
                response_format="pcm",
            )
            pcm = b"".join(response.iter_bytes())
        logger.api_response("audio.speech.create", duration_ms=timer.duration_ms)
    except Exception as e:
        logger.audio_error(f"TTS generation failed: {e}")
        return MediaResult.failed(str(e))

    if not pcm:
        logger.audio_error("TTS returned no audio")
        return MediaResult.empty()

    logger.audio(f"Received {len(pcm)} bytes of PCM ({timer.duration_ms:.0f}ms)")
    return MediaResult.ok(base64.b64encode(pcm).decode("ascii"))


# ---------------------------------------------------------------------------
# Conversation about a word
# ---------------------------------------------------------------------------

class ChatSession:
    """
    A multi-turn conversation seeded with one word's context.

    The history starts with a synthetic user context turn and a synthetic
    acknowledgement; real turns are appended only after the model replies,
    so a failed turn leaves the remote history untouched.
    """

    def __init__(self, context: str, native_lang: str, model: Optional[str] = None) -> None:
        self.model = model or DEFAULT_CHAT_MODEL
        self.system_instruction = CHAT_SYSTEM_INSTRUCTION.format(native_lang=native_lang)
        self.history: List[Dict[str, str]] = [
            {"role": "user", "content": f"Context: {context}"},
            {"role": "assistant", "content": CHAT_ACKNOWLEDGEMENT},
        ]
        self._lock = threading.Lock()

    def send_message(self, message: str) -> str:
        """Send one user turn and return the model's reply text."""
        if client is None:
            raise RuntimeError("OpenAI client not configured")

        user_turn = {"role": "user", "content": message}
        with self._lock:
            messages: List[Dict[str, Any]] = [{"role": "system", "content": self.system_instruction}]
            messages.extend(self.history)
            messages.append(user_turn)

            logger.api_call("chat.completions.create (chat)", model=self.model)
            with Timer() as timer:
                completion = client.chat.completions.create(model=self.model, messages=messages)
            logger.api_response("chat.completions.create (chat)", duration_ms=timer.duration_ms)

            reply = (completion.choices[0].message.content or "").strip() or CHAT_EMPTY_REPLY
            self.history.append(user_turn)
            self.history.append({"role": "assistant", "content": reply})
        return reply


def create_chat_session(context: str, native_lang: str) -> ChatSession:
    logger.chat(f"New chat session (reply language: {native_lang})")
    return ChatSession(context, native_lang)


# ---------------------------------------------------------------------------
# Story generation
# ---------------------------------------------------------------------------

def generate_story(words: List[WordResult], native_lang: str) -> str:
    """
    Weave the notebook words into one short story.

    Raises on transport errors; an empty completion yields STORY_EMPTY_TEXT.
    """
    if client is None:
        raise RuntimeError("OpenAI client not configured")

    word_list = ", ".join(w.original_text for w in words)
    logger.api(f"generate_story() called with {len(words)} words")

    logger.api_call("chat.completions.create (story)", model=DEFAULT_CHAT_MODEL)
    with Timer() as timer:
        completion = client.chat.completions.create(
            model=DEFAULT_CHAT_MODEL,
            messages=[{"role": "user", "content": STORY_PROMPT.format(
                word_list=word_list, native_lang=native_lang)}],
        )
    logger.api_response("chat.completions.create (story)", duration_ms=timer.duration_ms)

    return (completion.choices[0].message.content or "").strip() or STORY_EMPTY_TEXT
